"""Registry of supported code challenge methods.

The registry is read on every token exchange and is meant to be filled once
at configuration time. Registration swaps in a whole new read-only mapping,
so a reader never observes a half-updated set of methods.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from codebind.auth.server.models.errors import UnsupportedMethodError
from codebind.auth.server.models.pkce import PLAIN, S256
from codebind.auth.server.primitives.transforms import (
    ChallengeTransform,
    PlainTransform,
    S256Transform,
)

logger = logging.getLogger(__name__)

# Transforms that can be enabled by id from configuration
BUILTIN_TRANSFORMS: dict[str, type[ChallengeTransform]] = {
    PLAIN: PlainTransform,
    S256: S256Transform,
}


class TransformRegistry:
    """Maps ``code_challenge_method`` ids to challenge transforms.

    "plain" is always present, as RFC 7636 requires servers to support it.
    Transforms passed to the constructor are registered after the built-in
    "plain" entry, so passing a "plain" transform replaces it explicitly.
    """

    def __init__(self, transforms: Iterable[ChallengeTransform] | None = None):
        builtin = PlainTransform()
        self._transforms: MappingProxyType[str, ChallengeTransform] = (
            MappingProxyType({builtin.method_id: builtin})
        )
        self._lock = threading.Lock()

        for transform in transforms or ():
            self.register(transform)

    @classmethod
    def default(cls) -> TransformRegistry:
        """Registry with the "plain" and "S256" methods."""
        return cls([S256Transform()])

    @classmethod
    def from_method_ids(cls, method_ids: Iterable[str]) -> TransformRegistry:
        """Build a registry enabling the named built-in methods.

        Raises:
            UnsupportedMethodError: If an id names no built-in transform
        """
        transforms = []
        for method_id in method_ids:
            transform_cls = BUILTIN_TRANSFORMS.get(method_id)
            if transform_cls is None:
                raise UnsupportedMethodError(
                    f"Unknown code challenge method {method_id!r}. "
                    f"Available: {', '.join(sorted(BUILTIN_TRANSFORMS))}",
                    method_id=method_id,
                )
            transforms.append(transform_cls())
        return cls(transforms)

    def register(self, transform: ChallengeTransform) -> None:
        """Register a transform, replacing any transform with the same id."""
        with self._lock:
            updated = dict(self._transforms)
            replaced = updated.get(transform.method_id)
            updated[transform.method_id] = transform
            self._transforms = MappingProxyType(updated)

        if replaced is not None and replaced is not transform:
            logger.info(
                f"Replaced code challenge method {transform.method_id!r}: "
                f"{replaced!r} -> {transform!r}"
            )
        else:
            logger.debug(f"Registered code challenge method {transform.method_id!r}")

    def get(self, method_id: str | None) -> ChallengeTransform | None:
        if method_id is None:
            return None
        return self._transforms.get(method_id)

    def supported_methods(self) -> frozenset[str]:
        return frozenset(self._transforms)

    def is_supported(self, method_id: str | None) -> bool:
        if method_id is None:
            return False
        return method_id in self._transforms

    def __contains__(self, method_id: object) -> bool:
        return method_id in self._transforms

    def __iter__(self) -> Iterator[str]:
        return iter(self._transforms)

    def __len__(self) -> int:
        return len(self._transforms)

    def __repr__(self) -> str:
        return f"TransformRegistry({sorted(self._transforms)!r})"
