"""In-memory authorization code store with PKCE binding.

A reference implementation of the code store collaborator: it persists the
authorize request parameters under each issued code, and at redemption splits
the code verifier off the encoded code value before evaluating PKCE.
Production deployments keep codes in shared storage, but follow the same
issue/consume contract.
"""

from __future__ import annotations

import logging
import secrets
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType

from codebind.auth.server.models.errors import InvalidGrantError
from codebind.auth.server.services.authorize import AuthorizeRequestValidator
from codebind.auth.server.services.evaluator import PkceEvaluator
from codebind.auth.server.services.transport import SEPARATOR, decode_code

logger = logging.getLogger(__name__)

INVALID_CODE_DESCRIPTION = "Invalid authorization code"


def _generate_code() -> str:
    return secrets.token_urlsafe(32)


class InMemoryAuthorizationCodeStore:
    """Issues single-use authorization codes bound to their PKCE challenge."""

    def __init__(
        self,
        evaluator: PkceEvaluator | None = None,
        code_factory: Callable[[], str] = _generate_code,
    ):
        self.evaluator = evaluator if evaluator is not None else PkceEvaluator()
        self._validator = AuthorizeRequestValidator(self.evaluator.registry)
        self._code_factory = code_factory
        self._codes: dict[str, Mapping[str, str]] = {}
        self._lock = threading.Lock()

    def issue(self, request_parameters: Mapping[str, str]) -> str:
        """Mint a code for a validated authorization request.

        Raises:
            InvalidChallengeSyntaxError: If the code challenge is malformed
            UnsupportedMethodError: If the code challenge method is unknown
        """
        self._validator.validate(request_parameters)

        code = self._code_factory()
        if SEPARATOR in code:
            raise ValueError("Code factory produced a code containing a space")

        with self._lock:
            if code in self._codes:
                raise ValueError("Code factory produced a duplicate code")
            self._codes[code] = MappingProxyType(dict(request_parameters))
            outstanding = len(self._codes)

        logger.debug(f"Issued authorization code ({outstanding} outstanding)")
        return code

    def consume(self, encoded_code: str) -> Mapping[str, str]:
        """Redeem an authorization code, enforcing its PKCE binding.

        The code is removed before PKCE is evaluated, so a failed attempt
        still burns it.

        Args:
            encoded_code: Code value produced by encode_code

        Returns:
            The authorize request parameters stored with the code

        Raises:
            InvalidGrantError: If the code is unknown, used, or the verifier
                does not match
            PKCEError: If the PKCE parameters are missing or malformed
        """
        code, code_verifier = decode_code(encoded_code)

        with self._lock:
            request_parameters = self._codes.pop(code, None)

        if request_parameters is None:
            logger.debug("Redemption of unknown or already used authorization code")
            raise InvalidGrantError(INVALID_CODE_DESCRIPTION)

        outcome = self.evaluator.evaluate(request_parameters, code_verifier)
        if not outcome.grant_allowed:
            logger.debug("Authorization code rejected by PKCE verification")
            raise InvalidGrantError(INVALID_CODE_DESCRIPTION)

        return request_parameters

    def __len__(self) -> int:
        return len(self._codes)
