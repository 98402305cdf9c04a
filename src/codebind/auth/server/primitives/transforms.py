"""Code challenge methods (RFC 7636 Section 4.2).

A challenge method turns a code verifier into a code challenge. The server
never derives anything itself: it only checks that a verifier presented at
the token endpoint maps onto the challenge stored at the authorize step.

New methods are added by subclassing ChallengeTransform and registering an
instance with a TransformRegistry.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from abc import ABC, abstractmethod

from codebind.auth.server.models.pkce import PLAIN, S256

logger = logging.getLogger(__name__)


def create_s256_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge for a code verifier.

    RFC 7636 Section 4.2:
        code_challenge = BASE64URL-ENCODE(SHA256(ASCII(code_verifier)))

    Args:
        code_verifier: The code verifier to hash

    Returns:
        Unpadded base64url encoding of the SHA256 digest
    """
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


class ChallengeTransform(ABC):
    """A code challenge method, identified by its ``code_challenge_method`` id."""

    @property
    @abstractmethod
    def method_id(self) -> str:
        """Value of ``code_challenge_method`` selecting this transform."""
        ...

    @abstractmethod
    def verify(self, code_verifier: str | None, code_challenge: str | None) -> bool:
        """Check that the code verifier maps onto the code challenge.

        Must return False rather than raise when either value is missing.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(method_id={self.method_id!r})"


class PlainTransform(ChallengeTransform):
    """The "plain" method: code_challenge = code_verifier."""

    @property
    def method_id(self) -> str:
        return PLAIN

    def verify(self, code_verifier: str | None, code_challenge: str | None) -> bool:
        if code_verifier is None or code_challenge is None:
            return False
        return _constant_time_equals(code_verifier, code_challenge)


class S256Transform(ChallengeTransform):
    """The "S256" method: code_challenge = BASE64URL(SHA256(code_verifier))."""

    @property
    def method_id(self) -> str:
        return S256

    def verify(self, code_verifier: str | None, code_challenge: str | None) -> bool:
        if code_verifier is None or code_challenge is None:
            return False
        try:
            expected = create_s256_code_challenge(code_verifier)
        except (UnicodeError, ValueError) as e:
            logger.warning(f"S256 transform could not hash code verifier: {e}")
            return False
        return _constant_time_equals(expected, code_challenge)


def _constant_time_equals(left: str, right: str) -> bool:
    # compare_digest only accepts ASCII str, so compare the UTF-8 bytes.
    # surrogatepass keeps lone surrogates encodable and distinct.
    return hmac.compare_digest(
        left.encode("utf-8", "surrogatepass"),
        right.encode("utf-8", "surrogatepass"),
    )
