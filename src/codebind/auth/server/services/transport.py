"""Carrying the code verifier through an opaque authorization code.

Some code stores accept a single opaque ``code`` string at redemption and
have no slot for a code verifier. The token step therefore appends the
verifier to the code after one ASCII space, and the store splits it back
off on the first space before evaluating PKCE.
"""

from __future__ import annotations

from collections.abc import Mapping

from codebind.auth.server.models.errors import (
    InvalidVerifierSyntaxError,
    MalformedCodeError,
)
from codebind.auth.server.models.pkce import CODE_VERIFIER
from codebind.auth.server.primitives.syntax import (
    PARAMETER_SYNTAX_DESCRIPTION,
    is_valid_code_verifier,
)

SEPARATOR = " "
CODE = "code"


def encode_code(code: str, code_verifier: str | None) -> str:
    """Fold a code verifier into the authorization code value.

    Args:
        code: Authorization code as received at the token endpoint
        code_verifier: ``code_verifier`` from the token request, or None

    Returns:
        ``code`` unchanged when no verifier was sent, otherwise
        ``code + " " + code_verifier``

    Raises:
        MalformedCodeError: If the code already contains a space
        InvalidVerifierSyntaxError: If the verifier is empty or malformed
    """
    if code_verifier is None:
        return code

    if SEPARATOR in code:
        raise MalformedCodeError("Authorization code must not contain spaces.")
    if not code_verifier:
        raise InvalidVerifierSyntaxError(
            "Code verifier parameter must not be empty if provided."
        )
    if not is_valid_code_verifier(code_verifier):
        raise InvalidVerifierSyntaxError(
            f"Code verifier {PARAMETER_SYNTAX_DESCRIPTION}."
        )

    return f"{code}{SEPARATOR}{code_verifier}"


def decode_code(value: str) -> tuple[str, str | None]:
    """Split an encoded code value into ``(code, code_verifier)``."""
    code, separator, code_verifier = value.partition(SEPARATOR)
    if not separator:
        return code, None
    return code, code_verifier


def merge_code_verifier(parameters: Mapping[str, str]) -> dict[str, str]:
    """Apply encode_code to a token request's parameters.

    Returns a copy of ``parameters``. When both ``code`` and
    ``code_verifier`` are present, the copy's ``code`` carries the verifier.
    """
    merged = dict(parameters)
    if CODE in merged and CODE_VERIFIER in merged:
        merged[CODE] = encode_code(merged[CODE], merged[CODE_VERIFIER])
    return merged
