"""Syntax rules for PKCE code verifiers and code challenges.

RFC 7636 Section 4.1 and 4.2 give both parameters the same grammar:
43 to 128 characters from the unreserved set
    [A-Z] / [a-z] / [0-9] / "-" / "." / "_" / "~"
"""

from __future__ import annotations

import re

MIN_LENGTH = 43
MAX_LENGTH = 128

_PARAMETER_PATTERN = re.compile(rf"[A-Za-z0-9._~-]{{{MIN_LENGTH},{MAX_LENGTH}}}")

PARAMETER_SYNTAX_DESCRIPTION = (
    f"length must be between {MIN_LENGTH} and {MAX_LENGTH} and use only "
    "[A-Z],[a-z],[0-9],_,.,-,~ characters"
)


def is_valid_parameter(value: str | None) -> bool:
    """Check a code verifier or code challenge against the RFC 7636 grammar.

    Args:
        value: The parameter value, or None when it was not sent

    Returns:
        True if the value has a legal length and only unreserved characters
    """
    if not value:
        return False
    return _PARAMETER_PATTERN.fullmatch(value) is not None


def is_valid_code_challenge(code_challenge: str | None) -> bool:
    return is_valid_parameter(code_challenge)


def is_valid_code_verifier(code_verifier: str | None) -> bool:
    return is_valid_parameter(code_verifier)
