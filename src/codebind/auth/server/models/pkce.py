"""PKCE protocol constants and evaluation results (RFC 7636).

Contains the parameter names shared by the authorize and token steps, the
binding stored alongside an issued authorization code, and the outcomes of
evaluating a code verifier against that binding.
"""

from __future__ import annotations

from dataclasses import dataclass

# Protocol parameter names (case-sensitive)
CODE_CHALLENGE = "code_challenge"
CODE_CHALLENGE_METHOD = "code_challenge_method"
CODE_VERIFIER = "code_verifier"

# Challenge method ids
PLAIN = "plain"
S256 = "S256"

# RFC 7636 Section 4.3: "plain" when code_challenge_method is not sent
DEFAULT_METHOD = PLAIN


@dataclass(frozen=True)
class ChallengeBinding:
    """Code challenge captured at the authorize step.

    Persisted by the code store next to the issued authorization code and
    consumed once when that code is redeemed.
    """

    code_challenge: str
    code_challenge_method: str = DEFAULT_METHOD

    def to_parameters(self) -> dict[str, str]:
        return {
            CODE_CHALLENGE: self.code_challenge,
            CODE_CHALLENGE_METHOD: self.code_challenge_method,
        }


@dataclass(frozen=True)
class NoPkceUsed:
    """Neither a code challenge nor a code verifier took part in the exchange.

    The exchange proceeds as a plain authorization code grant.
    """

    @property
    def grant_allowed(self) -> bool:
        return True


@dataclass(frozen=True)
class Verified:
    """PKCE took part and the verifier was checked against the challenge.

    A ``matched`` value of False is a normal negative verdict, not an error.
    Callers must reject the grant exactly as they would for an unknown code.
    """

    matched: bool

    @property
    def grant_allowed(self) -> bool:
        return self.matched


EvaluationOutcome = NoPkceUsed | Verified
