"""PKCE evaluation at the token endpoint (RFC 7636 Section 4.6).

Decides, for one authorization code redemption, whether PKCE was used and
whether the presented code verifier matches the stored code challenge.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from codebind.auth.server.models.errors import (
    InvalidChallengeSyntaxError,
    InvalidVerifierSyntaxError,
    MissingChallengeError,
    MissingVerifierError,
    UnsupportedMethodError,
)
from codebind.auth.server.models.pkce import (
    CODE_CHALLENGE,
    CODE_CHALLENGE_METHOD,
    DEFAULT_METHOD,
    ChallengeBinding,
    EvaluationOutcome,
    NoPkceUsed,
    Verified,
)
from codebind.auth.server.primitives.syntax import (
    PARAMETER_SYNTAX_DESCRIPTION,
    is_valid_code_challenge,
    is_valid_code_verifier,
)
from codebind.auth.server.services.registry import TransformRegistry

logger = logging.getLogger(__name__)


class PkceEvaluator:
    """Evaluates PKCE parameters of an authorization code redemption.

    Two kinds of negative result are kept apart:
    - Malformed or unsupported input raises a PKCEError subclass. Callers
      answer with ``invalid_request``.
    - A well-formed verifier that does not match returns ``Verified(False)``.
      Callers reject the code with ``invalid_grant``.

    The evaluator holds no per-request state and is safe to share between
    threads.
    """

    def __init__(self, registry: TransformRegistry | None = None):
        self.registry = registry if registry is not None else TransformRegistry.default()

    def evaluate(
        self,
        request_parameters: Mapping[str, str],
        code_verifier: str | None,
    ) -> EvaluationOutcome:
        """Evaluate stored authorize parameters against a token-step verifier.

        Args:
            request_parameters: Parameters of the original authorize request
            code_verifier: ``code_verifier`` from the token request, if any

        Returns:
            NoPkceUsed if neither side used PKCE, otherwise Verified

        Raises:
            MissingVerifierError: Challenge stored but no verifier sent
            MissingChallengeError: Verifier sent but no challenge stored
            UnsupportedMethodError: Challenge method is not registered
            InvalidChallengeSyntaxError: Stored challenge is malformed
            InvalidVerifierSyntaxError: Verifier is malformed
        """
        code_challenge = request_parameters.get(CODE_CHALLENGE) or None
        code_verifier = code_verifier or None

        if code_challenge is None and code_verifier is None:
            logger.debug("No PKCE parameters, plain authorization code grant")
            return NoPkceUsed()
        if code_verifier is None:
            raise MissingVerifierError()
        if code_challenge is None:
            raise MissingChallengeError()

        method_id = request_parameters.get(CODE_CHALLENGE_METHOD) or DEFAULT_METHOD
        transform = self.registry.get(method_id)
        if transform is None:
            raise UnsupportedMethodError(
                f"Unsupported code challenge method {method_id!r}",
                method_id=method_id,
            )

        if not is_valid_code_challenge(code_challenge):
            raise InvalidChallengeSyntaxError(
                f"Code challenge {PARAMETER_SYNTAX_DESCRIPTION}."
            )
        if not is_valid_code_verifier(code_verifier):
            raise InvalidVerifierSyntaxError(
                f"Code verifier {PARAMETER_SYNTAX_DESCRIPTION}."
            )

        matched = transform.verify(code_verifier, code_challenge)
        logger.debug(f"PKCE {method_id} verification result: matched={matched}")
        return Verified(matched)

    def evaluate_binding(
        self,
        binding: ChallengeBinding | None,
        code_verifier: str | None,
    ) -> EvaluationOutcome:
        """Evaluate a stored challenge binding against a token-step verifier."""
        parameters = binding.to_parameters() if binding is not None else {}
        return self.evaluate(parameters, code_verifier)

    def supported_methods(self) -> frozenset[str]:
        return self.registry.supported_methods()
