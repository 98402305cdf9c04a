"""Tests for PKCE evaluation at the token endpoint.

Covers the decision procedure end to end:
- Presence rules for code_challenge and code_verifier
- Default and unsupported code challenge methods
- Syntax validation of both parameters
- Match and mismatch verdicts for plain and S256
"""

import pytest

from codebind.auth.server.models.errors import (
    InvalidChallengeSyntaxError,
    InvalidVerifierSyntaxError,
    MissingChallengeError,
    MissingVerifierError,
    PKCEError,
    UnsupportedMethodError,
)
from codebind.auth.server.models.pkce import ChallengeBinding, NoPkceUsed, Verified
from codebind.auth.server.services.evaluator import PkceEvaluator
from codebind.auth.server.services.registry import TransformRegistry

RFC_VERIFIER = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
RFC_CHALLENGE = "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"


class TestPresenceRules:
    def setup_method(self):
        self.evaluator = PkceEvaluator()

    def test_no_challenge_and_no_verifier_is_no_pkce(self) -> None:
        # Act
        outcome = self.evaluator.evaluate({}, None)

        # Assert
        assert outcome == NoPkceUsed()
        assert outcome.grant_allowed

    def test_empty_values_count_as_absent(self) -> None:
        assert self.evaluator.evaluate({"code_challenge": ""}, "") == NoPkceUsed()

    def test_unrelated_parameters_are_ignored(self) -> None:
        outcome = self.evaluator.evaluate(
            {"client_id": "app", "redirect_uri": "https://app.example.com/cb"}, None
        )
        assert outcome == NoPkceUsed()

    @pytest.mark.parametrize("code_verifier", [None, ""])
    def test_challenge_without_verifier_is_missing_verifier(
        self, code_verifier
    ) -> None:
        with pytest.raises(MissingVerifierError) as exc_info:
            self.evaluator.evaluate({"code_challenge": RFC_CHALLENGE}, code_verifier)

        assert exc_info.value.error == "invalid_request"
        assert "must be provided" in exc_info.value.description

    def test_verifier_without_challenge_is_missing_challenge(self) -> None:
        with pytest.raises(MissingChallengeError) as exc_info:
            self.evaluator.evaluate({}, RFC_VERIFIER)

        assert "not required" in exc_info.value.description

    def test_empty_challenge_with_verifier_is_missing_challenge(self) -> None:
        with pytest.raises(MissingChallengeError):
            self.evaluator.evaluate({"code_challenge": ""}, RFC_VERIFIER)

    def test_missing_checks_run_before_syntax_checks(self) -> None:
        # A malformed lone challenge is still reported as a missing verifier
        with pytest.raises(MissingVerifierError):
            self.evaluator.evaluate({"code_challenge": "short"}, None)


class TestChallengeMethod:
    def setup_method(self):
        self.evaluator = PkceEvaluator()

    @pytest.mark.parametrize("method_parameters", [{}, {"code_challenge_method": ""}])
    def test_absent_or_empty_method_defaults_to_plain(self, method_parameters) -> None:
        # Arrange
        parameters = {"code_challenge": RFC_CHALLENGE, **method_parameters}
        explicit = {"code_challenge": RFC_CHALLENGE, "code_challenge_method": "plain"}

        # Act
        outcome = self.evaluator.evaluate(parameters, RFC_CHALLENGE)

        # Assert
        assert outcome == Verified(True)
        assert outcome == self.evaluator.evaluate(explicit, RFC_CHALLENGE)

    def test_default_plain_rejects_s256_verifier(self) -> None:
        outcome = self.evaluator.evaluate({"code_challenge": RFC_CHALLENGE}, RFC_VERIFIER)
        assert outcome == Verified(False)

    @pytest.mark.parametrize(
        "code_challenge, code_verifier",
        [
            (RFC_CHALLENGE, RFC_VERIFIER),
            ("short", RFC_VERIFIER),
            (RFC_CHALLENGE, "short"),
            ("short", "short"),
        ],
    )
    def test_unsupported_method_regardless_of_parameter_validity(
        self, code_challenge: str, code_verifier: str
    ) -> None:
        parameters = {"code_challenge": code_challenge, "code_challenge_method": "bogus"}

        with pytest.raises(UnsupportedMethodError) as exc_info:
            self.evaluator.evaluate(parameters, code_verifier)

        assert exc_info.value.method_id == "bogus"

    def test_method_not_in_configured_registry_is_unsupported(self) -> None:
        # Arrange - registry with only the built-in plain method
        evaluator = PkceEvaluator(TransformRegistry())
        parameters = {"code_challenge": RFC_CHALLENGE, "code_challenge_method": "S256"}

        # Act & Assert
        with pytest.raises(UnsupportedMethodError):
            evaluator.evaluate(parameters, RFC_VERIFIER)


class TestParameterSyntax:
    def setup_method(self):
        self.evaluator = PkceEvaluator()

    def test_invalid_challenge(self) -> None:
        parameters = {"code_challenge": "a" * 42, "code_challenge_method": "S256"}

        with pytest.raises(InvalidChallengeSyntaxError):
            self.evaluator.evaluate(parameters, RFC_VERIFIER)

    def test_invalid_verifier(self) -> None:
        parameters = {"code_challenge": RFC_CHALLENGE, "code_challenge_method": "S256"}

        with pytest.raises(InvalidVerifierSyntaxError):
            self.evaluator.evaluate(parameters, "a" * 129)

    def test_challenge_is_checked_before_verifier(self) -> None:
        with pytest.raises(InvalidChallengeSyntaxError):
            self.evaluator.evaluate({"code_challenge": "bad challenge"}, "bad verifier")

    def test_syntax_errors_are_pkce_errors(self) -> None:
        with pytest.raises(PKCEError) as exc_info:
            self.evaluator.evaluate({"code_challenge": RFC_CHALLENGE}, "x")

        assert exc_info.value.to_response().error == "invalid_request"


class TestVerdicts:
    def setup_method(self):
        self.evaluator = PkceEvaluator()

    def test_s256_with_matching_verifier(self) -> None:
        # Act
        outcome = self.evaluator.evaluate(
            {"code_challenge": RFC_CHALLENGE, "code_challenge_method": "S256"},
            RFC_VERIFIER,
        )

        # Assert
        assert outcome == Verified(True)
        assert outcome.grant_allowed

    def test_s256_with_challenge_as_verifier_is_a_negative_verdict(self) -> None:
        # Act
        outcome = self.evaluator.evaluate(
            {"code_challenge": RFC_CHALLENGE, "code_challenge_method": "S256"},
            RFC_CHALLENGE,
        )

        # Assert - a mismatch is not an error
        assert outcome == Verified(False)
        assert not outcome.grant_allowed

    def test_plain_with_matching_verifier(self) -> None:
        outcome = self.evaluator.evaluate(
            {"code_challenge": RFC_CHALLENGE, "code_challenge_method": "plain"},
            RFC_CHALLENGE,
        )
        assert outcome == Verified(True)

    def test_evaluate_binding(self) -> None:
        binding = ChallengeBinding(RFC_CHALLENGE, "S256")

        assert self.evaluator.evaluate_binding(binding, RFC_VERIFIER) == Verified(True)
        assert self.evaluator.evaluate_binding(None, None) == NoPkceUsed()
        with pytest.raises(MissingChallengeError):
            self.evaluator.evaluate_binding(None, RFC_VERIFIER)

    def test_supported_methods_come_from_registry(self) -> None:
        assert self.evaluator.supported_methods() == {"plain", "S256"}
