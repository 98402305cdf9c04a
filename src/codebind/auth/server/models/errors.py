"""Exception hierarchy for server-side OAuth 2.0 PKCE errors.

Every error here is the expected result of bad client input. Each one carries
the OAuth 2.0 error code it maps to, so HTTP adapters can answer with a
client-facing error response instead of a server error.
"""

from __future__ import annotations

from codebind.auth.server.models.responses import OAuth2ErrorResponse


class OAuth2Error(Exception):
    """Base exception for all OAuth 2.0 server errors."""

    error: str = "invalid_request"

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description

    def to_response(self) -> OAuth2ErrorResponse:
        """Build the RFC 6749 Section 5.2 error body for this error."""
        return OAuth2ErrorResponse(
            error=self.error, error_description=self.description
        )


class InvalidGrantError(OAuth2Error):
    """Raised when an authorization code cannot be redeemed.

    Covers unknown, already used and PKCE-mismatched codes alike. The
    description is intentionally the same for all of them.
    """

    error = "invalid_grant"


class PKCEError(OAuth2Error):
    """Raised when PKCE parameters are missing, malformed or unsupported."""

    pass


class MissingVerifierError(PKCEError):
    """Raised when a code challenge was stored but no code verifier was sent."""

    def __init__(
        self,
        description: str = "Code verifier must be provided for this authorization code.",
    ) -> None:
        super().__init__(description)


class MissingChallengeError(PKCEError):
    """Raised when a code verifier was sent but no code challenge was stored."""

    def __init__(
        self,
        description: str = "Code verifier not required for this authorization code.",
    ) -> None:
        super().__init__(description)


class InvalidChallengeSyntaxError(PKCEError):
    """Raised when the code challenge breaks the RFC 7636 length/charset rule."""

    pass


class InvalidVerifierSyntaxError(PKCEError):
    """Raised when the code verifier breaks the RFC 7636 length/charset rule."""

    pass


class UnsupportedMethodError(PKCEError):
    """Raised when the code challenge method is not registered."""

    def __init__(self, description: str, method_id: str | None = None) -> None:
        super().__init__(description)
        self.method_id = method_id


class MalformedCodeError(PKCEError):
    """Raised when an authorization code already contains the transport separator.

    The verifier is appended to the code after a single space, so a code that
    already holds one could not be split back unambiguously.
    """

    pass
