"""PKCE checks at the authorization endpoint (RFC 7636 Section 4.4).

Rejecting a malformed challenge or an unknown method here means no
authorization code is ever minted for a request that could not be redeemed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from codebind.auth.server.models.errors import (
    InvalidChallengeSyntaxError,
    OAuth2Error,
    UnsupportedMethodError,
)
from codebind.auth.server.models.pkce import (
    CODE_CHALLENGE,
    CODE_CHALLENGE_METHOD,
    DEFAULT_METHOD,
    ChallengeBinding,
)
from codebind.auth.server.primitives.syntax import (
    PARAMETER_SYNTAX_DESCRIPTION,
    is_valid_code_challenge,
)
from codebind.auth.server.services.registry import TransformRegistry

logger = logging.getLogger(__name__)


class AuthorizeRequestValidator:
    """Validates the PKCE parameters of an authorization request."""

    def __init__(self, registry: TransformRegistry | None = None):
        self.registry = registry if registry is not None else TransformRegistry.default()

    def validate(self, request_parameters: Mapping[str, str]) -> ChallengeBinding | None:
        """Check the request's code challenge and method.

        Args:
            request_parameters: Query parameters of the authorization request

        Returns:
            The binding to persist with the issued code, or None without PKCE

        Raises:
            InvalidChallengeSyntaxError: If the code challenge is malformed
            UnsupportedMethodError: If the code challenge method is unknown
        """
        code_challenge = request_parameters.get(CODE_CHALLENGE)
        if not code_challenge:
            return None

        if not is_valid_code_challenge(code_challenge):
            raise InvalidChallengeSyntaxError(
                f"Code challenge {PARAMETER_SYNTAX_DESCRIPTION}."
            )

        method_id = request_parameters.get(CODE_CHALLENGE_METHOD) or DEFAULT_METHOD
        if not self.registry.is_supported(method_id):
            supported = ", ".join(sorted(self.registry.supported_methods()))
            raise UnsupportedMethodError(
                f"Unsupported code challenge method. Supported: {supported}",
                method_id=method_id,
            )

        logger.debug(f"Authorization request uses PKCE method {method_id!r}")
        return ChallengeBinding(
            code_challenge=code_challenge, code_challenge_method=method_id
        )


def build_error_redirect(
    redirect_uri: str, error: OAuth2Error, state: str | None = None
) -> str:
    """Build the redirect carrying an authorization error (RFC 6749 4.1.2.1).

    Existing query parameters of ``redirect_uri`` are preserved.
    """
    scheme, netloc, path, query, fragment = urlsplit(redirect_uri)
    params = parse_qsl(query, keep_blank_values=True)
    params.extend(error.to_response().to_query_params().items())
    if state is not None:
        params.append(("state", state))
    query = urlencode(params, quote_via=quote)
    return urlunsplit((scheme, netloc, path, query, fragment))
