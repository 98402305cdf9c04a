"""PKCE validation for the OAuth 2.0 authorization code grant (RFC 7636)."""

from codebind.auth.server.config import PkceConfig
from codebind.auth.server.endpoints.token import TokenEndpoint
from codebind.auth.server.models.errors import (
    InvalidChallengeSyntaxError,
    InvalidGrantError,
    InvalidVerifierSyntaxError,
    MalformedCodeError,
    MissingChallengeError,
    MissingVerifierError,
    OAuth2Error,
    PKCEError,
    UnsupportedMethodError,
)
from codebind.auth.server.models.pkce import (
    ChallengeBinding,
    EvaluationOutcome,
    NoPkceUsed,
    Verified,
)
from codebind.auth.server.models.responses import (
    OAuth2ErrorResponse,
    PkceServerMetadata,
)
from codebind.auth.server.primitives.syntax import is_valid_parameter
from codebind.auth.server.primitives.transforms import (
    ChallengeTransform,
    PlainTransform,
    S256Transform,
    create_s256_code_challenge,
)
from codebind.auth.server.services.authorize import (
    AuthorizeRequestValidator,
    build_error_redirect,
)
from codebind.auth.server.services.code_store import InMemoryAuthorizationCodeStore
from codebind.auth.server.services.evaluator import PkceEvaluator
from codebind.auth.server.services.registry import TransformRegistry
from codebind.auth.server.services.transport import (
    decode_code,
    encode_code,
    merge_code_verifier,
)

__all__ = [
    "PkceConfig",
    "TokenEndpoint",
    "OAuth2Error",
    "PKCEError",
    "InvalidGrantError",
    "MissingVerifierError",
    "MissingChallengeError",
    "InvalidChallengeSyntaxError",
    "InvalidVerifierSyntaxError",
    "UnsupportedMethodError",
    "MalformedCodeError",
    "ChallengeBinding",
    "EvaluationOutcome",
    "NoPkceUsed",
    "Verified",
    "OAuth2ErrorResponse",
    "PkceServerMetadata",
    "is_valid_parameter",
    "ChallengeTransform",
    "PlainTransform",
    "S256Transform",
    "create_s256_code_challenge",
    "AuthorizeRequestValidator",
    "build_error_redirect",
    "InMemoryAuthorizationCodeStore",
    "PkceEvaluator",
    "TransformRegistry",
    "encode_code",
    "decode_code",
    "merge_code_verifier",
]
