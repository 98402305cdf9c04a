"""Wire models returned by the authorization server.

Contains the RFC 6749 error response body and the PKCE part of the
RFC 8414 authorization server metadata document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from codebind.auth.server.services.registry import TransformRegistry


class OAuth2ErrorResponse(BaseModel):
    """OAuth 2.0 error response (RFC 6749 Section 5.2)."""

    error: str
    error_description: str | None = None
    error_uri: str | None = None

    def to_query_params(self) -> dict[str, str]:
        """Render as query parameters for an authorization error redirect."""
        return self.model_dump(exclude_none=True)


class PkceServerMetadata(BaseModel):
    """PKCE support advertised in Authorization Server Metadata (RFC 8414)."""

    code_challenge_methods_supported: list[str] = Field(min_length=1)

    @field_validator("code_challenge_methods_supported")
    @classmethod
    def sort_methods(cls, v: list[str]) -> list[str]:
        return sorted(set(v))

    @classmethod
    def from_registry(cls, registry: TransformRegistry) -> PkceServerMetadata:
        return cls(code_challenge_methods_supported=list(registry.supported_methods()))
