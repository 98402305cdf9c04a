"""Configuration for the PKCE server components.

Values come from the environment, optionally seeded from a ``.env`` file:

    CODEBIND_PKCE_METHODS=plain,S256
    CODEBIND_ALLOW_QUERY_STRING=true
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from codebind.auth.server.endpoints.token import GrantHandler, TokenEndpoint
from codebind.auth.server.models.pkce import PLAIN, S256
from codebind.auth.server.services.evaluator import PkceEvaluator
from codebind.auth.server.services.registry import TransformRegistry

METHODS_ENV = "CODEBIND_PKCE_METHODS"
ALLOW_QUERY_STRING_ENV = "CODEBIND_ALLOW_QUERY_STRING"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class PkceConfig:
    """Settings for building the registry, evaluator and token endpoint."""

    methods: tuple[str, ...] = (PLAIN, S256)
    allow_query_string: bool = True

    @classmethod
    def from_env(cls, env_file: str | None = None) -> PkceConfig:
        """Load settings from the environment.

        Args:
            env_file: Path of a ``.env`` file to load first. Variables already
                set in the environment take precedence.

        Raises:
            ValueError: If a variable cannot be parsed
        """
        load_dotenv(env_file)

        config = cls()
        methods = os.getenv(METHODS_ENV)
        if methods is not None:
            parsed = tuple(m.strip() for m in methods.split(",") if m.strip())
            config = replace(config, methods=parsed)

        allow_query_string = os.getenv(ALLOW_QUERY_STRING_ENV)
        if allow_query_string is not None:
            config = replace(
                config,
                allow_query_string=_parse_bool(
                    ALLOW_QUERY_STRING_ENV, allow_query_string
                ),
            )
        return config

    def build_registry(self) -> TransformRegistry:
        return TransformRegistry.from_method_ids(self.methods)

    def build_evaluator(self) -> PkceEvaluator:
        return PkceEvaluator(self.build_registry())

    def build_token_endpoint(self, grant_handler: GrantHandler) -> TokenEndpoint:
        return TokenEndpoint(grant_handler, allow_query_string=self.allow_query_string)
