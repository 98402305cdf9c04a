"""Starlette token endpoint adapter with PKCE code verifier transport.

Sits in front of an existing token grant handler that only understands the
``code`` parameter. Before delegating, the code verifier is folded into the
code value so the code store can check it at redemption.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from codebind.auth.server.models.errors import OAuth2Error
from codebind.auth.server.models.responses import OAuth2ErrorResponse
from codebind.auth.server.services.transport import merge_code_verifier

logger = logging.getLogger(__name__)

GrantHandler = Callable[[dict[str, str]], Awaitable[Mapping[str, Any]]]

# RFC 6749 Section 5.1: token responses must not be cached
_NO_STORE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}


class TokenEndpoint:
    """Token endpoint accepting form POSTs and, optionally, query strings.

    Args:
        grant_handler: Async callable receiving the merged token request
            parameters and returning the token response body
        allow_query_string: Accept GET requests and POST requests carrying
            parameters in the query string
    """

    def __init__(self, grant_handler: GrantHandler, allow_query_string: bool = True):
        self._grant_handler = grant_handler
        self.allow_query_string = allow_query_string

    def routes(self, path: str = "/oauth/token") -> list[Route]:
        return [
            Route(path, self._handle_post, methods=["POST"]),
            Route(path, self._handle_get, methods=["GET"]),
        ]

    async def _handle_post(self, request: Request) -> Response:
        """Handle POST requests - the standard token request."""
        if request.url.query and not self.allow_query_string:
            logger.debug("Call to token endpoint contains a query string. Aborting.")
            return self._method_not_allowed("POST")

        parameters: dict[str, str] = {}
        if self.allow_query_string:
            parameters.update(request.query_params)
        form = await request.form()
        parameters.update(
            {key: value for key, value in form.items() if isinstance(value, str)}
        )
        return await self._exchange(parameters)

    async def _handle_get(self, request: Request) -> Response:
        """Handle GET requests - only when query strings are allowed."""
        if not self.allow_query_string:
            return self._method_not_allowed("GET")
        return await self._exchange(dict(request.query_params))

    async def _exchange(self, parameters: dict[str, str]) -> Response:
        try:
            merged = merge_code_verifier(parameters)
            token_response = await self._grant_handler(merged)
        except OAuth2Error as e:
            logger.debug(f"Token request rejected: {type(e).__name__}: {e.error}")
            return self._error_response(e.to_response())

        return JSONResponse(dict(token_response), headers=_NO_STORE_HEADERS)

    def _error_response(self, error: OAuth2ErrorResponse) -> JSONResponse:
        return JSONResponse(
            error.model_dump(exclude_none=True),
            status_code=400,
            headers=_NO_STORE_HEADERS,
        )

    def _method_not_allowed(self, method: str) -> JSONResponse:
        body = OAuth2ErrorResponse(
            error="method_not_allowed",
            error_description=f"Request method '{method}' not supported",
        )
        return JSONResponse(body.model_dump(exclude_none=True), status_code=405)
