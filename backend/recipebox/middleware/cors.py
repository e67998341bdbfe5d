"""
RecipeBox Backend: Preflight Middleware
=========================================

What:  Answers every OPTIONS request with 200, an empty body and the
       Access-Control-Allow-* headers, without reaching any route.
How:   Short-circuits in `dispatch()`. Non-OPTIONS requests pass through;
       their CORS headers come from Starlette's CORSMiddleware.

Starlette's CORSMiddleware alone replies 400 to preflights that name a
disallowed method or header and lets plain OPTIONS requests fall through to
routing (405). Browsers and scripted clients here expect a flat 200.
"""

from typing import List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOW_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


class PreflightMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, allow_origins: List[str]):
        super().__init__(app)
        self.allow_origins = allow_origins
        self.allow_all = "*" in allow_origins

    def _allow_origin(self, request: Request) -> str:
        if self.allow_all:
            return "*"
        origin = request.headers.get("origin", "")
        return origin if origin in self.allow_origins else ""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "OPTIONS":
            return await call_next(request)

        headers = {
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }
        origin = self._allow_origin(request)
        if origin:
            headers["Access-Control-Allow-Origin"] = origin
            if origin != "*":
                headers["Vary"] = "Origin"
        return Response(status_code=200, headers=headers)
