from typing import Callable
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, X-Client-Info, Apikey"

class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """
    Stamps permissive cross-origin headers on every response, errors included,
    and answers any OPTIONS preflight with an empty 200.
    """
    def __init__(self, app, allow_origins: str = "*"):
        super().__init__(app)
        self.origins = [o.strip() for o in allow_origins.split(",") if o.strip()] or ["*"]

    def headers_for(self, request: Request) -> dict[str, str]:
        headers = {
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }
        if "*" in self.origins:
            headers["Access-Control-Allow-Origin"] = "*"
            return headers
        # Restricted: echo back only origins we know, never a stand-in
        headers["Vary"] = "Origin"
        requested = request.headers.get("origin")
        if requested in self.origins:
            headers["Access-Control-Allow-Origin"] = requested
        return headers

    async def dispatch(self, request: Request, call_next: Callable):
        headers = self.headers_for(request)
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)
        response: Response = await call_next(request)
        response.headers.update(headers)
        return response
