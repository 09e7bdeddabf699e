"""Security middleware: response headers and request body limits.

Both are pure ASGI middleware so streaming responses pass through untouched.
"""

import json

import structlog
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()

# ── 1. Security headers ───────────────────────────────────────────────────────


class SecurityHeadersMiddleware:
    """Add security headers to every HTTP response.

    JSON API responses under ``api_prefix`` are additionally marked
    ``no-store`` unless the handler set its own Cache-Control; deck content
    and analytics are per-user and must not land in shared caches.
    """

    _STATIC_HEADERS = (
        ("x-content-type-options", "nosniff"),
        ("x-frame-options", "DENY"),
        ("x-xss-protection", "0"),
        ("referrer-policy", "strict-origin-when-cross-origin"),
        ("content-security-policy", "default-src 'none'; frame-ancestors 'none'"),
    )
    _HSTS = ("strict-transport-security", "max-age=63072000; includeSubDomains")

    def __init__(
        self, app: ASGIApp, is_production: bool = False, api_prefix: str = "/api/"
    ) -> None:
        self.app = app
        self.api_prefix = api_prefix
        self.headers = list(self._STATIC_HEADERS)
        if is_production:
            self.headers.append(self._HSTS)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        is_api = scope.get("path", "").startswith(self.api_prefix)

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self.headers:
                    if name not in headers:
                        headers.append(name, value)
                if is_api and "cache-control" not in headers:
                    headers.append("cache-control", "no-store")
            await send(message)

        await self.app(scope, receive, send_with_headers)


# ── 2. Request body limits ────────────────────────────────────────────────────


class _BodyTooLarge(Exception):
    pass


class RequestBodySizeLimitMiddleware:
    """Reject request bodies larger than the limit for their path with 413.

    ``path_limits`` maps path prefixes to tighter limits (the public tracking
    beacon, for one); the longest matching prefix wins, otherwise
    ``max_bytes`` applies. A declared Content-Length is checked up front and
    chunked bodies are counted as they are read.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_bytes: int = 10_485_760,
        path_limits: dict[str, int] | None = None,
    ) -> None:
        self.app = app
        self.max_bytes = max_bytes
        self.path_limits = sorted(
            (path_limits or {}).items(), key=lambda item: len(item[0]), reverse=True
        )

    def limit_for(self, path: str) -> int:
        for prefix, limit in self.path_limits:
            if path.startswith(prefix):
                return limit
        return self.max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        limit = self.limit_for(path)

        declared = dict(scope.get("headers", [])).get(b"content-length")
        if declared:
            try:
                too_large = int(declared) > limit
            except ValueError:
                too_large = False  # malformed header, left to downstream
            if too_large:
                logger.warning(
                    "request_body_too_large",
                    path=path,
                    content_length=declared.decode(),
                    limit=limit,
                )
                await self._reject(send)
                return

        received = 0
        response_started = False

        async def counting_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise _BodyTooLarge
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, counting_receive, tracking_send)
        except _BodyTooLarge:
            logger.warning("request_body_too_large", path=path, received=received, limit=limit)
            if not response_started:
                await self._reject(send)

    @staticmethod
    async def _reject(send: Send) -> None:
        body = json.dumps(
            {"error": "payload_too_large", "message": "Request body too large."}
        ).encode()
        await send(
            {
                "type": "http.response.start",
                "status": 413,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(body)).encode()),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body, "more_body": False})
