"""Request Sanitization Middleware.

Runs every inbound payload through the sanitization pipeline before any route
handler sees it:

1. Query parameters and JSON / form-urlencoded bodies are sanitized by
   ``PayloadSanitizer`` (structural limits first, then string cleaning).
2. The sanitized values are classified by ``RequestGate``; a match ends
   the request with 400 and the handler never runs.
3. The sanitized values replace the originals in the ASGI scope/body, so
   handlers parse the cleaned payload.

SECURITY (CWE-20, CWE-79, CWE-89): heuristic defense layer. Handlers must
still use parameterized queries and context-aware escaping.

This is a pure ASGI middleware rather than ``BaseHTTPMiddleware`` because it
rewrites the request body stream. Bodies are read with a byte cap, so a
chunked request without ``Content-Length`` cannot grow past ``max_body_size``.

Author: Barangay Platform Team
Version: 1.0.0
"""

import json
from typing import Any
from urllib.parse import parse_qsl, urlencode

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from barangay_api.security.errors import PayloadTooLarge, SecurityViolation, error_response
from barangay_api.security.gate import RequestGate
from barangay_api.security.sanitizer import PayloadSanitizer
from barangay_api.services.client_ip_service import ClientIPExtractor
from barangay_api.utils.logging import get_logger

logger = get_logger(__name__)

BODY_METHODS = {"POST", "PUT", "PATCH", "DELETE"}
JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
DEFAULT_MAX_BODY_SIZE = 10 * 1024 * 1024  # 10 MB


def parse_query(raw: str) -> dict[str, Any]:
    """Parse a query/form string; repeated keys become lists."""
    params: dict[str, Any] = {}
    for key, value in parse_qsl(raw, keep_blank_values=True):
        if key in params:
            existing = params[key]
            params[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


def encode_query(params: dict[str, Any]) -> str:
    return urlencode(params, doseq=True)


class RequestSanitizationMiddleware:
    """Sanitize and gate query strings and request bodies.

    Args:
        app: ASGI application.
        sanitizer: Payload sanitizer holding the structural limits.
        gate: Request gate holding the pattern registry and field policy.
        ip_extractor: Client IP extraction used when logging rejections.
        max_body_size: Most body bytes read before rejecting with 413.
    """

    def __init__(
        self,
        app: ASGIApp,
        sanitizer: PayloadSanitizer,
        gate: RequestGate,
        ip_extractor: ClientIPExtractor | None = None,
        max_body_size: int = DEFAULT_MAX_BODY_SIZE,
    ):
        self.app = app
        self.sanitizer = sanitizer
        self.gate = gate
        self.ip_extractor = ip_extractor or ClientIPExtractor()
        self.max_body_size = max_body_size

        limits = sanitizer.limits
        logger.info(
            f"RequestSanitizationMiddleware initialized: "
            f"max_string={limits.max_string_length}, "
            f"max_collection={limits.max_array_length}, "
            f"max_depth={limits.max_object_depth}, "
            f"exempt_fields={len(gate.policy.exempt_fields)}, "
            f"max_body={max_body_size}"
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)

        try:
            self.gate.inspect_user_agent(headers.get("user-agent"))

            # Sanitize everything first, then classify the sanitized values
            query = self._sanitize_query(scope)
            body, parsed_body = await self._sanitize_body(scope, headers, receive)

            if query is not None:
                self.gate.inspect(query)
            if parsed_body is not None:
                self.gate.inspect(parsed_body)

        except SecurityViolation as exc:
            logger.warning(
                f"Request rejected: error={exc.error}, rule={exc.rule}, "
                f"field={exc.field}, method={scope.get('method')}, path={scope.get('path')}, "
                f"ip={self.ip_extractor.get_client_ip(Request(scope))}"
            )
            response = error_response(exc)
            await response(scope, receive, send)
            return

        if query is not None:
            scope = dict(scope)
            scope["query_string"] = encode_query(query).encode("latin-1")

        if body is None:
            await self.app(scope, receive, send)
            return

        scope = dict(scope)
        scope["headers"] = [
            (name, value)
            for name, value in scope["headers"]
            if name.lower() != b"content-length"
        ] + [(b"content-length", str(len(body)).encode("latin-1"))]

        await self.app(scope, self._replay(body, receive), send)

    def _sanitize_query(self, scope: Scope) -> dict[str, Any] | None:
        raw = scope.get("query_string", b"").decode("latin-1")
        if not raw:
            return None
        return self.sanitizer.sanitize_object(parse_query(raw))

    async def _sanitize_body(
        self, scope: Scope, headers: Headers, receive: Receive
    ) -> tuple[bytes | None, Any]:
        """Return ``(new_body_bytes, sanitized_payload)``.

        ``(None, None)`` means the body is not inspected (method without body,
        unsupported content type, or unparseable JSON left for the route's
        own validation).
        """
        if scope.get("method") not in BODY_METHODS:
            return None, None

        content_type = headers.get("content-type", "").split(";", 1)[0].strip().lower()
        if content_type not in (JSON_CONTENT_TYPE, FORM_CONTENT_TYPE):
            return None, None

        raw = await self._read_body(receive, self.max_body_size)

        if not raw:
            return raw, None

        if content_type == FORM_CONTENT_TYPE:
            form = self.sanitizer.sanitize_object(parse_query(raw.decode("utf-8", "replace")))
            return encode_query(form).encode("utf-8"), form

        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.debug(f"Body is not valid JSON, passing through: path={scope.get('path')}")
            return raw, None

        sanitized = self.sanitizer.sanitize_object(payload)
        return json.dumps(sanitized, ensure_ascii=False).encode("utf-8"), sanitized

    @staticmethod
    async def _read_body(receive: Receive, limit: int) -> bytes:
        """Read the whole body, raising ``PayloadTooLarge`` once ``limit`` bytes are passed."""
        chunks: list[bytes] = []
        total = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                break
            chunk = message.get("body", b"")
            total += len(chunk)
            if total > limit:
                raise PayloadTooLarge(
                    f"Payload too large: request body exceeds maximum allowed size of "
                    f"{limit} bytes"
                )
            chunks.append(chunk)
            if not message.get("more_body", False):
                break
        return b"".join(chunks)

    @staticmethod
    def _replay(body: bytes, receive: Receive) -> Receive:
        """Serve ``body`` once, then defer to the original channel (disconnects)."""
        sent = False

        async def replay_receive() -> Message:
            nonlocal sent
            if not sent:
                sent = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        return replay_receive
