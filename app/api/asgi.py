"""ASGI boundary for the tasks API.

Incoming requests are read with Starlette and normalized into
:class:`~app.api.messages.Request`; the router's :class:`Response` is emitted
through a Starlette response. Any fault escaping a handler becomes a generic
500 here and never reaches the client in detail.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request as StarletteRequest
from starlette.responses import Response as StarletteResponse

from .errors import ApiError
from .messages import Request, Response
from .router import Router

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal Server Error"


def decode_body(content_type: str, raw: bytes) -> tuple[Any, str | None]:
    """Return ``(body, error)``; only non-empty JSON payloads are parsed."""
    if "application/json" not in content_type.lower() or not raw:
        return None, None
    try:
        return json.loads(raw), None
    except ValueError as exc:
        return None, getattr(exc, "msg", None) or "Malformed JSON"


class Application:
    def __init__(self, router: Router) -> None:
        self._router = router

    def handle(self, request: Request) -> Response:
        try:
            return self._router.dispatch(request)
        except ApiError as exc:
            return exc.to_response()
        except Exception:  # noqa: BLE001
            logger.exception("Unhandled error for %s %s", request.method, request.path)
            return Response.json({"error": INTERNAL_ERROR}, 500)

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            return

        incoming = StarletteRequest(scope, receive)
        raw = await incoming.body()
        headers = dict(incoming.headers)
        body, body_error = decode_body(headers.get("content-type", ""), raw)

        request = Request.build(
            incoming.method,
            incoming.url.path,
            query=dict(incoming.query_params),
            headers=headers,
            body=body,
            body_error=body_error,
        )
        response = await run_in_threadpool(self.handle, request)
        logger.debug("%s %s -> %s", request.method, request.path, response.status_code)

        outgoing = StarletteResponse(
            content=response.render(),
            status_code=response.status_code,
            headers=response.headers,
        )
        await outgoing(scope, receive, send)
