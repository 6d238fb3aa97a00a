from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Any, Callable, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
QUIET_PATHS = frozenset({"/healthz"})
_GAME_PATH = re.compile(r"^/api/games/(?P<game_id>[^/]+)")


def _log_fields(request: Request, request_id: str) -> Dict[str, Any]:
    fields: Dict[str, Any] = {"request_id": request_id}
    m = _GAME_PATH.match(request.url.path)
    if m:
        fields["game_id"] = m.group("game_id")
    return fields


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log it with its game and timing.

    A client-supplied ``x-request-id`` is reused so callers can correlate
    engine searches with their own logs. Health probes log at DEBUG.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        fields = _log_fields(request, request_id)
        quiet = request.url.path in QUIET_PATHS

        (logger.debug if quiet else logger.info)(
            "%s %s", request.method, request.url.path, extra=fields
        )

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        fields["status_code"] = response.status_code
        fields["duration_ms"] = int((time.perf_counter() - start) * 1000)
        if response.status_code >= 500:
            log = logger.warning
        elif quiet:
            log = logger.debug
        else:
            log = logger.info
        log("%s %s -> %d", request.method, request.url.path, response.status_code, extra=fields)
        return response
