from __future__ import annotations

import logging
from typing import Any, Dict, Optional, cast

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """HTTP error carrying a machine-readable domain code (e.g. ``illegal_move``)."""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code


def error_envelope(
    *,
    code: str,
    message: str,
    err_type: str,
    request_id: str,
    field_errors: Optional[list[dict[str, str]]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
            "type": err_type,
            "request_id": request_id,
        }
    }
    if field_errors:
        payload["error"]["field_errors"] = field_errors
    return payload


def _render_http_exception(exc: StarletteHTTPException, request_id: str) -> JSONResponse:
    status_code = exc.status_code
    code = exc.code if isinstance(exc, ApiError) else _status_to_code(status_code)
    payload = error_envelope(
        code=code,
        message=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        err_type="client_error" if 400 <= status_code < 500 else "server_error",
        request_id=request_id,
    )
    return JSONResponse(status_code=status_code, content=payload)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    return _render_http_exception(cast(StarletteHTTPException, exc), request_id)


async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    if isinstance(exc, StarletteHTTPException):
        return _render_http_exception(exc, request_id)
    logger.exception("Unhandled exception", extra={"request_id": request_id})
    payload = error_envelope(
        code="internal_error",
        message="Internal Server Error",
        err_type="server_error",
        request_id=request_id,
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def request_validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    errors = []
    rve = cast(RequestValidationError, exc)
    for e in rve.errors():
        loc = ".".join(str(p) for p in e.get("loc", []) if p is not None)
        errors.append(
            {
                "field": loc,
                "code": e.get("type", "value_error"),
                "message": e.get("msg", "invalid value"),
            }
        )
    payload = error_envelope(
        code="unprocessable_entity",
        message="Validation error",
        err_type="client_error",
        request_id=request_id,
        field_errors=errors or None,
    )
    return JSONResponse(status_code=422, content=payload)


_CODES_BY_STATUS = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "unprocessable_entity",
}


def _status_to_code(status_code: int) -> str:
    if 500 <= status_code < 600:
        return "internal_error"
    return _CODES_BY_STATUS.get(status_code, "error")
