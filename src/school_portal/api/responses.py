"""
school_portal.api.responses

The response envelope shared by every endpoint.

Responsibilities:
- Build `{timeStamp, method, route, deviceType, timezone, success, status, message, data}`.
- Log each emitted envelope at a level matching its status.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette import status as http_status
from starlette.requests import Request

from school_portal.api.client_info import request_device_type, request_timezone
from school_portal.observability.logging import get_logger
from school_portal.services.crud import ServiceResult

log = get_logger(__name__)


def send_response(
    request: Request,
    status: int,
    message: str,
    data: Any = None,
) -> JSONResponse:
    success = 200 <= status < 300
    body = {
        "timeStamp": datetime.now(tz=UTC).isoformat(),
        "method": request.method,
        "route": request.url.path,
        "deviceType": request_device_type(request),
        "timezone": request_timezone(request),
        "success": success,
        "status": status,
        "message": message,
        "data": {} if data is None else data,
    }

    if success:
        log.info("response.success", status=status, message=message)
    elif status >= 500:
        log.error("response.server_error", status=status, message=message)
    else:
        log.warning("response.client_error", status=status, message=message)

    return JSONResponse(status_code=status, content=jsonable_encoder(body))


def ok(request: Request, message: str, data: Any = None) -> JSONResponse:
    return send_response(request, http_status.HTTP_200_OK, message, data)


def from_result(request: Request, result: ServiceResult) -> JSONResponse:
    return send_response(request, result.status, result.message, result.data)
