# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Global exception handler: RFC 7807 inspired error responses."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from starlette.requests import Request
from starlette.responses import JSONResponse

from aopguard.context.request_context import RequestContext
from aopguard.kernel.exceptions import (
    AopGuardException,
    ForbiddenException,
    InterceptionException,
)

# Exception -> HTTP status code mapping; anything else is a 500
_STATUS_MAP: dict[type, int] = {
    ForbiddenException: 403,
}


def _get_status_code(exc: Exception) -> int:
    """Map exception type to HTTP status code."""
    for exc_type, status in _STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return status
    return 500


def _transaction_id(request: Request) -> str | None:
    ctx = RequestContext.current()
    if ctx is not None:
        return ctx.request_id
    return request.headers.get("x-request-id")


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all exceptions with structured JSON responses.

    Only :class:`AopGuardException` messages reach the client; anything else
    becomes a generic internal error.
    """
    timestamp = datetime.now(UTC).isoformat()

    if isinstance(exc, AopGuardException) and not isinstance(exc, InterceptionException):
        status = _get_status_code(exc)
        body: dict[str, Any] = {
            "success": False,
            "error": {
                "message": str(exc),
                "code": exc.code or type(exc).__name__,
                "transaction_id": _transaction_id(request),
                "timestamp": timestamp,
                "status": status,
                "path": request.url.path,
            },
        }
        if exc.context:
            body["error"]["context"] = exc.context
    else:
        status = 500
        body = {
            "success": False,
            "error": {
                "message": "Internal server error",
                "code": "INTERNAL_ERROR",
                "transaction_id": _transaction_id(request),
                "timestamp": timestamp,
                "status": status,
                "path": request.url.path,
            },
        }

    return JSONResponse(body, status_code=status)
