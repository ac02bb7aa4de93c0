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
"""RequestContextMiddleware: per-request RequestContext, pure ASGI."""

from __future__ import annotations

import logging

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from aopguard.context.request_context import RequestContext

logger = logging.getLogger(__name__)


class RequestContextMiddleware:
    """Creates a fresh RequestContext for each incoming HTTP request.

    Honors the ``X-Request-Id`` header if present; otherwise generates a
    UUID.  The caller-asserted role is read from *role_header*; an absent
    or blank header yields a context without a role.  The context is cleared
    after the response is sent, even on error.
    """

    def __init__(self, app: ASGIApp, role_header: str = "X-User-Role") -> None:
        self.app = app
        self._role_header = role_header.lower()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        role = headers.get(self._role_header) or None
        ctx = RequestContext.init(request_id=headers.get("x-request-id"), role=role)
        logger.debug("Request %s started [role=%s]", ctx.request_id, role)
        try:
            await self.app(scope, receive, send)
        finally:
            RequestContext.clear()
