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
"""Starlette application exposing the demo controllers over HTTP."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from aopguard.aop.events import AuthorizationEventsPort
from aopguard.core.config import Config
from aopguard.core.properties import SecurityProperties
from aopguard.demo.composition import Collaborators, build_collaborators
from aopguard.demo.models import ApiResponse
from aopguard.kernel.exceptions import AopGuardException
from aopguard.web.errors import global_exception_handler
from aopguard.web.middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[JSONResponse]]


def _endpoint(handler: Callable[..., Any], *path_params: str) -> Endpoint:
    """Adapt a controller operation to a Starlette endpoint."""

    async def endpoint(request: Request) -> JSONResponse:
        args = [request.path_params[name] for name in path_params]
        result = handler(*args)
        if inspect.isawaitable(result):
            result = await result
        response: ApiResponse = result
        return JSONResponse(response.to_json())

    endpoint.__name__ = getattr(handler, "__name__", "endpoint")
    return endpoint


def build_routes(collaborators: Collaborators) -> list[Route]:
    products = collaborators.product_controller
    users = collaborators.user_controller
    reports = collaborators.report_controller
    admin = collaborators.admin_controller

    return [
        Route("/api/product", _endpoint(products.get_all_products), methods=["GET"]),
        Route("/api/product/{product_id:int}", _endpoint(products.delete_product, "product_id"), methods=["DELETE"]),
        Route("/api/user/all", _endpoint(users.get_all_users), methods=["GET"]),
        Route("/api/user/public", _endpoint(users.get_public_data), methods=["GET"]),
        Route("/api/report/public", _endpoint(reports.get_public_report), methods=["GET"]),
        Route("/api/report/detailed", _endpoint(reports.get_detailed_report), methods=["GET"]),
        Route("/api/report/financial", _endpoint(reports.get_financial_report), methods=["GET"]),
        Route(
            "/api/report/download/{report_id:int}",
            _endpoint(reports.download_report, "report_id"),
            methods=["GET"],
        ),
        Route("/api/admin/settings", _endpoint(admin.get_settings), methods=["GET"]),
        Route("/api/admin/logs", _endpoint(admin.get_logs), methods=["GET"]),
        Route("/api/admin/reset", _endpoint(admin.reset_system), methods=["POST"]),
    ]


def create_app(
    config: Config | None = None,
    events: AuthorizationEventsPort | None = None,
) -> Starlette:
    """Build the demo application from *config* (bundled defaults if omitted)."""
    config = config or Config.from_file()
    security = config.bind(SecurityProperties)
    collaborators = build_collaborators(security=security, events=events)

    app = Starlette(
        routes=build_routes(collaborators),
        middleware=[Middleware(RequestContextMiddleware, role_header=security.role_header)],
        exception_handlers={AopGuardException: global_exception_handler},
    )
    app.state.collaborators = collaborators
    app.state.config = config
    logger.info("Demo application created [required_role=%s, role_header=%s]", security.required_role, security.role_header)
    return app
