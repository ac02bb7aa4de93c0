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
"""Composition root for the demo application.

Every intercepted collaborator is listed explicitly; nothing is discovered
by scanning.  Proxies are built once here and shared for the lifetime of
the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from aopguard.aop.advice import AuthorizationAdvice
from aopguard.aop.events import AuthorizationEventsPort
from aopguard.aop.pointcut import PointcutMatcher
from aopguard.aop.proxy import ProxyFactory
from aopguard.aop.registry import MarkerRegistry
from aopguard.context.request_context import RequestContextRoleProvider, RoleProvider
from aopguard.core.properties import SecurityProperties
from aopguard.demo.controllers import AdminController, ProductController, ReportController, UserController
from aopguard.demo.services import ProductService, ProductServiceContract, UserService, UserServiceContract

logger = logging.getLogger(__name__)

# Collaborators exposed through a contract.
CONTRACT_REGISTRATIONS: list[tuple[type, type]] = [
    (ProductService, ProductServiceContract),
    (UserService, UserServiceContract),
]

# Collaborators whose concrete type must be preserved.
CONCRETE_REGISTRATIONS: list[type] = [
    ReportController,
    AdminController,
]


@dataclass(frozen=True)
class Collaborators:
    """The wired object graph handed to the transport layer."""

    registry: MarkerRegistry
    advice: AuthorizationAdvice
    product_service: ProductServiceContract
    user_service: UserServiceContract
    product_controller: ProductController
    user_controller: UserController
    report_controller: ReportController
    admin_controller: AdminController


def build_collaborators(
    security: SecurityProperties | None = None,
    role_provider: RoleProvider | None = None,
    events: AuthorizationEventsPort | None = None,
) -> Collaborators:
    """Wire services and controllers, wrapping each registered type in a proxy."""
    security = security or SecurityProperties()
    registry = MarkerRegistry()
    advice = AuthorizationAdvice(
        matcher=PointcutMatcher(registry),
        role_provider=role_provider or RequestContextRoleProvider(),
        required_role=security.required_role,
        events=events,
    )
    factory = ProxyFactory(advice)

    services = {impl: factory.wrap_contract_based(impl(), contract) for impl, contract in CONTRACT_REGISTRATIONS}
    controllers = {cls: factory.wrap_concrete_type(cls()) for cls in CONCRETE_REGISTRATIONS}

    product_service = services[ProductService]
    user_service = services[UserService]

    protected = [d.qualified_name for d in registry if registry.has_marker(d)]
    logger.info("Registered %d operations, %d protected: %s", len(registry), len(protected), ", ".join(protected))

    return Collaborators(
        registry=registry,
        advice=advice,
        product_service=product_service,
        user_service=user_service,
        product_controller=ProductController(product_service),
        user_controller=UserController(user_service),
        report_controller=controllers[ReportController],
        admin_controller=controllers[AdminController],
    )
