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
"""AuthorizationAdvice: the before-advice guarding privileged operations."""

from __future__ import annotations

from typing import Any, Protocol

from aopguard.aop.events import AuthorizationEventsPort, CompositeEventsAdapter, LoggerEventsAdapter
from aopguard.aop.pointcut import PointcutMatcher
from aopguard.aop.types import InvocationContext
from aopguard.context.request_context import RoleProvider
from aopguard.kernel.exceptions import AuthorizationDenied

DEFAULT_REQUIRED_ROLE = "Admin"


class Advice(Protocol):
    """Before-advice with optional short-circuit."""

    @property
    def matcher(self) -> PointcutMatcher: ...

    def advise(self, context: InvocationContext) -> Any: ...


class AuthorizationAdvice:
    """Checks the caller's role before letting a marked operation run.

    For every invocation:

    1. If the pointcut does not match, proceed without any check.
    2. Otherwise read the role from the *role_provider*.
    3. Compare it to *required_role*, ignoring case.
    4. On a match, proceed.
    5. Otherwise raise :class:`AuthorizationDenied` without proceeding.

    A missing role (including "no request in flight") is a denial.  The
    advice keeps no per-call state and may be shared by every proxy.

    Args:
        matcher: Pointcut deciding which invocations are protected.
        role_provider: Source of the caller-asserted role.
        required_role: Role that grants access.
        events: Observability hook; defaults to :class:`LoggerEventsAdapter`.
    """

    def __init__(
        self,
        matcher: PointcutMatcher,
        role_provider: RoleProvider,
        required_role: str = DEFAULT_REQUIRED_ROLE,
        events: AuthorizationEventsPort | None = None,
    ) -> None:
        self._matcher = matcher
        self._role_provider = role_provider
        self._required_role = required_role
        self._required_key = required_role.casefold()
        # Adapter failures are logged, never raised.
        self._events = CompositeEventsAdapter(events if events is not None else LoggerEventsAdapter())

    @property
    def matcher(self) -> PointcutMatcher:
        return self._matcher

    @property
    def required_role(self) -> str:
        return self._required_role

    def is_granted(self, role: str | None) -> bool:
        return role is not None and role.casefold() == self._required_key

    def advise(self, context: InvocationContext) -> Any:
        """Run the check for *context* and return the result of ``proceed()``.

        Raises:
            AuthorizationDenied: If the operation is protected and the caller
                does not hold the required role.
        """
        if not self._matcher.matches(context.target):
            return context.proceed()

        context.intercepted = True
        operation = self._matcher.registry.describe(context.target)
        self._events.on_check_started(operation)

        if not self.is_granted(self._role_provider.current_role()):
            self._events.on_denied(operation)
            raise AuthorizationDenied(f"Access denied. {self._required_role} role required.")

        self._events.on_granted(operation)
        return context.proceed()
