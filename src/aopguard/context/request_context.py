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
"""Request-scoped context backed by contextvars.

Each inbound request gets a fresh RequestContext via RequestContextMiddleware.
The context stores the request ID, the caller-asserted role and arbitrary
attributes.  Context variables are isolated per asyncio task and per thread,
so concurrent requests never observe each other's role.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Any, Protocol, runtime_checkable

_request_context_var: ContextVar[RequestContext | None] = ContextVar(
    "aopguard_request_context", default=None
)


class RequestContext:
    """Holds per-request state: request ID, role and custom attributes.

    Use ``RequestContext.init()`` to create a new context for the current
    task, and ``RequestContext.current()`` to retrieve it.
    """

    def __init__(self, request_id: str | None = None, role: str | None = None) -> None:
        self._request_id = request_id or uuid.uuid4().hex
        self._role = role
        self._attributes: dict[str, Any] = {}

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def role(self) -> str | None:
        return self._role

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    @classmethod
    def init(cls, request_id: str | None = None, role: str | None = None) -> RequestContext:
        """Create and set a new RequestContext for the current task."""
        ctx = cls(request_id=request_id, role=role)
        _request_context_var.set(ctx)
        return ctx

    @classmethod
    def current(cls) -> RequestContext | None:
        """Get the RequestContext for the current task, or None."""
        return _request_context_var.get()

    @classmethod
    def clear(cls) -> None:
        """Clear the RequestContext for the current task."""
        _request_context_var.set(None)


@runtime_checkable
class RoleProvider(Protocol):
    """Supplies the role asserted for the current call, if any."""

    def current_role(self) -> str | None: ...


class RequestContextRoleProvider:
    """RoleProvider reading the role from the current :class:`RequestContext`.

    Returns ``None`` when no request is in flight; the advice treats that
    exactly like a request without a role.
    """

    def current_role(self) -> str | None:
        ctx = RequestContext.current()
        if ctx is None:
            return None
        return ctx.role
