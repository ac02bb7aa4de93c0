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
"""AOP core types: OperationDescriptor, InvocationTarget and InvocationContext."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from aopguard.kernel.exceptions import DoubleProceedError


@dataclass(frozen=True)
class OperationDescriptor:
    """Identifies one callable operation and the markers that apply to it.

    Attributes:
        name: Operation (method) name.
        container: The class declaring or inheriting the operation.
        container_marked: Whether the container carries a marker.
        operation_marked: Whether the operation itself carries a marker.
    """

    name: str
    container: type
    container_marked: bool = False
    operation_marked: bool = False

    @property
    def qualified_name(self) -> str:
        return f"{self.container.__qualname__}.{self.name}"


@dataclass(frozen=True)
class InvocationTarget:
    """The operation a call is actually routed to.

    Attributes:
        container: Type of the real collaborator handling the call.
        name: Operation name.
        method: The originally-invoked handle (e.g. the contract's function).
        method_invocation_target: The most-derived implementation handle,
            or ``None`` when it is not available.
    """

    container: type
    name: str
    method: Callable[..., Any] | None = None
    method_invocation_target: Callable[..., Any] | None = None

    @property
    def resolved_method(self) -> Callable[..., Any] | None:
        """Prefer the implementation handle, fall back to the invoked one."""
        if self.method_invocation_target is not None:
            return self.method_invocation_target
        return self.method


class InvocationContext:
    """One call in flight.

    Created by a proxy for the duration of a single call and never shared.
    Everything is read-only except the diagnostic ``intercepted`` flag and
    the single-use :meth:`proceed` capability.

    For ``async def`` operations :meth:`proceed` returns the awaitable
    produced by the real operation; the proxy awaits it.
    """

    __slots__ = ("_target", "_args", "_kwargs", "_invoker", "_proceeded", "intercepted")

    def __init__(
        self,
        target: InvocationTarget,
        args: tuple,
        kwargs: dict[str, Any],
        invoker: Callable[..., Any],
    ) -> None:
        self._target = target
        self._args = tuple(args)
        self._kwargs: Mapping[str, Any] = MappingProxyType(dict(kwargs))
        self._invoker = invoker
        self._proceeded = False
        self.intercepted = False

    @property
    def target(self) -> InvocationTarget:
        return self._target

    @property
    def args(self) -> tuple:
        return self._args

    @property
    def kwargs(self) -> Mapping[str, Any]:
        return self._kwargs

    @property
    def proceeded(self) -> bool:
        return self._proceeded

    def proceed(self) -> Any:
        """Invoke the real operation exactly once with the original arguments.

        Whatever the operation returns is returned unchanged; whatever it
        raises propagates unchanged.

        Raises:
            DoubleProceedError: If called a second time.
        """
        if self._proceeded:
            raise DoubleProceedError(self._target.name)
        self._proceeded = True
        return self._invoker(*self._args, **self._kwargs)

    def __repr__(self) -> str:
        return (
            f"InvocationContext(operation={self._target.container.__qualname__}."
            f"{self._target.name}, proceeded={self._proceeded}, intercepted={self.intercepted})"
        )
