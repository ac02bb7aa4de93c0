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
"""MarkerRegistry: static table of which operations require authorization."""

from __future__ import annotations

import abc
import inspect
from collections.abc import Iterator
from typing import Any, Generic, Protocol

from aopguard.aop.markers import get_marker, is_marked_container
from aopguard.aop.types import InvocationTarget, OperationDescriptor

_SKIPPED_BASES: frozenset[type] = frozenset({object, Protocol, Generic, abc.ABC})  # type: ignore[arg-type]

# Dunder methods that are operations of the collaborator rather than protocol hooks.
_OPERATION_DUNDERS: frozenset[str] = frozenset({"__call__"})


def _is_operation_name(name: str) -> bool:
    return not name.startswith("_") or name in _OPERATION_DUNDERS


def operation_names(cls: type) -> set[str]:
    """Public instance operations declared on *cls* or its bases.

    ``__call__`` counts as an operation.  Static methods, class methods,
    properties and any other name starting with ``_`` are not operations.
    """
    names: set[str] = set()
    for klass in cls.__mro__:
        if klass in _SKIPPED_BASES:
            continue
        for name, value in vars(klass).items():
            if _is_operation_name(name) and inspect.isfunction(value):
                names.add(name)
    return names


def find_definition(cls: type, name: str) -> Any:
    """Return the most-derived function object for *name* on *cls*, or ``None``."""
    for klass in cls.__mro__:
        if klass in _SKIPPED_BASES:
            continue
        value = vars(klass).get(name)
        if value is not None:
            return value if inspect.isfunction(value) else None
    return None


def operation_marked(cls: type, name: str) -> bool:
    """Whether *name* carries a marker on *cls* or on any definition it overrides."""
    for klass in cls.__mro__:
        if klass in _SKIPPED_BASES:
            continue
        value = vars(klass).get(name)
        if value is not None and get_marker(value) is not None:
            return True
    return False


class MarkerRegistry:
    """Registry of :class:`OperationDescriptor` entries built at composition time.

    Proxy factories register every collaborator type they wrap, so the
    per-call lookup is a dictionary read.  After composition the registry is
    only read and is safe for unsynchronized concurrent access.

    Usage::

        registry = MarkerRegistry()
        registry.register(ReportController)

        descriptor = registry.lookup(ReportController, "detailed")
        registry.has_marker(descriptor)  # True
    """

    def __init__(self) -> None:
        self._descriptors: dict[tuple[type, str], OperationDescriptor] = {}

    def register(self, container: type, contract: type | None = None) -> list[OperationDescriptor]:
        """Record a descriptor for every operation of *container*.

        When *contract* is given its operations are included too; the
        container's own definition wins over the contract's when both exist.
        """
        container_marked = is_marked_container(container)
        names = operation_names(container)
        if contract is not None:
            names |= operation_names(contract)

        registered: list[OperationDescriptor] = []
        for name in sorted(names):
            if find_definition(container, name) is not None:
                marked = operation_marked(container, name)
            else:
                marked = contract is not None and operation_marked(contract, name)
            descriptor = OperationDescriptor(
                name=name,
                container=container,
                container_marked=container_marked,
                operation_marked=marked,
            )
            self._descriptors[(container, name)] = descriptor
            registered.append(descriptor)
        return registered

    def lookup(self, container: type, name: str) -> OperationDescriptor | None:
        return self._descriptors.get((container, name))

    def describe(self, target: InvocationTarget) -> OperationDescriptor:
        """Return the registered descriptor for *target*, deriving one if absent.

        Derived descriptors are not stored.
        """
        descriptor = self._descriptors.get((target.container, target.name))
        if descriptor is not None:
            return descriptor

        handle = target.resolved_method
        marked = handle is not None and get_marker(handle) is not None
        if not marked and handle is target.method_invocation_target:
            marked = operation_marked(target.container, target.name)
        return OperationDescriptor(
            name=target.name,
            container=target.container,
            container_marked=is_marked_container(target.container),
            operation_marked=marked,
        )

    @staticmethod
    def has_marker(descriptor: OperationDescriptor) -> bool:
        """An operation requires authorization if it or its container is marked."""
        return descriptor.operation_marked or descriptor.container_marked

    def descriptors(self) -> list[OperationDescriptor]:
        """All registered descriptors, in registration order."""
        return list(self._descriptors.values())

    def __iter__(self) -> Iterator[OperationDescriptor]:
        return iter(self.descriptors())

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, key: object) -> bool:
        return key in self._descriptors
