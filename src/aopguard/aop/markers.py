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
"""Marker declaration surface: ``@require_admin`` on operations and containers."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from aopguard.kernel.exceptions import MarkerDeclarationError

T = TypeVar("T")

MARKER_ATTR = "__aopguard_marker__"


class MarkerScope(enum.Enum):
    """Where a marker was declared."""

    OPERATION = "operation"
    CONTAINER = "container"


@dataclass(frozen=True)
class Marker:
    """Zero-data tag meaning "authorization advice applies here"."""

    scope: MarkerScope


def require_admin(target: T) -> T:
    """Mark an operation, or every operation of a container, as privileged.

    Usage::

        @require_admin
        class AdminController:
            def settings(self) -> dict: ...

        class ReportController:
            @require_admin
            def detailed(self) -> dict: ...

    Raises:
        MarkerDeclarationError: If *target* already carries a marker.
    """
    if isinstance(target, type):
        if MARKER_ATTR in vars(target):
            raise MarkerDeclarationError(
                f"Container '{target.__qualname__}' is already marked",
                code="DUPLICATE_MARKER",
            )
        setattr(target, MARKER_ATTR, Marker(MarkerScope.CONTAINER))
        return target

    fn = _unwrap(target)
    if not callable(fn):
        raise TypeError(f"@require_admin cannot be applied to {target!r}")
    if getattr(fn, MARKER_ATTR, None) is not None:
        raise MarkerDeclarationError(
            f"Operation '{getattr(fn, '__qualname__', fn)}' is already marked",
            code="DUPLICATE_MARKER",
        )
    fn.__aopguard_marker__ = Marker(MarkerScope.OPERATION)  # type: ignore[attr-defined]
    return target


def get_marker(obj: Any) -> Marker | None:
    """Return the marker declared directly on *obj*, ignoring inheritance."""
    if isinstance(obj, type):
        return vars(obj).get(MARKER_ATTR)
    return getattr(_unwrap(obj), MARKER_ATTR, None)


def is_marked_container(cls: type) -> bool:
    """Whether *cls* or any of its bases carries a container marker."""
    return any(MARKER_ATTR in vars(klass) for klass in cls.__mro__)


def _unwrap(obj: Any) -> Callable[..., Any]:
    """Strip ``staticmethod``/``classmethod`` wrappers to reach the function."""
    if isinstance(obj, (staticmethod, classmethod)):
        return obj.__func__
    return obj
