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
"""Observability hooks for authorization decisions.

The advice reports three events per protected call through an
:class:`AuthorizationEventsPort`:

* :class:`LoggerEventsAdapter` -- writes log records through the
  ``aopguard.aop.events`` logger (rendered by structlog when configured).
* :class:`CompositeEventsAdapter` -- fans-out each event to several
  adapters, absorbing individual adapter failures so that one broken sink
  never changes the outcome of a call.
* :class:`RecordingEventsAdapter` -- keeps events in memory for diagnostics.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from aopguard.aop.types import OperationDescriptor

_logger = logging.getLogger("aopguard.aop.events")


@runtime_checkable
class AuthorizationEventsPort(Protocol):
    """Receives authorization lifecycle events for protected operations."""

    def on_check_started(self, operation: OperationDescriptor) -> None: ...

    def on_granted(self, operation: OperationDescriptor) -> None: ...

    def on_denied(self, operation: OperationDescriptor) -> None: ...


# ---------------------------------------------------------------------------
# LoggerEventsAdapter
# ---------------------------------------------------------------------------


class LoggerEventsAdapter:
    """Logs authorization events; denials log at :data:`logging.WARNING`."""

    def on_check_started(self, operation: OperationDescriptor) -> None:
        _logger.info("Checking admin role for operation '%s'", operation.qualified_name)

    def on_granted(self, operation: OperationDescriptor) -> None:
        _logger.info("Access granted for operation '%s'", operation.qualified_name)

    def on_denied(self, operation: OperationDescriptor) -> None:
        _logger.warning("Access denied for operation '%s'", operation.qualified_name)


# ---------------------------------------------------------------------------
# CompositeEventsAdapter
# ---------------------------------------------------------------------------


class CompositeEventsAdapter:
    """Broadcasts events to multiple :class:`AuthorizationEventsPort` adapters.

    If an individual adapter raises, the error is logged and the remaining
    adapters still receive the event.
    """

    def __init__(self, *adapters: AuthorizationEventsPort) -> None:
        self._adapters: Sequence[AuthorizationEventsPort] = adapters

    def _broadcast(self, method: str, operation: OperationDescriptor) -> None:
        for adapter in self._adapters:
            try:
                getattr(adapter, method)(operation)
            except Exception:
                _logger.error(
                    "Events adapter %r failed on %s",
                    adapter,
                    method,
                    exc_info=True,
                )

    def on_check_started(self, operation: OperationDescriptor) -> None:
        self._broadcast("on_check_started", operation)

    def on_granted(self, operation: OperationDescriptor) -> None:
        self._broadcast("on_granted", operation)

    def on_denied(self, operation: OperationDescriptor) -> None:
        self._broadcast("on_denied", operation)


# ---------------------------------------------------------------------------
# RecordingEventsAdapter
# ---------------------------------------------------------------------------


class RecordingEventsAdapter:
    """Keeps ``(event, qualified_name)`` tuples in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def on_check_started(self, operation: OperationDescriptor) -> None:
        self.events.append(("check_started", operation.qualified_name))

    def on_granted(self, operation: OperationDescriptor) -> None:
        self.events.append(("granted", operation.qualified_name))

    def on_denied(self, operation: OperationDescriptor) -> None:
        self.events.append(("denied", operation.qualified_name))

    def clear(self) -> None:
        self.events.clear()
