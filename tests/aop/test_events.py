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
"""Tests for authorization event adapters."""

from __future__ import annotations

import logging

import pytest

from aopguard.aop.events import (
    AuthorizationEventsPort,
    CompositeEventsAdapter,
    LoggerEventsAdapter,
    RecordingEventsAdapter,
)
from aopguard.aop.types import OperationDescriptor


class Reports:
    pass


OPERATION = OperationDescriptor(name="detailed", container=Reports, operation_marked=True)


class BrokenAdapter:
    def on_check_started(self, operation: OperationDescriptor) -> None:
        raise RuntimeError("broken")

    def on_granted(self, operation: OperationDescriptor) -> None:
        raise RuntimeError("broken")

    def on_denied(self, operation: OperationDescriptor) -> None:
        raise RuntimeError("broken")


class TestConformance:
    @pytest.mark.parametrize(
        "adapter",
        [LoggerEventsAdapter(), RecordingEventsAdapter(), CompositeEventsAdapter()],
    )
    def test_implements_port(self, adapter):
        assert isinstance(adapter, AuthorizationEventsPort)


class TestLoggerEventsAdapter:
    def test_logs_check_and_grant(self, caplog):
        caplog.set_level(logging.INFO, logger="aopguard.aop.events")
        adapter = LoggerEventsAdapter()

        adapter.on_check_started(OPERATION)
        adapter.on_granted(OPERATION)

        messages = [r.getMessage() for r in caplog.records]
        assert "Checking admin role for operation 'Reports.detailed'" in messages
        assert "Access granted for operation 'Reports.detailed'" in messages

    def test_denial_logs_warning(self, caplog):
        caplog.set_level(logging.INFO, logger="aopguard.aop.events")
        LoggerEventsAdapter().on_denied(OPERATION)

        [record] = caplog.records
        assert record.levelno == logging.WARNING
        assert "Reports.detailed" in record.getMessage()


class TestCompositeEventsAdapter:
    def test_broadcasts_to_all_adapters(self):
        first, second = RecordingEventsAdapter(), RecordingEventsAdapter()
        composite = CompositeEventsAdapter(first, second)

        composite.on_check_started(OPERATION)
        composite.on_denied(OPERATION)

        expected = [("check_started", "Reports.detailed"), ("denied", "Reports.detailed")]
        assert first.events == expected
        assert second.events == expected

    def test_broken_adapter_is_isolated(self, caplog):
        recorder = RecordingEventsAdapter()
        composite = CompositeEventsAdapter(BrokenAdapter(), recorder)

        composite.on_granted(OPERATION)

        assert recorder.events == [("granted", "Reports.detailed")]
        assert any("failed on on_granted" in r.getMessage() for r in caplog.records)


class TestRecordingEventsAdapter:
    def test_clear(self):
        recorder = RecordingEventsAdapter()
        recorder.on_check_started(OPERATION)
        recorder.clear()
        assert recorder.events == []
