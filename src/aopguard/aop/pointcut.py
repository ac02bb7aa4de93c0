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
"""Pointcut matching: decides, per invocation, whether advice applies."""

from __future__ import annotations

from aopguard.aop.registry import MarkerRegistry
from aopguard.aop.types import InvocationTarget


class PointcutMatcher:
    """Pure predicate over the *actual* target of an invocation.

    The target's implementation handle is preferred over the handle that was
    nominally invoked, so a marker on an implementation is honoured even when
    the call arrives through a contract that does not declare it.
    """

    def __init__(self, registry: MarkerRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> MarkerRegistry:
        return self._registry

    def matches(self, target: InvocationTarget) -> bool:
        return self._registry.has_marker(self._registry.describe(target))
