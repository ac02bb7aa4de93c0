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
"""Method interception for AopGuard: markers, pointcuts, advice and proxies."""

from aopguard.aop.advice import DEFAULT_REQUIRED_ROLE, Advice, AuthorizationAdvice
from aopguard.aop.events import (
    AuthorizationEventsPort,
    CompositeEventsAdapter,
    LoggerEventsAdapter,
    RecordingEventsAdapter,
)
from aopguard.aop.markers import Marker, MarkerScope, get_marker, is_marked_container, require_admin
from aopguard.aop.pointcut import PointcutMatcher
from aopguard.aop.proxy import (
    ContractProxy,
    Interceptor,
    ProxyFactory,
    is_proxy,
    wrap_concrete_type,
    wrap_contract_based,
)
from aopguard.aop.registry import MarkerRegistry
from aopguard.aop.types import InvocationContext, InvocationTarget, OperationDescriptor

__all__ = [
    "DEFAULT_REQUIRED_ROLE",
    "Advice",
    "AuthorizationAdvice",
    "AuthorizationEventsPort",
    "CompositeEventsAdapter",
    "ContractProxy",
    "Interceptor",
    "InvocationContext",
    "InvocationTarget",
    "LoggerEventsAdapter",
    "Marker",
    "MarkerRegistry",
    "MarkerScope",
    "OperationDescriptor",
    "PointcutMatcher",
    "ProxyFactory",
    "RecordingEventsAdapter",
    "get_marker",
    "is_marked_container",
    "is_proxy",
    "require_admin",
    "wrap_concrete_type",
    "wrap_contract_based",
]
