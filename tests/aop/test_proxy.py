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
"""Tests for contract-based and concrete-type proxy factories."""

from __future__ import annotations

import abc
import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol, final, runtime_checkable

import pytest

from aopguard.aop.advice import AuthorizationAdvice
from aopguard.aop.events import RecordingEventsAdapter
from aopguard.aop.markers import require_admin
from aopguard.aop.pointcut import PointcutMatcher
from aopguard.aop.proxy import ContractProxy, ProxyFactory, is_proxy, wrap_concrete_type, wrap_contract_based
from aopguard.aop.registry import MarkerRegistry
from aopguard.context.request_context import RequestContext, RequestContextRoleProvider
from aopguard.kernel.exceptions import AuthorizationDenied, ProxyConstructionError

# ---------------------------------------------------------------------------
# Helper collaborators
# ---------------------------------------------------------------------------


@runtime_checkable
class ProductCatalog(Protocol):
    def list_products(self) -> list[str]: ...

    def delete_product(self, product_id: int) -> str: ...

    async def fetch_product(self, product_id: int) -> str: ...


class InMemoryCatalog:
    def __init__(self) -> None:
        self.products = ["Laptop", "Phone"]
        self.deleted: list[int] = []

    def list_products(self) -> list[str]:
        return list(self.products)

    @require_admin
    def delete_product(self, product_id: int) -> str:
        self.deleted.append(product_id)
        return f"Product {product_id} deleted"

    @require_admin
    async def fetch_product(self, product_id: int) -> str:
        await asyncio.sleep(0)
        return self.products[product_id]

    def internal_stats(self) -> int:
        return len(self.products)


class Ledger(abc.ABC):
    @abc.abstractmethod
    def balance(self) -> int: ...

    @abc.abstractmethod
    def close(self) -> str: ...


@require_admin
class SecureLedger(Ledger):
    def balance(self) -> int:
        return 100

    def close(self) -> str:
        return "closed"


class IncompleteCatalog:
    def list_products(self) -> list[str]:
        return []


class Reports:
    def __init__(self, title: str = "Q3") -> None:
        self.title = title
        self.detailed_calls = 0

    def public(self) -> str:
        return f"public {self.title}"

    @require_admin
    def detailed(self) -> str:
        self.detailed_calls += 1
        return f"detailed {self.title}"

    def summary(self) -> str:
        return self.detailed()

    @final
    @require_admin
    def sealed(self) -> str:
        return "sealed"

    @require_admin
    @staticmethod
    def version() -> str:
        return "1.0"

    @require_admin
    async def export(self, fmt: str = "pdf") -> str:
        await asyncio.sleep(0)
        return f"export.{fmt}"

    def explode(self) -> None:
        raise LookupError("missing report")


@final
class FinalService:
    def run(self) -> str:
        return "run"


class SlottedService:
    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value = 1

    def run(self) -> int:
        return self.value


class SlottedWithDict:
    __slots__ = ("value", "__dict__")

    def __init__(self) -> None:
        self.value = 1
        self.label = "slotted"

    def get(self) -> int:
        return self.value


@require_admin
class Vault:
    def __init__(self) -> None:
        self.balance = 2

    def __call__(self) -> str:
        return "opened"

    def _drain(self) -> str:
        return "drained"


class Job(Protocol):
    def __call__(self, name: str) -> str: ...


class GuardedJob:
    @require_admin
    def __call__(self, name: str) -> str:
        return f"ran {name}"


class Tagged:
    def __init_subclass__(cls, *, tag: str, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls.tag = tag


class TaggedService(Tagged, tag="service"):
    def run(self) -> str:
        return "run"


class Waiter(Protocol):
    async def wait(self) -> str: ...


class BlockingWaiter:
    def __init__(self) -> None:
        self.started = asyncio.Event()
        self.finished = False

    @require_admin
    async def wait(self) -> str:
        self.started.set()
        await asyncio.Event().wait()
        self.finished = True
        return "done"


class FixedRoleProvider:
    def __init__(self, role: str | None) -> None:
        self.role = role

    def current_role(self) -> str | None:
        return self.role


def _advice(role: str | None = None, events=None) -> AuthorizationAdvice:
    return AuthorizationAdvice(
        matcher=PointcutMatcher(MarkerRegistry()),
        role_provider=FixedRoleProvider(role),
        events=events,
    )


# ---------------------------------------------------------------------------
# Contract-based proxies
# ---------------------------------------------------------------------------


class TestContractBasedProxy:
    def test_implements_contract_but_not_concrete_type(self):
        proxy = wrap_contract_based(InMemoryCatalog(), ProductCatalog, _advice())

        assert isinstance(proxy, ProductCatalog)
        assert isinstance(proxy, ContractProxy)
        assert not isinstance(proxy, InMemoryCatalog)
        assert is_proxy(proxy)

    def test_unmarked_operation_passes_through(self):
        events = RecordingEventsAdapter()
        proxy = wrap_contract_based(InMemoryCatalog(), ProductCatalog, _advice(events=events))

        assert proxy.list_products() == ["Laptop", "Phone"]
        assert events.events == []

    def test_marked_operation_denied_without_role(self):
        real = InMemoryCatalog()
        proxy = wrap_contract_based(real, ProductCatalog, _advice())

        with pytest.raises(AuthorizationDenied):
            proxy.delete_product(7)
        assert real.deleted == []

    def test_marked_operation_granted_with_role(self):
        real = InMemoryCatalog()
        proxy = wrap_contract_based(real, ProductCatalog, _advice("admin"))

        assert proxy.delete_product(product_id=7) == "Product 7 deleted"
        assert real.deleted == [7]

    @pytest.mark.asyncio
    async def test_async_operation(self):
        granted = wrap_contract_based(InMemoryCatalog(), ProductCatalog, _advice("Admin"))
        denied = wrap_contract_based(InMemoryCatalog(), ProductCatalog, _advice("guest"))

        assert await granted.fetch_product(1) == "Phone"
        with pytest.raises(AuthorizationDenied):
            await denied.fetch_product(1)

    def test_call_operation_of_contract_is_intercepted(self):
        with pytest.raises(AuthorizationDenied):
            wrap_contract_based(GuardedJob(), Job, _advice())("nightly")
        assert wrap_contract_based(GuardedJob(), Job, _advice("admin"))("nightly") == "ran nightly"

    @pytest.mark.asyncio
    async def test_cancellation_propagates_from_granted_call(self):
        real = BlockingWaiter()
        proxy = wrap_contract_based(real, Waiter, _advice("Admin"))

        task = asyncio.create_task(proxy.wait())
        await real.started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert real.finished is False

    def test_only_contract_operations_are_exposed(self):
        proxy = wrap_contract_based(InMemoryCatalog(), ProductCatalog, _advice())
        assert not hasattr(proxy, "internal_stats")

    def test_proxy_is_immutable(self):
        proxy = wrap_contract_based(InMemoryCatalog(), ProductCatalog, _advice())
        with pytest.raises(AttributeError):
            proxy.list_products = lambda: []  # type: ignore[method-assign]
        with pytest.raises(AttributeError):
            del proxy.list_products

    def test_missing_operation_fails_at_composition(self):
        with pytest.raises(ProxyConstructionError) as exc_info:
            wrap_contract_based(IncompleteCatalog(), ProductCatalog, _advice())
        assert exc_info.value.code == "PROXY_UNSUPPORTED"

    def test_abc_contract_with_container_marker(self):
        proxy = wrap_contract_based(SecureLedger(), Ledger, _advice())

        assert isinstance(proxy, Ledger)
        with pytest.raises(AuthorizationDenied):
            proxy.balance()
        with pytest.raises(AuthorizationDenied):
            proxy.close()

    def test_abc_contract_granted(self):
        proxy = wrap_contract_based(SecureLedger(), Ledger, _advice("ADMIN"))
        assert proxy.balance() == 100

    def test_registers_implementation_type(self):
        advice = _advice()
        wrap_contract_based(InMemoryCatalog(), ProductCatalog, advice)

        registry = advice.matcher.registry
        descriptor = registry.lookup(InMemoryCatalog, "delete_product")
        assert descriptor is not None and descriptor.operation_marked

    def test_repr_mentions_real(self):
        proxy = wrap_contract_based(InMemoryCatalog(), ProductCatalog, _advice())
        assert "ProductCatalogProxy" in repr(proxy)


# ---------------------------------------------------------------------------
# Concrete-type proxies
# ---------------------------------------------------------------------------


class TestConcreteTypeProxy:
    def test_is_instance_of_concrete_type(self):
        real = Reports()
        proxy = wrap_concrete_type(real, _advice())

        assert isinstance(proxy, Reports)
        assert type(proxy) is not Reports
        assert is_proxy(proxy)
        assert not is_proxy(real)

    def test_shares_state_with_real_instance(self):
        real = Reports("Q4")
        proxy = wrap_concrete_type(real, _advice("Admin"))

        assert proxy.title == "Q4"
        proxy.detailed()
        assert real.detailed_calls == 1
        real.title = "Q1"
        assert proxy.public() == "public Q1"

    def test_state_not_polluted_by_proxy(self):
        real = Reports()
        wrap_concrete_type(real, _advice())
        assert set(vars(real)) == {"title", "detailed_calls"}

    def test_unmarked_operation_passes_through(self):
        proxy = wrap_concrete_type(Reports(), _advice())
        assert proxy.public() == "public Q3"

    def test_marked_operation_denied(self):
        real = Reports()
        proxy = wrap_concrete_type(real, _advice())

        with pytest.raises(AuthorizationDenied):
            proxy.detailed()
        assert real.detailed_calls == 0

    def test_self_calls_are_intercepted(self):
        proxy = wrap_concrete_type(Reports(), _advice())
        with pytest.raises(AuthorizationDenied):
            proxy.summary()

    def test_final_operation_is_not_intercepted(self):
        proxy = wrap_concrete_type(Reports(), _advice())
        assert proxy.sealed() == "sealed"

    def test_staticmethod_is_not_intercepted(self):
        proxy = wrap_concrete_type(Reports(), _advice())
        assert proxy.version() == "1.0"

    @pytest.mark.asyncio
    async def test_async_operation(self):
        assert await wrap_concrete_type(Reports(), _advice("Admin")).export("csv") == "export.csv"
        with pytest.raises(AuthorizationDenied):
            await wrap_concrete_type(Reports(), _advice()).export()

    def test_underlying_exception_propagates(self):
        proxy = wrap_concrete_type(Reports(), _advice())
        with pytest.raises(LookupError, match="missing report"):
            proxy.explode()

    def test_proxy_type_is_shared_per_class(self):
        first = wrap_concrete_type(Reports(), _advice())
        second = wrap_concrete_type(Reports(), _advice("Admin"))

        assert type(first) is type(second)
        with pytest.raises(AuthorizationDenied):
            first.detailed()
        assert second.detailed() == "detailed Q3"

    def test_preserves_operation_metadata(self):
        proxy = wrap_concrete_type(Reports(), _advice())
        assert type(proxy).detailed.__name__ == "detailed"
        assert type(proxy).detailed.__wrapped__ is vars(Reports)["detailed"]

    def test_final_class_is_rejected(self):
        with pytest.raises(ProxyConstructionError):
            wrap_concrete_type(FinalService(), _advice())

    def test_class_without_dict_is_rejected(self):
        with pytest.raises(ProxyConstructionError):
            wrap_concrete_type(SlottedService(), _advice())

    def test_class_with_slots_beside_dict_is_rejected(self):
        with pytest.raises(ProxyConstructionError, match="value"):
            wrap_concrete_type(SlottedWithDict(), _advice("Admin"))

    def test_subclass_hook_failure_is_reported(self):
        with pytest.raises(ProxyConstructionError, match="TaggedService"):
            wrap_concrete_type(TaggedService(), _advice())

    def test_call_operation_is_intercepted(self):
        denied = wrap_concrete_type(Vault(), _advice())
        with pytest.raises(AuthorizationDenied):
            denied()
        assert wrap_concrete_type(Vault(), _advice("Admin"))() == "opened"

    def test_underscore_helpers_are_not_operations(self):
        proxy = wrap_concrete_type(Vault(), _advice())
        assert proxy._drain() == "drained"
        assert "_drain" not in type(proxy).__dict__

    @pytest.mark.asyncio
    async def test_cancellation_propagates_from_granted_call(self):
        real = BlockingWaiter()
        proxy = wrap_concrete_type(real, _advice("Admin"))

        task = asyncio.create_task(proxy.wait())
        await real.started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert real.finished is False


# ---------------------------------------------------------------------------
# ProxyFactory
# ---------------------------------------------------------------------------


class TestProxyFactory:
    def test_binds_both_factories_to_one_advice(self):
        events = RecordingEventsAdapter()
        factory = ProxyFactory(_advice("Admin", events))

        catalog = factory.wrap_contract_based(InMemoryCatalog(), ProductCatalog)
        reports = factory.wrap_concrete_type(Reports())

        catalog.delete_product(1)
        reports.detailed()

        assert [event for event, _ in events.events] == ["check_started", "granted"] * 2
        assert factory.advice.matcher.registry.lookup(Reports, "detailed") is not None


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrentInvocations:
    @pytest.mark.asyncio
    async def test_tasks_see_their_own_role(self):
        advice = AuthorizationAdvice(PointcutMatcher(MarkerRegistry()), RequestContextRoleProvider())
        proxy = wrap_concrete_type(Reports(), advice)
        roles = ["Admin" if i % 2 == 0 else "guest" for i in range(50)]

        async def call(role: str) -> str:
            RequestContext.init(role=role)
            try:
                return await proxy.export("txt")
            except AuthorizationDenied:
                return "denied"
            finally:
                RequestContext.clear()

        results = await asyncio.gather(*(call(role) for role in roles))
        assert results == ["export.txt" if role == "Admin" else "denied" for role in roles]

    def test_threads_see_their_own_role(self):
        advice = AuthorizationAdvice(PointcutMatcher(MarkerRegistry()), RequestContextRoleProvider())
        real = InMemoryCatalog()
        proxy = wrap_contract_based(real, ProductCatalog, advice)

        def call(index: int) -> str:
            RequestContext.init(role="Admin" if index % 3 == 0 else None)
            try:
                return proxy.delete_product(index)
            except AuthorizationDenied:
                return "denied"
            finally:
                RequestContext.clear()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(call, range(30)))

        assert results == [f"Product {i} deleted" if i % 3 == 0 else "denied" for i in range(30)]
        assert sorted(real.deleted) == list(range(0, 30, 3))
