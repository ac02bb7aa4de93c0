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
"""Proxy factories: route every call on a collaborator through the advice.

Two call shapes are supported:

* **Contract-based** (:func:`wrap_contract_based`): the caller only knows a
  contract (a ``typing.Protocol`` or an ABC).  The proxy is a forwarding
  object implementing the same contract; each operation delegates to the
  real collaborator's same-named operation.
* **Concrete-type** (:func:`wrap_concrete_type`): the caller depends on the
  concrete class itself.  The proxy is an instance of a generated subclass
  that overrides every overridable operation and shares the real instance's
  state, so ``isinstance(proxy, type(real))`` holds.

Only overridable operations can be protected by a concrete-type proxy.
Functions decorated with :func:`typing.final`, static methods, class
methods and properties are invoked directly without interception.

For both proxies an operation is a public method or ``__call__``.  Methods
whose names start with ``_`` (other dunders included) are helpers and are
never intercepted, even on a marked container.  Instances with slot-backed
state cannot be shared and are rejected by :func:`wrap_concrete_type`.

Both proxies support ``async def`` operations.  Calls whose pointcut does
not match are forwarded after a single predicate check.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from aopguard.aop.advice import Advice
from aopguard.aop.registry import find_definition, operation_names
from aopguard.aop.types import InvocationContext, InvocationTarget
from aopguard.kernel.exceptions import ProxyConstructionError

T = TypeVar("T")


class Interceptor:
    """Routes a single invocation through the pointcut and the advice."""

    __slots__ = ("_advice", "_matcher")

    def __init__(self, advice: Advice) -> None:
        self._advice = advice
        self._matcher = advice.matcher

    @property
    def advice(self) -> Advice:
        return self._advice

    def invoke(
        self,
        target: InvocationTarget,
        invoker: Callable[..., Any],
        args: tuple,
        kwargs: dict[str, Any],
    ) -> Any:
        if not self._matcher.matches(target):
            return invoker(*args, **kwargs)
        return self._advice.advise(InvocationContext(target, args, kwargs, invoker))

    async def invoke_async(
        self,
        target: InvocationTarget,
        invoker: Callable[..., Any],
        args: tuple,
        kwargs: dict[str, Any],
    ) -> Any:
        if not self._matcher.matches(target):
            return await invoker(*args, **kwargs)
        result = self._advice.advise(InvocationContext(target, args, kwargs, invoker))
        if inspect.isawaitable(result):
            return await result
        return result


# ---------------------------------------------------------------------------
# Contract-based proxies
# ---------------------------------------------------------------------------


class ContractProxy:
    """Base class of generated contract-based proxies.

    Instances are immutable once constructed.
    """

    __aopguard_contract__: type

    def __init__(self, real: Any, interceptor: Interceptor) -> None:
        contract = type(self).__aopguard_contract__
        bindings: dict[str, tuple[InvocationTarget, Callable[..., Any]]] = {}
        for name in operation_names(contract):
            invoker = getattr(real, name, None)
            if not callable(invoker):
                raise ProxyConstructionError(
                    f"{type(real).__qualname__} does not implement "
                    f"{contract.__qualname__}.{name}",
                    code="PROXY_UNSUPPORTED",
                )
            target = InvocationTarget(
                container=type(real),
                name=name,
                method=find_definition(contract, name),
                method_invocation_target=find_definition(type(real), name),
            )
            bindings[name] = (target, invoker)
        object.__setattr__(self, "_aopguard_real", real)
        object.__setattr__(self, "_aopguard_interceptor", interceptor)
        object.__setattr__(self, "_aopguard_bindings", bindings)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} for {self._aopguard_real!r}>"


def _forwarding_operation(name: str, template: Callable[..., Any]) -> Callable[..., Any]:
    """Build the contract proxy's forwarding function for operation *name*."""
    if inspect.iscoroutinefunction(template):

        async def async_operation(self: Any, *args: Any, **kwargs: Any) -> Any:
            target, invoker = self._aopguard_bindings[name]
            return await self._aopguard_interceptor.invoke_async(target, invoker, args, kwargs)

        operation: Callable[..., Any] = async_operation
    else:

        def sync_operation(self: Any, *args: Any, **kwargs: Any) -> Any:
            target, invoker = self._aopguard_bindings[name]
            return self._aopguard_interceptor.invoke(target, invoker, args, kwargs)

        operation = sync_operation

    operation.__name__ = name
    operation.__doc__ = template.__doc__
    return operation


@functools.cache
def _contract_proxy_type(contract: type, implementation: type) -> type:
    namespace: dict[str, Any] = {
        "__module__": contract.__module__,
        "__qualname__": f"{contract.__qualname__}Proxy",
        "__aopguard_contract__": contract,
    }
    for name in sorted(operation_names(contract)):
        # Async-ness follows the implementation when it defines the operation.
        template = find_definition(implementation, name) or find_definition(contract, name)
        namespace[name] = _forwarding_operation(name, template)
    return type(contract)(f"{contract.__name__}Proxy", (ContractProxy, contract), namespace)


def wrap_contract_based(real: Any, contract: type[T], advice: Advice) -> T:
    """Wrap *real* in a proxy implementing *contract*.

    Only the contract's operations are exposed.  The real collaborator's
    type is registered with the advice's marker registry.

    Raises:
        ProxyConstructionError: If *real* does not implement every
            operation of *contract*, or the contract cannot be proxied.
    """
    advice.matcher.registry.register(type(real), contract)
    proxy_type = _contract_proxy_type(contract, type(real))
    try:
        return proxy_type(real, Interceptor(advice))  # type: ignore[no-any-return]
    except TypeError as exc:
        raise ProxyConstructionError(
            f"Cannot build a proxy for contract {contract.__qualname__}: {exc}",
            code="PROXY_UNSUPPORTED",
        ) from exc


# ---------------------------------------------------------------------------
# Concrete-type proxies
# ---------------------------------------------------------------------------


def _is_final(obj: Any) -> bool:
    return bool(getattr(obj, "__final__", False))


def _slot_names(cls: type) -> list[str]:
    """Slots declared along the MRO, other than ``__dict__`` and ``__weakref__``."""
    names: list[str] = []
    for klass in cls.__mro__:
        declared = vars(klass).get("__slots__", ())
        if isinstance(declared, str):
            declared = (declared,)
        names.extend(name for name in declared if name not in ("__dict__", "__weakref__"))
    return names


def _overriding_operation(cls: type, name: str, base: Callable[..., Any]) -> Callable[..., Any]:
    """Override *base* with a version that routes through the interceptor."""
    target = InvocationTarget(container=cls, name=name, method=base, method_invocation_target=base)

    if inspect.iscoroutinefunction(base):

        @functools.wraps(base)
        async def async_operation(self: Any, *args: Any, **kwargs: Any) -> Any:
            return await self._aopguard_interceptor.invoke_async(
                target, base.__get__(self), args, kwargs
            )

        return async_operation

    @functools.wraps(base)
    def sync_operation(self: Any, *args: Any, **kwargs: Any) -> Any:
        return self._aopguard_interceptor.invoke(target, base.__get__(self), args, kwargs)

    return sync_operation


@functools.cache
def _concrete_proxy_type(cls: type) -> type:
    if _is_final(cls):
        raise ProxyConstructionError(
            f"{cls.__qualname__} is final and cannot be subclassed",
            code="PROXY_UNSUPPORTED",
        )
    namespace: dict[str, Any] = {
        "__module__": cls.__module__,
        "__qualname__": f"{cls.__qualname__}Proxy",
        "__slots__": ("_aopguard_interceptor",),
        "__aopguard_proxied__": cls,
    }
    for name in sorted(operation_names(cls)):
        base = find_definition(cls, name)
        if base is None or _is_final(base):
            continue
        namespace[name] = _overriding_operation(cls, name, base)
    try:
        return type(cls)(f"{cls.__name__}Proxy", (cls,), namespace)
    except TypeError as exc:
        raise ProxyConstructionError(
            f"Cannot build a proxy subclass of {cls.__qualname__}: {exc}",
            code="PROXY_UNSUPPORTED",
        ) from exc


def wrap_concrete_type(real: T, advice: Advice) -> T:
    """Return a subclass instance of ``type(real)`` sharing *real*'s state.

    Every overridable public operation of the proxy routes through the
    advice before running the base implementation.  Calls an operation makes
    on ``self`` go through the proxy as well.

    Raises:
        ProxyConstructionError: If the class is final, cannot be
            subclassed, or keeps instance state outside ``__dict__``.
    """
    cls = type(real)
    if not hasattr(real, "__dict__"):
        raise ProxyConstructionError(
            f"{cls.__qualname__} instances have no __dict__ to share",
            code="PROXY_UNSUPPORTED",
        )
    slots = _slot_names(cls)
    if slots:
        raise ProxyConstructionError(
            f"{cls.__qualname__} keeps state in slots {slots} that a proxy cannot share",
            code="PROXY_UNSUPPORTED",
        )
    proxy_type = _concrete_proxy_type(cls)
    advice.matcher.registry.register(cls)

    proxy = object.__new__(proxy_type)
    proxy.__dict__ = real.__dict__
    proxy._aopguard_interceptor = Interceptor(advice)
    return proxy  # type: ignore[no-any-return]


def is_proxy(obj: Any) -> bool:
    """Whether *obj* was produced by one of the proxy factories."""
    return isinstance(obj, ContractProxy) or hasattr(type(obj), "__aopguard_proxied__")


class ProxyFactory:
    """Binds both proxy factories to one advice instance.

    Usage::

        factory = ProxyFactory(advice)
        products = factory.wrap_contract_based(ProductService(), ProductServiceContract)
        reports = factory.wrap_concrete_type(ReportController())
    """

    def __init__(self, advice: Advice) -> None:
        self._advice = advice

    @property
    def advice(self) -> Advice:
        return self._advice

    def wrap_contract_based(self, real: Any, contract: type[T]) -> T:
        return wrap_contract_based(real, contract, self._advice)

    def wrap_concrete_type(self, real: T) -> T:
        return wrap_concrete_type(real, self._advice)
