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
"""AopGuard exception hierarchy.

Every error raised by the interception engine derives from
:class:`AopGuardException`, which carries a machine-readable ``code`` and a
``context`` dict.  Errors raised by the intercepted operations themselves are
never wrapped and propagate unchanged.
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class AopGuardException(Exception):
    """Base exception for all AopGuard errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "ACCESS_DENIED").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(AopGuardException):
    """Authentication and authorization errors."""


class ForbiddenException(SecurityException):
    """Caller lacks permission to perform the operation."""


DEFAULT_DENIAL_MESSAGE = "Access denied. Admin role required."


class AuthorizationDenied(ForbiddenException):
    """A protected operation was invoked without the required role.

    The message is fixed and the context is always empty so that nothing
    about the protected operation leaks to the caller.
    """

    def __init__(self, message: str = DEFAULT_DENIAL_MESSAGE) -> None:
        super().__init__(message, code="ACCESS_DENIED")


# =============================================================================
# Interception Exceptions
# =============================================================================


class InterceptionException(AopGuardException):
    """Programming or composition errors inside the interception engine."""


class DoubleProceedError(InterceptionException):
    """``proceed()`` was called more than once on the same invocation."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"proceed() already called for operation '{operation}'",
            code="DOUBLE_PROCEED",
            context={"operation": operation},
        )


class MarkerDeclarationError(InterceptionException):
    """A marker was declared more than once on the same operation or container."""


class ProxyConstructionError(InterceptionException):
    """A collaborator cannot be wrapped by the requested proxy factory."""
