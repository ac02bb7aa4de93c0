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
"""Tests for the @require_admin marker declaration surface."""

from __future__ import annotations

import pytest

from aopguard.aop.markers import MarkerScope, get_marker, is_marked_container, require_admin
from aopguard.kernel.exceptions import MarkerDeclarationError


class TestOperationMarker:
    def test_marks_function_with_operation_scope(self):
        @require_admin
        def delete(item_id: int) -> str:
            return f"deleted {item_id}"

        marker = get_marker(delete)
        assert marker is not None
        assert marker.scope is MarkerScope.OPERATION

    def test_decorated_function_is_returned_unchanged(self):
        def fn() -> int:
            return 42

        assert require_admin(fn) is fn
        assert fn() == 42

    def test_unmarked_function_has_no_marker(self):
        def fn() -> None: ...

        assert get_marker(fn) is None

    def test_marking_twice_raises(self):
        def fn() -> None: ...

        require_admin(fn)
        with pytest.raises(MarkerDeclarationError) as exc_info:
            require_admin(fn)
        assert exc_info.value.code == "DUPLICATE_MARKER"

    def test_marks_function_inside_staticmethod(self):
        class Holder:
            @require_admin
            @staticmethod
            def helper() -> str:
                return "ok"

        assert get_marker(vars(Holder)["helper"]) is not None

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            require_admin(42)


class TestContainerMarker:
    def test_marks_class_with_container_scope(self):
        @require_admin
        class Admin:
            def settings(self) -> str:
                return "settings"

        marker = get_marker(Admin)
        assert marker is not None
        assert marker.scope is MarkerScope.CONTAINER
        assert is_marked_container(Admin)

    def test_container_marker_does_not_mark_methods(self):
        @require_admin
        class Admin:
            def settings(self) -> str:
                return "settings"

        assert get_marker(Admin.settings) is None

    def test_marking_class_twice_raises(self):
        @require_admin
        class Admin:
            pass

        with pytest.raises(MarkerDeclarationError):
            require_admin(Admin)

    def test_subclass_inherits_container_marker(self):
        @require_admin
        class Base:
            pass

        class Child(Base):
            pass

        assert get_marker(Child) is None
        assert is_marked_container(Child)

    def test_subclass_may_declare_its_own_marker(self):
        @require_admin
        class Base:
            pass

        @require_admin
        class Child(Base):
            pass

        assert get_marker(Child) is not None

    def test_unmarked_class(self):
        class Plain:
            pass

        assert not is_marked_container(Plain)
