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
"""Demo business services, exposed to callers only through their contracts."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from aopguard.aop.markers import require_admin


@runtime_checkable
class ProductServiceContract(Protocol):
    def get_all_products(self) -> str: ...

    def delete_product(self, product_id: int) -> str: ...


@runtime_checkable
class UserServiceContract(Protocol):
    def get_all_users(self) -> str: ...

    def get_public_data(self) -> str: ...


class ProductService:
    """Listing is public; deletion requires the admin role."""

    def get_all_products(self) -> str:
        return "Products: [Laptop, Phone, Tablet, Monitor]"

    @require_admin
    def delete_product(self, product_id: int) -> str:
        return f"Product {product_id} has been deleted by admin"


class UserService:
    @require_admin
    def get_all_users(self) -> str:
        return "List of all users: [Admin, User1, User2, User3]"

    def get_public_data(self) -> str:
        return "This is public data accessible to everyone"
