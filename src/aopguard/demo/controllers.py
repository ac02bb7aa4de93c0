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
"""Demo controllers.

Controllers are concrete classes wrapped with concrete-type proxies, so their
markers are declared directly on the class or on individual operations.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

from aopguard.aop.markers import require_admin
from aopguard.demo.models import (
    ApiResponse,
    DetailedReport,
    FinancialReport,
    LogEntry,
    ProductBreakdown,
    ReportSummary,
    SystemSettings,
)
from aopguard.demo.services import ProductServiceContract, UserServiceContract

_PERIOD = "Q3 2025"


class ProductController:
    def __init__(self, product_service: ProductServiceContract) -> None:
        self._product_service = product_service

    def get_all_products(self) -> ApiResponse:
        return ApiResponse(data=self._product_service.get_all_products())

    def delete_product(self, product_id: int) -> ApiResponse:
        return ApiResponse(message=self._product_service.delete_product(product_id))


class UserController:
    def __init__(self, user_service: UserServiceContract) -> None:
        self._user_service = user_service

    def get_all_users(self) -> ApiResponse:
        return ApiResponse(data=self._user_service.get_all_users())

    def get_public_data(self) -> ApiResponse:
        return ApiResponse(data=self._user_service.get_public_data())


class ReportController:
    """Mixed access: only the detailed and financial reports are protected."""

    def get_public_report(self) -> ApiResponse:
        report = ReportSummary(report_name="Public Sales Report", total_sales=50000, period=_PERIOD)
        return ApiResponse(data=report.model_dump(by_alias=True))

    @require_admin
    def get_detailed_report(self) -> ApiResponse:
        report = DetailedReport(
            report_name="Detailed Sales Report",
            total_sales=50000,
            profit=15000,
            costs=35000,
            breakdown=[
                ProductBreakdown(product="Laptop", sales=20000, profit=6000),
                ProductBreakdown(product="Phone", sales=18000, profit=5400),
                ProductBreakdown(product="Tablet", sales=12000, profit=3600),
            ],
            period=_PERIOD,
        )
        return ApiResponse(data=report.model_dump(by_alias=True))

    @require_admin
    def get_financial_report(self) -> ApiResponse:
        report = FinancialReport(
            report_name="Financial Report",
            revenue=50000,
            expenses=35000,
            net_profit=15000,
            tax=3000,
            period=_PERIOD,
        )
        return ApiResponse(data=report.model_dump(by_alias=True))

    async def download_report(self, report_id: int) -> ApiResponse:
        # Stands in for streaming the file from storage.
        await asyncio.sleep(0)
        return ApiResponse(
            message=f"Report {report_id} is being downloaded",
            data={"downloadUrl": f"/downloads/report-{report_id}.pdf"},
        )


@require_admin
class AdminController:
    """Every operation requires the admin role."""

    def __init__(self, system_name: str = "AOP Example System") -> None:
        self._system_name = system_name
        self.reset_count = 0

    def get_settings(self) -> ApiResponse:
        settings = SystemSettings(
            system_name=self._system_name,
            version="1.0.0",
            environment="Development",
            features=["AOP", "Proxies", "Interceptors"],
        )
        return ApiResponse(data=settings.model_dump(by_alias=True))

    def get_logs(self) -> ApiResponse:
        now = datetime.now()
        entries = [
            LogEntry(timestamp=now - timedelta(minutes=10), level="INFO", message="Application started"),
            LogEntry(timestamp=now - timedelta(minutes=5), level="WARN", message="High memory usage detected"),
            LogEntry(timestamp=now, level="INFO", message="Request processed"),
        ]
        return ApiResponse(data=[entry.model_dump(mode="json") for entry in entries])

    def reset_system(self) -> ApiResponse:
        self.reset_count += 1
        return ApiResponse(message="System has been reset by admin")
