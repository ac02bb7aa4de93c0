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
"""Response and payload models for the demo API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Envelope returned by every demo endpoint."""

    success: bool = True
    data: Any = None
    message: str | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ReportSummary(BaseModel):
    report_name: str = Field(serialization_alias="reportName")
    total_sales: int = Field(serialization_alias="totalSales")
    period: str


class ProductBreakdown(BaseModel):
    product: str
    sales: int
    profit: int


class DetailedReport(ReportSummary):
    profit: int
    costs: int
    breakdown: list[ProductBreakdown]


class FinancialReport(BaseModel):
    report_name: str = Field(serialization_alias="reportName")
    revenue: int
    expenses: int
    net_profit: int = Field(serialization_alias="netProfit")
    tax: int
    period: str


class SystemSettings(BaseModel):
    system_name: str = Field(serialization_alias="systemName")
    version: str
    environment: str
    features: list[str]


class LogEntry(BaseModel):
    timestamp: datetime
    level: str
    message: str
