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
"""Configuration properties bound from the ``aopguard.*`` sections."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from aopguard.core.config import config_properties


@config_properties(prefix="aopguard.security")
class SecurityProperties(BaseModel):
    """Authorization settings (aopguard.security.*)."""

    required_role: str = Field(default="Admin", min_length=1)
    role_header: str = Field(default="X-User-Role", min_length=1)


@config_properties(prefix="aopguard.server")
@dataclass
class ServerProperties:
    """Demo application server settings (aopguard.server.*)."""

    host: str = "127.0.0.1"
    port: int = 5054
