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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from aopguard.aop.registry import MarkerRegistry

AOPGUARD_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "aopguard": "bold magenta",
    "dim": "dim",
})

console = Console(theme=AOPGUARD_THEME)


def print_banner() -> None:
    """Print the AopGuard banner."""
    from aopguard import __version__

    console.print("[aopguard]AopGuard[/aopguard] [dim]:: method interception demo ::[/dim]")
    console.print(f"  [dim](v{__version__}) | Apache 2.0 License[/dim]\n")


def print_operations_table(registry: MarkerRegistry) -> None:
    """Print every registered operation with its protection status."""
    table = Table(title="[aopguard]Intercepted operations[/aopguard]", border_style="dim")
    table.add_column("Container", style="bold")
    table.add_column("Operation")
    table.add_column("Marker", style="dim")
    table.add_column("Protected")

    for descriptor in registry:
        if descriptor.container_marked:
            marker = "container"
        elif descriptor.operation_marked:
            marker = "operation"
        else:
            marker = "-"
        protected = "[warning]yes[/warning]" if registry.has_marker(descriptor) else "[success]no[/success]"
        table.add_row(descriptor.container.__qualname__, descriptor.name, marker, protected)

    console.print(table)
