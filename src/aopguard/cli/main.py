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
"""AopGuard CLI: run the demo application and inspect intercepted operations."""

from __future__ import annotations

from pathlib import Path

import click

from aopguard.cli.console import console, print_banner, print_operations_table
from aopguard.core.config import Config
from aopguard.core.properties import SecurityProperties, ServerProperties


class AopGuardCLI(click.Group):
    """Custom Click group that shows the banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


def _load_config(config_path: str | None, profiles: tuple[str, ...]) -> Config:
    path = Path(config_path) if config_path else Path("aopguard.yaml")
    return Config.from_file(path, active_profiles=list(profiles))


config_option = click.option(
    "--config", "config_path", default=None, type=click.Path(dir_okay=False),
    help="Configuration file (default: ./aopguard.yaml if present).",
)
profile_option = click.option("--profile", "profiles", multiple=True, help="Active profile overlay (repeatable).")


@click.group(cls=AopGuardCLI)
@click.version_option(package_name="aopguard")
def cli() -> None:
    """AopGuard: declarative authorization through method interception."""


@cli.command("run")
@config_option
@profile_option
@click.option("--host", default=None, help="Bind address (default: from config).")
@click.option("--port", default=None, type=int, help="Port number (default: from config).")
def run_command(config_path: str | None, profiles: tuple[str, ...], host: str | None, port: int | None) -> None:
    """Serve the demo API with uvicorn."""
    import uvicorn

    from aopguard.demo.app import create_app
    from aopguard.logging.structlog_adapter import StructlogAdapter

    config = _load_config(config_path, profiles)
    StructlogAdapter().configure(config)
    server = config.bind(ServerProperties)
    security = config.bind(SecurityProperties)

    app = create_app(config)

    bind_host = host or server.host
    bind_port = port or server.port
    print_banner()
    console.print(f"  [info]Listening on[/info] http://{bind_host}:{bind_port}")
    console.print(
        f"  [dim]Send '{security.role_header}: {security.required_role}' to reach protected endpoints.[/dim]\n"
    )
    print_operations_table(app.state.collaborators.registry)

    uvicorn.run(app, host=bind_host, port=bind_port, log_level="warning")


@cli.command("routes")
@config_option
@profile_option
def routes_command(config_path: str | None, profiles: tuple[str, ...]) -> None:
    """List intercepted operations and whether each one is protected."""
    from aopguard.demo.composition import build_collaborators

    config = _load_config(config_path, profiles)
    collaborators = build_collaborators(security=config.bind(SecurityProperties))
    print_operations_table(collaborators.registry)


def main() -> None:
    cli()
