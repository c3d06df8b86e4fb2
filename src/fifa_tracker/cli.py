import asyncio
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from fifa_tracker.config import ConfigurationError, create_config
from fifa_tracker.data.factory import create_data_manager
from fifa_tracker.data.manager import DataManager
from fifa_tracker.data.models import AppData
from fifa_tracker.errors import describe_error
from fifa_tracker.result import Err, Ok, capture

app = typer.Typer(help="FIFA tracker database tools.")
console = Console()

_CONFIG_OPTION = Annotated[str, typer.Option("--config", "-c", help="Path to the YAML config file.")]


@app.callback()
def main_callback(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase verbosity (-v debug, -vvv httpx)."),
) -> None:
    if verbose >= 1:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
        if verbose < 3:
            logging.getLogger("httpx").setLevel(logging.WARNING)
            logging.getLogger("httpcore").setLevel(logging.WARNING)


def _build_manager(config_path: str) -> DataManager:
    try:
        return create_data_manager(create_config(yaml_path=config_path))
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=2) from e


async def _check(manager: DataManager) -> Ok[None] | Err[Exception]:
    try:
        return await capture(manager.ping())
    finally:
        await manager.aclose()


async def _load(manager: DataManager) -> AppData:
    try:
        return await manager.load_all_app_data()
    finally:
        await manager.aclose()


@app.command()
def health(config_path: _CONFIG_OPTION = "config.yaml") -> None:
    """Probe the database with a minimal read."""
    manager = _build_manager(config_path)
    outcome = asyncio.run(_check(manager))
    if outcome.is_ok():
        console.print("[green]Database reachable[/green]")
        return
    console.print(f"[red]Database unreachable:[/red] {describe_error(outcome.unwrap_err())}")
    raise typer.Exit(code=1)


@app.command()
def load(config_path: _CONFIG_OPTION = "config.yaml") -> None:
    """Load every application table and print row counts."""
    manager = _build_manager(config_path)
    app_data = asyncio.run(_load(manager))

    table = Table(title="Application data")
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    for name, rows in app_data.as_dict().items():
        table.add_row(name, str(len(rows)))
    console.print(table)
