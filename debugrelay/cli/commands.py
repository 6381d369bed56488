"""CLI commands for debugrelay.

``serve`` runs the relay on stdio; ``methods`` prints the tool table.
"""

import asyncio
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from debugrelay import __logo__, __version__
from debugrelay.cli.shared.logging_utils import configure_stderr_logging, ensure_rotating_log_file

app = typer.Typer(
    name="debugrelay",
    help=f"{__logo__} debugrelay - debug operations relay for AI agents",
    no_args_is_help=True,
)

# stdout belongs to the protocol; human output goes to stderr.
console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} debugrelay v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """debugrelay - debug operations relay for AI agents."""
    pass


def _load(config_path: Path | None):
    from debugrelay.config.loader import load_config

    try:
        return load_config(config_path)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file (default ~/.debugrelay/config.json)"),
    bridge_cmd: list[str] = typer.Option(None, "--bridge-cmd", help="Mediator argv; repeat for each argument. Overrides config."),
    timeout: float = typer.Option(None, "--timeout", help="Bridge request timeout in seconds"),
    log_level: str = typer.Option(None, "--log-level", help="Log level for stderr (DEBUG, INFO, ...)"),
    log_file: bool = typer.Option(False, "--log-file", help="Also write rotating logs under ~/.debugrelay/logs"),
):
    """Serve debug operations over stdin/stdout."""
    from debugrelay.server.stdio import serve_stdio
    from debugrelay.session import DebugSession
    from debugrelay.utils.exceptions import DebugRelayError

    config = _load(config_path)
    if bridge_cmd:
        config.bridge.command = list(bridge_cmd)
    if timeout is not None:
        config.bridge.request_timeout_seconds = timeout
    level = (log_level or config.logging.level).upper()
    configure_stderr_logging(level, enabled=config.logging.enabled)
    if log_file or config.logging.file:
        ensure_rotating_log_file("serve", level=level)

    async def run() -> None:
        session = await DebugSession.create(config)
        try:
            await serve_stdio(session)
        finally:
            await session.close()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except DebugRelayError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def methods(
    config_path: Path = typer.Option(None, "--config", "-c", help="Config file (default ~/.debugrelay/config.json)"),
):
    """List the methods this server answers."""
    from debugrelay.session import DebugSession

    config = _load(config_path)
    config.bridge.command = []
    configure_stderr_logging("WARNING", enabled=config.logging.enabled)
    session = DebugSession(config)

    table = Table(title="Methods")
    table.add_column("Method", style="cyan")
    table.add_column("Tags")
    table.add_column("Enabled", style="green")
    table.add_column("Description")
    for reg in session.registry.registrations():
        table.add_row(
            reg.method,
            ", ".join(sorted(reg.tags)) or "-",
            "✓" if reg.enabled else "✗",
            reg.description,
        )
    console.print(table)


if __name__ == "__main__":
    app()
