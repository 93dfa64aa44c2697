"""Entry point: python -m mps_mcp."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mps_mcp import __version__
from mps_mcp.config import PlatformConfig, load_config
from mps_mcp.errors import AuthError, ConfigError
from mps_mcp.logging_config import setup_logging
from mps_mcp.session.manager import TokenManager

logger = logging.getLogger(__name__)

# stdout belongs to the MCP stdio transport.
_console = Console(stderr=True)

EXIT_OK = 0
EXIT_FAILURE = 1


def _config_path(args: list[str], environ: Mapping[str, str]) -> Path | None:
    """``--config PATH`` wins over ``MPS_CONFIG``."""
    for i, arg in enumerate(args):
        if arg == "--config" and i + 1 < len(args):
            return Path(args[i + 1]).expanduser()
        if arg.startswith("--config="):
            return Path(arg.split("=", 1)[1]).expanduser()
    env_path = environ.get("MPS_CONFIG", "").strip()
    return Path(env_path).expanduser() if env_path else None


def _positional(args: list[str]) -> set[str]:
    commands: set[str] = set()
    skip_next = False
    for arg in args:
        if skip_next:
            skip_next = False
            continue
        if arg == "--config":
            skip_next = True
            continue
        if not arg.startswith("-"):
            commands.add(arg)
    return commands


def _print_usage() -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold green", min_width=24)
    table.add_column()
    table.add_row("mps-mcp [serve]", "Authenticate and serve MCP tools over stdio")
    table.add_row("mps-mcp check", "Authenticate and show session details")
    table.add_row("mps-mcp help", "Show this help")
    table.add_row("--config PATH", "JSON config file (or MPS_CONFIG)")
    table.add_row("-v, --verbose", "Debug logging")
    _console.print(
        Panel(table, title=f"[bold]mps-mcp {__version__}[/bold]", border_style="blue", padding=(1, 0)),
    )


def _prepare(args: list[str], environ: Mapping[str, str], verbose: bool) -> PlatformConfig:
    setup_logging(verbose=verbose)
    config = load_config(_config_path(args, environ), environ)
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    setup_logging(level=level, verbose=verbose, log_dir=config.log_dir)
    return config


def _cmd_serve(config: PlatformConfig, environ: Mapping[str, str]) -> int:
    from mps_mcp.server.app import serve

    try:
        asyncio.run(serve(config, environ))
    except AuthError as exc:
        logger.error("Startup authentication failed: %s", exc)
        _console.print(f"[bold red]Failed to start server:[/bold red] {exc}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    return EXIT_OK


async def _check(config: PlatformConfig, environ: Mapping[str, str]) -> TokenManager:
    tokens = TokenManager(config)
    await tokens.authenticate_from_env(environ)
    return tokens


def _cmd_check(config: PlatformConfig, environ: Mapping[str, str]) -> int:
    try:
        tokens = asyncio.run(_check(config, environ))
    except AuthError as exc:
        _console.print(
            Panel(
                f"[bold red]{exc}[/bold red]",
                title="[bold]Authentication[/bold]",
                border_style="red",
                padding=(1, 2),
            ),
        )
        return EXIT_FAILURE

    session = tokens.session
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Platform", config.base_url)
    table.add_row("Credentials", f"{config.username_env} / {config.password_env}")
    table.add_row("Issued", session.issued_at.isoformat() if session else "-")
    expires = session.expires_at.isoformat() if session and session.expires_at else "unknown"
    table.add_row("Expires", expires)
    table.add_row("Refresh advised", "yes" if tokens.should_refresh() else "no")
    _console.print(
        Panel(table, title="[bold]Authenticated[/bold]", border_style="green", padding=(1, 2)),
    )
    return EXIT_OK


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> None:
    """CLI entry point."""
    args = sys.argv[1:] if argv is None else argv
    env = os.environ if environ is None else environ
    commands = _positional(args)
    verbose = "--verbose" in args or "-v" in args

    if "help" in commands or "--help" in args or "-h" in args:
        _print_usage()
        return

    try:
        config = _prepare(args, env, verbose)
    except ConfigError as exc:
        _console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        sys.exit(EXIT_FAILURE)

    exit_code = _cmd_check(config, env) if "check" in commands else _cmd_serve(config, env)
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
