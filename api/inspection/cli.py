"""Operator CLI for database inspection (`claims-inspect tables|schema`), implemented with Typer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import typer

from core import db
from core.logs import configure_logging
from core.settings import DatabaseConfig, database_config, merged_env

from . import schema, tables

DEFAULT_ENV_FILE = Path(".env.local")

SUCCESS_EXIT_CODE = 0
CHECK_FAILED_EXIT_CODE = 1
CONFIG_ERROR_EXIT_CODE = 2

logger = logging.getLogger(__name__)

app = typer.Typer(no_args_is_help=True, help="Claims database inspection tools")


async def _with_connection(config: DatabaseConfig, run: Callable[[Any], Awaitable[Any]]) -> Any:
    conn = await db.connect(config.url)
    try:
        return await run(conn)
    finally:
        await conn.close()


def _require_config(ctx: typer.Context) -> DatabaseConfig:
    config = ctx.obj
    if not isinstance(config, DatabaseConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


@app.callback()
def main(
    ctx: typer.Context,
    env_file: Path = typer.Option(
        DEFAULT_ENV_FILE,
        "--env-file",
        help="KEY=VALUE settings file layered over the process environment",
    ),
    log_level: str | None = typer.Option(None, envvar="LOG_LEVEL", help="error|warn|info|debug"),
) -> None:
    """Load settings once for every command."""
    configure_logging(log_level)
    try:
        ctx.obj = database_config(merged_env(env_file))
    except RuntimeError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE) from exc


@app.command("tables")
def check_tables(ctx: typer.Context) -> None:
    """Report which of the expected tables exist."""
    config = _require_config(ctx)
    try:
        results = asyncio.run(_with_connection(config, lambda conn: tables.check_tables(conn, echo=typer.echo)))
    except Exception as exc:
        typer.echo(f"❌ Could not check tables: {exc}")
        raise typer.Exit(code=CHECK_FAILED_EXIT_CODE) from exc
    missing = [r.table for r in results if not r.exists]
    if missing:
        logger.info("tables_missing count=%s tables=%s", len(missing), ",".join(missing))
        raise typer.Exit(code=CHECK_FAILED_EXIT_CODE)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


@app.command("schema")
def check_schema(ctx: typer.Context) -> None:
    """Dry-run a sentinel claim insert against the claims table."""
    config = _require_config(ctx)
    try:
        report = asyncio.run(_with_connection(config, lambda conn: schema.verify_schema(conn, echo=typer.echo)))
    except Exception as exc:
        typer.echo(f"Schema check failed: {exc}", err=True)
        raise typer.Exit(code=CHECK_FAILED_EXIT_CODE) from exc
    typer.echo("")
    raise typer.Exit(code=SUCCESS_EXIT_CODE if report.ok else CHECK_FAILED_EXIT_CODE)


if __name__ == "__main__":
    app()
