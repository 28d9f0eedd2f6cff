"""
Table existence check.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import asyncpg

from core import db

EXPECTED_TABLES = (
    "claims",
    "claim_submissions",
    "claim_status_updates",
    "ai_coding_log",
    "eligibility_checks",
    "audit_log",
    "providers",
    "payers",
)


@dataclass(frozen=True)
class TableCheck:
    table: str
    exists: bool
    error: str | None = None

    def line(self) -> str:
        if self.exists:
            return f"✅ {self.table}: Exists"
        if self.error is None:
            return f"❌ {self.table}: Does not exist"
        return f"❌ {self.table}: Error - {self.error}"


async def check_table(conn: Any, table: str) -> TableCheck:
    try:
        await conn.fetch(f"SELECT 1 FROM {db.quote_ident(table)} LIMIT 0")
    except asyncpg.UndefinedTableError:
        return TableCheck(table=table, exists=False)
    except Exception as exc:
        return TableCheck(table=table, exists=False, error=str(exc))
    return TableCheck(table=table, exists=True)


async def check_tables(
    conn: Any,
    tables: Iterable[str] = EXPECTED_TABLES,
    *,
    echo: Callable[[str], None] = print,
) -> list[TableCheck]:
    """
    Check every table in order and print one marker line per table.

    A missing or failing table never stops the remaining checks.
    """
    echo("\n=== Checking Database Tables ===\n")
    results: list[TableCheck] = []
    for table in tables:
        result = await check_table(conn, table)
        echo(result.line())
        results.append(result)
    echo("")
    return results
