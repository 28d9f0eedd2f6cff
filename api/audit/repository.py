"""
Audit log persistence (raw SQL). Append-only.
"""

from __future__ import annotations

import json

from core import db

from .schemas import AuditEvent


async def insert_audit_event(event: AuditEvent) -> None:
    await db.execute(
        """
        INSERT INTO audit_log (user_id, action, resource_type, resource_id, changes, ip_address, user_agent)
        VALUES ($1, $2, $3, $4, $5::jsonb, $6, $7)
        """,
        event.user_id,
        event.action,
        event.resource_type,
        event.resource_id,
        json.dumps(event.changes) if event.changes is not None else None,
        event.ip_address,
        event.user_agent,
    )
