"""
Audit trail for access to patient data.

Every successful lookup of a sensitive resource appends one `AuditEvent` to
the `audit_log` table. What a failed write does to the request is governed by
AUDIT_FAILURE_MODE (see `core.settings.audit_failure_mode`).
"""

from __future__ import annotations

import logging

from fastapi import Request

from core import db
from core.settings import audit_failure_mode

from . import repository
from .schemas import AuditEvent

logger = logging.getLogger(__name__)


class AuditError(RuntimeError):
    pass


def client_ip(request: Request) -> str | None:
    """
    First hop of X-Forwarded-For, else the direct peer address.
    """
    forwarded = (request.headers.get("x-forwarded-for") or "").strip()
    if forwarded:
        return forwarded.split(",", 1)[0].strip() or None
    if request.client is not None:
        return request.client.host
    return None


def event_from_request(
    request: Request,
    *,
    action: str,
    resource_type: str,
    resource_id: str,
) -> AuditEvent:
    return AuditEvent(
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent") or None,
    )


async def record(event: AuditEvent, *, mode: str | None = None) -> bool:
    """
    Append `event` to the audit log. Returns True if it was written.

    Skipped (False) when no database is configured. In "ignore" mode a failed
    write is logged and reported as False; in "strict" mode it raises
    `AuditError`.
    """
    mode = mode or audit_failure_mode()

    if not db.has_pool():
        logger.debug("audit_skipped reason=no_database action=%s", event.action)
        return False

    try:
        await repository.insert_audit_event(event)
    except Exception as exc:
        logger.exception(
            "audit_write_failed action=%s resource_type=%s resource_id=%s",
            event.action,
            event.resource_type,
            event.resource_id,
        )
        if mode == "strict":
            raise AuditError("Failed to write audit log.") from exc
        return False

    return True
