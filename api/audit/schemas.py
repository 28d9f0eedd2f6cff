"""
Audit event shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditEvent(BaseModel):
    # One immutable fact about an access to sensitive data.
    model_config = ConfigDict(frozen=True)

    action: str
    resource_type: str
    resource_id: str
    ip_address: str | None = None
    user_agent: str | None = None
    user_id: str | None = None
    changes: dict[str, Any] | None = None
