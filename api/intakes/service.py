"""
Intake/client lookup flow shared by the IntakeQ proxy routes.

Flow per request:
1. log start
2. call the provider (returns an Envelope)
3. failure envelope -> 500 with the normalized error
4. success -> audit event, log success, 200 with the upstream payload

Anything unexpected becomes a generic 500 INTERNAL_ERROR envelope.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from fastapi import Request

from audit import service as audit_service
from core import intakeq
from core.envelope import Envelope, internal_error
from core.logs import redact

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[Envelope[Any]]]


@dataclass(frozen=True)
class LookupSpec:
    resource_type: str
    action: str
    fallback_message: str
    fetch: Fetcher


INTAKE_LOOKUP = LookupSpec(
    resource_type="intake",
    action="intake_viewed",
    fallback_message="Failed to fetch intake",
    fetch=lambda intake_id: intakeq.get_intake(intake_id),
)

CLIENT_LOOKUP = LookupSpec(
    resource_type="client",
    action="client_viewed",
    fallback_message="Failed to fetch client",
    fetch=lambda client_id: intakeq.get_client(client_id),
)


def _failure_body(result: Envelope[Any], fallback_message: str) -> dict[str, Any]:
    error = result.error
    message = (error.message if error is not None else "") or fallback_message
    code = error.code if error is not None else None
    return Envelope.fail(message, code=code).to_body()


async def lookup(request: Request, resource_id: str, spec: LookupSpec) -> tuple[int, dict[str, Any]]:
    """
    Run one audited lookup. Returns (status_code, body).
    """
    try:
        logger.info("%s_fetch_started %s_id=%s", spec.resource_type, spec.resource_type, resource_id)

        result = await spec.fetch(resource_id)

        if not result.success:
            logger.warning(
                "%s_fetch_failed %s_id=%s error=%s",
                spec.resource_type,
                spec.resource_type,
                resource_id,
                redact(result.error.model_dump(exclude_none=True)) if result.error else {},
            )
            return 500, _failure_body(result, spec.fallback_message)

        event = audit_service.event_from_request(
            request,
            action=spec.action,
            resource_type=spec.resource_type,
            resource_id=resource_id,
        )
        await audit_service.record(event)

        logger.info("%s_fetch_succeeded %s_id=%s", spec.resource_type, spec.resource_type, resource_id)
        return 200, Envelope.ok(result.data).to_body()
    except Exception:
        logger.exception("%s_lookup_error %s_id=%s", spec.resource_type, spec.resource_type, resource_id)
        return 500, internal_error().to_body()
