"""
IntakeQ HTTP client helpers.

Used endpoints:
- GET /intakes/{id}       -> intake form (AppointmentId, Questions, ...)
- GET /clients?search=... -> [client, ...]

Every lookup returns an `Envelope`; upstream rejections and transport failures
become failure envelopes instead of exceptions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .envelope import NOT_FOUND, Envelope
from .settings import IntakeQConfig, intakeq_config

logger = logging.getLogger(__name__)

TIMEOUT_CODE = "ETIMEDOUT"
NETWORK_CODE = "NETWORK_ERROR"


# Configuration problems are explicit and separable from upstream failures.
class IntakeQError(RuntimeError):
    pass


def _resolve_config(config: IntakeQConfig | None) -> IntakeQConfig:
    config = config or intakeq_config()
    if not config.api_key:
        raise IntakeQError("INTAKEQ_API_KEY environment variable is required.")
    if not config.base_url:
        raise IntakeQError("INTAKEQ_BASE_URL is empty.")
    return config


def _failure(message: str, exc: httpx.HTTPError) -> Envelope[Any]:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return Envelope.fail(message, code=str(status), retryable=status >= 500)
    if isinstance(exc, httpx.TimeoutException):
        return Envelope.fail(message, code=TIMEOUT_CODE, retryable=True)
    return Envelope.fail(message, code=NETWORK_CODE, retryable=False)


async def _get(
    path: str,
    *,
    config: IntakeQConfig | None = None,
    params: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    cfg = _resolve_config(config)
    async with httpx.AsyncClient(
        base_url=cfg.base_url.rstrip("/"),
        headers={"X-Auth-Key": cfg.api_key, "Content-Type": "application/json"},
        timeout=cfg.timeout_s,
        transport=transport,
    ) as client:
        logger.debug("intakeq_request method=GET url=%s", path)
        try:
            resp = await client.get(path, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
            logger.error("intakeq_error url=%s status=%s message=%s", path, status, exc)
            raise
        logger.debug("intakeq_response status=%s url=%s", resp.status_code, path)

    return resp.json()


async def get_intake(
    intake_id: str,
    *,
    config: IntakeQConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Envelope[Any]:
    """
    Fetch an intake form (patient demographics and insurance answers).
    """
    try:
        data = await _get(f"/intakes/{intake_id}", config=config, transport=transport)
    except httpx.HTTPError as exc:
        return _failure("Failed to fetch intake", exc)

    logger.info("intakeq_intake_fetched intake_id=%s", intake_id)
    return Envelope.ok(data)


async def get_client(
    client_id: str,
    *,
    config: IntakeQConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Envelope[Any]:
    """
    Look up a client (patient) through the search endpoint; first match wins.
    """
    try:
        data = await _get(
            "/clients",
            config=config,
            params={"search": str(client_id), "includeProfile": "true"},
            transport=transport,
        )
    except httpx.HTTPError as exc:
        return _failure("Failed to fetch client", exc)

    matches = data if isinstance(data, list) else []
    logger.info("intakeq_client_fetched client_id=%s count=%s", client_id, len(matches))
    if not matches:
        return Envelope.fail("Client not found", code=NOT_FOUND)
    return Envelope.ok(matches[0])

