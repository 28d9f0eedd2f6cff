"""
Logging setup shared by the API and the operator scripts.

Modules log through `logging.getLogger(__name__)`. Context that may carry
patient data goes through `redact()` first; identifiers are fine, names and
dates of birth are not.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .settings import env_str

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

PHI_FIELDS = frozenset(
    {
        "firstName",
        "lastName",
        "dateOfBirth",
        "ssn",
        "email",
        "phone",
        "address",
        "name",
    }
)

REDACTED = "[REDACTED]"

logger = logging.getLogger(__name__)


def log_level(raw: str | None = None) -> int:
    name = (raw if raw is not None else env_str("LOG_LEVEL", "info")).strip().lower()
    return _LEVELS.get(name, logging.INFO)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=log_level(level), format=LOG_FORMAT)
    logging.getLogger().setLevel(log_level(level))


def redact(context: Mapping[str, Any]) -> dict[str, Any]:
    """
    Copy `context` with PHI-bearing keys replaced by a placeholder.
    """
    sanitized = dict(context)
    for field in PHI_FIELDS:
        if sanitized.get(field):
            sanitized[field] = REDACTED
            logger.warning("phi_field_redacted field=%s", field)
    return sanitized
