"""
Configuration helpers.

Values come from process environment. Operator scripts can additionally load
a local `KEY=VALUE` settings file (e.g. `.env.local`); that file is merged into
an explicit mapping and never written back into `os.environ`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

DEFAULT_SFTP_PORT = 22
DEFAULT_SFTP_TIMEOUT_S = 30.0
DEFAULT_INTAKEQ_BASE_URL = "https://intakeq.com/api/v1"

AUDIT_FAILURE_MODES = ("ignore", "strict")


def env_str(name: str, default: str = "", *, env: Mapping[str, str] | None = None) -> str:
    source = os.environ if env is None else env
    return (source.get(name) or "").strip() or default


def env_int(name: str, default: int, *, env: Mapping[str, str] | None = None) -> int:
    raw = env_str(name, env=env)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float, *, env: Mapping[str, str] | None = None) -> float:
    raw = env_str(name, env=env)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_env_file(path: str | Path) -> dict[str, str]:
    """
    Read a `KEY=VALUE` settings file without touching `os.environ`.

    Keys declared without a value are dropped.
    """
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def merged_env(env_file: str | Path | None = None) -> dict[str, str]:
    """
    Process environment overlaid with the settings file (file wins).

    A missing file is not an error; the process environment alone is used.
    """
    values = dict(os.environ)
    if env_file is not None and Path(env_file).is_file():
        values.update(load_env_file(env_file))
    return values


@dataclass(frozen=True)
class SftpConfig:
    host: str
    port: int
    username: str
    password: str
    timeout_s: float = DEFAULT_SFTP_TIMEOUT_S

    @property
    def is_complete(self) -> bool:
        return bool(self.host and self.username and self.password)


def sftp_config(env: Mapping[str, str] | None = None) -> SftpConfig:
    return SftpConfig(
        host=env_str("OFFICE_ALLY_SFTP_HOST", env=env),
        port=env_int("OFFICE_ALLY_SFTP_PORT", DEFAULT_SFTP_PORT, env=env),
        username=env_str("OFFICE_ALLY_SFTP_USERNAME", env=env),
        password=env_str("OFFICE_ALLY_SFTP_PASSWORD", env=env),
        timeout_s=env_float("OFFICE_ALLY_SFTP_TIMEOUT", DEFAULT_SFTP_TIMEOUT_S, env=env),
    )


@dataclass(frozen=True)
class IntakeQConfig:
    base_url: str
    api_key: str
    timeout_s: float = 30.0


def intakeq_config(env: Mapping[str, str] | None = None) -> IntakeQConfig:
    return IntakeQConfig(
        base_url=env_str("INTAKEQ_BASE_URL", DEFAULT_INTAKEQ_BASE_URL, env=env),
        api_key=env_str("INTAKEQ_API_KEY", env=env),
    )


def audit_failure_mode(env: Mapping[str, str] | None = None) -> str:
    """
    How an audit write failure affects the request.

    - ignore: log it and keep the successful response (default)
    - strict: fail the request with a generic 500
    """
    mode = env_str("AUDIT_FAILURE_MODE", "ignore", env=env).lower()
    return mode if mode in AUDIT_FAILURE_MODES else "ignore"


@dataclass(frozen=True)
class DatabaseConfig:
    url: str


def database_config(env: Mapping[str, str] | None = None) -> DatabaseConfig:
    url = env_str("DATABASE_URL", env=env)
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return DatabaseConfig(url=url)
