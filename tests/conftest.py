"""Shared fixtures and fakes for API and inspection tests."""

from __future__ import annotations

import stat
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient

import main
from core.settings import SftpConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "DATABASE_URL",
        "AUDIT_FAILURE_MODE",
        "INTAKEQ_API_KEY",
        "INTAKEQ_BASE_URL",
        "OFFICE_ALLY_SFTP_HOST",
        "OFFICE_ALLY_SFTP_PORT",
        "OFFICE_ALLY_SFTP_USERNAME",
        "OFFICE_ALLY_SFTP_PASSWORD",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def client() -> TestClient:
    # No context manager: lifespan (DB pool) is not started.
    return TestClient(main.app)


@pytest.fixture
def sftp_config() -> SftpConfig:
    return SftpConfig(host="sftp.example.test", port=22, username="user", password="secret")


def remote_file(name: str, *, directory: bool = False, size: int = 10, mtime: int = 1_700_000_000) -> Any:
    mode = (stat.S_IFDIR if directory else stat.S_IFREG) | 0o644
    return SimpleNamespace(filename=name, st_mode=mode, st_size=size, st_mtime=mtime)


class FakeSftpSession:
    """Stands in for `core.sftp.SftpSession`; records calls."""

    instances: list["FakeSftpSession"] = []

    listings: dict[str, Any] = {}
    connect_error: Exception | None = None

    def __init__(self, config: SftpConfig) -> None:
        self.config = config
        self.end_calls = 0
        self.listed: list[str] = []
        FakeSftpSession.instances.append(self)

    def connect(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error

    def list(self, path: str) -> list[Any]:
        self.listed.append(path)
        value = self.listings[path]
        if isinstance(value, Exception):
            raise value
        return value

    def end(self) -> None:
        self.end_calls += 1


@pytest.fixture
def fake_sftp() -> type[FakeSftpSession]:
    FakeSftpSession.instances = []
    FakeSftpSession.listings = {}
    FakeSftpSession.connect_error = None
    return FakeSftpSession


@pytest.fixture(name="remote_file")
def remote_file_fixture() -> Any:
    return remote_file
