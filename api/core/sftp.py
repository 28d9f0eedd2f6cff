"""
SFTP session helpers (paramiko).

`open_session()` is the only way to get a session: it connects, yields an
`SFTPClient`, and closes the session exactly once however the block exits.
"""

from __future__ import annotations

import logging
import socket
import stat
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

import paramiko

from .settings import SftpConfig

logger = logging.getLogger(__name__)


# SFTP failures are explicit and separable from other runtime errors.
class SftpError(RuntimeError):
    pass


class SftpSession:
    """
    Thin wrapper over a paramiko transport + SFTP channel.
    """

    def __init__(self, config: SftpConfig) -> None:
        self.config = config
        self._transport: paramiko.Transport | None = None
        self._sftp: paramiko.SFTPClient | None = None

    def connect(self) -> None:
        if not self.config.is_complete:
            raise SftpError("Office Ally SFTP credentials not configured.")
        sock = socket.create_connection((self.config.host, self.config.port), timeout=self.config.timeout_s)
        try:
            transport = paramiko.Transport(sock)
        except Exception:
            sock.close()
            raise
        transport.banner_timeout = self.config.timeout_s
        transport.auth_timeout = self.config.timeout_s
        try:
            transport.connect(username=self.config.username, password=self.config.password)
            self._sftp = paramiko.SFTPClient.from_transport(transport)
        except Exception:
            transport.close()
            raise
        self._transport = transport

    def list(self, path: str) -> list[paramiko.SFTPAttributes]:
        if self._sftp is None:
            raise SftpError("SFTP session is not connected.")
        return self._sftp.listdir_attr(path)

    def end(self) -> None:
        if self._sftp is not None:
            self._sftp.close()
            self._sftp = None
        if self._transport is not None:
            self._transport.close()
            self._transport = None


@contextmanager
def open_session(config: SftpConfig, *, factory: Any = SftpSession) -> Iterator[Any]:
    session = factory(config)
    try:
        logger.info("sftp_connecting host=%s port=%s username=%s", config.host, config.port, config.username)
        session.connect()
        logger.info("sftp_connected host=%s", config.host)
        yield session
    finally:
        try:
            session.end()
        except Exception:
            # Cleanup must never hide the error that got us here.
            logger.debug("sftp_close_failed host=%s", config.host, exc_info=True)


def entry_type(mode: int | None) -> str:
    if mode is None:
        return "-"
    if stat.S_ISDIR(mode):
        return "d"
    if stat.S_ISLNK(mode):
        return "l"
    return "-"


def iso_timestamp(epoch_s: float | None) -> str | None:
    """
    Seconds since epoch -> `2024-01-31T12:00:00.000Z`.
    """
    if epoch_s is None:
        return None
    moment = datetime.fromtimestamp(float(epoch_s), tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_file_entry(attrs: Any) -> dict[str, Any]:
    return {
        "name": attrs.filename,
        "type": entry_type(getattr(attrs, "st_mode", None)),
        "size": getattr(attrs, "st_size", None) or 0,
        "modifyTime": iso_timestamp(getattr(attrs, "st_mtime", None)),
    }
