"""
SFTP directory listing self-test.

Lists `/` plus a few well-known Office Ally directories so an operator can
check credentials and see what the clearinghouse has dropped. Not a
production data path.
"""

from __future__ import annotations

import logging
from typing import Any

from core import sftp
from core.envelope import Envelope
from core.settings import SftpConfig, sftp_config

logger = logging.getLogger(__name__)

ROOT_DIR = "/"
SECONDARY_DIRS = {"outbound": "/outbound", "inbound": "/inbound"}
MAX_SECONDARY_ENTRIES = 10

LIST_FAILED = "SFTP_LIST_FAILED"
SUCCESS_MESSAGE = "Successfully listed SFTP directories"


def _list_guarded(session: Any, path: str) -> list[Any]:
    """
    List `path`; on failure return a one-element diagnostic list instead.
    """
    try:
        return list(session.list(path))[:MAX_SECONDARY_ENTRIES]
    except Exception as exc:
        logger.warning("sftp_list_dir_failed path=%s error=%s", path, exc)
        return [f"Error: {exc}"]


def _normalize(entries: list[Any]) -> list[Any]:
    # Error placeholders are strings; pass them through as-is.
    return [entry if isinstance(entry, str) else sftp.to_file_entry(entry) for entry in entries]


def list_directories(
    config: SftpConfig | None = None,
    *,
    session_factory: Any = None,
) -> tuple[int, dict[str, Any]]:
    """
    Returns (status_code, body).
    """
    config = config or sftp_config()
    try:
        logger.info("sftp_list_test_started host=%s", config.host)
        with sftp.open_session(config, factory=session_factory or sftp.SftpSession) as session:
            root = list(session.list(ROOT_DIR))
            secondary = {name: _list_guarded(session, path) for name, path in SECONDARY_DIRS.items()}

        directories = {"root": _normalize(root)}
        directories.update({name: _normalize(entries) for name, entries in secondary.items()})
    except Exception as exc:
        logger.error("sftp_list_test_error error=%s", exc)
        message = str(exc) or "SFTP listing failed"
        return 500, Envelope.fail(message, code=LIST_FAILED).to_body()

    logger.info("sftp_list_test_succeeded root_entries=%s", len(directories["root"]))
    return 200, {"success": True, "message": SUCCESS_MESSAGE, "directories": directories}
