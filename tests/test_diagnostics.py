"""Tests for the SFTP directory listing diagnostic."""

from __future__ import annotations

import stat
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from core import sftp
from core.settings import SftpConfig
from diagnostics import service


def test_lists_and_normalizes_all_directories(sftp_config: SftpConfig, fake_sftp, remote_file) -> None:
    fake_sftp.listings = {
        "/": [remote_file("outbound", directory=True, size=4096), remote_file("readme.txt", size=12)],
        "/outbound": [remote_file("a.999")],
        "/inbound": [],
    }

    status, body = service.list_directories(sftp_config, session_factory=fake_sftp)

    assert status == 200
    assert body["success"] is True
    assert body["message"] == "Successfully listed SFTP directories"
    assert body["directories"]["root"] == [
        {"name": "outbound", "type": "d", "size": 4096, "modifyTime": "2023-11-14T22:13:20.000Z"},
        {"name": "readme.txt", "type": "-", "size": 12, "modifyTime": "2023-11-14T22:13:20.000Z"},
    ]
    assert body["directories"]["outbound"][0]["name"] == "a.999"
    assert body["directories"]["inbound"] == []
    assert fake_sftp.instances[0].listed == ["/", "/outbound", "/inbound"]
    assert fake_sftp.instances[0].end_calls == 1


def test_outbound_failure_is_isolated(sftp_config: SftpConfig, fake_sftp, remote_file) -> None:
    fake_sftp.listings = {
        "/": [remote_file("root.txt")],
        "/outbound": IOError("No such file"),
        "/inbound": [remote_file("in.277")],
    }

    status, body = service.list_directories(sftp_config, session_factory=fake_sftp)

    assert status == 200
    assert body["directories"]["outbound"] == ["Error: No such file"]
    assert body["directories"]["root"][0]["name"] == "root.txt"
    assert body["directories"]["inbound"][0]["name"] == "in.277"
    assert fake_sftp.instances[0].end_calls == 1


def test_secondary_listings_truncated_in_order(sftp_config: SftpConfig, fake_sftp, remote_file) -> None:
    files = [remote_file(f"f{i:02d}") for i in range(15)]
    fake_sftp.listings = {"/": files, "/outbound": files, "/inbound": files}

    _, body = service.list_directories(sftp_config, session_factory=fake_sftp)

    expected = [f"f{i:02d}" for i in range(10)]
    assert [e["name"] for e in body["directories"]["outbound"]] == expected
    assert [e["name"] for e in body["directories"]["inbound"]] == expected
    assert len(body["directories"]["root"]) == 15


def test_root_failure_is_500_and_session_closed_once(sftp_config: SftpConfig, fake_sftp) -> None:
    fake_sftp.listings = {"/": PermissionError("Permission denied")}

    status, body = service.list_directories(sftp_config, session_factory=fake_sftp)

    assert status == 500
    assert body == {"success": False, "error": {"message": "Permission denied", "code": "SFTP_LIST_FAILED"}}
    assert fake_sftp.instances[0].end_calls == 1
    assert fake_sftp.instances[0].listed == ["/"]


def test_connect_failure_still_closes_once(sftp_config: SftpConfig, fake_sftp) -> None:
    fake_sftp.connect_error = sftp.SftpError("Authentication failed.")

    status, body = service.list_directories(sftp_config, session_factory=fake_sftp)

    assert status == 500
    assert body["error"]["message"] == "Authentication failed."
    assert fake_sftp.instances[0].end_calls == 1


def test_close_failure_does_not_mask_primary_error(
    sftp_config: SftpConfig, fake_sftp, monkeypatch: pytest.MonkeyPatch
) -> None:
    fake_sftp.listings = {"/": OSError("listing broke")}

    def broken_end(self) -> None:
        self.end_calls += 1
        raise OSError("close broke")

    monkeypatch.setattr(fake_sftp, "end", broken_end)
    status, body = service.list_directories(sftp_config, session_factory=fake_sftp)

    assert status == 500
    assert body["error"]["message"] == "listing broke"


def test_real_session_rejects_missing_credentials() -> None:
    session = sftp.SftpSession(SftpConfig(host="", port=22, username="", password=""))
    with pytest.raises(sftp.SftpError):
        session.connect()


def test_real_session_connects_with_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple] = []

    def refuse(address: tuple[str, int], timeout: float | None = None) -> object:
        calls.append((address, timeout))
        raise TimeoutError("timed out")

    monkeypatch.setattr(sftp.socket, "create_connection", refuse)
    session = sftp.SftpSession(SftpConfig(host="sftp.test", port=2222, username="u", password="p", timeout_s=5.0))

    with pytest.raises(TimeoutError):
        session.connect()

    assert calls == [(("sftp.test", 2222), 5.0)]


def test_real_session_applies_timeouts_to_transport(monkeypatch: pytest.MonkeyPatch) -> None:
    sock = SimpleNamespace(closed=False)
    transports: list = []

    class FakeTransport:
        def __init__(self, sock_arg: object) -> None:
            self.sock = sock_arg
            self.connected_as: tuple[str, str] | None = None
            transports.append(self)

        def connect(self, *, username: str, password: str) -> None:
            self.connected_as = (username, password)

        def close(self) -> None:
            pass

    monkeypatch.setattr(sftp.socket, "create_connection", lambda address, timeout=None: sock)
    monkeypatch.setattr(sftp.paramiko, "Transport", FakeTransport)
    monkeypatch.setattr(sftp.paramiko.SFTPClient, "from_transport", staticmethod(lambda transport: object()))
    session = sftp.SftpSession(SftpConfig(host="sftp.test", port=22, username="u", password="p", timeout_s=7.0))

    session.connect()

    transport = transports[0]
    assert transport.sock is sock
    assert transport.banner_timeout == 7.0
    assert transport.auth_timeout == 7.0
    assert transport.connected_as == ("u", "p")


def test_route_uses_environment(client: TestClient, monkeypatch: pytest.MonkeyPatch, fake_sftp, remote_file) -> None:
    monkeypatch.setenv("OFFICE_ALLY_SFTP_HOST", "sftp.officeally.test")
    monkeypatch.setenv("OFFICE_ALLY_SFTP_PORT", "not-a-port")
    monkeypatch.setenv("OFFICE_ALLY_SFTP_USERNAME", "u")
    monkeypatch.setenv("OFFICE_ALLY_SFTP_PASSWORD", "p")
    monkeypatch.setattr(sftp, "SftpSession", fake_sftp)
    fake_sftp.listings = {"/": [remote_file("x")], "/outbound": [], "/inbound": []}

    resp = client.get("/api/test-sftp-list")

    assert resp.status_code == 200
    assert resp.json()["directories"]["root"][0]["name"] == "x"
    assert fake_sftp.instances[0].config.port == 22
    assert fake_sftp.instances[0].config.host == "sftp.officeally.test"


def test_route_missing_credentials_is_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    # Real SftpSession: fails before any network I/O.
    resp = client.get("/api/test-sftp-list")

    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert resp.json()["error"]["code"] == "SFTP_LIST_FAILED"


@pytest.mark.parametrize(
    ("mode", "expected"),
    [(stat.S_IFDIR | 0o755, "d"), (stat.S_IFLNK | 0o777, "l"), (stat.S_IFREG | 0o644, "-"), (None, "-")],
)
def test_entry_type(mode: int | None, expected: str) -> None:
    assert sftp.entry_type(mode) == expected


def test_to_file_entry_handles_missing_attributes() -> None:
    entry = sftp.to_file_entry(SimpleNamespace(filename="x"))
    assert entry == {"name": "x", "type": "-", "size": 0, "modifyTime": None}
