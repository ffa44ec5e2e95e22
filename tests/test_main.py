import json
import socket
from pathlib import Path

import pytest

from apps.server import main as entry


def _write_config(tmp_path: Path, device: dict, **overrides) -> Path:
    device_path = tmp_path / "device.json"
    device_path.write_text(json.dumps(device), encoding="utf-8")
    cfg = {
        "listen_host": "127.0.0.1",
        "port": 0,
        "fixture_path": str(device_path),
        "log_file": str(tmp_path / "logs" / "server.log"),
        "query_timeout_seconds": 1.0,
    }
    cfg.update(overrides)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(cfg), encoding="utf-8")
    return path


def test_version_failure_aborts_startup(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    served = []
    monkeypatch.setattr(entry.StatusServer, "serve_forever", lambda self, listener: served.append(listener))
    path = _write_config(tmp_path, {"failures": {"get_system_version": 0x123}})

    assert entry.main(["--config", str(path)]) == 1
    assert served == []


def test_version_timeout_aborts_startup(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        {"delays": {"get_system_version": 0.5}},
        query_timeout_seconds=0.05,
    )
    assert entry.main(["--config", str(path)]) == 1


def test_starts_and_serves(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    replies = []

    def serve_once(self, listener: socket.socket) -> None:
        with socket.create_connection(listener.getsockname(), timeout=2.0) as client:
            self.serve_one(listener)
            replies.append(client.makefile("rb").readline())

    monkeypatch.setattr(entry.StatusServer, "serve_forever", serve_once)
    monkeypatch.setattr(entry, "_install_signal_handlers", lambda listener: None)
    path = _write_config(tmp_path, {"system_version": "7.9.9", "gpu_clock_hz": 0})

    assert entry.main(["--config", str(path)]) == 0
    assert replies == [b'{"game_title_id": null, "game_name": "sleep"}\n']


def test_bind_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
        taken.bind(("127.0.0.1", 0))
        taken.listen(1)
        port = taken.getsockname()[1]
        path = _write_config(tmp_path, {})
        monkeypatch.setattr(entry, "_install_signal_handlers", lambda listener: None)

        assert entry.main(["--config", str(path), "--port", str(port)]) == 1


def test_signal_closes_listener(monkeypatch: pytest.MonkeyPatch) -> None:
    handlers = {}
    monkeypatch.setattr(entry.signal, "signal", lambda sig, handler: handlers.__setitem__(sig, handler))

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        entry._install_signal_handlers(listener)
        handlers[entry.signal.SIGINT](entry.signal.SIGINT, None)
        assert listener.fileno() == -1


@pytest.mark.parametrize("port", ["70000", "-1"])
def test_out_of_range_port_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, port: str) -> None:
    served = []
    monkeypatch.setattr(entry.StatusServer, "serve_forever", lambda self, listener: served.append(listener))
    monkeypatch.setattr(entry, "_install_signal_handlers", lambda listener: None)
    path = _write_config(tmp_path, {})

    assert entry.main(["--config", str(path), "--port", port]) == 1
    assert served == []
