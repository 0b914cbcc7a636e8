"""Daemon control and HTTP client for CLI commands."""

from __future__ import annotations

import json
import os
import signal
import subprocess
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx

from deeplink_bridge.config import SOCKET_PATH, STATE_DIR

BASE_URL = "http://deeplink-bridge"
SERVER_APP = "deeplink_bridge.daemon.server:app"


def _uds_client(socket_path: Path, timeout: float) -> httpx.Client:
    return httpx.Client(
        transport=httpx.HTTPTransport(uds=str(socket_path)),
        base_url=BASE_URL,
        timeout=timeout,
    )


def _wait_until(condition: Callable[[], bool], timeout: float, interval: float = 0.1) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(interval)
    return False


def _healthy(client: httpx.Client) -> bool:
    try:
        return client.get("/health").status_code == 200
    except httpx.HTTPError:
        return False


class DaemonController:
    """Start/stop/status for the uvicorn daemon, tracked through a pid file."""

    def __init__(self, socket_path: Path = SOCKET_PATH, state_dir: Path = STATE_DIR) -> None:
        self.socket_path = socket_path
        self.pid_file = state_dir / "daemon.pid"
        self.log_file = state_dir / "daemon.log"
        state_dir.mkdir(parents=True, exist_ok=True)

    def _pid_running(self, pid: int) -> bool:
        try:
            os.kill(pid, 0)
        except OSError:
            return False
        return True

    def _running_pid(self) -> int | None:
        """PID from the pid file if that process is alive; a stale file is removed."""
        try:
            pid = int(self.pid_file.read_text().strip())
        except (FileNotFoundError, ValueError):
            return None
        if self._pid_running(pid):
            return pid
        self.pid_file.unlink(missing_ok=True)
        return None

    def health(self) -> bool:
        """Return True if the daemon socket responds to /health."""
        if not self.socket_path.exists():
            return False
        with _uds_client(self.socket_path, timeout=1.0) as client:
            return _healthy(client)

    def start(self) -> int:
        """Start the daemon; returns PID, or -1 if already running but PID unknown."""
        pid = self._running_pid()
        if pid:
            return pid
        if self.health():
            return -1

        # uvicorn refuses to bind over a stale socket file
        self.socket_path.unlink(missing_ok=True)
        args = [sys.executable, "-m", "uvicorn", SERVER_APP, "--uds", str(self.socket_path)]
        with self.log_file.open("a", encoding="utf-8") as log_handle:
            proc = subprocess.Popen(
                args, stdout=log_handle, stderr=log_handle, start_new_session=True
            )
        self.pid_file.write_text(str(proc.pid))
        return proc.pid

    def stop(self) -> bool:
        """Send SIGTERM to the daemon and wait up to two seconds for it to exit."""
        pid = self._running_pid()
        if not pid:
            return False
        os.kill(pid, signal.SIGTERM)
        if not _wait_until(lambda: not self._pid_running(pid), timeout=2.0):
            return False
        self.pid_file.unlink(missing_ok=True)
        return True

    def status(self) -> dict[str, Any]:
        """Return daemon status summary."""
        pid = self._running_pid()
        return {
            "pid": pid,
            "pid_running": pid is not None,
            "socket": str(self.socket_path),
            "socket_exists": self.socket_path.exists(),
        }


class DaemonClient:
    """HTTP client over the daemon's Unix socket, starting the daemon on demand."""

    def __init__(
        self,
        socket_path: Path = SOCKET_PATH,
        *,
        auto_start: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.auto_start = auto_start
        self.controller = DaemonController(socket_path)
        self._client = _uds_client(socket_path, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def request(
        self, method: str, path: str, json_body: dict[str, Any] | None = None
    ) -> httpx.Response:
        if self.auto_start and not _healthy(self._client):
            self.controller.start()
            if not _wait_until(lambda: _healthy(self._client), timeout=5.0):
                raise RuntimeError("Daemon did not become healthy in time")
        return self._client.request(method, path, json=json_body)


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=True)
