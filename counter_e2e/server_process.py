"""Spawn the static file server as a child process and wait until it serves."""

import logging
import os
import socket
import subprocess
import sys
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import requests

from counter_e2e.config import DEFAULT_HOST

logger = logging.getLogger(__name__)

# Lines kept in error messages when the server fails to come up.
OUTPUT_TAIL_LINES = 50

# uvicorn logs this only after its listening socket is bound.
BOUND_MARKER = "Uvicorn running on"


class ServerStartupError(RuntimeError):
    """The static server exited or never became reachable."""


def find_free_port() -> int:
    """Find a free port by binding to port 0 and letting the OS choose."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        s.listen(1)
        port = s.getsockname()[1]
    return port


def wait_for_server(
    url: str, max_attempts: int = 15, is_alive: Optional[Callable[[], bool]] = None
) -> bool:
    """Wait for the server to be ready using exponential backoff.

    Gives up early once ``is_alive`` reports the server process has gone.
    """
    delay_ms = 1
    for _attempt in range(max_attempts):
        if is_alive is not None and not is_alive():
            return False
        try:
            response = requests.get(url, timeout=5)
            if response.status_code == 200:
                return True
        except requests.exceptions.RequestException:
            pass
        time.sleep(delay_ms / 1000)
        delay_ms = min(delay_ms * 2, 1000)  # 1ms, 2ms, 4ms, ..., capped at 1s
    return False


def serve_command(port: int, host: str = DEFAULT_HOST, root: Optional[Path] = None) -> tuple[str, ...]:
    """Command line that runs `counter_e2e.main serve` with the current interpreter.

    ``root`` is resolved against the caller's working directory, since the child runs elsewhere.
    """
    cmd: tuple[str, ...] = (
        sys.executable,
        *("-m", "counter_e2e.main", "serve"),
        f"--port={port}",
        "--no-browser",
    )
    if host != DEFAULT_HOST:
        cmd += (f"--host={host}",)
    if root is not None:
        cmd += (f"--root={root.resolve()}",)
    return cmd


@dataclass
class ServerProcess:
    """A running static server and the output it has produced so far."""

    process: subprocess.Popen
    url: str
    output_lines: list[str] = field(default_factory=list)
    first_line: threading.Event = field(default_factory=threading.Event)
    # Set once uvicorn reports its socket is bound, or on EOF.
    bound: threading.Event = field(default_factory=threading.Event)
    monitor_thread: Optional[threading.Thread] = None

    def monitor_output(self) -> None:
        """Drain server output, logging each line; signals `first_line` and `bound` as they happen."""
        try:
            for line in iter(self.process.stdout.readline, ""):
                if line:
                    self.output_lines.append(line.strip())
                    logger.info(f"[SERVER] {line.strip()}")
                    self.first_line.set()
                    if BOUND_MARKER in line:
                        self.bound.set()
        except Exception as e:
            logger.error(f"[SERVER MONITOR ERROR] {e}")
        finally:
            self.first_line.set()
            self.bound.set()

    def has_bound(self) -> bool:
        return any(BOUND_MARKER in line for line in self.output_lines)

    def output_tail(self) -> str:
        return "\n".join(self.output_lines[-OUTPUT_TAIL_LINES:])

    def is_running(self) -> bool:
        return self.process.poll() is None

    def stop(self) -> None:
        """Kill the server and wait for it; safe to call more than once."""
        if self.is_running():
            logger.info("[SERVER] Shutting down server...")
            self.process.kill()
        self.process.wait()
        if self.monitor_thread is not None:
            self.monitor_thread.join(timeout=3)
        self.process.stdout.close()

    def fail(self, reason: str) -> ServerStartupError:
        """Stop the server and build the error describing why it did not come up."""
        self.stop()
        return ServerStartupError(
            f"{reason} (exit code {self.process.returncode}).\n"
            "Server output:\n" + self.output_tail()
        )


def start_static_server(
    port: int,
    root: Optional[Path] = None,
    host: str = DEFAULT_HOST,
    startup_timeout: float = 15.0,
    command: Optional[Sequence[str]] = None,
) -> ServerProcess:
    """Start the static server and block until it is serving ``http://host:port``.

    The first line on the server's stdout is the readiness signal. That line is printed
    before the socket is bound, so startup then waits for uvicorn to report the bind and
    confirms with an HTTP probe; a server that died on a busy port is never mistaken for
    whatever else is listening there. Raises ServerStartupError (after killing the process)
    if any step fails. ``command`` replaces the `serve` command line.
    """
    server_url = f"http://{host}:{port}"
    cmd = tuple(command) if command is not None else serve_command(port, host=host, root=root)
    logger.info(f"Starting static server: {' '.join(cmd)}")

    process = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,  # One stream to monitor.
        cwd=Path(__file__).parent.parent,
        env={**os.environ, "PYTHONUNBUFFERED": "1"},
        text=True,
        bufsize=1,
    )
    server = ServerProcess(process=process, url=server_url)
    server.monitor_thread = threading.Thread(target=server.monitor_output, daemon=True)
    server.monitor_thread.start()

    if not server.first_line.wait(timeout=startup_timeout) or not server.output_lines:
        raise server.fail(f"Server produced no readiness line within {startup_timeout}s")

    if not server.bound.wait(timeout=startup_timeout) or not server.has_bound():
        raise server.fail(f"Server exited or never bound {server_url}")

    if not wait_for_server(server_url, is_alive=server.is_running):
        if not server.is_running():
            raise server.fail(f"Server exited while waiting for {server_url}")
        raise server.fail(f"Server failed to start within timeout at {server_url}")

    logger.info(f"Static server ready at {server_url}")
    return server
