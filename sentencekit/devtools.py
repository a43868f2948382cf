"""Drive a Chromium browser through its remote debugging protocol."""

from __future__ import annotations

import itertools
import json
import os
import shutil
import subprocess
import threading
import time
from collections.abc import Iterable, Mapping
from concurrent.futures import Future, TimeoutError as FutureTimeout
from pathlib import Path
from typing import Any, Optional, Union

import websocket

from sentencekit.network import HttpError, JsonParseError, http_request, parse_json

DEFAULT_PORT = 9222
CACHE_DIR_NAME = "devtoolscache"
REQUEST_TIMEOUT = 30.0
CONNECT_ATTEMPTS = 20
CONNECT_DELAY = 0.25


def _default_candidates() -> list[str]:
    candidates = [
        found for found in (shutil.which(name) for name in ("chrome", "msedge", "google-chrome", "chromium"))
        if found
    ]
    for variable in ("ProgramFiles(x86)", "ProgramFiles", "LOCALAPPDATA"):
        folder = os.environ.get(variable)
        if folder:
            candidates.append(os.path.join(folder, "Google", "Chrome", "Application", "chrome.exe"))
    return candidates


def find_chrome(candidates: Optional[Iterable[Union[str, Path]]] = None) -> Optional[str]:
    """Return the last existing path among ``candidates``, or ``None``."""
    if candidates is None:
        candidates = _default_candidates()
    found = None
    for candidate in candidates:
        if Path(candidate).exists():
            found = str(candidate)
    return found


def chrome_command(chrome_path: str, headless: bool, cache_dir: Union[str, Path],
                   port: int = DEFAULT_PORT) -> list[str]:
    """Build the command line that starts the browser for remote debugging."""
    command = [
        str(chrome_path),
        "--proxy-server=direct://",
        "--disable-extensions",
        "--disable-gpu",
        "--no-first-run",
        f"--user-data-dir={cache_dir}",
        f"--remote-debugging-port={port}",
    ]
    command += ["--window-size=1920,1080", "--headless"] if headless else ["--window-size=850,900"]
    return command


class DevToolsSession:
    """A browser process and the debugging websocket of its first page."""

    def __init__(self, chrome_path: str, headless: bool = True, port: int = DEFAULT_PORT):
        self.chrome_path = chrome_path
        self.headless = headless
        self.port = port
        self.cache_dir = Path.cwd() / CACHE_DIR_NAME
        self.status = "Stopped"
        self.process: Optional[subprocess.Popen] = None
        self._socket: Optional[websocket.WebSocket] = None
        self._lock = threading.Lock()
        self._send_lock = threading.Lock()
        self._pending: dict[int, Future] = {}
        self._ids = itertools.count(1)

    def _page_socket_url(self) -> Optional[str]:
        for attempt in range(CONNECT_ATTEMPTS):
            try:
                response = http_request("127.0.0.1", "POST", "/json/list", port=self.port,
                                        secure=False, agent_name="Mozilla/5.0")
                pages = parse_json(response.text)
            except (HttpError, JsonParseError):
                time.sleep(CONNECT_DELAY)
                continue
            if isinstance(pages, list):
                for page in pages:
                    if (isinstance(page, dict) and page.get("type") == "page"
                            and isinstance(page.get("webSocketDebuggerUrl"), str)):
                        return page["webSocketDebuggerUrl"]
            return None
        return None

    def start(self) -> None:
        """Start the browser and connect to it.

        Raises ``OSError`` if the browser cannot be started and
        ``ConnectionError`` if no page can be reached.
        """
        if self.process is not None:
            self.close()
        command = chrome_command(self.chrome_path, self.headless, self.cache_dir, self.port)
        try:
            self.process = subprocess.Popen(command)
        except OSError:
            self.status = "StartupFailed"
            raise
        url = self._page_socket_url()
        if url is None:
            self.status = "ConnectingFailed"
            raise ConnectionError("could not find a page to debug")
        try:
            self._socket = websocket.create_connection(url)
        except (OSError, websocket.WebSocketException) as exc:
            self.status = "ConnectingFailed"
            raise ConnectionError(f"could not connect to {url}: {exc}") from exc
        self.status = "Connected"
        threading.Thread(target=self._receive, args=(self._socket,), daemon=True).start()

    def _receive(self, socket: websocket.WebSocket) -> None:
        while True:
            try:
                message = socket.recv()
            except (OSError, websocket.WebSocketException):
                break
            if not isinstance(message, str):
                if not message:
                    break
                continue
            try:
                result = parse_json(message)
            except JsonParseError:
                continue
            if not isinstance(result, dict) or not isinstance(result.get("id"), float):
                continue
            with self._lock:
                future = self._pending.pop(int(result["id"]), None)
            if future is not None:
                future.set_result(result)
        self._fail_pending()
        if self._socket is socket:
            self.status = "Unconnected"

    def _fail_pending(self) -> None:
        with self._lock:
            pending, self._pending = self._pending, {}
        for future in pending.values():
            if not future.done():
                future.set_exception(ConnectionError("closed"))

    def close(self) -> None:
        """Disconnect, stop the browser and remove its profile directory."""
        socket, self._socket = self._socket, None
        if socket is not None:
            try:
                socket.close(timeout=1)
            except (OSError, websocket.WebSocketException):
                pass
        self._fail_pending()
        if self.process is not None:
            self.process.terminate()
            try:
                self.process.wait(timeout=1)
            except subprocess.TimeoutExpired:
                pass
            for _ in range(19):
                try:
                    shutil.rmtree(self.cache_dir)
                    break
                except FileNotFoundError:
                    break
                except OSError:
                    time.sleep(0.1)
        self.process = None
        self.status = "Stopped"

    def connected(self) -> bool:
        socket = self._socket
        return socket is not None and bool(socket.connected)

    def send_request(self, method: str, params: Union[str, Mapping[str, Any]] = "{}") -> dict:
        """Call a protocol method and return its ``result``; ``{}`` on failure."""
        with self._lock:
            request_id = next(self._ids)
        socket = self._socket
        if socket is None or not socket.connected:
            return {}
        if not isinstance(params, str):
            params = json.dumps(params)
        future: Future = Future()
        with self._lock:
            self._pending[request_id] = future
        message = f'{{"id":{request_id},"method":"{method}","params":{params}}}'
        try:
            with self._send_lock:
                socket.send(message)
            response = future.result(timeout=REQUEST_TIMEOUT)
        except (OSError, websocket.WebSocketException, FutureTimeout, ConnectionError):
            with self._lock:
                self._pending.pop(request_id, None)
            return {}
        result = response.get("result")
        return result if isinstance(result, dict) and result else {}