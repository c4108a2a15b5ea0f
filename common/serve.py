"""Read-only HTTP endpoint exposing the latest navigation snapshot."""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Tuple
from urllib.parse import urlparse

from common.logger import get_logger
from common.types import NavigationSnapshot

logger = get_logger("serve")

SnapshotProvider = Callable[[], NavigationSnapshot]
SummaryProvider = Callable[[], str]


def _make_handler(get_snapshot: SnapshotProvider, get_summary: SummaryProvider):
    class SnapshotRequestHandler(BaseHTTPRequestHandler):
        server_version = "DualNavSnapshot/1.0"

        def do_GET(self) -> None:  # noqa: N802 (method name from BaseHTTPRequestHandler)
            route = urlparse(self.path).path

            if route == "/state":
                payload = json.dumps(get_snapshot().to_dict()).encode("utf-8")
                self._send_response(200, "application/json", payload)
                return

            if route == "/summary":
                self._send_response(200, "text/plain; charset=utf-8", get_summary().encode("utf-8"))
                return

            self.send_error(404)

        def _send_response(self, status: int, content_type: str, payload: bytes) -> None:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(payload)))
            self.send_header("Cache-Control", "no-store, no-cache, must-revalidate")
            self.end_headers()
            if payload:
                self.wfile.write(payload)

        def log_message(self, fmt: str, *args: Any) -> None:  # noqa: A003 (fmt name)
            logger.debug(fmt % args)

    return SnapshotRequestHandler


class SnapshotServer:
    """Utility wrapper for running the snapshot HTTP server in a thread."""

    def __init__(self, get_snapshot: SnapshotProvider, get_summary: SummaryProvider, host: str, port: int) -> None:
        handler_cls = _make_handler(get_snapshot, get_summary)
        self._httpd = ThreadingHTTPServer((host, port), handler_cls)
        self._httpd.daemon_threads = True
        self._thread = threading.Thread(target=self._httpd.serve_forever, name="snapshot-http", daemon=True)

    @property
    def address(self) -> Tuple[str, int]:
        host, port = self._httpd.server_address[:2]
        return str(host), int(port)

    def start(self) -> None:
        self._thread.start()
        host, port = self.address
        logger.info(f"Serving snapshots on http://{host}:{port}/state")

    def shutdown(self) -> None:
        if self._thread.is_alive():
            self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread.is_alive():
            self._thread.join(timeout=1.0)


__all__ = ["SnapshotServer"]
