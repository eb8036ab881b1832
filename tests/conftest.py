"""Shared fixtures: a local HTTP server and httpx mock transports."""

from __future__ import annotations

import re
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Dict, List

import httpx
import pytest

from httpreq import Config

RESPONSE_DATA = b'{"success": true,"data": "done!"}'
DOWNLOAD_DATA = b"%PDF-1.4 local test document"


class _Handler(BaseHTTPRequestHandler):
    def _handle(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        self.server.requests.append(
            {"method": self.command, "path": self.path, "headers": self.headers, "body": body}
        )

        if self.path == "/redirect":
            self.send_response(307)
            self.send_header("Location", "/echo")
            self.send_header("Content-Length", "0")
            self.end_headers()
            return

        if self.path == "/echo":
            payload = body
            self.send_response(200)
            self.send_header("Content-Type", "application/octet-stream")
            self.send_header("X-Method", self.command)
        elif self.path == "/download":
            payload = DOWNLOAD_DATA
            self.send_response(200)
            self.send_header("Content-Type", "application/pdf")
            self.send_header("Content-Disposition", 'attachment; filename="report.pdf"')
        else:
            payload = RESPONSE_DATA
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Test-Header", "test response header")

        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = do_POST = do_PUT = do_DELETE = _handle

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        return


@pytest.fixture
def local_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server.requests = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    server.base_url = f"http://127.0.0.1:{server.server_address[1]}"
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def local_config() -> Config:
    """Config that ignores proxy environment variables."""
    return Config(trust_env=False, timeout=10)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response] | None = None):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if handler is not None:
                return handler(request)
            return httpx.Response(200, content=b"ok")

        super().__init__(record)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


class OneShotStream(httpx.SyncByteStream):
    """Response stream that fails if it is iterated more than once."""

    def __init__(self, data: bytes):
        self.data = data
        self.reads = 0
        self.closes = 0

    def __iter__(self):
        self.reads += 1
        if self.reads > 1:
            raise RuntimeError("stream read twice")
        yield self.data

    def close(self) -> None:
        self.closes += 1


def _parse_multipart(body: bytes, content_type: str) -> Dict[str, bytes]:
    boundary = content_type.split("boundary=", 1)[1].encode("ascii")
    parts = {}
    for chunk in body.split(b"--" + boundary)[1:]:
        if chunk.startswith(b"--"):
            break
        chunk = chunk[2:-2]  # CRLF after the delimiter and before the next one
        head, _, content = chunk.partition(b"\r\n\r\n")
        name = re.search(rb'name="([^"]*)"', head).group(1).decode()
        parts[name] = content
    return parts


@pytest.fixture
def parse_multipart():
    return _parse_multipart


@pytest.fixture
def make_transport():
    """Factory for a RecordingTransport with a custom handler."""
    return RecordingTransport


@pytest.fixture
def one_shot_stream():
    """Factory for a response stream that may only be read once."""
    return OneShotStream
