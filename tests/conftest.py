"""
Shared fixtures: a throwaway local HTTP server that records what it receives.
"""
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

RESPONSE_SUCCESS = '{"message":"Success"}'
RESPONSE_FAIL = '{"message":"Fail"}'

ROUTES = {
    "/success": (200, RESPONSE_SUCCESS),
    "/fail": (500, RESPONSE_FAIL),
    "/list": (200, "[1, 2, 3]"),
    "/number": (200, "42"),
    "/broken": (200, '{"message": '),
    "/user": (200, '{"name": "ada", "age": 36}'),
}


class _RecordingHandler(BaseHTTPRequestHandler):
    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        parts = urlsplit(self.path)
        self.server.recorded.append({
            "method": self.command,
            "path": parts.path,
            "query": parse_qs(parts.query),
            "raw_query": parts.query,
            "headers": {k.lower(): v for k, v in self.headers.items()},
            "body": body,
        })

        status, payload = ROUTES.get(parts.path, (404, '{"message":"Not Found"}'))
        data = payload.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    do_GET = _handle
    do_POST = _handle

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server():
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _RecordingHandler)
    httpd.recorded = []
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield httpd
    finally:
        httpd.shutdown()
        httpd.server_close()
        thread.join(timeout=5)


@pytest.fixture
def base_url(server):
    host, port = server.server_address[:2]
    return f"http://{host}:{port}"


@pytest.fixture
def session():
    s = requests.Session()
    yield s
    s.close()


@pytest.fixture
def closed_port_url():
    """Base URL pointing at a port nothing listens on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}"

