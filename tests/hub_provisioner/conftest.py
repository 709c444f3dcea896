"""
Shared fixtures: a local HTTP server and a stand-in git executable.
"""

import http.server
import stat
import textwrap
import threading

import pytest

PAYLOAD = b"\x00\x01speaker-embeddings\xff" * 64


class _Handler(http.server.BaseHTTPRequestHandler):
    routes = {}

    def do_GET(self):
        route = self.routes.get(self.path)
        if route is None:
            self.send_response(404)
            self.send_header("Content-Length", "9")
            self.end_headers()
            self.wfile.write(b"not found")
            return

        status, headers, body = route
        self.send_response(status)
        for key, value in headers.items():
            self.send_header(key, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def payload():
    return PAYLOAD


@pytest.fixture
def http_server():
    """
    Serve a fixed set of routes on localhost and yield the base URL.
    """
    routes = {
        "/payload.bin": (200, {}, PAYLOAD),
        "/redirect": (302, {"Location": "/payload.bin"}, b""),
        "/moved": (301, {"Location": "/redirect"}, b""),
        "/to-missing": (302, {"Location": "/missing"}, b""),
        "/loop": (302, {"Location": "/loop"}, b""),
        "/no-location": (302, {}, b""),
        "/bad-location": (302, {"Location": "http://[bad-host/x"}, b""),
        "/server-error": (500, {}, b"boom"),
    }
    handler = type("Handler", (_Handler,), {"routes": routes})
    server = http.server.ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def fake_git(tmp_path):
    """
    A git replacement that understands ``clone --depth 1 <url> <dest>``.

    URLs containing "unreachable" fail like git does for a missing repository,
    and so does cloning into a non-empty directory.
    """
    script = tmp_path / "bin" / "git"
    script.parent.mkdir()
    script.write_text(
        textwrap.dedent(
            """\
            #!/bin/sh
            url="$4"
            dest="$5"
            case "$url" in
              *unreachable*)
                echo "fatal: repository '$url' not found" >&2
                exit 128
                ;;
            esac
            if [ -d "$dest" ] && [ -n "$(ls -A "$dest")" ]; then
              echo "fatal: destination path '$dest' already exists and is not an empty directory." >&2
              exit 128
            fi
            echo "Cloning into '$dest'..." >&2
            mkdir -p "$dest"
            echo "$url" > "$dest/README.md"
            echo "depth=$3" > "$dest/.shallow"
            """
        )
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script)
