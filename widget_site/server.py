"""Static file server for the built site, plus a readiness check.

Usage:
    python -m widget_site serve --port 5000
    python -m widget_site wait http://localhost:5000
"""
import http.server
import socket
import threading
import time
import urllib.error
import urllib.request
from functools import partial
from pathlib import Path

from widget_site.config import SETTINGS
from widget_site.errors import ServerNotReady


class QuietHandler(http.server.SimpleHTTPRequestHandler):
    verbose = False

    def end_headers(self):
        # Always serve the current build.
        self.send_header("Cache-Control", "no-store")
        super().end_headers()

    def log_message(self, format, *args):
        if self.verbose:
            super().log_message(format, *args)


def _handler(directory, verbose):
    handler = type("Handler", (QuietHandler,), {"verbose": verbose})
    return partial(handler, directory=str(directory))


def free_port(host="127.0.0.1") -> int:
    """Find an available TCP port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((host, 0))
        return s.getsockname()[1]


class StaticServer:
    """Serve ``directory`` from a background thread."""

    def __init__(self, directory, host=SETTINGS.HOST, port=SETTINGS.PORT, verbose=False):
        self.directory = Path(directory)
        self.host = host
        self.port = port
        self.verbose = verbose
        self._httpd = None
        self._thread = None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def start(self):
        if not (self.directory / "index.html").is_file():
            raise FileNotFoundError(f"no index.html in {self.directory}")
        self._httpd = http.server.ThreadingHTTPServer(
            (self.host, self.port), _handler(self.directory, self.verbose)
        )
        self.port = self._httpd.server_address[1]
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)
        self._thread.start()
        return self

    def stop(self):
        if self._httpd is not None:
            self._httpd.shutdown()
            self._httpd.server_close()
            self._thread.join()
            self._httpd = None
            self._thread = None

    def __enter__(self):
        return self.start()

    def __exit__(self, *exc):
        self.stop()


def serve(directory, host=SETTINGS.HOST, port=SETTINGS.PORT, verbose=True):
    """Serve ``directory`` until interrupted (Ctrl+C or SIGINT)."""
    httpd = http.server.ThreadingHTTPServer((host, port), _handler(directory, verbose))
    print(f"Serving {directory} at http://{host}:{httpd.server_address[1]}", flush=True)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print("Server stopped", flush=True)
    finally:
        httpd.server_close()


def wait_on(url, delay=SETTINGS.WAIT_DELAY, timeout=SETTINGS.HTTP_TIMEOUT,
            interval=SETTINGS.POLL_INTERVAL):
    """Block until ``url`` answers with a 2xx status.

    Sleeps ``delay`` seconds first, then polls every ``interval`` seconds
    and raises ``ServerNotReady`` once ``timeout`` seconds have passed.
    """
    time.sleep(delay)
    deadline = time.monotonic() + timeout
    last_error = None
    while True:
        try:
            with urllib.request.urlopen(url, timeout=max(interval, 1.0)) as resp:
                if 200 <= resp.status < 300:
                    return resp.status
                last_error = f"HTTP {resp.status}"
        except urllib.error.HTTPError as e:
            last_error = f"HTTP {e.code}"
        except (urllib.error.URLError, OSError) as e:
            last_error = str(e)
        if time.monotonic() >= deadline:
            raise ServerNotReady(f"{url} not ready after {timeout}s ({last_error})")
        time.sleep(interval)
