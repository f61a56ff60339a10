import os
import signal
import subprocess
import sys

import pytest

from widget_site.config import Settings
from widget_site.render import build_site
from widget_site.server import free_port, wait_on


@pytest.fixture(scope="session")
def settings():
    return Settings.from_env()


@pytest.fixture(scope="session")
def site_dir(tmp_path_factory):
    return build_site(tmp_path_factory.mktemp("static-site1"))


@pytest.fixture(scope="session")
def base_url(settings, site_dir):
    # Same shape as spawning sirv and blocking on wait-on before any test.
    port = settings.PORT if "WIDGET_SITE_PORT" in os.environ else free_port()
    url = f"http://{settings.HOST}:{port}"
    server = subprocess.Popen(
        [sys.executable, "-m", "widget_site", "serve",
         "--dir", str(site_dir), "--no-build", "--quiet",
         "--host", settings.HOST, "--port", str(port)],
    )
    try:
        wait_on(url, delay=settings.WAIT_DELAY, timeout=settings.HTTP_TIMEOUT)
        yield url
    finally:
        server.send_signal(signal.SIGINT)
        try:
            server.wait(timeout=5)
        except subprocess.TimeoutExpired:
            server.kill()
            server.wait()
