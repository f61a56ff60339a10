import urllib.request
from pathlib import Path

import pytest

from widget_site.__main__ import main
from widget_site.config import Settings
from widget_site.errors import ServerNotReady, SiteConfigError
from widget_site.render import build_site
from widget_site.server import StaticServer, free_port, wait_on


def test_static_server_serves_site(tmp_path):
    build_site(tmp_path)
    with StaticServer(tmp_path, host="127.0.0.1", port=0) as server:
        assert server.port != 0
        assert wait_on(server.url, delay=0, timeout=5) == 200
        with urllib.request.urlopen(server.url + "/widgets.js") as resp:
            assert b"initSelect" in resp.read()


def test_static_server_needs_index(tmp_path):
    with pytest.raises(FileNotFoundError):
        StaticServer(tmp_path, port=0).start()


def test_wait_on_times_out():
    url = f"http://127.0.0.1:{free_port()}"
    with pytest.raises(ServerNotReady):
        wait_on(url, delay=0, timeout=0.5, interval=0.1)


def test_settings_from_env(monkeypatch):
    monkeypatch.delenv("WIDGET_SITE_HOST", raising=False)
    monkeypatch.setenv("WIDGET_SITE_PORT", "5123")
    monkeypatch.setenv("WIDGET_SITE_DELAY", "0")
    settings = Settings.from_env()
    assert settings.PORT == 5123
    assert settings.WAIT_DELAY == 0
    assert settings.base_url == "http://localhost:5123"


def test_settings_reject_bad_numbers(monkeypatch):
    monkeypatch.setenv("WIDGET_SITE_PORT", "five")
    with pytest.raises(SiteConfigError):
        Settings.from_env()
    monkeypatch.setenv("WIDGET_SITE_PORT", "70000")
    with pytest.raises(SiteConfigError):
        Settings.from_env()


def test_cli_build(tmp_path, capsys):
    assert main(["build", "--out", str(tmp_path)]) == 0
    assert (tmp_path / "index.html").is_file()
    assert "Site written to" in capsys.readouterr().out


def test_cli_build_with_bad_config(tmp_path, capsys):
    bad = tmp_path / "site.json"
    bad.write_text("[]")
    assert main(["build", "--out", str(tmp_path / "out"), "--config", str(bad)]) == 1
    assert "invalid site definition" in capsys.readouterr().err


def test_cli_wait_reports_timeout(capsys):
    url = f"http://127.0.0.1:{free_port()}"
    assert main(["wait", url, "--delay", "0", "--timeout", "0.3"]) == 1
    assert "not ready" in capsys.readouterr().err


def test_cli_serve_removes_its_temp_dir(monkeypatch):
    served = []

    def fake_serve(directory, host, port, verbose):
        assert (Path(directory) / "index.html").is_file()
        served.append(Path(directory))

    monkeypatch.setattr("widget_site.__main__.serve", fake_serve)
    assert main(["serve", "--port", "0", "--quiet"]) == 0
    assert len(served) == 1
    assert not served[0].exists()


def test_cli_serve_keeps_given_dir(tmp_path, monkeypatch):
    monkeypatch.setattr("widget_site.__main__.serve", lambda directory, host, port, verbose: None)
    assert main(["serve", "--dir", str(tmp_path / "site"), "--port", "0"]) == 0
    assert (tmp_path / "site" / "index.html").is_file()
