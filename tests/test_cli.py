"""
Tests for gateway/cli.py - subcommands and error exit codes.
"""
import logging

import httpx
import pytest
import respx

from gateway import cli

CONFIG = """
server:
  host: 0.0.0.0
  port: 9191
channels:
  - name: grafana-alerts
    type: grafana
  - name: generic
    type: dummy
"""


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GATEWAY_CONFIG", raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "gateway.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return str(path)


class TestListChannels:
    def test_prints_table(self, config_file, capsys):
        assert cli.main(["--config", config_file, "list-channels"]) == 0
        out = capsys.readouterr().out
        assert "NAME" in out
        assert "grafana-alerts" in out
        assert "dummy" in out

    def test_no_channels(self, capsys):
        assert cli.main(["list-channels"]) == 0
        assert "No channels configured." in capsys.readouterr().out

    def test_missing_config_file(self, tmp_path, capsys):
        code = cli.main(["--config", str(tmp_path / "missing.yaml"), "list-channels"])
        assert code == 1
        assert capsys.readouterr().err.startswith("error:")


class TestListSkills:
    def test_prints_table(self, tmp_path, capsys):
        skill_dir = tmp_path / "skills" / "summarize"
        skill_dir.mkdir(parents=True)
        (skill_dir / "SKILL.md").write_text("---\nname: summarize\ndescription: Summarizes\n---\n")
        config = tmp_path / "skills.yaml"
        config.write_text(f"skills:\n  dirs:\n    - {tmp_path / 'skills'}\n")

        assert cli.main(["--config", str(config), "list-skills"]) == 0
        out = capsys.readouterr().out
        assert "summarize" in out
        assert "Summarizes" in out

    def test_no_skills(self, capsys):
        assert cli.main(["list-skills"]) == 0
        assert "No skills registered." in capsys.readouterr().out


class TestListEvents:
    @respx.mock
    def test_prints_events(self, config_file, capsys):
        route = respx.get("http://127.0.0.1:9191/admin/events").mock(
            return_value=httpx.Response(
                200,
                json={
                    "events": [
                        {
                            "id": "6f1c1d2e-0000-4000-8000-000000000001",
                            "channel_id": "grafana-alerts",
                            "status": "forwarded",
                            "timestamp": "2026-01-01T00:00:00Z",
                        }
                    ],
                    "count": 1,
                    "total": 1,
                },
            )
        )

        assert cli.main(["--config", config_file, "list-events", "--limit", "5"]) == 0

        assert route.calls.last.request.url.params["limit"] == "5"
        out = capsys.readouterr().out
        assert "grafana-alerts" in out
        assert "forwarded" in out

    @respx.mock
    def test_no_events(self, capsys):
        respx.get("http://gw.test/admin/events").mock(
            return_value=httpx.Response(200, json={"events": [], "count": 0, "total": 0})
        )
        assert cli.main(["list-events", "--url", "http://gw.test/"]) == 0
        assert "No events found." in capsys.readouterr().out

    @respx.mock
    def test_sends_api_key(self, tmp_path, capsys):
        config = tmp_path / "keyed.yaml"
        config.write_text("server:\n  api_key: k1\n")
        route = respx.get("http://gw.test/admin/events").mock(
            return_value=httpx.Response(200, json={"events": []})
        )

        cli.main(["--config", str(config), "list-events", "--url", "http://gw.test"])

        assert route.calls.last.request.headers["x-api-key"] == "k1"

    @respx.mock
    def test_error_status(self, capsys):
        respx.get("http://gw.test/admin/events").mock(
            return_value=httpx.Response(401, json={"error": "invalid or missing API key"})
        )
        assert cli.main(["list-events", "--url", "http://gw.test"]) == 1
        assert "401" in capsys.readouterr().err

    @respx.mock
    def test_unreachable(self, capsys):
        respx.get("http://gw.test/admin/events").mock(side_effect=httpx.ConnectError("refused"))
        assert cli.main(["list-events", "--url", "http://gw.test"]) == 1
        assert "refused" in capsys.readouterr().err


class TestRun:
    def test_starts_uvicorn(self, config_file, monkeypatch):
        calls = {}

        def fake_run(app, **kwargs):
            calls["app"] = app
            calls.update(kwargs)

        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        monkeypatch.setattr(cli.uvicorn, "run", fake_run)
        try:
            assert cli.main(["--config", config_file, "run"]) == 0
        finally:
            root.handlers[:] = handlers
            root.setLevel(level)

        assert calls["port"] == 9191
        assert calls["host"] == "0.0.0.0"
        assert calls["log_config"] is None
        assert set(calls["app"].state.channels) == {"grafana-alerts", "generic"}

    def test_requires_subcommand(self):
        with pytest.raises(SystemExit):
            cli.main([])
