"""
Tests for gateway/config.py - YAML loading, defaults, env overrides, validation.
"""
import pytest

from gateway.config import load_settings
from gateway.errors import ConfigError

FULL_YAML = """
server:
  host: "127.0.0.1"
  port: 9090
agent:
  url: "http://localhost:3000"
  timeout: 10s
channels:
  - name: slack
    type: websocket
    auth: "xoxb-token"
  - name: discord
    type: http
    auth: "bot-token"
skills:
  dirs:
    - "./skills"
    - "/opt/skills"
  allowlist:
    - "summarize"
    - "search"
store:
  type: memory
  capacity: 5000
logging:
  level: debug
  format: text
"""


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """Run each test in an empty directory with no gateway env vars."""
    monkeypatch.chdir(tmp_path)
    for var in ("GATEWAY_CONFIG", "AGENT_URL", "GRAFANA_TOKEN"):
        monkeypatch.delenv(var, raising=False)


def _write(tmp_path, content: str):
    p = tmp_path / "config.yaml"
    p.write_text(content, encoding="utf-8")
    return p


class TestLoad:
    def test_valid_full(self, tmp_path):
        cfg = load_settings(_write(tmp_path, FULL_YAML))

        assert cfg.server.host == "127.0.0.1"
        assert cfg.server.port == 9090
        assert cfg.agent.url == "http://localhost:3000"
        assert cfg.agent.timeout == 10.0
        assert [c.name for c in cfg.channels] == ["slack", "discord"]
        assert cfg.channels[1].type == "http"
        assert cfg.channels[0].auth == "xoxb-token"
        assert cfg.skills.dirs == ["./skills", "/opt/skills"]
        assert cfg.skills.allowlist == ["summarize", "search"]
        assert cfg.store.capacity == 5000
        assert cfg.logging.level == "debug"
        assert cfg.logging.format == "text"

    def test_defaults(self, tmp_path):
        cfg = load_settings(_write(tmp_path, "server:\n  port: 9090\n"))

        assert cfg.server.host == "0.0.0.0"
        assert cfg.agent.timeout == 30.0
        assert cfg.agent.url == ""
        assert cfg.store.type == "memory"
        assert cfg.store.capacity == 1000
        assert cfg.logging.level == "info"
        assert cfg.logging.format == "json"
        assert cfg.webhooks.rate_limit == "120/minute"
        assert cfg.channels == []

    def test_no_file_uses_defaults(self):
        cfg = load_settings()
        assert cfg.server.port == 8080
        assert cfg.store.capacity == 1000

    def test_default_file_in_cwd_is_read(self, tmp_path):
        (tmp_path / "gateway.yaml").write_text("store:\n  capacity: 7\n")
        assert load_settings().store.capacity == 7

    def test_gateway_config_env_selects_file(self, tmp_path, monkeypatch):
        path = _write(tmp_path, "server:\n  port: 7070\n")
        monkeypatch.setenv("GATEWAY_CONFIG", str(path))
        assert load_settings().server.port == 7070

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="file not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, "server: [unclosed\n"))


class TestValidation:
    @pytest.mark.parametrize("port", [0, -1, 70000])
    def test_invalid_port(self, tmp_path, port):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, f"server:\n  port: {port}\n"))

    @pytest.mark.parametrize("capacity", [0, -5])
    def test_non_positive_capacity(self, tmp_path, capacity):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, f"store:\n  capacity: {capacity}\n"))

    def test_negative_timeout(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, "agent:\n  timeout: -1\n"))

    def test_bad_duration(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, "agent:\n  timeout: soon\n"))

    @pytest.mark.parametrize("value,seconds", [("500ms", 0.5), ("2m", 120.0), ("1h", 3600.0), (15, 15.0)])
    def test_duration_formats(self, tmp_path, value, seconds):
        cfg = load_settings(_write(tmp_path, f"agent:\n  timeout: {value}\n"))
        assert cfg.agent.timeout == seconds

    def test_channel_missing_name(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, "channels:\n  - type: dummy\n"))

    def test_channel_missing_type(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, "channels:\n  - name: x\n"))

    def test_duplicate_channel_names(self, tmp_path):
        yaml = "channels:\n  - name: x\n    type: dummy\n  - name: x\n    type: grafana\n"
        with pytest.raises(ConfigError, match="duplicate channel name"):
            load_settings(_write(tmp_path, yaml))

    def test_unsupported_store_type(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(_write(tmp_path, "store:\n  type: redis\n"))


class TestEnvironment:
    def test_expands_secret_references(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AGENT_URL", "http://agent:9000")
        monkeypatch.setenv("GRAFANA_TOKEN", "s3cret")
        yaml = (
            "agent:\n  url: ${AGENT_URL}/events\n"
            "channels:\n  - name: g\n    type: grafana\n    auth: ${GRAFANA_TOKEN}\n"
        )
        cfg = load_settings(_write(tmp_path, yaml))

        assert cfg.agent.url == "http://agent:9000/events"
        assert cfg.channels[0].auth == "s3cret"

    def test_unset_reference_expands_empty(self, tmp_path):
        cfg = load_settings(_write(tmp_path, "agent:\n  url: ${AGENT_URL}\n"))
        assert cfg.agent.url == ""

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GATEWAY_STORE__CAPACITY", "42")
        cfg = load_settings(_write(tmp_path, "store:\n  capacity: 5000\n"))
        assert cfg.store.capacity == 42

    def test_dotenv_file_is_read(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GATEWAY_SERVER__PORT", raising=False)
        (tmp_path / ".env").write_text("GATEWAY_SERVER__PORT=6060\n")
        assert load_settings().server.port == 6060
