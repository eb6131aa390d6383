"""
Test configuration and fixtures.
Builds apps with an in-memory store and stub collaborators; no network calls.
"""
import os

import pytest
from fastapi.testclient import TestClient

from gateway.agents import StubAgentClient
from gateway.channels import DummyChannel, GrafanaChannel
from gateway.config import Settings
from gateway.events import Event, EventStatus, MemoryEventStore, Skill
from gateway.main import create_app


def make_event(channel_id: str = "ch", body: bytes = b'{"test":true}') -> Event:
    return Event(
        channel_id=channel_id,
        raw_body=body,
        headers={"X-Test": "1"},
        status=EventStatus.RECEIVED,
    )


@pytest.fixture
def event_factory():
    """Factory for fresh events with unique ids."""
    return make_event


@pytest.fixture
def store():
    return MemoryEventStore(100)


class InitOnlySettings(Settings):
    """Settings that ignore the environment, .env and YAML files."""

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, *args, **kwargs):
        return (init_settings,)


@pytest.fixture(autouse=True)
def _clean_gateway_env(monkeypatch):
    """Keep exported GATEWAY_* variables from leaking into tests."""
    for var in list(os.environ):
        if var.startswith("GATEWAY_"):
            monkeypatch.delenv(var)


@pytest.fixture
def make_settings():
    """Factory for settings built from keyword arguments and defaults only."""
    return InitOnlySettings


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def skills():
    return [Skill(name="echo", description="echoes input", path="/skills/echo")]


@pytest.fixture
def channels():
    return {
        "dummy": DummyChannel("dummy"),
        "grafana": GrafanaChannel("grafana", "secret"),
    }


@pytest.fixture
def make_app(settings, store, channels, skills):
    """Build an app, overriding any collaborator by keyword."""

    def _make(**overrides):
        kwargs = {
            "store": store,
            "channels": channels,
            "agent": StubAgentClient(),
            "skills": skills,
        }
        kwargs.update(overrides)
        app_settings = kwargs.pop("settings", settings)
        return create_app(app_settings, **kwargs)

    return _make


@pytest.fixture
def client(make_app):
    with TestClient(make_app()) as c:
        yield c
