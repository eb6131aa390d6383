"""FastAPI dependencies for collaborators held on ``app.state``."""

import hmac

from fastapi import HTTPException, Request

from gateway.agents import BaseAgentClient
from gateway.channels import BaseChannel
from gateway.events import BaseEventStore, Skill


def get_store(request: Request) -> BaseEventStore:
    return request.app.state.store


def get_channels(request: Request) -> dict[str, BaseChannel]:
    return request.app.state.channels


def get_agent(request: Request) -> BaseAgentClient:
    return request.app.state.agent


def get_skills(request: Request) -> list[Skill]:
    return request.app.state.skills


async def verify_api_key(request: Request) -> None:
    """Require X-API-Key when an API key is configured."""
    expected = request.app.state.settings.server.api_key
    if not expected:
        return
    provided = request.headers.get("x-api-key", "")
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        raise HTTPException(401, "invalid or missing API key")
