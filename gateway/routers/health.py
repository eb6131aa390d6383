from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from gateway import __version__
from gateway.agents import BaseAgentClient, HTTPAgentClient
from gateway.dependencies import get_agent


router = APIRouter(tags=["health"])

_startup_time = datetime.now(timezone.utc)


class EndpointInfo(BaseModel):
    path: str
    description: str


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    endpoints: list[EndpointInfo]


class AgentStatus(BaseModel):
    configured: bool
    client: str
    url: str | None = None
    last_check: str | None = None


ENDPOINTS = [
    EndpointInfo(path="/health", description="Gateway status and API directory"),
    EndpointInfo(path="/health/agent", description="Agent backend configuration"),
    EndpointInfo(path="/webhooks/{channel}", description="Webhook ingestion and forwarding"),
    EndpointInfo(path="/admin/events", description="Recent events, newest first"),
    EndpointInfo(path="/admin/channels", description="Configured channels"),
    EndpointInfo(path="/admin/skills", description="Registered skills"),
    EndpointInfo(path="/admin/stats", description="Event store size and capacity"),
]


@router.get("/health", response_model=HealthResponse)
async def health_check():
    uptime = (datetime.now(timezone.utc) - _startup_time).total_seconds()

    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=round(uptime, 2),
        endpoints=ENDPOINTS,
    )


@router.get("/health/agent", response_model=AgentStatus)
async def agent_status(agent: BaseAgentClient = Depends(get_agent)):
    if isinstance(agent, HTTPAgentClient):
        return AgentStatus(
            configured=True,
            client=agent.client_name,
            url=agent.url,
            last_check=datetime.now(timezone.utc).isoformat(),
        )
    return AgentStatus(configured=False, client=agent.client_name)
