"""
Agent Clients

Outbound adapters that deliver event envelopes to the agent backend.
"""

from gateway.config import AgentConfig

from .base import AgentResponse, BaseAgentClient
from .http_client import HTTPAgentClient
from .stub import StubAgentClient

__all__ = [
    "AgentResponse",
    "BaseAgentClient",
    "HTTPAgentClient",
    "StubAgentClient",
    "build_agent_client",
]


def build_agent_client(config: AgentConfig) -> BaseAgentClient:
    """HTTP client when an agent URL is configured, the logging stub otherwise."""
    if config.url:
        return HTTPAgentClient(config.url, timeout=config.timeout)
    return StubAgentClient()
