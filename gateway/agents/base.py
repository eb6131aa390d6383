"""Base interface for agent backend clients."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from gateway.events.models import EventEnvelope


class AgentResponse(BaseModel):
    """Result of forwarding an envelope to the agent backend."""
    status: str
    event_id: str
    body: Any = None


class BaseAgentClient(ABC):
    """Abstract base class for agent clients."""

    @property
    @abstractmethod
    def client_name(self) -> str:
        """Return client identifier."""
        pass

    @abstractmethod
    async def forward(self, envelope: EventEnvelope) -> AgentResponse:
        """Deliver an envelope, raising AgentError on failure."""
        pass
