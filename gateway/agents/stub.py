"""Stub agent client for development and tests."""

import logging
import uuid

from gateway.events.models import EventEnvelope

from .base import AgentResponse, BaseAgentClient

logger = logging.getLogger(__name__)


class StubAgentClient(BaseAgentClient):
    """Logs the envelope and returns a canned successful response."""

    @property
    def client_name(self) -> str:
        return "stub"

    async def forward(self, envelope: EventEnvelope) -> AgentResponse:
        logger.info(
            "forwarding event",
            extra={
                "event_id": str(envelope.event.id),
                "channel": envelope.channel,
                "skills": len(envelope.skills),
            },
        )
        return AgentResponse(status="ok", event_id=str(uuid.uuid4()))
