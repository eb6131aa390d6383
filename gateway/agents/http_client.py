"""HTTP agent client - POSTs envelopes to the agent backend."""

import httpx

from gateway.errors import AgentError, parse_agent_error
from gateway.events.models import EventEnvelope

from .base import AgentResponse, BaseAgentClient


class HTTPAgentClient(BaseAgentClient):
    """Sends each envelope as JSON and relays the backend's reply."""

    def __init__(self, url: str, timeout: float = 30.0):
        self.url = url
        # 0 disables the timeout
        self.timeout = timeout or None

    @property
    def client_name(self) -> str:
        return "http"

    def _get_headers(self, envelope: EventEnvelope) -> dict:
        return {
            "Content-Type": "application/json",
            "X-Event-ID": str(envelope.event.id),
            "X-Channel": envelope.channel,
        }

    async def forward(self, envelope: EventEnvelope) -> AgentResponse:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.url,
                    headers=self._get_headers(envelope),
                    json=envelope.model_dump(mode="json"),
                )
        except httpx.TimeoutException as e:
            raise AgentError(f"agent timed out: {e!r}") from e
        except httpx.HTTPError as e:
            raise AgentError(f"agent unreachable: {e!r}") from e

        if not response.is_success:
            raise AgentError(
                f"agent returned {response.status_code}: {parse_agent_error(response.text)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = response.text or None

        if isinstance(data, dict) and "status" in data:
            return AgentResponse(
                status=str(data["status"]),
                event_id=str(data.get("event_id") or envelope.event.id),
                body=data.get("body"),
            )

        return AgentResponse(status="ok", event_id=str(envelope.event.id), body=data)
