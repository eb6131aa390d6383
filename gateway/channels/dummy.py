"""Pass-through channel that accepts any POST body."""

from fastapi import Request

from gateway.errors import ChannelError
from gateway.events.models import Event

from .base import BaseChannel, extract_headers


class DummyChannel(BaseChannel):
    @property
    def channel_type(self) -> str:
        return "dummy"

    def validate_request(self, request: Request) -> None:
        if request.method != "POST":
            raise ChannelError(f"method {request.method} not allowed, expected POST", 405)

    async def parse_request(self, request: Request) -> Event:
        body = await request.body()
        return Event(
            channel_id=self.name,
            raw_body=body,
            headers=extract_headers(request),
        )
