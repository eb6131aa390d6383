"""Grafana alerting webhook channel."""

import hmac
import json

from fastapi import Request

from gateway.errors import ChannelError
from gateway.events.models import Event

from .base import BaseChannel, extract_headers

MAX_BODY_SIZE = 1 << 20  # 1 MiB


class GrafanaChannel(BaseChannel):
    """Requires JSON content, an optional bearer token, and a body under 1 MiB."""

    def __init__(self, name: str, auth_token: str = ""):
        super().__init__(name)
        self._auth_token = auth_token

    @property
    def channel_type(self) -> str:
        return "grafana"

    def validate_request(self, request: Request) -> None:
        if request.method != "POST":
            raise ChannelError(f"method {request.method} not allowed, expected POST", 405)

        content_type = request.headers.get("content-type", "")
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type != "application/json":
            raise ChannelError(
                f"unsupported Content-Type {content_type!r}, expected application/json", 415
            )

        if self._auth_token:
            token = request.headers.get("authorization", "")
            expected = f"Bearer {self._auth_token}"
            if not hmac.compare_digest(token.encode(), expected.encode()):
                raise ChannelError("invalid or missing authorization token", 401)

    async def parse_request(self, request: Request) -> Event:
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > MAX_BODY_SIZE:
            raise ChannelError("request body exceeds 1MB limit", 413)

        body = bytearray()
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > MAX_BODY_SIZE:
                raise ChannelError("request body exceeds 1MB limit", 413)

        try:
            json.loads(body)
        except ValueError:
            raise ChannelError("request body is not valid JSON")

        return Event(
            channel_id=self.name,
            raw_body=bytes(body),
            headers=extract_headers(request),
        )
