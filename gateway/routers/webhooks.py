"""Webhook ingestion endpoint - validate, store, forward, relay."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter

from gateway.agents import BaseAgentClient
from gateway.channels import BaseChannel
from gateway.dependencies import get_agent, get_channels, get_skills, get_store
from gateway.errors import AgentError, ChannelError, EventNotFoundError, StoreError
from gateway.events import BaseEventStore, EventEnvelope, EventStatus, Skill

logger = logging.getLogger(__name__)


def _record_outcome(store: BaseEventStore, event_id: UUID, status: EventStatus) -> None:
    """Best-effort status update; the event may already have been evicted."""
    try:
        store.update_status(event_id, status)
    except EventNotFoundError:
        logger.warning(
            "event evicted before status update",
            extra={"event_id": str(event_id), "status": status.value},
        )


async def ingest_webhook(
    channel: str,
    request: Request,
    channels: dict[str, BaseChannel] = Depends(get_channels),
    store: BaseEventStore = Depends(get_store),
    agent: BaseAgentClient = Depends(get_agent),
    skills: list[Skill] = Depends(get_skills),
):
    """Receive a webhook on a channel and forward it to the agent."""
    ch = channels.get(channel)
    if ch is None:
        raise HTTPException(404, f"unknown channel: {channel}")

    try:
        ch.validate_request(request)
        event = await ch.parse_request(request)
    except ChannelError as e:
        logger.info("webhook rejected: %s", e, extra={"channel": channel})
        raise HTTPException(e.status_code, str(e))

    try:
        store.save(event)
    except StoreError as e:
        logger.error("failed to save event: %s", e, extra={"event_id": str(event.id)})
        raise HTTPException(500, "failed to store event")

    envelope = EventEnvelope.wrap(event, skills)
    try:
        result = await agent.forward(envelope)
    except AgentError as e:
        _record_outcome(store, event.id, EventStatus.FAILED)
        logger.error(
            "agent forward failed: %s", e,
            extra={"event_id": str(event.id), "channel": channel},
        )
        raise HTTPException(502, "agent forwarding failed")

    _record_outcome(store, event.id, EventStatus.FORWARDED)
    return JSONResponse(result.model_dump(mode="json"))


def build_router(limiter: Limiter | None = None, rate_limit: str = "") -> APIRouter:
    """Webhook router; the ingest route is rate limited per client address."""
    router = APIRouter()
    endpoint = ingest_webhook
    if limiter is not None and rate_limit:
        endpoint = limiter.limit(rate_limit)(ingest_webhook)
    router.add_api_route("/{channel}", endpoint, methods=["POST"])
    return router
