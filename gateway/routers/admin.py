"""Admin endpoints - read-only views of events, channels and skills."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from gateway.channels import BaseChannel
from gateway.dependencies import get_channels, get_skills, get_store
from gateway.errors import EventNotFoundError
from gateway.events import BaseEventStore, Event, Skill

router = APIRouter()

DEFAULT_EVENTS_LIMIT = 50
MAX_EVENTS_LIMIT = 1000


class EventsResponse(BaseModel):
    events: list[Event]
    count: int
    total: int


class ChannelInfo(BaseModel):
    name: str
    type: str


class ChannelsResponse(BaseModel):
    channels: list[str]
    details: list[ChannelInfo]
    count: int


class SkillsResponse(BaseModel):
    skills: list[Skill]
    count: int


class StatsResponse(BaseModel):
    count: int
    capacity: int


@router.get("/events", response_model=EventsResponse)
async def list_events(
    # Out-of-range limits are rejected with 422 here rather than clamped by the store
    limit: int = Query(DEFAULT_EVENTS_LIMIT, ge=1, le=MAX_EVENTS_LIMIT),
    offset: int = Query(0, ge=0),
    store: BaseEventStore = Depends(get_store),
):
    """Recent events, newest first."""
    events = store.list(limit, offset)
    return EventsResponse(events=events, count=len(events), total=store.count())


@router.get("/events/{event_id}", response_model=Event)
async def get_event(event_id: UUID, store: BaseEventStore = Depends(get_store)):
    try:
        return store.get(event_id)
    except EventNotFoundError:
        raise HTTPException(404, f"event not found: {event_id}")


@router.get("/channels", response_model=ChannelsResponse)
async def list_channels(channels: dict[str, BaseChannel] = Depends(get_channels)):
    names = sorted(channels)
    return ChannelsResponse(
        channels=names,
        details=[ChannelInfo(name=n, type=channels[n].channel_type) for n in names],
        count=len(names),
    )


@router.get("/skills", response_model=SkillsResponse)
async def list_skills(skills: list[Skill] = Depends(get_skills)):
    return SkillsResponse(skills=skills, count=len(skills))


@router.get("/stats", response_model=StatsResponse)
async def store_stats(store: BaseEventStore = Depends(get_store)):
    return StatsResponse(count=store.count(), capacity=store.capacity)
