"""Webhook Gateway - FastAPI application factory.

Serve with ``gateway run`` or ``uvicorn --factory gateway.main:create_app``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException

from gateway import __version__
from gateway.agents import BaseAgentClient, build_agent_client
from gateway.channels import BaseChannel, build_channels
from gateway.config import Settings, load_settings
from gateway.dependencies import verify_api_key
from gateway.events import BaseEventStore, MemoryEventStore, Skill
from gateway.middleware import AccessLogMiddleware, RequestIDMiddleware
from gateway.routers import admin, health, webhooks
from gateway.skills import SkillRegistry

logger = logging.getLogger(__name__)


def discover_skills(settings: Settings) -> list[Skill]:
    registry = SkillRegistry()
    if settings.skills.dirs:
        registry.scan(settings.skills.dirs)
    return registry.filter(settings.skills.allowlist)


@asynccontextmanager
async def lifespan(app: FastAPI):
    state = app.state
    logger.info(
        "Gateway starting: %d channels, %d skills, agent=%s, store capacity=%d",
        len(state.channels),
        len(state.skills),
        state.agent.client_name,
        state.store.capacity,
    )
    yield
    logger.info("Gateway stopped")


async def _http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "invalid request", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def create_app(
    settings: Settings | None = None,
    *,
    store: BaseEventStore | None = None,
    channels: dict[str, BaseChannel] | None = None,
    agent: BaseAgentClient | None = None,
    skills: list[Skill] | None = None,
) -> FastAPI:
    """Build the gateway app; collaborators not passed in are built from settings."""
    settings = settings or load_settings()

    app = FastAPI(
        title="Webhook Gateway",
        description="Receives webhooks, stores recent events, forwards them to an agent",
        version=__version__,
        lifespan=lifespan,
    )

    # One store per app instance, shared by every request
    app.state.settings = settings
    app.state.store = store if store is not None else MemoryEventStore(settings.store.capacity)
    app.state.channels = channels if channels is not None else build_channels(settings.channels)
    app.state.agent = agent if agent is not None else build_agent_client(settings.agent)
    app.state.skills = skills if skills is not None else discover_skills(settings)

    # Rate limiting
    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    # Outermost last: request id wraps access logging
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers (health and webhooks are public; admin requires API key when set)
    app.include_router(health.router)
    app.include_router(
        webhooks.build_router(limiter, settings.webhooks.rate_limit),
        prefix="/webhooks",
        tags=["webhooks"],
    )
    app.include_router(
        admin.router, prefix="/admin", tags=["admin"], dependencies=[Depends(verify_api_key)]
    )

    return app
