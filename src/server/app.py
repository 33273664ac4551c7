"""
HTTP server module.

Builds every service from the settings and exposes them through FastAPI:
- GET  /                        install link page
- GET  /auth/install            redirect to Slack's authorize URL (Bolt OAuth flow)
- GET  /auth/install/callback   finish installation (Bolt OAuth flow, 200 / 500)
- POST /events                  Events API deliveries (verified by Bolt)
- POST /actions                 interactive action deliveries (verified by Bolt)
- GET  /health                  liveness check
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, Response
from slack_bolt.adapter.fastapi.async_handler import AsyncSlackRequestHandler
from slack_bolt.async_app import AsyncApp
from slack_sdk.oauth.state_store import FileOAuthStateStore
from slack_sdk.oauth.state_store.async_state_store import AsyncOAuthStateStore

from src.config.settings import Settings
from src.install.flow import CALLBACK_PATH, INSTALL_PATH, build_oauth_settings
from src.install.pages import install_page
from src.paste.client import PasteClient
from src.redis.client import AsyncRedisClientImpl
from src.slack.actions import ActionHandler
from src.slack.app import create_bolt_app
from src.slack.client_cache import ClientCache
from src.slack.events import EventDispatcher
from src.storage.credentials import CredentialStore, LocalCredentialStore, RedisCredentialStore
from src.storage.oauth_state import DEFAULT_STATE_EXPIRATION_SECONDS, RedisOAuthStateStore
from src.storage.pending import (
    InMemoryPendingActionStore,
    PendingActionStore,
    RedisPendingActionStore,
)

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the HTTP layer needs, built once at startup.

    Attributes:
        redis: Key-value client (None for the local backend)
        paste: Paste-hosting API client
        bolt: Bolt app handling events, actions and the OAuth flow
    """

    redis: AsyncRedisClientImpl | None
    paste: PasteClient
    bolt: AsyncApp


def build_services(settings: Settings) -> Services:
    """Construct the stores, clients and handlers from the settings.

    Args:
        settings: Application settings

    Returns:
        The wired Services
    """
    redis: AsyncRedisClientImpl | None = None
    credentials: CredentialStore
    pending: PendingActionStore
    state_store: AsyncOAuthStateStore

    if settings.storage_backend == "redis":
        if settings.redis_url is None:
            msg = "REDIS_URL is required when STORAGE_BACKEND is redis"
            raise ValueError(msg)
        redis = AsyncRedisClientImpl(settings.redis_url)
        credentials = RedisCredentialStore(redis)
        pending = RedisPendingActionStore(redis, ttl_seconds=settings.pending_action_ttl_seconds)
        state_store = RedisOAuthStateStore(redis)
    else:
        base_dir = Path(settings.local_storage_dir)
        credentials = LocalCredentialStore(base_dir / "tokens")
        pending = InMemoryPendingActionStore(ttl_seconds=settings.pending_action_ttl_seconds)
        state_store = FileOAuthStateStore(
            expiration_seconds=DEFAULT_STATE_EXPIRATION_SECONDS,
            base_dir=str(base_dir / "oauth_states"),
        )

    clients = ClientCache(credentials)
    paste = PasteClient(
        base_url=settings.paste_api_base_url,
        list_api_url=settings.paste_list_api_url,
        list_user=settings.paste_list_user,
        timeout=settings.http_timeout_seconds,
    )
    oauth_settings = build_oauth_settings(
        client_id=settings.slack_client_id,
        client_secret=settings.slack_client_secret,
        credentials=credentials,
        clients=clients,
        state_store=state_store,
        redirect_uri=settings.slack_redirect_uri,
    )
    dispatcher = EventDispatcher(
        clients=clients,
        pending=pending,
        paste=paste,
        list_keyword=settings.list_keyword,
    )
    actions = ActionHandler(clients=clients, pending=pending, paste=paste)
    bolt = create_bolt_app(
        settings.slack_signing_secret, clients, dispatcher, actions, oauth_settings
    )

    return Services(redis=redis, paste=paste, bolt=bolt)


def create_app(services: Services) -> FastAPI:
    """Create the FastAPI application.

    Args:
        services: Services built by build_services

    Returns:
        The FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services.redis is not None:
            await services.redis.connect()
        yield
        await services.paste.aclose()
        if services.redis is not None:
            await services.redis.disconnect()

    app = FastAPI(title="Snippet Saver", lifespan=lifespan)
    slack_handler = AsyncSlackRequestHandler(services.bolt)

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return install_page()

    @app.get(INSTALL_PATH)
    async def install(req: Request) -> Response:
        return await slack_handler.handle(req)

    @app.get(CALLBACK_PATH)
    async def install_callback(req: Request) -> Response:
        return await slack_handler.handle(req)

    @app.post("/events")
    async def events(req: Request) -> Response:
        return await slack_handler.handle(req)

    @app.post("/actions")
    async def actions(req: Request) -> Response:
        return await slack_handler.handle(req)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
