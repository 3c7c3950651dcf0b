"""Entry point for the FastAPI-powered feed service."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .models import FeedResponse, UserStateSnapshot
from .services.catalog import CatalogClient
from .services.feed_engine import FeedEngine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    catalog_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.catalog_api_url),
            timeout=httpx.Timeout(settings.source_timeout_seconds, connect=5.0),
        )
    )
    fastapi_app.state.feed_engine = FeedEngine(
        CatalogClient(catalog_http_client), settings
    )

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Personalized video feeds ranked from the viewer's history",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_feed_engine(app: FastAPI) -> FeedEngine:
    engine = getattr(app.state, "feed_engine", None)
    if not isinstance(engine, FeedEngine):
        raise RuntimeError("Feed engine not initialised")
    return engine


def register_routes(fastapi_app: FastAPI) -> None:
    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.post("/api/feed", response_model=FeedResponse)
    async def main_feed_endpoint(
        snapshot: UserStateSnapshot, mode: str | None = None
    ) -> FeedResponse:
        engine = get_feed_engine(fastapi_app)
        try:
            resolved_mode = engine.resolve_mode(mode)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        videos = await engine.main_feed(snapshot, mode=resolved_mode)
        return FeedResponse.build(videos, page=snapshot.page, mode=resolved_mode)

    @fastapi_app.post("/api/feed/shorts", response_model=FeedResponse)
    async def shorts_feed_endpoint(snapshot: UserStateSnapshot) -> FeedResponse:
        engine = get_feed_engine(fastapi_app)
        videos = await engine.shorts_feed(snapshot)
        return FeedResponse.build(videos, page=snapshot.page, mode="shorts")


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
