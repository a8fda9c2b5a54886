"""
uiforge HTTP service.
Natural-language UI generation over a fixed component whitelist.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from injector import Injector
from prometheus_client import CONTENT_TYPE_LATEST

from .core import Settings, configure_logging, create_container, get_logger, new_session_id
from .handlers import UIHandler
from .models import ModelLoader
from .monitoring import metrics_collector
from .registry import ComponentRegistry
from .sessions import SessionStore

logger = get_logger(__name__)

PREVIEW_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>uiforge preview</title></head>
<body>{body}</body>
</html>"""


def create_app(container: Injector | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Configured injector (environment-configured default)
    """
    container = container or create_container()
    settings = container.get(Settings)
    configure_logging(settings.log_level, settings.json_logs)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Log startup, release the model on shutdown."""
        logger.info("startup", host=settings.host, port=settings.port, model=settings.gemini_model)
        yield
        ModelLoader.unload()
        logger.info("shutdown")

    app = FastAPI(
        title="uiforge",
        description="Natural-language UI generation over a fixed component library",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.container = container

    def handler() -> UIHandler:
        return container.get(UIHandler)

    def with_session(data: dict[str, Any] | None) -> dict[str, Any]:
        data = dict(data or {})
        if data.get("sessionId") is None:
            data["sessionId"] = settings.default_session_id
        return data

    @app.post("/api/generate")
    async def generate(payload: dict[str, Any] | None = Body(default=None)):
        status, body = await handler().generate(with_session(payload))
        return JSONResponse(body, status_code=status)

    @app.post("/api/rollback")
    async def rollback(payload: dict[str, Any] | None = Body(default=None)):
        status, body = await handler().rollback(with_session(payload))
        return JSONResponse(body, status_code=status)

    @app.get("/api/versions")
    async def versions(session_id: str | None = Query(default=None, alias="sessionId")):
        status, body = handler().versions(with_session({"sessionId": session_id}))
        return JSONResponse(body, status_code=status)

    @app.get("/api/session")
    async def session(session_id: str | None = Query(default=None, alias="sessionId")):
        status, body = handler().session(with_session({"sessionId": session_id}))
        return JSONResponse(body, status_code=status)

    @app.post("/api/session/new")
    async def new_session():
        """Issue a fresh session identifier."""
        return {"sessionId": new_session_id()}

    @app.post("/api/reset")
    async def reset(payload: dict[str, Any] | None = Body(default=None)):
        status, body = await handler().reset(with_session(payload))
        return JSONResponse(body, status_code=status)

    @app.get("/api/preview", response_class=HTMLResponse)
    async def preview(session_id: str | None = Query(default=None, alias="sessionId")):
        status, body = handler().preview(with_session({"sessionId": session_id}))
        return HTMLResponse(PREVIEW_PAGE.format(body=body), status_code=status)

    @app.get("/api/health")
    async def health():
        """Health check."""
        return {
            "status": "ok",
            "model": settings.gemini_model,
            "components": len(container.get(ComponentRegistry)),
            "sessions": len(container.get(SessionStore)),
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics."""
        return Response(content=metrics_collector.get_metrics(), media_type=CONTENT_TYPE_LATEST)

    return app


def main() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    container = create_container()
    settings = container.get(Settings)
    app = create_app(container)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
