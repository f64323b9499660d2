"""FastAPI application serving an interactive graph view session."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kgviz.api.graph import router as graph_router
from kgviz.config import Settings, settings
from kgviz.session import GraphSession

logger = logging.getLogger(__name__)


def create_app(config: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage application lifespan - startup and shutdown."""
        logger.info("Starting kgviz API...")
        app.state.session = GraphSession(config=config)

        yield

        logger.info("Shutting down kgviz API...")
        app.state.session.teardown()

    app = FastAPI(
        title="kgviz",
        description="Interactive knowledge-graph layout and view engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    app.include_router(graph_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "kgviz.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
