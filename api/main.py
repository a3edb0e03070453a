# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: main.py
# -----------------------------------------------------------------------------
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from api.AppContainer import AppContainer
from api.routers import health, query, documents, chat
from config.Config import Config

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger(__name__)


def create_app(container: Optional[AppContainer] = None) -> FastAPI:
    """
    Build the FastAPI app. The container is created once at startup so a
    misconfigured deployment fails before serving traffic; tests pass a
    pre-built container wired with fakes.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if container is not None:
            app.state.container = container
        else:
            logger.info("Building AppContainer from environment")
            app.state.container = AppContainer(Config.from_env())
        yield

    app = FastAPI(title="DocQA RAG API", lifespan=lifespan)
    app.include_router(health.router)
    app.include_router(query.router)
    app.include_router(documents.router)
    app.include_router(chat.router)
    return app


app = create_app()
