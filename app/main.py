# app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI

from .config import Settings, get_settings
from .oer import oer_router
from .oer.controller import ResourceListController
from .oer.shell import Shell


logger = logging.getLogger(__name__)

USER_AGENT = "oer-collection-viewer/1.0 (+https://collection.bccampus.ca)"


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application.

    ``transport`` replaces the network transport of the HTTP client;
    tests pass an ``httpx.MockTransport`` here.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(
            timeout=settings.request_timeout_seconds,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        ) as client:
            controller = ResourceListController(
                client,
                settings.endpoint_list,
                page_size=settings.page_size,
                loading_policy=settings.loading_policy,
            )
            shell = Shell(controller)
            app.state.shell = shell
            shell.mount()
            logger.info("Resource list mounted with %s endpoint(s)", len(controller.endpoints))
            try:
                yield
            finally:
                await controller.aclose()

    app = FastAPI(
        title="OER Collection",
        description="Paginated viewer for open educational resources from BCcampus.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(oer_router)
    return app


app = create_app()
