"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Overrides (settings, upstream transport, clock) may be seeded on
      app.state before startup, see create_app()
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from indodax_proxy.config import Settings, configure_logging, settings
from indodax_proxy.handlers import AdminHandler, MarketHandler
from indodax_proxy.handlers.admin_handler import ENDPOINTS
from indodax_proxy.repositories import IndodaxClient, InMemoryCacheRepository
from indodax_proxy.services import AdminService, MarketService

logger = logging.getLogger(__name__)


def get_market_handler(request: Request) -> MarketHandler:
    """Dependency injection for MarketHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "market_handler", None)
    if handler is None:
        raise RuntimeError("MarketHandler not initialized. Check lifespan setup.")
    return handler


def get_admin_handler(request: Request) -> AdminHandler:
    """Dependency injection for AdminHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "admin_handler", None)
    if handler is None:
        raise RuntimeError("AdminHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Cache repository - one explicitly owned store for the whole app
    2. Upstream client - pooled httpx client
    3. Services - market orchestration and administration
    4. Handlers - app.state.market_handler / app.state.admin_handler

    Cleanup:
        Closes the upstream client and removes everything from app.state
    """
    app_settings: Settings = getattr(app.state, "settings", None) or settings
    configure_logging(app_settings.log_level)

    repository = InMemoryCacheRepository.create(
        ttls=app_settings.cache_ttls,
        clock=getattr(app.state, "clock", None),
    )
    client = IndodaxClient.create(app_settings, transport=getattr(app.state, "upstream_transport", None))

    market_service = MarketService.create(
        cache=repository,
        client=client,
        single_flight=app_settings.cache_single_flight,
        upstream_domain=app_settings.upstream_domain,
    )
    admin_service = AdminService.create(cache=repository, client=client)

    app.state.cache_repository = repository
    app.state.upstream_client = client
    app.state.market_handler = MarketHandler(market_service=market_service)
    app.state.admin_handler = AdminHandler(admin_service=admin_service)

    logger.info("Indodax proxy ready, upstream %s", client.base_url)
    logger.info("Cache TTLs: %s, single-flight: %s", app_settings.cache_ttls, market_service.single_flight)
    for endpoint in ENDPOINTS:
        logger.info("  • %s", endpoint)

    yield

    await client.close()
    del app.state.admin_handler
    del app.state.market_handler
    del app.state.upstream_client
    del app.state.cache_repository
    logger.info("Indodax proxy shut down")


# Type aliases for cleaner dependency injection
MarketHandlerDep = Annotated[MarketHandler, Depends(get_market_handler)]
AdminHandlerDep = Annotated[AdminHandler, Depends(get_admin_handler)]
