"""
Inventory Service - Main Application
Seat inventory engine (reserve / allocate / release / price quote) and the hold expiry sweeper.
"""

from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import INVENTORY_WIRE_MODULES
from src.platform.database.db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import install_intercept_handler
from src.platform.observability.tracing import TracingConfig
from src.service.inventory.driven_adapter import model  # noqa: F401  registers tables
from src.service.inventory.driving_adapter.http_controller.seat_inventory_controller import (
    router as seat_inventory_router,
)


SERVICE_NAME = 'inventory-service'


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Inventory Service] Starting up...')
    install_intercept_handler()

    # Setup OpenTelemetry tracing
    tracing = TracingConfig(service_name=SERVICE_NAME)
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    tracing.instrument_httpx()
    Logger.base.info('📊 [Inventory Service] OpenTelemetry tracing configured')

    # Wire dependency injection for use cases
    container.wire(modules=INVENTORY_WIRE_MODULES)
    Logger.base.info('🔌 [Inventory Service] Dependency injection wired')

    await create_db_and_tables()
    Logger.base.info('🗄️ [Inventory Service] Database ready')

    # The sweeper only starts once the database is reachable
    background_tasks = anyio.create_task_group()
    await background_tasks.__aenter__()
    background_tasks.start_soon(container.hold_expiry_sweeper().run_forever)
    Logger.base.info('⏰ [Inventory Service] Hold expiry sweeper started')

    Logger.base.info('✅ [Inventory Service] Startup complete')

    yield

    # Shutdown
    Logger.base.info('🛑 [Inventory Service] Shutting down...')

    background_tasks.cancel_scope.cancel()
    await background_tasks.__aexit__(None, None, None)

    catalog_client = container.inventory_catalog_client()
    if catalog_client is not None:
        await catalog_client.http.aclose()

    await dispose_engine()
    Logger.base.info('🗄️ [Inventory Service] Database engine disposed')

    # Shutdown tracing (flush remaining spans)
    tracing.shutdown()

    # Unwire DI
    container.unwire()

    Logger.base.info('👋 [Inventory Service] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    routers=[seat_inventory_router],
    title='Inventory Service',
    description='Seat holds, allocations and releases with per-seat row locking',
    service_name=SERVICE_NAME,
)
