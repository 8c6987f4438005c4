"""
Order Service - Main Application
Order fulfillment saga: reserve, price, charge, allocate, issue tickets; payment and
reservation webhooks.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.platform.app_factory import create_app
from src.platform.config.di import close_http_clients, container
from src.platform.config.wire_modules import ORDER_WIRE_MODULES
from src.platform.database.db_setting import create_db_and_tables, dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_config import install_intercept_handler
from src.platform.observability.tracing import TracingConfig
from src.service.order.driven_adapter import model  # noqa: F401  registers tables
from src.service.order.driving_adapter.http_controller.order_controller import (
    router as order_router,
)
from src.service.order.driving_adapter.http_controller.webhook_controller import (
    router as webhook_router,
)


SERVICE_NAME = 'order-service'


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Order Service] Starting up...')
    install_intercept_handler()

    # Setup OpenTelemetry tracing
    tracing = TracingConfig(service_name=SERVICE_NAME)
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    tracing.instrument_httpx()
    Logger.base.info('📊 [Order Service] OpenTelemetry tracing configured')

    # Wire dependency injection for use cases
    container.wire(modules=ORDER_WIRE_MODULES)
    Logger.base.info('🔌 [Order Service] Dependency injection wired')

    await create_db_and_tables()
    Logger.base.info('✅ [Order Service] Startup complete')

    yield

    # Shutdown
    Logger.base.info('🛑 [Order Service] Shutting down...')

    await close_http_clients()
    await dispose_engine()

    # Shutdown tracing (flush remaining spans)
    tracing.shutdown()

    # Unwire DI
    container.unwire()

    Logger.base.info('👋 [Order Service] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    routers=[order_router, webhook_router],
    title='Order Service',
    description='Order fulfillment saga with idempotent replay and compensations',
    service_name=SERVICE_NAME,
)
