"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html

Use cases resolve their collaborators through `Provide[Container.xxx]`; modules
imported here must not import this module back.
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.db_setting import Database
from src.platform.http.service_http_client import ServiceHttpClient
from src.service.inventory.app.command.expire_holds_use_case import ExpireHoldsUseCase
from src.service.inventory.driven_adapter.client.catalog_client_impl import (
    build_inventory_catalog_client,
)
from src.service.inventory.driven_adapter.repo.idempotency_response_repo_impl import (
    IdempotencyResponseRepoImpl,
)
from src.service.inventory.driven_adapter.repo.seat_availability_repo_impl import (
    SeatAvailabilityRepoImpl,
)
from src.service.inventory.driven_adapter.repo.seat_hold_repo_impl import SeatHoldRepoImpl
from src.service.inventory.driven_adapter.repo.seat_inventory_unit_of_work_impl import (
    SeatInventoryUnitOfWorkImpl,
)
from src.service.inventory.driving_adapter.background.hold_expiry_sweeper import (
    HoldExpirySweeper,
)
from src.service.order.app.service.order_saga_coordinator import OrderSagaCoordinator
from src.service.order.driven_adapter.client.directory_client_impl import DirectoryClientImpl
from src.service.order.driven_adapter.client.inventory_client_impl import InventoryClientImpl
from src.service.order.driven_adapter.client.payment_client_impl import PaymentClientImpl
from src.service.order.driven_adapter.repo.order_idempotency_repo_impl import (
    OrderIdempotencyRepoImpl,
)
from src.service.order.driven_adapter.repo.order_repo_impl import OrderRepoImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # ---------------------------------------------------------------- inventory
    # Unit of work is a Factory: one session per transaction
    seat_inventory_uow = providers.Factory(
        SeatInventoryUnitOfWorkImpl, session_factory=database.provided.session
    )

    # Read-side repositories (stateless - use session_factory per call)
    seat_availability_query_repo = providers.Singleton(
        SeatAvailabilityRepoImpl, session_factory=database.provided.session
    )
    seat_hold_query_repo = providers.Singleton(
        SeatHoldRepoImpl, session_factory=database.provided.session
    )
    idempotency_response_repo = providers.Singleton(
        IdempotencyResponseRepoImpl, session_factory=database.provided.session
    )

    # None unless INVENTORY_CATALOG_URL is set
    inventory_catalog_client = providers.Singleton(build_inventory_catalog_client)

    expire_holds_use_case = providers.Singleton(
        ExpireHoldsUseCase, uow_factory=seat_inventory_uow.provider
    )
    hold_expiry_sweeper = providers.Singleton(
        HoldExpirySweeper,
        expire_holds_use_case=expire_holds_use_case,
        interval_seconds=config_service.provided.SWEEPER_INTERVAL_SECONDS,
    )

    # -------------------------------------------------------------------- order
    inventory_http = providers.Singleton(
        ServiceHttpClient,
        name='inventory',
        base_url=config_service.provided.INVENTORY_SERVICE_URL,
    )
    payment_http = providers.Singleton(
        ServiceHttpClient,
        name='payment',
        base_url=config_service.provided.PAYMENT_SERVICE_URL,
    )
    user_http = providers.Singleton(
        ServiceHttpClient,
        name='user',
        base_url=config_service.provided.USER_SERVICE_URL,
    )
    catalog_http = providers.Singleton(
        ServiceHttpClient,
        name='catalog',
        base_url=config_service.provided.CATALOG_SERVICE_URL,
    )

    inventory_client = providers.Singleton(InventoryClientImpl, http=inventory_http)
    payment_client = providers.Singleton(PaymentClientImpl, http=payment_http)
    user_directory_client = providers.Singleton(DirectoryClientImpl, http=user_http)
    catalog_directory_client = providers.Singleton(DirectoryClientImpl, http=catalog_http)

    order_repo = providers.Singleton(OrderRepoImpl, session_factory=database.provided.session)
    order_idempotency_repo = providers.Singleton(
        OrderIdempotencyRepoImpl, session_factory=database.provided.session
    )

    # Sole writer of Order state
    order_saga_coordinator = providers.Singleton(
        OrderSagaCoordinator,
        order_repo=order_repo,
        inventory_client=inventory_client,
        payment_client=payment_client,
    )


container = Container()


async def close_http_clients() -> None:
    for provider in (
        container.inventory_http,
        container.payment_http,
        container.user_http,
        container.catalog_http,
    ):
        await provider().aclose()


def cleanup() -> None:
    container.reset_singletons()
