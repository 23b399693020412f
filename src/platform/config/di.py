"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.service.admission.driven_adapter.policy.validation_policy_provider_impl import (
    ValidationPolicyProviderImpl,
)
from src.service.admission.driven_adapter.repo.booking_ticket_command_repo_impl import (
    BookingTicketCommandRepoImpl,
)
from src.service.admission.driven_adapter.repo.gift_ticket_command_repo_impl import (
    GiftTicketCommandRepoImpl,
)
from src.service.admission.driven_adapter.repo.validation_log_repo_impl import (
    ValidationLogRepoImpl,
)
from src.service.reconciliation.driven_adapter.gateway.raiaccept_client import RaiAcceptClient
from src.service.reconciliation.driven_adapter.repo.reconciliation_booking_repo_impl import (
    ReconciliationBookingRepoImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    database = providers.Singleton(Database)

    # Admission (stateless repos - use session_factory per call)
    booking_ticket_command_repo = providers.Singleton(
        BookingTicketCommandRepoImpl, session_factory=database.provided.session
    )
    gift_ticket_command_repo = providers.Singleton(
        GiftTicketCommandRepoImpl, session_factory=database.provided.session
    )
    validation_log_repo = providers.Singleton(
        ValidationLogRepoImpl, session_factory=database.provided.session
    )
    # Singleton so the policy snapshot cache is shared across requests
    validation_policy_provider = providers.Singleton(
        ValidationPolicyProviderImpl,
        session_factory=database.provided.session,
        settings=config_service,
    )

    # Reconciliation
    reconciliation_booking_repo = providers.Singleton(
        ReconciliationBookingRepoImpl, session_factory=database.provided.session
    )
    payment_gateway_client = providers.Singleton(RaiAcceptClient, settings=config_service)


container = Container()


async def cleanup() -> None:
    await container.payment_gateway_client().aclose()
    container.reset_singletons()
