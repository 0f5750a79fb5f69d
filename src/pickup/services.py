"""Composition root: builds the external clients and the services using them.

Clients are constructed here once per application and passed in
explicitly; tests build ``Services`` directly with fakes.
"""

from dataclasses import dataclass, field

from pickup.auth.fake_adapter import FakeSessionAuthority
from pickup.auth.port import SessionAuthority
from pickup.auth.resolvers import consumer_resolvers, vendor_resolvers
from pickup.channel.fake_push import FakePushAdapter
from pickup.channel.push_port import PushPort
from pickup.config import Settings
from pickup.gateway.fake_adapter import FakeGateway
from pickup.gateway.port import PaymentGateway
from pickup.inventory.ledger import InventoryLedger
from pickup.locks.memory import InMemoryLocks
from pickup.locks.port import AdvisoryLocks
from pickup.order.completion import CompletionNotifier
from pickup.order.fulfillment import FulfillmentCoordinator
from pickup.order.redemption import RedemptionHandshake
from pickup.order.reminder import PickupReminder
from pickup.payment.webhook import PaymentWebhookProcessor
from pickup.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Services:
    settings: Settings
    gateway: PaymentGateway
    push: PushPort
    authority: SessionAuthority
    locks: AdvisoryLocks

    webhooks: PaymentWebhookProcessor = field(init=False)
    fulfillment: FulfillmentCoordinator = field(init=False)
    redemption: RedemptionHandshake = field(init=False)
    completion: CompletionNotifier = field(init=False)
    reminders: PickupReminder = field(init=False)
    consumer_resolvers: list = field(init=False)
    vendor_resolvers: list = field(init=False)

    def __post_init__(self) -> None:
        self.webhooks = PaymentWebhookProcessor(self.gateway, self.push, self.settings)
        self.fulfillment = FulfillmentCoordinator(self.gateway, InventoryLedger())
        self.redemption = RedemptionHandshake()
        self.completion = CompletionNotifier(self.push, self.locks, self.settings)
        self.reminders = PickupReminder(self.push, self.locks, self.settings)
        self.consumer_resolvers = consumer_resolvers(self.authority)
        self.vendor_resolvers = vendor_resolvers(self.authority)


def _gateway(settings: Settings) -> PaymentGateway:
    if settings.is_production or settings.stripe_secret_key:
        from pickup.gateway.stripe_adapter import StripeGateway

        return StripeGateway(
            api_key=settings.require("stripe_secret_key"),
            webhook_secret=settings.require("stripe_webhook_secret"),
        )
    return FakeGateway()


def _push(settings: Settings) -> PushPort:
    if settings.is_production or settings.line_channel_access_token:
        from pickup.channel.line_push import LinePushAdapter

        return LinePushAdapter(settings.require("line_channel_access_token"))
    return FakePushAdapter()


def _authority(settings: Settings) -> SessionAuthority:
    if settings.is_production or settings.user_session_secret:
        from pickup.auth.line_session import LineSessionAuthority

        return LineSessionAuthority(
            user_session_secret=settings.require("user_session_secret"),
            store_session_secret=settings.require("store_session_secret"),
            login_channel_id=settings.require("line_login_channel_id"),
        )
    return FakeSessionAuthority()


def _locks(settings: Settings) -> AdvisoryLocks:
    if settings.database_url.startswith("postgres"):
        from pickup.locks.postgres import PostgresAdvisoryLocks

        return PostgresAdvisoryLocks(settings.database_url)
    return InMemoryLocks()


def build_services(settings: Settings | None = None) -> Services:
    """Wire real adapters where they are configured and fakes elsewhere.

    In production every real adapter is required, so a missing secret
    raises ``ConfigurationError`` at startup.
    """
    settings = settings or Settings.from_env()
    services = Services(
        settings=settings,
        gateway=_gateway(settings),
        push=_push(settings),
        authority=_authority(settings),
        locks=_locks(settings),
    )
    logger.info(
        "services_built",
        environment=settings.environment,
        gateway=type(services.gateway).__name__,
        push=type(services.push).__name__,
        authority=type(services.authority).__name__,
        locks=type(services.locks).__name__,
    )
    return services
