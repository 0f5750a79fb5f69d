"""FastAPI routes for the pickup order lifecycle."""

from fastapi import APIRouter, Depends, Header, Request

from pickup.api.dependencies import current_consumer, current_vendor, get_services, require_cron_secret
from pickup.api.errors import error_response
from pickup.api.schemas import (
    CompletionResponse,
    FulfillResponse,
    LatestRedeemRequestResponse,
    OrderActionRequest,
    RedeemResponse,
    ReminderSweepResponse,
    RequestRedeemResponse,
    ThankYouSweepResponse,
    WebhookResponse,
)
from pickup.auth.port import Principal
from pickup.exceptions import AuthenticationError
from pickup.services import Services

# ---------------------------------------------------------------------------
# Payment gateway
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/stripe", tags=["payments"])


@payment_router.post("/webhook", response_model=WebhookResponse)
async def payment_webhook(
    request: Request,
    stripe_signature: str = Header(default=""),
    services: Services = Depends(get_services),
):
    """Gateway webhook. Anything but a bad signature answers 200 so the gateway stops retrying."""
    payload = await request.body()
    try:
        outcome = services.webhooks.process(payload, stripe_signature)
    except AuthenticationError as exc:
        return error_response(400, exc.code)
    return WebhookResponse(duplicate=outcome.duplicate)


@payment_router.get("/fulfill", response_model=FulfillResponse)
async def fulfill_checkout(
    session_id: str | None = None,
    services: Services = Depends(get_services),
) -> FulfillResponse:
    """Checkout return. Safe to call again after a reload or a failed attempt."""
    order = services.fulfillment.fulfill(session_id)
    return FulfillResponse(order=order)


# ---------------------------------------------------------------------------
# Vendor app
# ---------------------------------------------------------------------------
store_router = APIRouter(prefix="/store/orders", tags=["store"])


@store_router.post("/request-redeem", response_model=RequestRedeemResponse)
async def request_redeem(
    body: OrderActionRequest,
    vendor: Principal | None = Depends(current_vendor),
    services: Services = Depends(get_services),
) -> RequestRedeemResponse:
    order = services.redemption.request(body.order_id, vendor)
    return RequestRedeemResponse(orderId=str(order.id), redeemRequestAt=order.redeem_request_at.isoformat())


@store_router.post("/complete", response_model=CompletionResponse, response_model_exclude_none=True)
async def complete_order(
    body: OrderActionRequest,
    vendor: Principal | None = Depends(current_vendor),
    services: Services = Depends(get_services),
) -> CompletionResponse:
    result = services.completion.complete(body.order_id, vendor)
    return CompletionResponse(**result)


# ---------------------------------------------------------------------------
# Consumer app
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/redeem-request/latest", response_model=LatestRedeemRequestResponse)
async def latest_redeem_request(
    consumer: Principal | None = Depends(current_consumer),
    services: Services = Depends(get_services),
) -> LatestRedeemRequestResponse:
    """Polled by the consumer app; unauthenticated callers simply get no order."""
    return LatestRedeemRequestResponse(order=services.redemption.latest(consumer))


@order_router.post("/redeem", response_model=RedeemResponse)
async def redeem_order(
    body: OrderActionRequest,
    consumer: Principal | None = Depends(current_consumer),
    services: Services = Depends(get_services),
) -> RedeemResponse:
    redeemed = services.redemption.confirm(body.order_id, consumer)
    return RedeemResponse(orderId=str(body.order_id), redeemed=redeemed)


# ---------------------------------------------------------------------------
# Scheduled jobs
# ---------------------------------------------------------------------------
cron_router = APIRouter(prefix="/cron", tags=["cron"], dependencies=[Depends(require_cron_secret)])


@cron_router.post("/thank-completed", response_model=ThankYouSweepResponse, response_model_exclude_none=True)
async def thank_completed(services: Services = Depends(get_services)) -> ThankYouSweepResponse:
    """Backstop for thank-you pushes the vendor action did not deliver."""
    return ThankYouSweepResponse(**services.completion.sweep())


@cron_router.post("/remind-pickup", response_model=ReminderSweepResponse, response_model_exclude_none=True)
async def remind_pickup(services: Services = Depends(get_services)) -> ReminderSweepResponse:
    return ReminderSweepResponse(**services.reminders.sweep())
