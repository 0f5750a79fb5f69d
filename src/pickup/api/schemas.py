"""Pydantic request/response schemas for the pickup API.

These are external contracts: field names follow the client apps
(``orderId``), while the services work with snake_case names.
"""

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class OrderActionRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"examples": [{"orderId": "0b6f3c1e-2d1a-4d0e-9a57-5f0c2f7d9a10"}]},
    )

    order_id: str | None = Field(default=None, alias="orderId")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class OkResponse(BaseModel):
    ok: bool = True


class WebhookResponse(OkResponse):
    duplicate: bool = False


class FulfillResponse(OkResponse):
    order: dict


class RedeemRequestSchema(BaseModel):
    id: str
    code: str | None = None


class LatestRedeemRequestResponse(OkResponse):
    order: RedeemRequestSchema | None = None


class RedeemResponse(OkResponse):
    orderId: str
    redeemed: bool


class RequestRedeemResponse(OkResponse):
    orderId: str
    redeemRequestAt: str


class CompletionResponse(OkResponse):
    orderId: str
    pushed: int = 0
    updated: int = 0
    skipped: int = 0
    reason: str | None = None


class SweepFailureSchema(BaseModel):
    id: str
    reason: str


class ThankYouSweepResponse(OkResponse):
    skipped: bool | int | None = None
    reason: str | None = None
    picked: int | None = None
    pushed: int | None = None
    updated: int | None = None
    failures: list[SweepFailureSchema] | None = None


class ReminderSweepResponse(OkResponse):
    skipped: bool | None = None
    reason: str | None = None
    checked: int | None = None
    sent: int | None = None
    failures: list[SweepFailureSchema] | None = None
