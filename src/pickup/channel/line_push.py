"""LINE Messaging API push adapter."""

import httpx

from pickup.channel.push_port import PushPort
from pickup.utils.logging import get_logger

logger = get_logger(__name__)

LINE_PUSH_URL = "https://api.line.me/v2/bot/message/push"


class LinePushAdapter(PushPort):
    """Sends push messages through the LINE Messaging API.

    Transport errors are not caught here; callers decide whether a raised
    error is fatal. HTTP error responses come back as ``status="failed"``.
    """

    def __init__(self, channel_access_token: str, client: httpx.Client | None = None) -> None:
        self.channel_access_token = channel_access_token
        self.client = client or httpx.Client()

    def send(self, to: str, messages: list[dict]) -> dict:
        response = self.client.post(
            LINE_PUSH_URL,
            headers={"Authorization": f"Bearer {self.channel_access_token}"},
            json={"to": to, "messages": messages},
        )

        if response.is_success:
            return {
                "message_id": response.headers.get("x-line-request-id"),
                "status": "sent",
            }

        logger.warning("line_push_rejected", status_code=response.status_code, body=response.text[:500])
        return {
            "message_id": None,
            "status": "failed",
            "error": f"HTTP {response.status_code}",
        }

    def close(self) -> None:
        self.client.close()
