"""Fake push adapter: records sent pushes for testing."""

from uuid import uuid4

from pickup.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    """Push adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.should_succeed = True
        self.should_raise = False
        self.failure_reason = "Push delivery failed"

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Push delivery failed",
        should_raise: bool = False,
    ):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.should_raise = should_raise

    def send(self, to: str, messages: list[dict]) -> dict:
        if self.should_raise:
            raise ConnectionError(self.failure_reason)

        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
            }

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append(
            {
                "message_id": message_id,
                "to": to,
                "messages": messages,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def pushes_to(self, to: str) -> list[dict]:
        return [push for push in self.sent_pushes if push["to"] == to]

    def reset(self):
        """Clear sent pushes (useful between tests)."""
        self.sent_pushes.clear()
        self.should_succeed = True
        self.should_raise = False
        self.failure_reason = "Push delivery failed"
