"""Pickup reminder: pushed shortly before the pickup window opens."""

REMINDER_TEXT = "まもなく受け取り予定です。店舗でチケットをご提示ください。"


class PickupReminderTemplate:
    kind = "pickup_reminder"

    @staticmethod
    def render(context: dict) -> list[dict]:
        text = REMINDER_TEXT
        code = context.get("code")
        if code:
            text = f"{text}\n引換コード：{code}"
        return [{"type": "text", "text": text}]
