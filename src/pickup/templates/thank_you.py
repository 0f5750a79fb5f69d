"""Thank you: pushed once an order is completed at the counter."""

THANK_YOU_TEXT = "受け取りありがとうございました。ご利用に感謝いたします。"


class ThankYouTemplate:
    kind = "thank_you"

    @staticmethod
    def render(context: dict) -> list[dict]:
        messages = [{"type": "text", "text": THANK_YOU_TEXT}]

        app_url = context.get("app_url")
        if app_url:
            messages.append(
                {
                    "type": "template",
                    "altText": "ミニアプリを開く",
                    "template": {
                        "type": "buttons",
                        "text": "次回のご注文はこちらから",
                        "actions": [{"type": "uri", "label": "ミニアプリを開く", "uri": app_url}],
                    },
                }
            )
        return messages
