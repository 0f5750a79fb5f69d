"""Order received: pushed when the payment webhook marks an order paid."""


class OrderReceivedTemplate:
    kind = "order_received"

    @staticmethod
    def render(context: dict) -> list[dict]:
        store_name = context.get("store_name")
        code = context.get("code")
        total = context.get("total")
        pickup_from = context.get("pickup_time_from")
        pickup_to = context.get("pickup_time_to")
        ticket_url = context.get("ticket_url")

        if pickup_from and pickup_to:
            pickup_window = f"{pickup_from}〜{pickup_to}"
        else:
            pickup_window = "受取時間は注文詳細でご確認ください"

        lines = [
            "ご注文を受け付けました 🎉",
            f"店舗：{store_name}" if store_name else None,
            f"引換コード：{code}" if code else None,
            f"お支払い金額：¥{total:,}" if isinstance(total, int) else None,
            pickup_window,
            f"チケットを表示：{ticket_url}" if ticket_url else None,
        ]
        return [{"type": "text", "text": "\n".join(line for line in lines if line)}]
