"""Template registry: maps a message kind to its template class.

Each template renders a list of channel messages from a context dict.
"""

from pickup.templates.order_received import OrderReceivedTemplate
from pickup.templates.pickup_reminder import PickupReminderTemplate
from pickup.templates.thank_you import ThankYouTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    OrderReceivedTemplate.kind: OrderReceivedTemplate,
    ThankYouTemplate.kind: ThankYouTemplate,
    PickupReminderTemplate.kind: PickupReminderTemplate,
}


def get_template(kind: str):
    """Look up a template class by message kind."""
    template_cls = TEMPLATE_REGISTRY.get(kind)
    if template_cls is None:
        raise ValueError(f"No template registered for message kind: {kind}")
    return template_cls


def render_messages(kind: str, context: dict) -> list[dict]:
    return get_template(kind).render(context)
