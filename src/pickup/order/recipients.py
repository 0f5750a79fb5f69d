"""Push destination lookup for an order.

Tried in order: the consumer recorded on the order, then the consumer
linked to the order's auth account.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from pickup.consumer.account import ConsumerAccount


def _direct(order) -> str | None:
    return order.consumer_id or None


def _linked_account(order) -> str | None:
    if not order.account_id:
        return None
    try:
        account = current_domain.repository_for(ConsumerAccount).get(order.account_id)
    except ObjectNotFoundError:
        return None
    return account.consumer_id or None


RECIPIENT_LOOKUPS = (_direct, _linked_account)


def resolve_recipient(order) -> str | None:
    for lookup in RECIPIENT_LOOKUPS:
        recipient = lookup(order)
        if recipient:
            return recipient
    return None
