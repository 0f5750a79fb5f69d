"""Consumer accounts: maps an auth account to its push destination.

Older orders carry only the account that paid, not the consumer's
messaging id. The notifier falls back to this mapping for those.
"""

from protean.fields import DateTime, Identifier, String

from pickup.domain import pickup


@pickup.aggregate
class ConsumerAccount:
    account_id = Identifier(identifier=True, required=True)
    consumer_id = String(required=True, max_length=255)
    display_name = String(max_length=255)
    linked_at = DateTime()
