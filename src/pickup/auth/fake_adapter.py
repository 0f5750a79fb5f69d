"""Fake session authority for development and testing.

Tokens and cookies are registered up front; anything unregistered is
treated as unauthenticated.
"""

from pickup.auth.port import Principal, PrincipalKind, SessionAuthority


class FakeSessionAuthority(SessionAuthority):
    def __init__(self) -> None:
        self.id_tokens: dict[str, str] = {}
        self.consumer_sessions: dict[str, str] = {}
        self.vendor_sessions: dict[str, Principal] = {}

    def add_id_token(self, token: str, consumer_id: str) -> None:
        self.id_tokens[token] = consumer_id

    def add_consumer_session(self, cookie_value: str, consumer_id: str) -> None:
        self.consumer_sessions[cookie_value] = consumer_id

    def add_vendor_session(self, cookie_value: str, vendor_id: str, store_id: str | None) -> None:
        self.vendor_sessions[cookie_value] = Principal(
            principal_id=vendor_id,
            kind=PrincipalKind.VENDOR,
            store_id=store_id,
        )

    def consumer_from_id_token(self, id_token: str) -> Principal | None:
        consumer_id = self.id_tokens.get(id_token)
        if consumer_id is None:
            return None
        return Principal(principal_id=consumer_id, kind=PrincipalKind.CONSUMER)

    def consumer_from_session(self, cookie_value: str) -> Principal | None:
        consumer_id = self.consumer_sessions.get(cookie_value)
        if consumer_id is None:
            return None
        return Principal(principal_id=consumer_id, kind=PrincipalKind.CONSUMER)

    def vendor_from_session(self, cookie_value: str) -> Principal | None:
        return self.vendor_sessions.get(cookie_value)

    def reset(self) -> None:
        self.id_tokens.clear()
        self.consumer_sessions.clear()
        self.vendor_sessions.clear()
