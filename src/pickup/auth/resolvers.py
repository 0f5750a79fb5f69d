"""Credential resolvers: ordered strategies for finding the caller.

Each resolver inspects one credential channel of the request and returns
a ``Principal`` or None. ``resolve_principal`` walks a list of resolvers
and the first principal found wins.
"""

from starlette.requests import Request

from pickup.auth.port import Principal, SessionAuthority

CONSUMER_COOKIE = "user_session"
VENDOR_COOKIE = "store_session"
ID_TOKEN_HEADER = "x-liff-id-token"


class BearerTokenResolver:
    """``Authorization: Bearer <id token>``"""

    def __init__(self, authority: SessionAuthority) -> None:
        self.authority = authority

    def __call__(self, request: Request) -> Principal | None:
        scheme, _, token = request.headers.get("authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return self.authority.consumer_from_id_token(token.strip())


class HeaderTokenResolver:
    """ID token carried in a dedicated header."""

    def __init__(self, authority: SessionAuthority, header: str = ID_TOKEN_HEADER) -> None:
        self.authority = authority
        self.header = header

    def __call__(self, request: Request) -> Principal | None:
        token = request.headers.get(self.header, "").strip()
        if not token:
            return None
        return self.authority.consumer_from_id_token(token)


class ConsumerCookieResolver:
    def __init__(self, authority: SessionAuthority, cookie: str = CONSUMER_COOKIE) -> None:
        self.authority = authority
        self.cookie = cookie

    def __call__(self, request: Request) -> Principal | None:
        value = request.cookies.get(self.cookie)
        if not value:
            return None
        return self.authority.consumer_from_session(value)


class VendorCookieResolver:
    def __init__(self, authority: SessionAuthority, cookie: str = VENDOR_COOKIE) -> None:
        self.authority = authority
        self.cookie = cookie

    def __call__(self, request: Request) -> Principal | None:
        value = request.cookies.get(self.cookie)
        if not value:
            return None
        return self.authority.vendor_from_session(value)


def consumer_resolvers(authority: SessionAuthority) -> list:
    return [
        BearerTokenResolver(authority),
        HeaderTokenResolver(authority),
        ConsumerCookieResolver(authority),
    ]


def vendor_resolvers(authority: SessionAuthority) -> list:
    return [VendorCookieResolver(authority)]


def resolve_principal(request: Request, resolvers) -> Principal | None:
    for resolver in resolvers:
        principal = resolver(request)
        if principal is not None:
            return principal
    return None
