"""Session authority backed by signed cookies and LINE ID tokens.

Session cookies are ``<body>.<sig>``: ``body`` is the base64url-encoded JSON
payload ``{"sub", "iat", "store_id"?}`` and ``sig`` the base64url HMAC-SHA256
of ``body`` under the app's session secret. ID tokens are checked against
LINE's verify endpoint for the login channel.
"""

import base64
import hashlib
import hmac
import json
import time

import httpx

from pickup.auth.port import Principal, PrincipalKind, SessionAuthority
from pickup.exceptions import ConfigurationError, UpstreamError
from pickup.utils.logging import get_logger

logger = get_logger(__name__)

LINE_VERIFY_URL = "https://api.line.me/oauth2/v2.1/verify"
LINE_ISSUER = "https://access.line.me"


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _sign(body: str, secret: str) -> str:
    return _b64url(hmac.new(secret.encode(), body.encode(), hashlib.sha256).digest())


def issue_session_cookie(sub: str, secret: str, store_id: str | None = None) -> str:
    payload = {"sub": sub, "iat": int(time.time())}
    if store_id is not None:
        payload["store_id"] = store_id
    body = _b64url(json.dumps(payload, separators=(",", ":")).encode())
    return f"{body}.{_sign(body, secret)}"


def verify_session_cookie(cookie_value: str, secret: str) -> dict | None:
    """Payload of a correctly signed cookie, or None."""
    if not cookie_value or not secret:
        return None
    body, _, signature = cookie_value.partition(".")
    if not body or not signature:
        return None
    if not hmac.compare_digest(signature, _sign(body, secret)):
        return None
    try:
        payload = json.loads(_b64url_decode(body))
    except ValueError:
        return None
    if not isinstance(payload, dict) or not isinstance(payload.get("sub"), str):
        return None
    if payload.get("store_id") is not None:
        payload["store_id"] = str(payload["store_id"])
    return payload


class LineSessionAuthority(SessionAuthority):
    def __init__(
        self,
        user_session_secret: str,
        store_session_secret: str,
        login_channel_id: str,
        client: httpx.Client | None = None,
    ) -> None:
        self.user_session_secret = user_session_secret
        self.store_session_secret = store_session_secret
        self.login_channel_id = login_channel_id
        self.client = client or httpx.Client()

    def consumer_from_id_token(self, id_token: str) -> Principal | None:
        if not id_token:
            return None
        if not self.login_channel_id:
            raise ConfigurationError(message="Missing required setting: LINE_LOGIN_CHANNEL_ID")

        try:
            response = self.client.post(
                LINE_VERIFY_URL,
                data={"id_token": id_token, "client_id": self.login_channel_id},
            )
        except httpx.HTTPError as exc:
            raise UpstreamError("ID_TOKEN_VERIFY_FAILED", str(exc)) from exc

        if not response.is_success:
            logger.info("id_token_rejected", status_code=response.status_code)
            return None

        claims = response.json()
        subject = str(claims.get("sub") or "").strip()
        if claims.get("iss") != LINE_ISSUER or not subject:
            logger.info("id_token_claims_invalid", issuer=claims.get("iss"))
            return None
        return Principal(principal_id=subject, kind=PrincipalKind.CONSUMER)

    def consumer_from_session(self, cookie_value: str) -> Principal | None:
        payload = verify_session_cookie(cookie_value, self.user_session_secret)
        if payload is None:
            return None
        return Principal(principal_id=payload["sub"], kind=PrincipalKind.CONSUMER)

    def vendor_from_session(self, cookie_value: str) -> Principal | None:
        payload = verify_session_cookie(cookie_value, self.store_session_secret)
        if payload is None:
            return None
        return Principal(
            principal_id=payload["sub"],
            kind=PrincipalKind.VENDOR,
            store_id=payload.get("store_id"),
        )
