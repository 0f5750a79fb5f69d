"""Tests for signed session cookies."""

from pickup.auth.line_session import LineSessionAuthority, issue_session_cookie, verify_session_cookie
from pickup.auth.port import PrincipalKind

SECRET = "s3cret"


class TestSignedCookies:
    def test_roundtrip_payload(self):
        cookie = issue_session_cookie("U123", SECRET, store_id="store-a")
        payload = verify_session_cookie(cookie, SECRET)
        assert payload["sub"] == "U123"
        assert payload["store_id"] == "store-a"
        assert isinstance(payload["iat"], int)

    def test_wrong_secret(self):
        cookie = issue_session_cookie("U123", SECRET)
        assert verify_session_cookie(cookie, "other") is None

    def test_tampered_body(self):
        cookie = issue_session_cookie("U123", SECRET)
        body, sig = cookie.split(".")
        forged = issue_session_cookie("U999", "attacker").split(".")[0]
        assert verify_session_cookie(f"{forged}.{sig}", SECRET) is None

    def test_malformed(self):
        assert verify_session_cookie("", SECRET) is None
        assert verify_session_cookie("no-dot", SECRET) is None
        assert verify_session_cookie("a.b", SECRET) is None


class TestLineSessionAuthority:
    def _authority(self):
        return LineSessionAuthority(
            user_session_secret="user-secret",
            store_session_secret="store-secret",
            login_channel_id="1234567890",
        )

    def test_consumer_session(self):
        principal = self._authority().consumer_from_session(issue_session_cookie("U1", "user-secret"))
        assert principal.principal_id == "U1"
        assert principal.kind == PrincipalKind.CONSUMER

    def test_vendor_session_carries_store(self):
        principal = self._authority().vendor_from_session(issue_session_cookie("U9", "store-secret", "store-a"))
        assert principal.kind == PrincipalKind.VENDOR
        assert principal.store_id == "store-a"

    def test_vendor_cookie_not_valid_as_consumer(self):
        cookie = issue_session_cookie("U9", "store-secret", "store-a")
        assert self._authority().consumer_from_session(cookie) is None
