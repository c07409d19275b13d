import time

import jwt
import pytest

from storefront.authservice import TokenService
from storefront.authservice.errors import InvalidToken

SEVEN_DAYS = 7 * 24 * 3600


class FixedClock:
    def __init__(self, ts: int):
        self.ts = ts

    def now_utc_ts(self) -> int:
        return self.ts


def test_issue_and_verify_roundtrip_subject():
    svc = TokenService("test-secret")
    token = svc.issue("user-123")
    assert svc.verify(token) == "user-123"


def test_default_expiry_is_seven_days():
    svc = TokenService("test-secret", clock=FixedClock(1_700_000_000))
    claims = jwt.decode(svc.issue("u1"), options={"verify_signature": False})
    assert claims["exp"] - claims["iat"] == SEVEN_DAYS
    assert claims["sub"] == "u1"


def test_token_from_other_secret_rejected():
    token = TokenService("other-secret").issue("u1")
    with pytest.raises(InvalidToken):
        TokenService("test-secret").verify(token)


def test_expired_token_rejected():
    eight_days_ago = int(time.time()) - 8 * 24 * 3600
    token = TokenService("test-secret", clock=FixedClock(eight_days_ago)).issue("u1")
    with pytest.raises(InvalidToken):
        TokenService("test-secret").verify(token)


@pytest.mark.parametrize("token", ["", None, "garbage", "a.b.c", "only.two"])
def test_malformed_token_rejected(token):
    with pytest.raises(InvalidToken):
        TokenService("test-secret").verify(token)


def test_failure_modes_share_one_message():
    svc = TokenService("test-secret")
    expired = TokenService("test-secret", clock=FixedClock(int(time.time()) - SEVEN_DAYS - 60)).issue("u1")
    forged = TokenService("other-secret").issue("u1")
    messages = set()
    for token in (expired, forged, "garbage"):
        with pytest.raises(InvalidToken) as exc:
            svc.verify(token)
        messages.add(str(exc.value))
    assert messages == {"Invalid token"}


def test_token_without_subject_rejected():
    token = jwt.encode({"exp": int(time.time()) + 60}, "test-secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        TokenService("test-secret").verify(token)


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        TokenService("")
