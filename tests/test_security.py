"""
Tests for session tokens and anti-forgery nonces.
"""

from datetime import timedelta

import pytest

from pycomments.core.config import settings
from pycomments.core.security import (
    JWTNonceManager,
    create_access_token,
    decode_token,
    get_nonce_manager,
    user_id_from_token,
)


@pytest.fixture
def nonces() -> JWTNonceManager:
    return JWTNonceManager(secret_key="nonce-test-secret", lifetime=timedelta(minutes=5))


def test_nonce_round_trip_for_user(nonces):
    token = nonces.create("comment-form", 7)
    assert nonces.verify("comment-form", token, 7) is True


def test_nonce_round_trip_for_anonymous(nonces):
    token = nonces.create("comment-form", None)
    assert nonces.verify("comment-form", token, None) is True


def test_nonce_bound_to_action(nonces):
    token = nonces.create("comment-form", 7)
    assert nonces.verify("delete-comment", token, 7) is False


def test_nonce_bound_to_user(nonces):
    token = nonces.create("comment-form", 7)
    assert nonces.verify("comment-form", token, 8) is False
    assert nonces.verify("comment-form", token, None) is False


def test_anonymous_nonce_not_valid_for_user(nonces):
    token = nonces.create("comment-form", None)
    assert nonces.verify("comment-form", token, 7) is False


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_nonce_rejects_malformed_tokens(nonces, token):
    assert nonces.verify("comment-form", token, None) is False


def test_expired_nonce_rejected():
    nonces = JWTNonceManager(secret_key="nonce-test-secret", lifetime=timedelta(seconds=-30))
    token = nonces.create("comment-form", 7)
    assert nonces.verify("comment-form", token, 7) is False


def test_nonce_signed_with_other_key_rejected(nonces):
    forged = JWTNonceManager(secret_key="someone-else", lifetime=timedelta(minutes=5))
    token = forged.create("comment-form", 7)
    assert nonces.verify("comment-form", token, 7) is False


def test_access_token_is_not_a_nonce():
    nonces = get_nonce_manager()
    access_token = create_access_token(7)
    assert nonces.verify(settings.comment_form_action, access_token, 7) is False


def test_nonce_payload_carries_action():
    token = get_nonce_manager().create("comment-form", 7)
    payload = decode_token(token)

    assert payload is not None
    assert payload.type == "nonce"
    assert payload.action == "comment-form"
    assert payload.sub == "7"


def test_user_id_from_access_token():
    assert user_id_from_token(create_access_token(7)) == 7


@pytest.mark.parametrize(
    "token",
    [
        None,
        "",
        "garbage",
        create_access_token("not-a-number"),
        create_access_token(0),
        create_access_token(7, expires_delta=timedelta(minutes=-1)),
    ],
    ids=["none", "empty", "garbage", "non-numeric", "zero", "expired"],
)
def test_user_id_from_bad_tokens(token):
    assert user_id_from_token(token) is None


def test_nonce_is_not_a_session_token():
    token = get_nonce_manager().create("comment-form", 7)
    assert user_id_from_token(token) is None
