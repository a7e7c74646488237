"""Tests for password hashing, session tokens and order receipts."""

from datetime import timedelta

from jose import jwt

from pizza_service.core.config import settings
from pizza_service.core.receipts import create_order_receipt, decode_order_receipt
from pizza_service.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_is_not_plaintext():
    hashed = get_password_hash("diner")
    assert hashed != "diner"
    assert verify_password("diner", hashed)
    assert not verify_password("Diner", hashed)


def test_access_token_round_trip_carries_roles():
    token = create_access_token(5, [{"role": "franchisee", "objectId": 2}])
    payload = decode_access_token(token)
    assert payload is not None
    assert payload["sub"] == "5"
    assert payload["roles"] == [{"role": "franchisee", "objectId": 2}]
    assert payload["type"] == "access"


def test_each_token_gets_its_own_id():
    a = decode_access_token(create_access_token(1, []))
    b = decode_access_token(create_access_token(1, []))
    assert a["jti"] != b["jti"]


def test_expired_token_rejected():
    token = create_access_token(1, [], expires_delta=timedelta(seconds=-5))
    assert decode_access_token(token) is None


def test_tampered_and_foreign_tokens_rejected():
    token = create_access_token(1, [])
    header, body, signature = token.split(".")
    assert decode_access_token(f"{header}.{body}.{signature[::-1]}") is None
    assert decode_access_token("not-a-token") is None

    foreign = jwt.encode({"sub": "1", "type": "access", "jti": "x"}, "other-key", algorithm="HS256")
    assert decode_access_token(foreign) is None


def test_token_without_access_type_rejected():
    token = jwt.encode(
        {"sub": "1", "jti": "abc", "type": "refresh"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )
    assert decode_access_token(token) is None


def test_receipt_signed_with_receipt_key():
    receipt = create_order_receipt({"id": 1, "items": []}, {"id": 2, "name": "d", "email": "d@x.com"})
    claims = decode_order_receipt(receipt)
    assert claims["order"]["id"] == 1
    assert claims["diner"]["email"] == "d@x.com"

    # a receipt is not a session token
    assert decode_access_token(receipt) is None
