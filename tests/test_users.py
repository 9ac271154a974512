import asyncio
from datetime import timedelta

from auth.utils import decode_access_token
from models.auth import SignUpRequest
from services.users import get_user, sign_up
from tests.conftest import issue_token


def test_sign_up_creates_user_once(store):
    request = SignUpRequest(uid="u7", name="Margaret", email="margaret@example.com")

    first = asyncio.run(sign_up(store, request))
    second = asyncio.run(sign_up(store, request))

    assert first["success"] is True
    assert second == {"success": False, "message": "User already exists. Please sign in."}
    assert len([call for call in store.set_calls if call[0] == "users"]) == 1


def test_get_user(store):
    user = asyncio.run(get_user(store, "u1"))

    assert user.id == "u1"
    assert user.name == "Ada"
    assert asyncio.run(get_user(store, "nobody")) is None


def test_access_token_round_trip():
    token = issue_token({"user_id": "u1", "email": "ada@example.com"})

    token_data = decode_access_token(token)

    assert token_data.user_id == "u1"
    assert token_data.email == "ada@example.com"


def test_token_without_user_id_is_rejected():
    assert decode_access_token(issue_token({"email": "ada@example.com"})) is None
    assert decode_access_token("garbage") is None


def test_expired_token_is_rejected():
    token = issue_token({"user_id": "u1"}, expires_in=timedelta(minutes=-5))

    assert decode_access_token(token) is None
