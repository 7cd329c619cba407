"""Password reset token lifecycle tests."""

import logging
import re
from datetime import timedelta

import pytest

from sitecms.config import Settings
from sitecms.models.mixins import as_utc, utcnow
from sitecms.models.user import User
from sitecms.services.auth import authenticate_user
from sitecms.services.errors import (
    ExpiredToken,
    InvalidCredentials,
    InvalidToken,
    WeakPassword,
)
from sitecms.services.password_reset import PasswordResetService


@pytest.fixture
def service(db):
    return PasswordResetService(db)


@pytest.fixture
def editor(make_user):
    return make_user("editor", "editor@example.com", password="old-secret")


def _token_for(db, user_id: int) -> str | None:
    user = db.get(User, user_id)
    db.refresh(user)
    return user.reset_token


def test_request_reset_issues_token(service, db, editor):
    assert service.request_reset("editor@example.com") is None

    user = db.get(User, editor.id)
    db.refresh(user)
    assert re.fullmatch(r"[0-9a-f]{64}", user.reset_token)
    remaining = as_utc(user.reset_token_expires) - utcnow()
    assert timedelta(minutes=59) < remaining <= timedelta(minutes=60)


def test_request_reset_unknown_email(service, db, editor):
    assert service.request_reset("nobody@example.com") is None
    assert _token_for(db, editor.id) is None


def test_reset_password_once(service, db, editor):
    service.request_reset("editor@example.com")
    token = _token_for(db, editor.id)

    user = service.reset_password(token, "brand-new")
    assert user.id == editor.id
    assert _token_for(db, editor.id) is None

    assert authenticate_user(db, "editor", "brand-new").id == editor.id
    with pytest.raises(InvalidCredentials):
        authenticate_user(db, "editor", "old-secret")

    with pytest.raises(InvalidToken):
        service.reset_password(token, "another-one")


def test_expired_token(service, db, editor):
    service.request_reset("editor@example.com")
    token = _token_for(db, editor.id)
    db.query(User).filter(User.id == editor.id).update(
        {User.reset_token_expires: utcnow() - timedelta(seconds=1)}
    )
    db.commit()

    with pytest.raises(ExpiredToken) as expired:
        service.reset_password(token, "brand-new")
    assert _token_for(db, editor.id) is None

    # Once cleared, the same token is simply unknown
    with pytest.raises(InvalidToken) as invalid:
        service.reset_password(token, "brand-new")
    assert expired.value.message == invalid.value.message
    assert expired.value.code != invalid.value.code


def test_new_request_replaces_previous_token(service, db, editor):
    service.request_reset("editor@example.com")
    first = _token_for(db, editor.id)
    service.request_reset("editor@example.com")
    second = _token_for(db, editor.id)

    assert first != second
    with pytest.raises(InvalidToken):
        service.reset_password(first, "brand-new")
    service.reset_password(second, "brand-new")


def test_weak_password_keeps_token(service, db, editor):
    service.request_reset("editor@example.com")
    token = _token_for(db, editor.id)

    with pytest.raises(WeakPassword):
        service.reset_password(token, "123")
    assert _token_for(db, editor.id) == token


def test_unknown_token(service):
    with pytest.raises(InvalidToken):
        service.reset_password("0" * 64, "brand-new")


def test_token_logged_in_development(db, editor, caplog):
    caplog.set_level(logging.INFO, logger="sitecms.services.password_reset")
    service = PasswordResetService(db, Settings(environment="development"))
    service.request_reset("editor@example.com")

    token = _token_for(db, editor.id)
    assert token in caplog.text
    assert f"reset-password.html?token={token}" in caplog.text


def test_token_not_logged_in_production(db, editor, caplog):
    caplog.set_level(logging.INFO, logger="sitecms.services.password_reset")
    settings = Settings(environment="production", session_secret="a-real-secret")
    service = PasswordResetService(db, settings)
    service.request_reset("editor@example.com")

    token = _token_for(db, editor.id)
    assert token not in caplog.text
    assert "issued" in caplog.text


class TestResetApi:
    def test_forgot_password_same_response(self, client, editor):
        known = client.post("/api/auth/forgot-password", json={"email": "editor@example.com"})
        unknown = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert known.json()["success"] is True

    def test_reset_flow(self, client, db, editor):
        client.post("/api/auth/forgot-password", json={"email": "editor@example.com"})
        token = _token_for(db, editor.id)

        response = client.post(
            "/api/auth/reset-password", json={"token": token, "newPassword": "brand-new"}
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

        login = client.post(
            "/api/auth/login", json={"username": "editor", "password": "brand-new"}
        )
        assert login.status_code == 200

        replay = client.post(
            "/api/auth/reset-password", json={"token": token, "newPassword": "brand-new"}
        )
        assert replay.status_code == 400
        assert replay.json()["code"] == "invalid_token"

    def test_reset_expired(self, client, db, editor):
        client.post("/api/auth/forgot-password", json={"email": "editor@example.com"})
        token = _token_for(db, editor.id)
        db.query(User).filter(User.id == editor.id).update(
            {User.reset_token_expires: utcnow() - timedelta(minutes=5)}
        )
        db.commit()

        response = client.post(
            "/api/auth/reset-password", json={"token": token, "newPassword": "brand-new"}
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid or expired reset token",
            "code": "expired_token",
        }
