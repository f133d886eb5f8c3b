"""Tests for the monthly password gate and access tokens."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from sermon_wizard.services.access import (
    access_token_expiry,
    create_access_token,
    current_access_date,
    decode_access_token,
    end_of_access_month,
    password_for_month,
    verify_access_password,
)
from tests.test_constants import TEST_ACCESS_PASSWORD, TEST_ACCESS_PASSWORD_WRONG

TABLE = {1: "janeiro-123", 2: "fevereiro-456"}


# ---------------------------------------------------------------------------
# Unit tests: access service
# ---------------------------------------------------------------------------


class TestMonthlyPassword:
    def test_password_for_month(self):
        assert password_for_month(1, TABLE) == "janeiro-123"
        assert password_for_month(3, TABLE) is None

    def test_current_month_password_accepted(self):
        assert verify_access_password("janeiro-123", TABLE, today=date(2026, 1, 15)) is True

    def test_other_month_password_rejected(self):
        assert verify_access_password("janeiro-123", TABLE, today=date(2026, 2, 1)) is False

    def test_month_without_password_rejects_everything(self):
        assert verify_access_password("", TABLE, today=date(2026, 3, 1)) is False

    def test_wrong_password_rejected(self):
        assert verify_access_password("janeiro", TABLE, today=date(2026, 1, 31)) is False


class TestAccessToken:
    def test_create_and_decode_token(self):
        token = create_access_token()
        payload = decode_access_token(token)
        assert payload is not None
        assert payload["sub"] == "wizard"
        assert "exp" in payload

    def test_invalid_token_returns_none(self):
        assert decode_access_token("not.a.valid.token") is None

    def test_tampered_token_returns_none(self):
        token = create_access_token()
        assert decode_access_token(token[:-4] + "XXXX") is None

    def test_expired_token_returns_none(self):
        token = create_access_token(expires_delta=timedelta(seconds=-1))
        assert decode_access_token(token) is None

    def test_foreign_subject_rejected(self):
        token = create_access_token(data={"sub": "someone-else"})
        assert decode_access_token(token) is None


class TestAccessCalendar:
    """Month boundaries follow ACCESS_TIMEZONE (America/Sao_Paulo, UTC-3, by default)."""

    def test_local_date_lags_utc_at_month_turn(self):
        now = datetime(2026, 2, 1, 1, 0, tzinfo=timezone.utc)
        assert current_access_date(now) == date(2026, 1, 31)

    def test_local_date_in_utc_zone(self, monkeypatch):
        monkeypatch.setenv("ACCESS_TIMEZONE", "UTC")
        now = datetime(2026, 2, 1, 1, 0, tzinfo=timezone.utc)
        assert current_access_date(now) == date(2026, 2, 1)

    def test_end_of_month_is_local_midnight(self):
        now = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert end_of_access_month(now) == datetime(2026, 2, 1, 3, 0, tzinfo=timezone.utc)

    def test_end_of_december_rolls_year(self):
        now = datetime(2026, 12, 31, 12, 0, tzinfo=timezone.utc)
        assert end_of_access_month(now) == datetime(2027, 1, 1, 3, 0, tzinfo=timezone.utc)

    def test_expiry_is_24h_mid_month(self):
        now = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert access_token_expiry(now) == now + timedelta(hours=24)

    def test_expiry_capped_at_month_end(self):
        now = datetime(2026, 1, 31, 20, 0, tzinfo=timezone.utc)
        assert access_token_expiry(now) == datetime(2026, 2, 1, 3, 0, tzinfo=timezone.utc)

    def test_token_claims_capped_at_month_end(self):
        now = datetime(2026, 1, 31, 20, 0, tzinfo=timezone.utc)
        claims = jwt.get_unverified_claims(create_access_token(now=now))
        assert claims["exp"] == int(datetime(2026, 2, 1, 3, 0, tzinfo=timezone.utc).timestamp())

    def test_token_from_previous_month_rejected(self):
        token = create_access_token(now=datetime(2020, 1, 31, 12, 0, tzinfo=timezone.utc))
        assert decode_access_token(token) is None


# ---------------------------------------------------------------------------
# Integration tests: gate enabled
# ---------------------------------------------------------------------------


@pytest.fixture
def gated_client(monkeypatch, stub_provider) -> TestClient:
    """App with a password configured for every month."""
    from sermon_wizard.config import get_settings
    from sermon_wizard.main import create_app
    from sermon_wizard.services.wizard import SermonWizard

    table = {str(m): TEST_ACCESS_PASSWORD for m in range(1, 13)}
    monkeypatch.setenv("MONTHLY_PASSWORDS", json.dumps(table))
    get_settings.cache_clear()

    app = create_app()
    app.state.wizard = SermonWizard(provider_factory=lambda: stub_provider)
    return TestClient(app, raise_server_exceptions=False)


class TestGate:
    def test_api_requires_login(self, gated_client):
        resp = gated_client.post("/api/next-step", json={"response": "Grace", "step": 1})
        assert resp.status_code == 401
        assert "error" in resp.json()

    def test_index_redirects_to_login(self, gated_client):
        resp = gated_client.get("/", follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/login"

    def test_login_page_renders(self, gated_client):
        resp = gated_client.get("/login")
        assert resp.status_code == 200
        assert "login-form" in resp.text

    def test_wrong_password(self, gated_client):
        resp = gated_client.post("/api/auth/login", json={"password": TEST_ACCESS_PASSWORD_WRONG})
        assert resp.status_code == 401
        assert resp.json() == {"error": "Senha inválida."}

    def test_login_sets_cookie_and_unlocks_wizard(self, gated_client):
        resp = gated_client.post("/api/auth/login", json={"password": TEST_ACCESS_PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["token_type"] == "bearer"
        assert "access_token" in resp.cookies

        resp = gated_client.post("/api/next-step", json={"response": "Grace", "step": 1})
        assert resp.status_code == 200
        assert resp.json()["step"] == 2

    def test_bearer_header_accepted(self, gated_client):
        token = create_access_token()
        resp = gated_client.post(
            "/api/next-step",
            json={"response": "Grace", "step": 1},
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 200

    def test_logout_clears_cookie(self, gated_client):
        gated_client.post("/api/auth/login", json={"password": TEST_ACCESS_PASSWORD})
        resp = gated_client.post("/api/auth/logout")
        assert resp.status_code == 200
        resp = gated_client.post("/api/next-step", json={"response": "Grace", "step": 1})
        assert resp.status_code == 401


def test_gate_disabled_without_table(client):
    resp = client.post("/api/next-step", json={"response": "Grace", "step": 1})
    assert resp.status_code == 200


def test_verify_uses_settings_table(monkeypatch):
    from sermon_wizard.config import get_settings

    month = current_access_date().month
    monkeypatch.setenv("MONTHLY_PASSWORDS", f'{{"{month}": "senha-do-mes"}}')
    get_settings.cache_clear()
    assert verify_access_password("senha-do-mes") is True
