"""Tests for the security headers added to every response."""

from surveydesk.core.config import settings


async def test_api_responses_deny_all_content(client):
    response = await client.get("/v1/surveys/questions")

    assert response.headers["Content-Security-Policy"] == (
        "default-src 'none'; frame-ancestors 'none'"
    )
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Cache-Control" not in response.headers
    assert "Strict-Transport-Security" not in response.headers


async def test_token_responses_are_not_cached(client):
    response = await client.post(
        "/v1/auth/login",
        json={"email": "andino@barbour.co", "password": "clave123"},
    )

    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "no-store"


async def test_docs_keep_default_policy(client):
    response = await client.get("/docs")

    assert response.status_code == 200
    assert "Content-Security-Policy" not in response.headers


async def test_production_adds_hsts(client, monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")

    response = await client.get("/health")

    assert response.headers["Strict-Transport-Security"].startswith("max-age=")
