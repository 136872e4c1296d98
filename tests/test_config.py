from __future__ import annotations

from pagespeed_app.config import Settings


def test_blank_admin_access_token_is_unset(monkeypatch):
    monkeypatch.setenv("SHOPIFY_ADMIN_ACCESS_TOKEN", "   ")

    assert Settings().SHOPIFY_ADMIN_ACCESS_TOKEN is None


def test_admin_access_token_is_stripped(monkeypatch):
    monkeypatch.setenv("SHOPIFY_ADMIN_ACCESS_TOKEN", " shpat_admin \n")

    assert Settings().SHOPIFY_ADMIN_ACCESS_TOKEN == "shpat_admin"


def test_cors_origins_split_on_commas(monkeypatch):
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", "https://admin.shopify.com, https://example.com,")

    assert Settings().BACKEND_CORS_ORIGINS == ["https://admin.shopify.com", "https://example.com"]
