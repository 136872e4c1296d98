from __future__ import annotations

import base64
import hashlib
import hmac
import re
from urllib.parse import urlparse

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pagespeed_app.config import settings

SHOPIFY_DOMAIN_SUFFIX = ".myshopify.com"

_SHOP_DOMAIN_RE = re.compile(r"^[a-z0-9][a-z0-9-]*\.myshopify\.com$")
_SHOP_HANDLE_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")

internal_bearer_scheme = HTTPBearer(auto_error=False)


def parse_shop_domain(shop: str | None) -> str | None:
    """Return the canonical ``*.myshopify.com`` host for ``shop`` or ``None``.

    Accepts the bare domain, a URL on it (such as an admin link pasted by a
    merchant) or just the shop handle.
    """
    candidate = (shop or "").strip().lower()
    if not candidate:
        return None
    if "://" in candidate:
        candidate = urlparse(candidate).hostname or ""
    else:
        candidate = candidate.split("/", 1)[0]
    if _SHOP_HANDLE_RE.fullmatch(candidate):
        candidate = f"{candidate}{SHOPIFY_DOMAIN_SUFFIX}"
    if not _SHOP_DOMAIN_RE.fullmatch(candidate):
        return None
    return candidate


def normalize_shop_domain(shop: str) -> str:
    normalized = parse_shop_domain(shop)
    if normalized is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{shop!r} is not a *.myshopify.com shop",
        )
    return normalized


def webhook_hmac_digest(body: bytes) -> str:
    digest = hmac.new(
        settings.SHOPIFY_APP_API_SECRET.encode("utf-8"),
        body,
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("utf-8")


def verify_webhook_hmac(*, body: bytes, supplied_hmac: str | None) -> bool:
    if not supplied_hmac:
        return False
    return hmac.compare_digest(
        webhook_hmac_digest(body).encode("utf-8"),
        supplied_hmac.strip().encode("utf-8"),
    )


async def verified_webhook_shop(request: Request) -> str:
    """Authenticate a Shopify webhook delivery and return the shop it concerns.

    The shop comes from ``x-shopify-shop-domain``; the ``shop`` query parameter
    is accepted for deliveries that only carry it in the callback URL.
    """
    body = await request.body()
    if not verify_webhook_hmac(body=body, supplied_hmac=request.headers.get("x-shopify-hmac-sha256")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook HMAC")

    shop = request.headers.get("x-shopify-shop-domain") or request.query_params.get("shop")
    if not shop:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing x-shopify-shop-domain header",
        )
    return normalize_shop_domain(shop)


def require_internal_api_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(internal_bearer_scheme),
) -> None:
    """Guard for the manual script routes, which only internal tooling may call."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    supplied = credentials.credentials.strip().encode("utf-8")
    if not hmac.compare_digest(supplied, settings.SHOPIFY_INTERNAL_API_TOKEN.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid internal API token")
