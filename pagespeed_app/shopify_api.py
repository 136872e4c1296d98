from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from pagespeed_app.config import settings

LAYOUT_ASSET_KEY = "layout/theme.liquid"
ACTIVE_THEME_ROLE = "main"

ThemeId = int | str


class ShopifyApiError(RuntimeError):
    def __init__(self, *, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteError(ShopifyApiError):
    """Shopify answered with a non-success status, or could not be reached."""


class NotFoundError(ShopifyApiError):
    def __init__(self, *, message: str, status_code: int = 404) -> None:
        super().__init__(message=message, status_code=status_code)


class ParseError(ShopifyApiError):
    """Shopify answered, but the body is not shaped the way the endpoint documents."""


@dataclass(frozen=True)
class Theme:
    id: ThemeId
    name: str
    role: str

    @property
    def is_active(self) -> bool:
        return self.role == ACTIVE_THEME_ROLE


class ThemeAssetClient:
    """Reads and writes theme assets of one shop through the Admin REST API."""

    def __init__(
        self,
        *,
        shop_domain: str,
        access_token: str,
        api_version: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.shop_domain = shop_domain
        self._access_token = access_token
        self._api_version = api_version or settings.SHOPIFY_ADMIN_API_VERSION
        self._timeout = settings.SHOPIFY_REQUEST_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def base_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self._api_version}"

    async def list_themes(self) -> list[Theme]:
        body = await self._request_json("GET", "/themes.json", action="get themes")
        raw_themes = body.get("themes")
        if not isinstance(raw_themes, list):
            raise ParseError(message="Themes response is missing the themes list")

        themes: list[Theme] = []
        for raw_theme in raw_themes:
            if not isinstance(raw_theme, dict):
                raise ParseError(message="Themes response contains a non-object entry")
            theme_id = raw_theme.get("id")
            if not isinstance(theme_id, (int, str)) or isinstance(theme_id, bool) or theme_id == "":
                raise ParseError(message="Themes response is missing theme.id")
            themes.append(
                Theme(
                    id=theme_id,
                    name=str(raw_theme.get("name") or ""),
                    role=str(raw_theme.get("role") or ""),
                )
            )
        return themes

    async def get_active_theme_id(self) -> ThemeId:
        themes = await self.list_themes()
        for theme in themes:
            if theme.is_active:
                return theme.id
        raise NotFoundError(message=f"No active theme found for {self.shop_domain}")

    async def get_asset(self, theme_id: ThemeId, key: str = LAYOUT_ASSET_KEY) -> str:
        body = await self._request_json(
            "GET",
            f"/themes/{theme_id}/assets.json",
            params={"asset[key]": key},
            action="get theme asset",
        )
        asset = body.get("asset")
        if not isinstance(asset, dict):
            raise ParseError(message=f"Theme asset response is missing asset for {key}")
        value = asset.get("value")
        if not isinstance(value, str):
            raise ParseError(message=f"Theme asset response is missing asset.value for {key}")
        return value

    async def put_asset(self, theme_id: ThemeId, key: str, value: str) -> bool:
        await self._request_json(
            "PUT",
            f"/themes/{theme_id}/assets.json",
            payload={"asset": {"key": key, "value": value}},
            action="update theme asset",
        )
        return True

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        action: str,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self._access_token,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    params=params,
                    json=payload,
                    headers=headers,
                )
        except httpx.RequestError as exc:
            raise RemoteError(message=f"Network error while calling Shopify to {action}: {exc}") from exc

        if not response.is_success:
            raise RemoteError(
                message=f"Failed to {action}: {response.status_code} {response.reason_phrase}",
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ParseError(message=f"Shopify returned invalid JSON while trying to {action}") from exc

        if not isinstance(body, dict):
            raise ParseError(message="Shopify API response must be a JSON object")
        return body
