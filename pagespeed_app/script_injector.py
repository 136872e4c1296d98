from __future__ import annotations

import logging
from dataclasses import dataclass

from pagespeed_app import snippet
from pagespeed_app.schemas import ScriptSyncStatus
from pagespeed_app.shopify_api import LAYOUT_ASSET_KEY, ThemeAssetClient, ThemeId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScriptSyncResult:
    ok: bool
    status: ScriptSyncStatus
    theme_id: ThemeId | None = None
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok


async def install(client: ThemeAssetClient, snippet_source: str) -> ScriptSyncResult:
    """Inject the optimization snippet into the active theme's layout.

    Best effort: failures are logged and reported through the result, never raised.
    """
    theme_id: ThemeId | None = None
    try:
        theme_id = await client.get_active_theme_id()
        logger.info(
            "Injecting optimization script",
            extra={"shop_domain": client.shop_domain, "theme_id": theme_id},
        )
        layout = await client.get_asset(theme_id, LAYOUT_ASSET_KEY)

        if snippet.find_anchor(snippet.remove(layout)) is None:
            logger.warning(
                "Theme layout has neither </head> nor </body>; optimization script not injected",
                extra={"shop_domain": client.shop_domain, "theme_id": theme_id},
            )
            return ScriptSyncResult(ok=False, status="no_anchor", theme_id=theme_id)

        status: ScriptSyncStatus = "replaced" if snippet.contains_block(layout) else "injected"
        await client.put_asset(theme_id, LAYOUT_ASSET_KEY, snippet.inject(layout, snippet_source))
    except Exception as exc:  # noqa: BLE001
        logger.exception(
            "Failed to inject optimization script",
            extra={"shop_domain": client.shop_domain, "theme_id": theme_id},
        )
        return ScriptSyncResult(ok=False, status="failed", theme_id=theme_id, error=str(exc))

    logger.info(
        "Optimization script injected",
        extra={"shop_domain": client.shop_domain, "theme_id": theme_id, "status": status},
    )
    return ScriptSyncResult(ok=True, status=status, theme_id=theme_id)


async def uninstall(client: ThemeAssetClient) -> ScriptSyncResult:
    theme_id: ThemeId | None = None
    try:
        theme_id = await client.get_active_theme_id()
        logger.info(
            "Removing optimization script",
            extra={"shop_domain": client.shop_domain, "theme_id": theme_id},
        )
        layout = await client.get_asset(theme_id, LAYOUT_ASSET_KEY)

        if not snippet.contains_block(layout):
            return ScriptSyncResult(ok=True, status="not_present", theme_id=theme_id)

        await client.put_asset(theme_id, LAYOUT_ASSET_KEY, snippet.remove(layout))
    except Exception as exc:  # noqa: BLE001
        logger.exception(
            "Failed to remove optimization script",
            extra={"shop_domain": client.shop_domain, "theme_id": theme_id},
        )
        return ScriptSyncResult(ok=False, status="failed", theme_id=theme_id, error=str(exc))

    logger.info(
        "Optimization script removed",
        extra={"shop_domain": client.shop_domain, "theme_id": theme_id},
    )
    return ScriptSyncResult(ok=True, status="removed", theme_id=theme_id)
