from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from pagespeed_app import script_injector  # noqa: E402
from pagespeed_app.optimization_script import render_optimization_script  # noqa: E402
from pagespeed_app.security import parse_shop_domain  # noqa: E402
from pagespeed_app.shopify_api import ThemeAssetClient  # noqa: E402


async def run(action: str, shop_domain: str, access_token: str) -> script_injector.ScriptSyncResult:
    client = ThemeAssetClient(shop_domain=shop_domain, access_token=access_token)
    if action == "install":
        return await script_injector.install(client, render_optimization_script())
    return await script_injector.uninstall(client)


def main(action: str, shop_domain: str, access_token: str) -> int:
    result = asyncio.run(run(action, shop_domain, access_token))
    print(f"{action} on {shop_domain}: status={result.status} themeId={result.theme_id}")
    if result.error:
        print(f"error: {result.error}")
    return 0 if result.ok else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Inject or remove the page speed optimization script in a shop's active theme."
    )
    parser.add_argument("action", choices=["install", "uninstall"])
    parser.add_argument("--shop", required=True, help="Shop domain, admin URL or handle, e.g. example.myshopify.com.")
    parser.add_argument(
        "--token",
        default=os.environ.get("SHOPIFY_ADMIN_ACCESS_TOKEN"),
        help="Admin API access token (defaults to SHOPIFY_ADMIN_ACCESS_TOKEN).",
    )
    args = parser.parse_args()
    if not args.token:
        parser.error("--token or SHOPIFY_ADMIN_ACCESS_TOKEN is required")
    shop_domain = parse_shop_domain(args.shop)
    if shop_domain is None:
        parser.error(f"{args.shop!r} is not a *.myshopify.com shop")
    logging.basicConfig(level=logging.INFO)
    sys.exit(main(args.action, shop_domain, args.token))
