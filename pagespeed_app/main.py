from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from pagespeed_app import script_injector
from pagespeed_app.config import settings
from pagespeed_app.optimization_script import render_optimization_script
from pagespeed_app.reports import build_page_analysis, build_speed_metrics
from pagespeed_app.schemas import (
    AnalyzePageRequest,
    LifecycleWebhookResponse,
    PageAnalysisReport,
    ScriptSyncRequest,
    ScriptSyncResponse,
    SpeedMetrics,
    SpeedSettings,
    UpdateSpeedSettingsRequest,
    UpdateSpeedSettingsResponse,
)
from pagespeed_app.script_injector import ScriptSyncResult
from pagespeed_app.security import (
    normalize_shop_domain,
    require_internal_api_token,
    verified_webhook_shop,
)
from pagespeed_app.shopify_api import ThemeAssetClient

logger = logging.getLogger(__name__)

app = FastAPI(title="Page Speed Optimizer", default_response_class=ORJSONResponse)
app.add_middleware(
    CORSMiddleware,
    allow_origins=sorted(set(settings.BACKEND_CORS_ORIGINS)),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(_request: Request, exc: Exception) -> ORJSONResponse:
    logger.exception("Unhandled server exception", exc_info=exc)
    return ORJSONResponse(status_code=500, content={"detail": "Internal server error."})


def build_theme_client(*, shop_domain: str, access_token: str) -> ThemeAssetClient:
    return ThemeAssetClient(shop_domain=shop_domain, access_token=access_token)


def _require_admin_access_token() -> str:
    if not settings.SHOPIFY_ADMIN_ACCESS_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="SHOPIFY_ADMIN_ACCESS_TOKEN is not configured",
        )
    return settings.SHOPIFY_ADMIN_ACCESS_TOKEN


def _serialize_result(*, shop_domain: str, result: ScriptSyncResult) -> ScriptSyncResponse:
    return ScriptSyncResponse(
        shopDomain=shop_domain,
        ok=result.ok,
        status=result.status,
        themeId=str(result.theme_id) if result.theme_id is not None else None,
        error=result.error,
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "message": "Page Speed Optimizer App is running"}


@app.post("/webhooks/app/installed", response_model=LifecycleWebhookResponse)
async def app_installed_webhook(shop_domain: str = Depends(verified_webhook_shop)):
    logger.info("App installed", extra={"shop_domain": shop_domain})
    if not settings.SHOPIFY_ADMIN_ACCESS_TOKEN:
        logger.warning(
            "Skipping optimization script injection; no admin access token configured",
            extra={"shop_domain": shop_domain},
        )
        return LifecycleWebhookResponse(scriptOk=False, status="skipped")

    client = build_theme_client(shop_domain=shop_domain, access_token=settings.SHOPIFY_ADMIN_ACCESS_TOKEN)
    result = await script_injector.install(client, render_optimization_script(SpeedSettings()))
    return LifecycleWebhookResponse(scriptOk=result.ok, status=result.status)


@app.post("/webhooks/app/uninstalled", response_model=LifecycleWebhookResponse)
async def app_uninstalled_webhook(shop_domain: str = Depends(verified_webhook_shop)):
    logger.info("App uninstalled", extra={"shop_domain": shop_domain})
    if not settings.SHOPIFY_ADMIN_ACCESS_TOKEN:
        logger.warning(
            "Skipping optimization script removal; no admin access token configured",
            extra={"shop_domain": shop_domain},
        )
        return LifecycleWebhookResponse(scriptOk=False, status="skipped")

    client = build_theme_client(shop_domain=shop_domain, access_token=settings.SHOPIFY_ADMIN_ACCESS_TOKEN)
    result = await script_injector.uninstall(client)
    return LifecycleWebhookResponse(scriptOk=result.ok, status=result.status)


@app.get("/api/speed-settings", response_model=SpeedSettings)
def get_speed_settings():
    return SpeedSettings()


@app.post("/api/speed-settings", response_model=UpdateSpeedSettingsResponse)
def update_speed_settings(payload: UpdateSpeedSettingsRequest):
    # Not persisted.
    logger.info("Settings updated", extra={"speed_settings": payload.settings.model_dump()})
    return UpdateSpeedSettingsResponse(success=True, message="Settings saved successfully")


@app.post("/api/analyze-page", response_model=PageAnalysisReport)
def analyze_page(payload: AnalyzePageRequest):
    return build_page_analysis(payload.url)


@app.get("/api/metrics", response_model=SpeedMetrics)
def get_metrics():
    return build_speed_metrics()


@app.post(
    "/api/script/install",
    response_model=ScriptSyncResponse,
    dependencies=[Depends(require_internal_api_token)],
)
async def install_script(payload: ScriptSyncRequest):
    shop_domain = normalize_shop_domain(payload.shopDomain)
    client = build_theme_client(shop_domain=shop_domain, access_token=_require_admin_access_token())
    result = await script_injector.install(client, render_optimization_script(payload.settings))
    return _serialize_result(shop_domain=shop_domain, result=result)


@app.post(
    "/api/script/uninstall",
    response_model=ScriptSyncResponse,
    dependencies=[Depends(require_internal_api_token)],
)
async def uninstall_script(payload: ScriptSyncRequest):
    shop_domain = normalize_shop_domain(payload.shopDomain)
    client = build_theme_client(shop_domain=shop_domain, access_token=_require_admin_access_token())
    result = await script_injector.uninstall(client)
    return _serialize_result(shop_domain=shop_domain, result=result)
