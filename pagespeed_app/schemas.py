from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SpeedSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enableImageOptimization: bool = True
    enableLazyLoading: bool = True
    enableCaching: bool = True
    imageQuality: int = Field(default=80, ge=1, le=100)
    cacheExpiration: int = Field(default=3600, ge=0)
    minifyCSS: bool = True
    minifyJS: bool = True
    deferNonCriticalCSS: bool = True


class UpdateSpeedSettingsRequest(BaseModel):
    settings: SpeedSettings


class UpdateSpeedSettingsResponse(BaseModel):
    success: bool
    message: str


class AnalyzePageRequest(BaseModel):
    url: str = Field(min_length=1)


class PageScore(BaseModel):
    performance: int
    accessibility: int
    seo: int
    bestPractices: int


class PageMetrics(BaseModel):
    firstContentfulPaint: str
    largestContentfulPaint: str
    cumulativeLayoutShift: str
    timeToFirstByte: str


class PageAnalysisReport(BaseModel):
    url: str
    score: PageScore
    metrics: PageMetrics
    suggestions: list[str]


class SpeedMetrics(BaseModel):
    averagePageLoadTime: str
    averagePageSize: str
    averageRequestCount: int
    performance: int
    lastUpdated: datetime


ScriptSyncStatus = Literal[
    "injected",
    "replaced",
    "removed",
    "not_present",
    "no_anchor",
    "failed",
    "skipped",
]


class ScriptSyncRequest(BaseModel):
    shopDomain: str = Field(min_length=1)
    settings: SpeedSettings | None = None


class ScriptSyncResponse(BaseModel):
    shopDomain: str
    ok: bool
    status: ScriptSyncStatus
    themeId: str | None = None
    error: str | None = None


class LifecycleWebhookResponse(BaseModel):
    received: bool = True
    scriptOk: bool
    status: ScriptSyncStatus
