"""Synthetic page-speed figures shown on the dashboard.

No measurement happens here; the numbers are fixed sample values.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pagespeed_app.schemas import PageAnalysisReport, PageMetrics, PageScore, SpeedMetrics

SUGGESTIONS: tuple[str, ...] = (
    "Optimize images - Use WebP format and serve responsive images",
    "Enable browser caching - Set Cache-Control headers",
    "Minify CSS and JavaScript files",
    "Defer non-critical CSS",
    "Use a CDN for faster asset delivery",
    "Implement lazy loading for images",
)


def build_page_analysis(url: str) -> PageAnalysisReport:
    return PageAnalysisReport(
        url=url,
        score=PageScore(performance=85, accessibility=90, seo=100, bestPractices=92),
        metrics=PageMetrics(
            firstContentfulPaint="1.2s",
            largestContentfulPaint="2.4s",
            cumulativeLayoutShift="0.05",
            timeToFirstByte="0.3s",
        ),
        suggestions=list(SUGGESTIONS),
    )


def build_speed_metrics(now: datetime | None = None) -> SpeedMetrics:
    return SpeedMetrics(
        averagePageLoadTime="2.1s",
        averagePageSize="2.5 MB",
        averageRequestCount=45,
        performance=82,
        lastUpdated=now or datetime.now(timezone.utc),
    )
