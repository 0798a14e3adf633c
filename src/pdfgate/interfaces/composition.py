"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from pdfgate.application.render_pipeline import RenderPipeline
from pdfgate.application.use_cases import (
    GenerateAlvaraUseCase,
    GenerateCompanyReportUseCase,
)
from pdfgate.infrastructure.admission import AdmissionController
from pdfgate.infrastructure.barcode import Code128Barcode
from pdfgate.infrastructure.browser.launcher import PlaywrightLauncher
from pdfgate.infrastructure.browser.pool import SharedBrowserPool
from pdfgate.infrastructure.browser.probe import ChromiumProbe
from pdfgate.infrastructure.browser.renderer import PlaywrightPdfRenderer
from pdfgate.infrastructure.config.schema import AppConfig
from pdfgate.infrastructure.metrics import RenderMetrics
from pdfgate.infrastructure.registry import HttpxCompanyRegistry
from pdfgate.infrastructure.templates import JinjaTemplates
from pdfgate.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_browser_pool(config: AppConfig) -> SharedBrowserPool:
    """Wire probe → launcher → pool.  Nothing is launched until first use."""
    launcher = PlaywrightLauncher(
        probe=ChromiumProbe(explicit_path=config.chrome_path),
        use_bundled_chromium=config.use_bundled_chromium,
        headless=config.browser_headless,
        launch_args=config.launch_args,
    )
    return SharedBrowserPool(launcher=launcher)


def wire_render_path(state: AppState, config: AppConfig) -> None:
    """Create admission gate, browser pool, pipeline and use cases.

    Expects ``state.metrics``, ``state.http_client`` and, optionally, a
    pre-built ``state.browser_pool`` (tests inject a fake one).
    """
    state.admission = AdmissionController(max_concurrent=config.max_concurrent)
    if getattr(state, "browser_pool", None) is None:
        state.browser_pool = build_browser_pool(config)

    state.pipeline = RenderPipeline(
        admission=state.admission,
        browser_pool=state.browser_pool,
        renderer=PlaywrightPdfRenderer(
            timeout_ms=config.render_timeout_ms,
            min_pdf_bytes=config.min_pdf_bytes,
        ),
        metrics=state.metrics,
        acquire_timeout=config.acquire_timeout_seconds,
    )

    state.templates = JinjaTemplates()
    state.alvara_uc = GenerateAlvaraUseCase(
        pipeline=state.pipeline,
        templates=state.templates,
        barcode=Code128Barcode(),
    )
    state.company_report_uc = GenerateCompanyReportUseCase(
        pipeline=state.pipeline,
        templates=state.templates,
        registry=HttpxCompanyRegistry(
            http_client=state.http_client,
            base_url=config.registry_base_url,
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Metrics (recorded by the pipeline)
        2. HTTP client (used by the company registry)
        3. Admission gate + browser pool + pipeline + use cases

    Teardown drains in-flight requests before the browser is closed.
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Metrics collector (must exist before components that record)
    state.metrics = RenderMetrics()

    # 2) HTTP client for registry lookups
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.registry_timeout_seconds),
        headers={"Accept": "application/json"},
        follow_redirects=True,
    )
    log.info("http_client_initialized", timeout=config.registry_timeout_seconds)

    # 3) Render path; the browser starts lazily on the first render
    wire_render_path(state, config)
    log.info(
        "render_path_initialized",
        max_concurrent=config.max_concurrent,
        acquire_timeout=config.acquire_timeout_seconds,
    )

    state.graceful_shutdown.mark_ready()
    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.graceful_shutdown.wait_for_drain(
            timeout=config.drain_timeout_seconds,
        )

        await state.browser_pool.shutdown()
        log.info("browser_pool_shut_down")

        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
