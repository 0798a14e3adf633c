"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from pdfgate.infrastructure.config import AppConfig
from pdfgate.infrastructure.graceful_shutdown import GracefulShutdown

if TYPE_CHECKING:
    from pdfgate.application.render_pipeline import RenderPipeline
    from pdfgate.application.use_cases import (
        GenerateAlvaraUseCase,
        GenerateCompanyReportUseCase,
    )
    from pdfgate.domain.ports import TemplatePort
    from pdfgate.infrastructure.admission import AdmissionController
    from pdfgate.infrastructure.browser.pool import SharedBrowserPool
    from pdfgate.infrastructure.metrics import RenderMetrics


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    templates: TemplatePort

    # Render path (admission gate + single shared Chromium)
    admission: AdmissionController
    browser_pool: SharedBrowserPool
    pipeline: RenderPipeline

    # Use cases
    alvara_uc: GenerateAlvaraUseCase
    company_report_uc: GenerateCompanyReportUseCase

    # Metrics (in-memory counters)
    metrics: RenderMetrics

    # Graceful shutdown (request tracking + drain)
    graceful_shutdown: GracefulShutdown
