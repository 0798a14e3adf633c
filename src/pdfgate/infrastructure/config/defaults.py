"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_LAUNCH_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--single-process",
    "--disable-gpu",
)

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "pdfgate",
    "environment": "dev",
    "admission": {
        "max_concurrent": 2,
        "acquire_timeout_seconds": None,  # wait forever
    },
    "browser": {
        "executable_path": None,
        "use_bundled_chromium": True,
        "headless": True,
        "launch_args": list(DEFAULT_LAUNCH_ARGS),
        "render_timeout_ms": 30_000,
        "min_pdf_bytes": 1000,
    },
    "registry": {
        "base_url": "https://brasilapi.com.br/api/cnpj/v1",
        "timeout_seconds": 10.0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "shutdown": {
        "drain_timeout_seconds": 10.0,
    },
}
