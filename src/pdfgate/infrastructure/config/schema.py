"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .defaults import DEFAULT_LAUNCH_ARGS

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _normalize_path(value: Any) -> Path | None:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if value is None or value == "":
        return None
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (admission/browser/registry/logging/shutdown).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="pdfgate", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Admission (YAML section: admission.*)
    max_concurrent: int = Field(
        default=2,
        validation_alias=AliasChoices(
            "max_concurrent",
            AliasPath("admission", "max_concurrent"),
        ),
        description="Maximum renders running against the browser at once.",
    )
    acquire_timeout_seconds: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices(
            "acquire_timeout_seconds",
            AliasPath("admission", "acquire_timeout_seconds"),
        ),
        description="Seconds a request may queue for a render slot (None = forever).",
    )

    # Browser (YAML section: browser.*)
    chrome_path: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices(
            "chrome_path",
            AliasPath("browser", "executable_path"),
        ),
        description="Explicit Chromium binary; probed when unset.",
    )
    use_bundled_chromium: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "use_bundled_chromium",
            AliasPath("browser", "use_bundled_chromium"),
        ),
        description="Use Playwright's bundled Chromium when no system binary is found.",
    )
    browser_headless: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "browser_headless",
            AliasPath("browser", "headless"),
        ),
        description="Run Chromium headless.",
    )
    launch_args: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LAUNCH_ARGS),
        validation_alias=AliasChoices(
            "launch_args",
            AliasPath("browser", "launch_args"),
        ),
        description="Chromium command-line flags.",
    )
    render_timeout_ms: int = Field(
        default=30_000,
        validation_alias=AliasChoices(
            "render_timeout_ms",
            AliasPath("browser", "render_timeout_ms"),
        ),
        description="Playwright timeout for loading and printing a document.",
    )
    min_pdf_bytes: int = Field(
        default=1000,
        validation_alias=AliasChoices(
            "min_pdf_bytes",
            AliasPath("browser", "min_pdf_bytes"),
        ),
        description="Smaller renderer output is treated as corrupt.",
    )

    # Company registry (YAML section: registry.*)
    registry_base_url: str = Field(
        default="https://brasilapi.com.br/api/cnpj/v1",
        validation_alias=AliasChoices(
            "registry_base_url",
            AliasPath("registry", "base_url"),
        ),
        description="Base URL of the CNPJ lookup API.",
    )
    registry_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "registry_timeout_seconds",
            AliasPath("registry", "timeout_seconds"),
        ),
        description="HTTP timeout for registry lookups.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Shutdown (YAML section: shutdown.*)
    drain_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "drain_timeout_seconds",
            AliasPath("shutdown", "drain_timeout_seconds"),
        ),
        description="Seconds to wait for in-flight requests before closing the browser.",
    )

    @field_validator("chrome_path", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path | None:
        return _normalize_path(v)

    @field_validator("max_concurrent")
    @classmethod
    def _validate_max_concurrent(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_concurrent must be >= 1")
        return v

    @field_validator("acquire_timeout_seconds")
    @classmethod
    def _validate_acquire_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("acquire_timeout_seconds must be > 0")
        return v

    @field_validator("render_timeout_ms")
    @classmethod
    def _validate_render_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("render_timeout_ms must be > 0")
        return v

    @field_validator("min_pdf_bytes")
    @classmethod
    def _validate_min_pdf_bytes(cls, v: int) -> int:
        if v < 0:
            raise ValueError("min_pdf_bytes must be >= 0")
        return v

    @field_validator("registry_timeout_seconds", "drain_timeout_seconds")
    @classmethod
    def _validate_positive_seconds(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "admission": {
                "max_concurrent": self.max_concurrent,
                "acquire_timeout_seconds": self.acquire_timeout_seconds,
            },
            "browser": {
                "executable_path": str(self.chrome_path) if self.chrome_path else None,
                "use_bundled_chromium": self.use_bundled_chromium,
                "headless": self.browser_headless,
                "launch_args": list(self.launch_args),
                "render_timeout_ms": self.render_timeout_ms,
                "min_pdf_bytes": self.min_pdf_bytes,
            },
            "registry": {
                "base_url": self.registry_base_url,
                "timeout_seconds": self.registry_timeout_seconds,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "shutdown": {"drain_timeout_seconds": self.drain_timeout_seconds},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read PDFGATE_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - PDFGATE_MAX_CONCURRENT
    - PDFGATE_ACQUIRE_TIMEOUT_SECONDS
    - PDFGATE_CHROME_PATH
    - PDFGATE_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="PDFGATE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    max_concurrent: Optional[int] = None
    acquire_timeout_seconds: Optional[float] = None

    chrome_path: Optional[Path] = None
    use_bundled_chromium: Optional[bool] = None
    browser_headless: Optional[bool] = None
    render_timeout_ms: Optional[int] = None
    min_pdf_bytes: Optional[int] = None

    registry_base_url: Optional[str] = None
    registry_timeout_seconds: Optional[float] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    drain_timeout_seconds: Optional[float] = None

    @field_validator("chrome_path", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
