"""Playwright-backed browser launcher and handle."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

import structlog
from playwright.async_api import Browser, Page, Playwright, async_playwright

from pdfgate.domain.exceptions import ExecutableNotFoundError
from pdfgate.domain.ports.browser import ExecutableProbePort
from pdfgate.infrastructure.config.defaults import DEFAULT_LAUNCH_ARGS

log = structlog.get_logger(__name__)


class PlaywrightBrowserHandle:
    """A launched Chromium plus the Playwright driver that owns it."""

    def __init__(
        self,
        *,
        playwright: Playwright,
        browser: Browser,
        generation: int,
        executable: Path | None = None,
    ) -> None:
        self._playwright = playwright
        self._browser = browser
        self.generation = generation
        self.executable = executable

    def is_connected(self) -> bool:
        return self._browser.is_connected()

    async def new_page(self) -> Page:
        return await self._browser.new_page()

    async def close(self) -> None:
        """Close the browser, then stop the driver.

        The driver is stopped even when closing the browser fails; the first
        error is re-raised for the caller to report.
        """
        try:
            if self._browser.is_connected():
                await self._browser.close()
        finally:
            await self._playwright.stop()

    def __repr__(self) -> str:
        return f"<PlaywrightBrowserHandle generation={self.generation}>"


class PlaywrightLauncher:
    """Launch headless Chromium through Playwright.

    Usage::

        launcher = PlaywrightLauncher(probe=ChromiumProbe())
        handle = await launcher(1)

    Args:
        probe: Locates a system Chromium.  ``None`` always uses Playwright's
            bundled browser.
        use_bundled_chromium: Fall back to the bundled browser when the
            probe finds nothing; otherwise the launch fails.
        headless: Run without a display.
        launch_args: Extra Chromium command-line flags.
    """

    def __init__(
        self,
        *,
        probe: ExecutableProbePort | None = None,
        use_bundled_chromium: bool = True,
        headless: bool = True,
        launch_args: Sequence[str] = DEFAULT_LAUNCH_ARGS,
    ) -> None:
        self._probe = probe
        self._use_bundled = use_bundled_chromium
        self._headless = headless
        self._launch_args = list(launch_args)

    def _resolve_executable(self) -> Path | None:
        if self._probe is None:
            return None
        try:
            return self._probe.locate_executable()
        except ExecutableNotFoundError:
            if not self._use_bundled:
                raise
            log.info("chromium_using_bundled")
            return None

    async def __call__(self, generation: int) -> PlaywrightBrowserHandle:
        # The probe spawns `chromium --version` per candidate; keep it off the loop.
        executable = await asyncio.to_thread(self._resolve_executable)

        pw = await async_playwright().start()
        try:
            browser = await pw.chromium.launch(
                executable_path=str(executable) if executable else None,
                headless=self._headless,
                args=self._launch_args,
            )
        except BaseException:
            await pw.stop()
            raise

        log.info(
            "chromium_launched",
            generation=generation,
            executable=str(executable) if executable else "bundled",
            headless=self._headless,
        )
        return PlaywrightBrowserHandle(
            playwright=pw,
            browser=browser,
            generation=generation,
            executable=executable,
        )
