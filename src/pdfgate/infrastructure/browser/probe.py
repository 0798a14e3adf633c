"""Chromium executable discovery.

Hosting platforms put Chromium in very different places (distro packages,
snap, Nix store).  Candidates are tried in this order:

    1. Explicit path (config) or ``CHROME_PATH`` environment variable
    2. Well-known Linux install paths
    3. ``/nix/store/*chromium*/bin/{chromium,google-chrome}``
    4. ``chromium`` / ``google-chrome`` on ``PATH``

A candidate is accepted only if it exists and ``<path> --version`` reports
Chromium or Chrome within a few seconds, which rules out snap stubs and
broken symlinks.
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from pathlib import Path

import structlog

from pdfgate.domain.exceptions import ExecutableNotFoundError

log = structlog.get_logger(__name__)

_WELL_KNOWN_PATHS: tuple[str, ...] = (
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
    "/usr/bin/google-chrome",
    "/usr/bin/google-chrome-stable",
    "/snap/bin/chromium",
)

_NIX_STORE = Path("/nix/store")
_NIX_BINARIES: tuple[str, ...] = ("chromium", "google-chrome")
_PATH_NAMES: tuple[str, ...] = ("chromium", "google-chrome")

_VERSION_TIMEOUT_SECONDS = 3.0
_VERSION_RE = re.compile(r"chromium|chrome", re.IGNORECASE)


def _nix_candidates(root: Path) -> list[str]:
    """Chromium binaries inside Nix store packages, if the store exists."""
    try:
        entries = sorted(p for p in root.iterdir() if "chromium" in p.name.lower())
    except OSError:
        return []
    return [str(entry / "bin" / name) for entry in entries for name in _NIX_BINARIES]


def _reports_chromium(path: str) -> bool:
    """Run ``<path> --version`` and check it identifies as Chromium/Chrome."""
    try:
        result = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
            timeout=_VERSION_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.SubprocessError):
        log.debug("chromium_candidate_not_runnable", path=path, exc_info=True)
        return False
    return bool(_VERSION_RE.search(result.stdout or ""))


class ChromiumProbe:
    """Locate a runnable Chromium binary.

    Args:
        explicit_path: Path from configuration; takes precedence over
            ``CHROME_PATH``.
    """

    def __init__(self, *, explicit_path: Path | None = None) -> None:
        self._explicit_path = explicit_path

    def candidates(self) -> list[str]:
        """All candidate paths, in priority order, without duplicates."""
        ordered: list[str] = []
        if self._explicit_path is not None:
            ordered.append(str(self._explicit_path))
        env_path = os.environ.get("CHROME_PATH")
        if env_path:
            ordered.append(env_path)
        ordered.extend(_WELL_KNOWN_PATHS)
        ordered.extend(_nix_candidates(_NIX_STORE))
        for name in _PATH_NAMES:
            found = shutil.which(name)
            if found:
                ordered.append(found)
        return list(dict.fromkeys(ordered))

    def locate_executable(self) -> Path:
        """Return the first usable candidate.

        Raises:
            ExecutableNotFoundError: no candidate exists and runs.
        """
        tried = self.candidates()
        for candidate in tried:
            if not Path(candidate).exists():
                continue
            if _reports_chromium(candidate):
                log.info("chromium_located", path=candidate)
                return Path(candidate)
        log.warning("chromium_not_found", candidates=len(tried))
        raise ExecutableNotFoundError(tried)
