"""Tests for ChromiumProbe executable discovery."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pdfgate.domain.exceptions import ExecutableNotFoundError
from pdfgate.domain.ports import ExecutableProbePort
from pdfgate.infrastructure.browser import probe as probe_mod
from pdfgate.infrastructure.browser.probe import ChromiumProbe


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the host's real browsers out of the candidate list."""
    monkeypatch.delenv("CHROME_PATH", raising=False)
    monkeypatch.setattr(probe_mod, "_WELL_KNOWN_PATHS", ())
    monkeypatch.setattr(probe_mod, "_NIX_STORE", tmp_path / "no-nix")
    monkeypatch.setattr(probe_mod.shutil, "which", lambda name: None)


def _binary(tmp_path: Path, name: str = "chromium") -> Path:
    path = tmp_path / name
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    return path


def _version_output(stdout: str) -> MagicMock:
    return MagicMock(return_value=subprocess.CompletedProcess([], 0, stdout=stdout))


class TestCandidates:
    def test_explicit_path_first(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHROME_PATH", "/env/chrome")
        probe = ChromiumProbe(explicit_path=Path("/opt/chromium"))
        assert probe.candidates()[:2] == ["/opt/chromium", "/env/chrome"]

    def test_duplicates_removed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHROME_PATH", "/opt/chromium")
        probe = ChromiumProbe(explicit_path=Path("/opt/chromium"))
        assert probe.candidates() == ["/opt/chromium"]

    def test_nix_store_entries(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        store = tmp_path / "store"
        (store / "abc-chromium-120").mkdir(parents=True)
        (store / "def-firefox-121").mkdir()
        monkeypatch.setattr(probe_mod, "_NIX_STORE", store)

        assert ChromiumProbe().candidates() == [
            str(store / "abc-chromium-120" / "bin" / "chromium"),
            str(store / "abc-chromium-120" / "bin" / "google-chrome"),
        ]

    def test_path_lookup_last(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            probe_mod.shutil,
            "which",
            lambda name: "/usr/local/bin/chromium" if name == "chromium" else None,
        )
        assert ChromiumProbe().candidates() == ["/usr/local/bin/chromium"]


class TestLocateExecutable:
    def test_satisfies_port(self) -> None:
        assert isinstance(ChromiumProbe(), ExecutableProbePort)

    def test_accepts_binary_reporting_chromium(self, tmp_path: Path) -> None:
        binary = _binary(tmp_path)
        with patch.object(probe_mod.subprocess, "run", _version_output("Chromium 120.0.6099.109")):
            assert ChromiumProbe(explicit_path=binary).locate_executable() == binary

    def test_skips_missing_paths(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        binary = _binary(tmp_path, "google-chrome")
        monkeypatch.setenv("CHROME_PATH", str(binary))
        run = _version_output("Google Chrome 121.0")
        with patch.object(probe_mod.subprocess, "run", run):
            found = ChromiumProbe(explicit_path=tmp_path / "missing").locate_executable()
        assert found == binary
        run.assert_called_once()

    def test_rejects_stub_with_wrong_version(self, tmp_path: Path) -> None:
        binary = _binary(tmp_path)
        with patch.object(
            probe_mod.subprocess, "run", _version_output("snap: command not found")
        ), pytest.raises(ExecutableNotFoundError) as exc_info:
            ChromiumProbe(explicit_path=binary).locate_executable()
        assert str(binary) in exc_info.value.candidates

    def test_rejects_hanging_binary(self, tmp_path: Path) -> None:
        binary = _binary(tmp_path)
        run = MagicMock(side_effect=subprocess.TimeoutExpired(str(binary), 3.0))
        with patch.object(probe_mod.subprocess, "run", run), pytest.raises(
            ExecutableNotFoundError
        ):
            ChromiumProbe(explicit_path=binary).locate_executable()

    def test_nothing_found(self) -> None:
        with pytest.raises(ExecutableNotFoundError, match="CHROME_PATH"):
            ChromiumProbe().locate_executable()
