"""Backends de portapapeles: Windows nativo y WSL (PowerShell).

Ambos ejecutan el mismo script (`core.powershell`); WSL añade la traducción
de rutas antes y la reconciliación del nombre de fichero después.
"""

from __future__ import annotations

import logging
from pathlib import Path

from adapters.clipboard_sources.base import classify_failure
from adapters.wsl_paths import WslPathReconciler, reconcile
from core.config import AppSettings
from core.domain.errors import ClipboardError
from core.domain.models import CommandOutput, ErrorKind
from core.interfaces.backend import ClipboardBackend
from core.interfaces.runner import CommandRunner
from core.powershell import (
    EXIT_NO_IMAGE,
    EXIT_NOT_AN_IMAGE,
    PROBE_TRUE,
    build_clipboard_script,
    powershell_command,
)
from core.validation import discard_on_failure

log = logging.getLogger(__name__)


def _last_line(text: str) -> str:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return lines[-1] if lines else ""


class WindowsClipboard(ClipboardBackend):
    """Portapapeles de Windows vía `System.Windows.Forms.Clipboard`."""

    name = "windows"
    executable = "powershell"
    helpers: tuple[str, ...] = ("powershell",)
    supports_probe = True

    def __init__(self, runner: CommandRunner, settings: AppSettings | None = None) -> None:
        self._runner = runner
        self._settings = settings or AppSettings()

    async def _host_directory(self, target_dir: Path) -> str:
        return str(target_dir)

    async def has_image(self) -> bool:
        script = build_clipboard_script(dry_run=True)
        try:
            output = await self._runner.run(
                powershell_command(self.executable, script),
                timeout=self._settings.probe_timeout_seconds,
            )
        except (ClipboardError, OSError) as exc:
            log.debug("PowerShell probe failed: %s", exc)
            return False
        return output.ok and _last_line(output.stdout).lower() == PROBE_TRUE

    def _failure(self, output: CommandOutput) -> ClipboardError:
        detail = output.stderr.strip() or f"exit code {output.returncode}"
        if output.returncode == EXIT_NO_IMAGE:
            return ClipboardError(ErrorKind.NO_IMAGE_IN_CLIPBOARD, "No image found in clipboard")
        if output.returncode == EXIT_NOT_AN_IMAGE:
            return ClipboardError(ErrorKind.EXTRACTION_FAILED, detail)
        return classify_failure(output, ("no image found in clipboard",))

    async def extract(self, target_dir: Path, stem: str) -> Path:
        host_dir = await self._host_directory(target_dir)
        script = build_clipboard_script(destination_dir=host_dir, stem=stem)

        # The script picks the extension (file drops keep theirs).
        with discard_on_failure(target_dir, pattern=f"{stem}.*"):
            output = await self._runner.run(
                powershell_command(self.executable, script),
                timeout=self._settings.extraction_timeout_seconds,
            )
            if not output.ok:
                raise self._failure(output)

            reported = _last_line(output.stdout)
            if not reported:
                raise ClipboardError(ErrorKind.EXTRACTION_FAILED, "PowerShell did not report an output path")
            log.debug("PowerShell reported %s", reported)
            return reconcile(target_dir, reported)


class WslClipboard(WindowsClipboard):
    """Portapapeles de Windows desde WSL (`powershell.exe` + `wslpath`)."""

    name = "wsl"
    executable = "powershell.exe"
    helpers = ("powershell.exe", "wslpath")

    def __init__(self, runner: CommandRunner, settings: AppSettings | None = None) -> None:
        super().__init__(runner, settings)
        self._paths = WslPathReconciler(
            runner,
            timeout=self._settings.path_translation_timeout_seconds,
        )

    async def _host_directory(self, target_dir: Path) -> str:
        return await self._paths.to_host_path(target_dir)
