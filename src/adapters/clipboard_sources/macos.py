"""Backend de portapapeles: macOS (pngpaste).

No hay sonda rápida: la propia extracción es la señal.
"""

from __future__ import annotations

from pathlib import Path

from adapters.clipboard_sources.base import run_into_file
from core.config import AppSettings
from core.interfaces.backend import ClipboardBackend
from core.interfaces.runner import CommandRunner

# pngpaste: "No PNG data found on the clipboard!"
_NO_IMAGE_MARKERS = ("no png data", "no image data", "no image")


class MacOSClipboard(ClipboardBackend):
    name = "macos"
    helpers = ("pngpaste",)
    supports_probe = False

    def __init__(self, runner: CommandRunner, settings: AppSettings | None = None) -> None:
        self._runner = runner
        self._settings = settings or AppSettings()

    async def has_image(self) -> bool | None:
        # pngpaste no lista tipos: solo la extracción lo sabe.
        return None

    async def extract(self, target_dir: Path, stem: str) -> Path:
        destination = target_dir / f"{stem}.png"
        return await run_into_file(
            self._runner,
            ["pngpaste", str(destination)],
            destination,
            timeout=self._settings.extraction_timeout_seconds,
            no_image_markers=_NO_IMAGE_MARKERS,
            redirect_stdout=False,
        )
