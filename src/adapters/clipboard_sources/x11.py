"""Backend de portapapeles: X11 (xclip)."""

from __future__ import annotations

from pathlib import Path

from adapters.clipboard_sources.base import probe_listing, run_into_file
from core.config import AppSettings
from core.interfaces.backend import ClipboardBackend
from core.interfaces.runner import CommandRunner

# xclip: "Error: target image/png not available"
_NO_IMAGE_MARKERS = ("not available", "no selection")


class X11Clipboard(ClipboardBackend):
    """Lee la selección `clipboard` con xclip, target `image/png`."""

    name = "x11"
    helpers = ("xclip",)
    supports_probe = True

    def __init__(self, runner: CommandRunner, settings: AppSettings | None = None) -> None:
        self._runner = runner
        self._settings = settings or AppSettings()

    async def has_image(self) -> bool:
        return await probe_listing(
            self._runner,
            ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"],
            timeout=self._settings.probe_timeout_seconds,
        )

    async def extract(self, target_dir: Path, stem: str) -> Path:
        return await run_into_file(
            self._runner,
            ["xclip", "-selection", "clipboard", "-t", "image/png", "-o"],
            target_dir / f"{stem}.png",
            timeout=self._settings.extraction_timeout_seconds,
            no_image_markers=_NO_IMAGE_MARKERS,
        )
