"""Backend de portapapeles: Wayland (wl-clipboard)."""

from __future__ import annotations

from pathlib import Path

from adapters.clipboard_sources.base import probe_listing, run_into_file
from core.config import AppSettings
from core.interfaces.backend import ClipboardBackend
from core.interfaces.runner import CommandRunner

# Mensajes de wl-paste cuando no hay nada pegable en el tipo pedido.
_NO_IMAGE_MARKERS = (
    "nothing is copied",
    "no selection",
    "no suitable type",
    "not available as requested type",
)


class WaylandClipboard(ClipboardBackend):
    """Lee la imagen con `wl-paste --type image/png`."""

    name = "wayland"
    helpers = ("wl-paste",)
    supports_probe = True

    def __init__(self, runner: CommandRunner, settings: AppSettings | None = None) -> None:
        self._runner = runner
        self._settings = settings or AppSettings()

    async def has_image(self) -> bool:
        return await probe_listing(
            self._runner,
            ["wl-paste", "--list-types"],
            timeout=self._settings.probe_timeout_seconds,
        )

    async def extract(self, target_dir: Path, stem: str) -> Path:
        return await run_into_file(
            self._runner,
            ["wl-paste", "--no-newline", "--type", "image/png"],
            target_dir / f"{stem}.png",
            timeout=self._settings.extraction_timeout_seconds,
            no_image_markers=_NO_IMAGE_MARKERS,
        )
