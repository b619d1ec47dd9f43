"""Backends de portapapeles (estrategias concretas).

Por qué un paquete:
- Agrupa un módulo por mecanismo nativo (wl-clipboard, xclip, pngpaste, PowerShell).
- Cada módulo implementa `core.interfaces.backend.ClipboardBackend`.
- `select_backend` es el único punto donde se decide la estrategia: una
  entrada por plataforma (y por sesión en Linux).
"""

from __future__ import annotations

from typing import Callable

from adapters.clipboard_sources.macos import MacOSClipboard
from adapters.clipboard_sources.wayland import WaylandClipboard
from adapters.clipboard_sources.windows import WindowsClipboard, WslClipboard
from adapters.clipboard_sources.x11 import X11Clipboard
from core.config import AppSettings
from core.domain.errors import ClipboardError
from core.domain.models import ErrorKind, PlatformKind, SessionKind
from core.interfaces.backend import ClipboardBackend
from core.interfaces.runner import CommandRunner

BackendFactory = Callable[[CommandRunner, AppSettings], ClipboardBackend]

# La sesión solo discrimina en Linux; el resto de plataformas usa `None`.
BACKENDS: dict[tuple[PlatformKind, SessionKind | None], BackendFactory] = {
    (PlatformKind.LINUX, SessionKind.WAYLAND): WaylandClipboard,
    (PlatformKind.LINUX, SessionKind.X11): X11Clipboard,
    (PlatformKind.MACOS, None): MacOSClipboard,
    (PlatformKind.WINDOWS, None): WindowsClipboard,
    (PlatformKind.WSL, None): WslClipboard,
}


def select_backend(
    platform: PlatformKind,
    session: SessionKind | None,
    *,
    runner: CommandRunner,
    settings: AppSettings,
) -> ClipboardBackend:
    """Resuelve la estrategia para (plataforma, sesión) o lanza `ClipboardError`."""

    if platform is PlatformKind.UNSUPPORTED:
        raise ClipboardError(
            ErrorKind.UNSUPPORTED_PLATFORM,
            "Only supported on Windows, WSL, macOS, and Linux environments",
        )

    key = (platform, session if platform is PlatformKind.LINUX else None)
    factory = BACKENDS.get(key)
    if factory is None:
        raise ClipboardError(
            ErrorKind.NO_CLIPBOARD_BACKEND,
            "Unknown session type. Linux clipboard requires X11 or Wayland.",
            hint="Set XDG_SESSION_TYPE, WAYLAND_DISPLAY or DISPLAY for the current desktop session.",
        )
    return factory(runner, settings)


__all__ = [
    "BACKENDS",
    "MacOSClipboard",
    "WaylandClipboard",
    "WindowsClipboard",
    "WslClipboard",
    "X11Clipboard",
    "select_backend",
]
