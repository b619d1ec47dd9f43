"""Platform and desktop-session detection.

Both detectors are pure functions of an `EnvironmentSnapshot`; the only I/O is
the optional `loginctl` fallback, which goes through the injected runner.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from pathlib import Path

from core.domain.errors import ClipboardError
from core.domain.models import EnvironmentSnapshot, PlatformKind, SessionKind
from core.interfaces.runner import CommandRunner

log = logging.getLogger(__name__)

_SESSION_NAMES = {"wayland": SessionKind.WAYLAND, "x11": SessionKind.X11}


def detect_platform(snapshot: EnvironmentSnapshot) -> PlatformKind:
    """Classify the host into exactly one `PlatformKind`."""

    system = snapshot.system.strip().lower()
    if system == "windows":
        return PlatformKind.WINDOWS
    if system == "linux":
        return PlatformKind.WSL if snapshot.windows_mount_present else PlatformKind.LINUX
    if system == "darwin":
        return PlatformKind.MACOS
    return PlatformKind.UNSUPPORTED


@lru_cache(maxsize=4)
def detect_host_platform(windows_mount: Path) -> PlatformKind:
    """Memoized classification of the running process' host, per mount path."""

    snapshot = EnvironmentSnapshot.from_host(windows_mount=windows_mount)
    kind = detect_platform(snapshot)
    log.debug("Detected platform %s (system=%s)", kind.value, snapshot.system)
    return kind


def session_from_environment(snapshot: EnvironmentSnapshot) -> SessionKind | None:
    """Environment-only part of session detection; `None` means undecided."""

    session_type = (snapshot.get("XDG_SESSION_TYPE") or "").lower()
    if session_type in _SESSION_NAMES:
        return _SESSION_NAMES[session_type]
    if snapshot.get("WAYLAND_DISPLAY"):
        return SessionKind.WAYLAND
    if snapshot.get("DISPLAY"):
        return SessionKind.X11
    return None


def _parse_session_type(text: str) -> SessionKind:
    lowered = text.lower()
    if "wayland" in lowered:
        return SessionKind.WAYLAND
    if "x11" in lowered:
        return SessionKind.X11
    return SessionKind.UNKNOWN


async def _query_session_manager(
    snapshot: EnvironmentSnapshot,
    runner: CommandRunner,
    timeout: float,
) -> SessionKind:
    if not snapshot.user:
        return SessionKind.UNKNOWN

    listing = await runner.run(["loginctl", "list-sessions", "--no-legend"], timeout=timeout)
    if not listing.ok:
        return SessionKind.UNKNOWN

    session_id = None
    for line in listing.stdout.splitlines():
        parts = line.split()
        if len(parts) >= 3 and snapshot.user in parts[1:3]:
            session_id = parts[0]
            break
    if session_id is None:
        return SessionKind.UNKNOWN

    details = await runner.run(
        ["loginctl", "show-session", session_id, "-p", "Type"],
        timeout=timeout,
    )
    if not details.ok:
        return SessionKind.UNKNOWN
    return _parse_session_type(details.stdout)


async def detect_session(
    snapshot: EnvironmentSnapshot,
    runner: CommandRunner,
    *,
    timeout: float = 3.0,
) -> SessionKind:
    """Detect the Linux desktop session, first matching signal wins.

    Order: XDG_SESSION_TYPE, WAYLAND_DISPLAY, DISPLAY, then a bounded
    `loginctl` query. Every failure of the query collapses to `unknown`.
    """

    from_env = session_from_environment(snapshot)
    if from_env is not None:
        return from_env

    try:
        return await asyncio.wait_for(
            _query_session_manager(snapshot, runner, timeout),
            timeout=timeout,
        )
    except (ClipboardError, TimeoutError, OSError) as exc:
        log.debug("loginctl session query failed: %s", exc)
        return SessionKind.UNKNOWN
