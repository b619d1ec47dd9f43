"""Clipboard extraction orchestration.

This module owns the whole "extract now" flow so that entry points (the CLI,
an editor integration, tests) only hand over a target directory and consume
an `ExtractionResult`. Side-effects on the UI (spinners, messages) stay out
of here; callers can observe progress through `PipelineHooks`.

Flow: detect platform -> detect session (Linux) -> select backend -> check
helpers -> probe -> create target directory -> extract -> validate.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from adapters.clipboard_sources import select_backend
from adapters.process_runner import AsyncProcessRunner
from core.config import AppSettings
from core.domain.errors import ClipboardError
from core.domain.models import (
    EnvironmentSnapshot,
    ErrorKind,
    ExtractionErr,
    ExtractionRequest,
    ExtractionResult,
    PlatformKind,
    SessionKind,
)
from core.interfaces.backend import ClipboardBackend
from core.interfaces.runner import CommandRunner
from core.naming import Clock, build_image_stem, local_now
from core.platform import detect_host_platform, detect_platform, detect_session
from core.validation import validate_image_file

log = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "No image found in clipboard. Copy an image or image file and try again."


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress)."""

    stage: Callable[[str], None] | None = None

    def notify(self, message: str) -> None:
        if self.stage:
            self.stage(message)


@dataclass
class ResolvedBackend:
    platform: PlatformKind
    session: SessionKind | None
    backend: ClipboardBackend


def resolve_target_directory(
    *,
    settings: AppSettings,
    workspace: Path | None = None,
    target: Path | None = None,
) -> Path:
    """Explicit target wins; otherwise `<workspace>/<temp_dir_name>`."""

    if target is not None:
        return target.expanduser()
    if workspace is None:
        raise ClipboardError(ErrorKind.WORKSPACE_UNAVAILABLE, "No workspace folder is open")
    workspace = workspace.expanduser()
    if not workspace.is_dir():
        raise ClipboardError(ErrorKind.WORKSPACE_UNAVAILABLE, f"Workspace folder not found: {workspace}")
    return workspace / settings.temp_dir_name


def _ensure_directory(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ClipboardError(
            ErrorKind.WORKSPACE_UNAVAILABLE,
            f"Cannot create target directory {path}: {exc}",
        ) from exc
    return path.resolve()


async def resolve_backend(
    *,
    settings: AppSettings,
    runner: CommandRunner,
    snapshot: EnvironmentSnapshot | None = None,
    platform: PlatformKind | None = None,
) -> ResolvedBackend:
    """Pick the strategy once; raises `ClipboardError` when none applies."""

    if platform is None:
        if snapshot is not None:
            platform = detect_platform(snapshot)
        else:
            platform = detect_host_platform(settings.windows_mount_path)

    session: SessionKind | None = None
    if platform is PlatformKind.LINUX:
        snapshot = snapshot or EnvironmentSnapshot.from_host(windows_mount=settings.windows_mount_path)
        session = await detect_session(
            snapshot,
            runner,
            timeout=settings.session_query_timeout_seconds,
        )

    backend = select_backend(platform, session, runner=runner, settings=settings)
    log.debug("Using %s clipboard backend (platform=%s, session=%s)", backend.name, platform.value, session)
    return ResolvedBackend(platform=platform, session=session, backend=backend)


def _require_helpers(backend: ClipboardBackend, runner: CommandRunner) -> None:
    for helper in backend.helpers:
        if not runner.available(helper):
            raise ClipboardError.helper_missing(helper)


async def _paste(
    request: ExtractionRequest,
    *,
    settings: AppSettings,
    runner: CommandRunner,
    snapshot: EnvironmentSnapshot | None,
    clock: Clock,
    hooks: PipelineHooks,
) -> ExtractionResult:
    resolved = await resolve_backend(
        settings=settings,
        runner=runner,
        snapshot=snapshot,
        platform=request.platform,
    )
    backend = resolved.backend
    _require_helpers(backend, runner)

    if settings.probe_before_extract and backend.supports_probe:
        hooks.notify("Checking clipboard...")
        if await backend.has_image() is False:
            raise ClipboardError(ErrorKind.NO_IMAGE_IN_CLIPBOARD, NO_IMAGE_MESSAGE)

    target_dir = _ensure_directory(request.target_directory)

    hooks.notify("Retrieving image from clipboard...")
    stem = build_image_stem(clock())
    path = await backend.extract(target_dir, stem)

    result = validate_image_file(
        path,
        min_bytes=settings.min_image_bytes,
        max_bytes=settings.max_image_bytes,
    )
    if result.ok:
        log.info("Saved clipboard image to %s (%s bytes)", result.file_path, result.size_bytes)
    return result


async def paste_clipboard_image(
    request: ExtractionRequest,
    *,
    settings: AppSettings | None = None,
    runner: CommandRunner | None = None,
    snapshot: EnvironmentSnapshot | None = None,
    clock: Clock = local_now,
    hooks: PipelineHooks | None = None,
) -> ExtractionResult:
    """Save the clipboard image under `request.target_directory`.

    Never raises for expected failures: every error is returned as an
    `ExtractionErr`. The whole call is bounded by
    `settings.overall_timeout_seconds`; on expiry the running helper is killed.
    """

    settings = settings or AppSettings()
    runner = runner or AsyncProcessRunner()
    hooks = hooks or PipelineHooks()

    try:
        return await asyncio.wait_for(
            _paste(
                request,
                settings=settings,
                runner=runner,
                snapshot=snapshot,
                clock=clock,
                hooks=hooks,
            ),
            timeout=settings.overall_timeout_seconds,
        )
    except TimeoutError:
        return ExtractionErr(
            kind=ErrorKind.TIMEOUT,
            message=f"Clipboard extraction did not finish within {settings.overall_timeout_seconds:g}s",
        )
    except ClipboardError as exc:
        log.info("Clipboard extraction failed (%s): %s", exc.kind.value, exc.message)
        return exc.to_result()
    except OSError as exc:
        log.warning("Clipboard extraction failed: %s", exc)
        return ExtractionErr(kind=ErrorKind.EXTRACTION_FAILED, message=f"Failed to save clipboard image: {exc}")


async def probe_clipboard(
    *,
    settings: AppSettings | None = None,
    runner: CommandRunner | None = None,
    snapshot: EnvironmentSnapshot | None = None,
    platform: PlatformKind | None = None,
) -> bool | None:
    """Cheap "is there an image?" check.

    Returns `None` when the backend has no probe (macOS): only an extraction
    can tell. Never raises.
    """

    settings = settings or AppSettings()
    runner = runner or AsyncProcessRunner()
    try:
        resolved = await resolve_backend(
            settings=settings,
            runner=runner,
            snapshot=snapshot,
            platform=platform,
        )
    except ClipboardError as exc:
        log.debug("No probe available: %s", exc)
        return False
    if not resolved.backend.supports_probe:
        return None
    return await resolved.backend.has_image()
