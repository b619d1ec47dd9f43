"""Piezas comunes de los backends basados en procesos auxiliares.

Por qué aquí:
- wl-paste, xclip y pngpaste fallan de formas parecidas (exit != 0 y un
  mensaje en stderr); la traducción a `ErrorKind` vive en un solo sitio.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from core.domain.errors import ClipboardError
from core.domain.models import CommandOutput, ErrorKind
from core.interfaces.runner import CommandRunner
from core.validation import discard_on_failure

log = logging.getLogger(__name__)


def lists_image_type(listing: str) -> bool:
    """True if any advertised clipboard type is an `image/*` MIME type."""

    return any(line.strip().lower().startswith("image/") for line in listing.splitlines())


def classify_failure(output: CommandOutput, no_image_markers: Sequence[str]) -> ClipboardError:
    """Map a non-zero helper exit to "nothing to paste" or a generic failure."""

    binary = output.argv[0] if output.argv else "helper"
    detail = output.stderr.strip() or output.stdout.strip() or f"exit code {output.returncode}"
    lowered = detail.lower()
    if any(marker in lowered for marker in no_image_markers):
        return ClipboardError(ErrorKind.NO_IMAGE_IN_CLIPBOARD, f"No image found in clipboard ({detail})")
    return ClipboardError(ErrorKind.EXTRACTION_FAILED, f"Failed to save clipboard image: {binary}: {detail}")


async def probe_listing(runner: CommandRunner, argv: Sequence[str], *, timeout: float) -> bool:
    """Run a type-listing command; every failure collapses to `False`."""

    try:
        output = await runner.run(argv, timeout=timeout)
    except (ClipboardError, OSError) as exc:
        log.debug("Probe %s failed: %s", argv[0], exc)
        return False
    return output.ok and lists_image_type(output.stdout)


async def run_into_file(
    runner: CommandRunner,
    argv: Sequence[str],
    destination: Path,
    *,
    timeout: float,
    no_image_markers: Sequence[str],
    redirect_stdout: bool = True,
) -> Path:
    """Run a helper that produces `destination`; partial output is removed on failure."""

    with discard_on_failure(destination):
        output = await runner.run(
            argv,
            timeout=timeout,
            stdout_path=destination if redirect_stdout else None,
        )
        if not output.ok:
            raise classify_failure(output, no_image_markers)
    return destination
