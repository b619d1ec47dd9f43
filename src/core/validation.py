"""Post-extraction sanity checks and scoped cleanup.

Por qué un módulo aparte:
- Cualquier backend puede producir un fichero vacío o truncado; la regla de
  "no dejar basura en disco" se aplica aquí una sola vez.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from core.config import MIB
from core.domain.errors import ClipboardError
from core.domain.models import ErrorKind, ExtractionOk, ExtractionResult

log = logging.getLogger(__name__)


def discard(path: Path) -> None:
    """Best-effort delete; a failure is logged and never raised."""

    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        log.warning("Could not remove %s: %s", path, exc)
    else:
        log.debug("Removed %s", path)


@contextmanager
def discard_on_failure(path: Path, *, pattern: str | None = None) -> Iterator[Path]:
    """Delete the candidate output if the block exits with any exception.

    With `pattern`, `path` is a directory and every entry matching the glob is
    removed (used when the helper decides the extension).
    """

    try:
        yield path
    except BaseException:
        if pattern is None:
            discard(path)
        else:
            for match in path.glob(pattern):
                discard(match)
        raise


def _format_limit(max_bytes: int) -> str:
    if max_bytes >= MIB:
        return f"{max_bytes // MIB}MB"
    return f"{max_bytes} bytes"


def _checked_size(path: Path, min_bytes: int, max_bytes: int) -> int:
    if not path.is_file():
        raise ClipboardError(ErrorKind.EXTRACTION_FAILED, "Image file was not created successfully")

    size = path.stat().st_size
    if size == 0:
        raise ClipboardError(ErrorKind.EMPTY_RESULT, "Image file is empty")
    if size < min_bytes:
        raise ClipboardError(
            ErrorKind.SUSPICIOUSLY_SMALL,
            f"Image file is too small ({size} bytes, likely corrupted)",
        )
    if size > max_bytes:
        raise ClipboardError(
            ErrorKind.TOO_LARGE,
            f"Image file is too large (>{_format_limit(max_bytes)})",
        )
    return size


def validate_image_file(
    path: Path,
    *,
    min_bytes: int = 1024,
    max_bytes: int = 50 * MIB,
) -> ExtractionResult:
    """Check existence and size envelope; invalid files are deleted."""

    try:
        with discard_on_failure(path):
            size = _checked_size(path, min_bytes, max_bytes)
    except ClipboardError as exc:
        log.info("Rejected %s: %s", path, exc.message)
        return exc.to_result()
    except OSError as exc:
        return ClipboardError(ErrorKind.EXTRACTION_FAILED, f"Could not inspect {path}: {exc}").to_result()
    return ExtractionOk(file_path=path, size_bytes=size)
