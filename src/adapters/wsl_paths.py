"""WSL path reconciliation.

PowerShell runs on the Windows side and only knows Windows paths, while the
caller reads the file through the Linux mount. The directory is translated
once with `wslpath -w` before the script runs; afterwards only the filename
of the reported path is trusted and re-joined onto the Linux directory.
"""

from __future__ import annotations

from pathlib import Path, PureWindowsPath

from core.domain.errors import ClipboardError
from core.domain.models import ErrorKind
from core.interfaces.runner import CommandRunner


def reported_filename(reported_path: str) -> str:
    """Filename component of a path printed by a Windows-side helper."""

    name = PureWindowsPath(reported_path.strip()).name
    if not name:
        raise ClipboardError(
            ErrorKind.EXTRACTION_FAILED,
            f"Helper reported an unusable path: {reported_path!r}",
        )
    return name


def reconcile(linux_dir: Path, reported_path: str) -> Path:
    """Linux-side path of the file the helper reported.

    >>> reconcile(Path("/home/u/proj/.temp"), r"C:\\Users\\u\\proj\\.temp\\a.png")
    PosixPath('/home/u/proj/.temp/a.png')
    """

    return linux_dir / reported_filename(reported_path)


class WslPathReconciler:
    def __init__(self, runner: CommandRunner, *, timeout: float = 3.0) -> None:
        self._runner = runner
        self._timeout = timeout

    async def to_host_path(self, linux_path: Path) -> str:
        """Windows-side spelling of `linux_path` (via `wslpath -w`)."""

        output = await self._runner.run(["wslpath", "-w", str(linux_path)], timeout=self._timeout)
        translated = output.stdout.strip()
        if not output.ok or not translated:
            raise ClipboardError(
                ErrorKind.EXTRACTION_FAILED,
                f"Could not translate {linux_path} to a Windows path: {output.stderr.strip() or 'no output'}",
            )
        return translated

    def reconcile(self, linux_dir: Path, reported_path: str) -> Path:
        return reconcile(linux_dir, reported_path)
