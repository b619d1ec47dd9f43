"""Error taxonomy shared by adapters and the extraction pipeline.

Adapters raise `ClipboardError`; the pipeline is the only place that turns it
into an `ExtractionErr` value for the caller.
"""

from __future__ import annotations

from core.domain.models import ErrorKind, ExtractionErr

# Install commands keyed by the helper binary that was missing.
INSTALL_HINTS: dict[str, str] = {
    "wl-paste": "wl-clipboard not installed. Run: sudo apt-get install wl-clipboard",
    "xclip": "xclip not installed. Run: sudo apt-get install xclip",
    "pngpaste": "pngpaste not installed. Run: brew install pngpaste",
    "powershell": "Windows PowerShell not found. Make sure powershell.exe is on PATH.",
    "powershell.exe": (
        "powershell.exe not reachable from WSL. Enable Windows interop "
        "(appendWindowsPath / [interop] in /etc/wsl.conf)."
    ),
    "wslpath": "wslpath not found. It ships with WSL; update WSL with: wsl --update",
    "loginctl": "loginctl not found. It ships with systemd.",
}


def install_hint(binary: str) -> str:
    return INSTALL_HINTS.get(binary, f"Install `{binary}` and make sure it is on PATH.")


class ClipboardError(Exception):
    """A normalized failure raised at an adapter boundary."""

    def __init__(self, kind: ErrorKind, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.hint = hint

    @classmethod
    def helper_missing(cls, binary: str) -> "ClipboardError":
        hint = install_hint(binary)
        return cls(
            ErrorKind.HELPER_NOT_INSTALLED,
            f"Required clipboard helper `{binary}` is not installed. {hint}",
            hint=hint,
        )

    @classmethod
    def timed_out(cls, binary: str, seconds: float) -> "ClipboardError":
        return cls(ErrorKind.TIMEOUT, f"`{binary}` did not finish within {seconds:g}s and was terminated.")

    def to_result(self) -> ExtractionErr:
        return ExtractionErr(kind=self.kind, message=self.message, hint=self.hint)

    def __str__(self) -> str:
        return self.message
