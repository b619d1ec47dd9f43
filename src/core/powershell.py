"""PowerShell script builder for the Windows clipboard.

The Windows and WSL backends talk to `System.Windows.Forms.Clipboard` through
a short PowerShell script. Instead of interpolating a template, the script is
composed from a few nodes and rendered once:

- `LoadAssembly`, `TryCatch`, `CheckFileDrop`, `CheckImage`,
  `If`, `WriteOutput`, `Fail`, `Exit`, `Statement`.

Values coming from Python (directories, filenames) only ever enter the script
through `ps_quote`. The rendered script is handed to PowerShell with
`-EncodedCommand`, so no shell quoting is involved on either side of WSL.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Sequence

IMAGE_EXTENSIONS: tuple[str, ...] = (
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".bmp",
    ".webp",
    ".svg",
    ".ico",
    ".tiff",
    ".tif",
)

EXIT_FAILED = 1
EXIT_NO_IMAGE = 2
EXIT_NOT_AN_IMAGE = 3

PROBE_TRUE = "true"
PROBE_FALSE = "false"

_INDENT = "    "
# PowerShell treats the typographic single quotes as quote characters too.
_SINGLE_QUOTES = ("'", "‘", "’", "‚", "‛")


def ps_quote(value: str) -> str:
    """Render `value` as a PowerShell single-quoted (verbatim) string literal.

    Inside single quotes `$` and the backtick are literal; only quote
    characters need escaping, which is done by doubling them.
    """

    escaped = value
    for quote in _SINGLE_QUOTES:
        escaped = escaped.replace(quote, quote * 2)
    return f"'{escaped}'"


def encode_command(script: str) -> str:
    """Payload for `powershell -EncodedCommand` (base64 of UTF-16LE)."""

    return base64.b64encode(script.encode("utf-16-le")).decode("ascii")


def powershell_command(executable: str, script: str) -> list[str]:
    return [
        executable,
        "-NoProfile",
        "-NonInteractive",
        "-Sta",
        "-EncodedCommand",
        encode_command(script),
    ]


class Node:
    def lines(self) -> list[str]:
        raise NotImplementedError


def _block(steps: Sequence[Node]) -> list[str]:
    out: list[str] = []
    for step in steps:
        out.extend(_INDENT + line for line in step.lines())
    return out


@dataclass(frozen=True)
class Statement(Node):
    text: str

    def lines(self) -> list[str]:
        return [self.text]


@dataclass(frozen=True)
class LoadAssembly(Node):
    name: str

    def __post_init__(self) -> None:
        if not self.name.replace(".", "").isalnum():
            raise ValueError(f"invalid assembly name: {self.name!r}")

    def lines(self) -> list[str]:
        return [f"Add-Type -AssemblyName {self.name}"]


@dataclass(frozen=True)
class WriteOutput(Node):
    """Write a PowerShell expression to stdout."""

    expression: str

    def lines(self) -> list[str]:
        return [f"Write-Output {self.expression}"]


@dataclass(frozen=True)
class Exit(Node):
    code: int = 0

    def lines(self) -> list[str]:
        return [f"exit {self.code}"]


@dataclass(frozen=True)
class Fail(Node):
    """Diagnostic on stderr followed by a non-zero exit."""

    message: str
    exit_code: int = EXIT_FAILED
    detail: str | None = None

    def lines(self) -> list[str]:
        text = ps_quote(self.message)
        if self.detail is not None:
            text = f"{ps_quote(self.message + ': ')} + {self.detail}"
        return [f"[Console]::Error.WriteLine({text})", f"exit {self.exit_code}"]


@dataclass(frozen=True)
class If(Node):
    condition: str
    then: tuple[Node, ...]

    def lines(self) -> list[str]:
        return [f"if ({self.condition}) {{", *_block(self.then), "}"]


@dataclass(frozen=True)
class TryCatch(Node):
    body: tuple[Node, ...]
    handler: tuple[Node, ...]
    cleanup: tuple[Node, ...] = ()

    def lines(self) -> list[str]:
        out = ["try {", *_block(self.body), "} catch {", *_block(self.handler)]
        if self.cleanup:
            out.extend(["} finally {", *_block(self.cleanup)])
        out.append("}")
        return out


@dataclass(frozen=True)
class CheckFileDrop(Node):
    """Branch on the first entry of the clipboard file-drop list.

    Binds `$source` and `$extension` for the nested steps.
    """

    on_image: tuple[Node, ...]
    on_other: tuple[Node, ...] = ()
    extensions: tuple[str, ...] = IMAGE_EXTENSIONS

    def lines(self) -> list[str]:
        allowed = ", ".join(ps_quote(ext) for ext in self.extensions)
        inner: list[str] = [
            "$source = $files[0]",
            "$extension = [System.IO.Path]::GetExtension($source).ToLower()",
            f"if (@({allowed}) -contains $extension) {{",
            *_block(self.on_image),
        ]
        if self.on_other:
            inner.extend(["} else {", *_block(self.on_other)])
        inner.append("}")
        return [
            "$files = [System.Windows.Forms.Clipboard]::GetFileDropList()",
            "if ($files -and $files.Count -gt 0) {",
            *(_INDENT + line for line in inner),
            "}",
        ]


@dataclass(frozen=True)
class CheckImage(Node):
    """Branch on the in-memory clipboard image. Binds `$image`."""

    on_image: tuple[Node, ...]
    on_missing: tuple[Node, ...] = ()

    def lines(self) -> list[str]:
        out = [
            "$image = [System.Windows.Forms.Clipboard]::GetImage()",
            "if ($image -ne $null) {",
            *_block(self.on_image),
        ]
        if self.on_missing:
            out.extend(["} else {", *_block(self.on_missing)])
        out.append("}")
        return out


@dataclass(frozen=True)
class Script:
    steps: tuple[Node, ...] = field(default_factory=tuple)

    def render(self) -> str:
        out: list[str] = []
        for step in self.steps:
            out.extend(step.lines())
        return "\n".join(out) + "\n"


def _probe_script(extensions: tuple[str, ...]) -> Script:
    found = (WriteOutput(ps_quote(PROBE_TRUE)), Exit(0))
    return Script(
        steps=(
            TryCatch(
                body=(
                    LoadAssembly("System.Windows.Forms"),
                    CheckFileDrop(on_image=found, extensions=extensions),
                    CheckImage(on_image=(Statement("$image.Dispose()"), *found)),
                    WriteOutput(ps_quote(PROBE_FALSE)),
                ),
                handler=(WriteOutput(ps_quote(PROBE_FALSE)),),
            ),
        )
    )


def _extract_script(destination_dir: str, stem: str, extensions: tuple[str, ...]) -> Script:
    directory = ps_quote(destination_dir)
    copy_file = (
        If("-not (Test-Path -LiteralPath $source)", (Fail("Source file not found", detail="$source"),)),
        TryCatch(
            body=(
                Statement(
                    f"$target = Join-Path -Path {directory} -ChildPath ({ps_quote(stem)} + $extension)"
                ),
                Statement("Copy-Item -LiteralPath $source -Destination $target -Force"),
                WriteOutput("$target"),
                Exit(0),
            ),
            handler=(Fail("Failed to copy file", detail="$_"),),
        ),
    )
    save_image = (
        TryCatch(
            body=(
                Statement(
                    f"$target = Join-Path -Path {directory} -ChildPath {ps_quote(stem + '.png')}"
                ),
                Statement("$image.Save($target, [System.Drawing.Imaging.ImageFormat]::Png)"),
            ),
            handler=(Fail("Failed to save clipboard image", detail="$_"),),
            cleanup=(Statement("$image.Dispose()"),),
        ),
        WriteOutput("$target"),
        Exit(0),
    )
    return Script(
        steps=(
            Statement("$ErrorActionPreference = 'Stop'"),
            TryCatch(
                body=(LoadAssembly("System.Windows.Forms"), LoadAssembly("System.Drawing")),
                handler=(Fail("Failed to load required .NET assemblies"),),
            ),
            CheckFileDrop(
                on_image=copy_file,
                on_other=(
                    Fail(
                        "Clipboard contains a non-image file",
                        exit_code=EXIT_NOT_AN_IMAGE,
                        detail="$source",
                    ),
                ),
                extensions=extensions,
            ),
            CheckImage(
                on_image=save_image,
                on_missing=(Fail("No image found in clipboard", exit_code=EXIT_NO_IMAGE),),
            ),
        )
    )


def build_clipboard_script(
    *,
    destination_dir: str | None = None,
    stem: str | None = None,
    dry_run: bool = False,
    extensions: tuple[str, ...] = IMAGE_EXTENSIONS,
) -> str:
    """Render the clipboard script.

    With `dry_run` the script writes nothing and prints `true`/`false`;
    otherwise it saves into `destination_dir` (a host-side path) and prints
    the resulting path.
    """

    if dry_run:
        return _probe_script(extensions).render()
    if not destination_dir or not stem:
        raise ValueError("destination_dir and stem are required unless dry_run is set")
    return _extract_script(destination_dir, stem, extensions).render()
