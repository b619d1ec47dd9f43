"""Paneles y tablas Rich compartidos por `save`, `probe` y `doctor`.

Los comandos deciden qué mostrar; aquí solo se decide cómo se ve.
"""

from __future__ import annotations

import os
from pathlib import Path

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ExtractionErr, ExtractionOk


def print_banner(console: Console) -> None:
    """Banner de `save`; el comando lo omite con `--json` o `--quiet`."""

    title = Text("clip-paste", style="bold cyan")
    subtitle = Text("Clipboard image → project folder", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(0, 4)))


def relative_to_workspace(path: Path, workspace: Path) -> str:
    """Ruta relativa al workspace si está dentro; si no, la absoluta."""

    try:
        return os.path.relpath(path, workspace.resolve())
    except ValueError:
        return str(path)


def build_saved_panel(result: ExtractionOk, *, workspace: Path) -> Panel:
    relative = relative_to_workspace(result.file_path, workspace)
    size_kb = round(result.size_bytes / 1024)
    body = Text()
    body.append("Image saved to: ")
    body.append(relative, style="bold")
    body.append(f" ({size_kb}KB)", style="dim")
    return Panel(body, border_style="green")


def build_error_panel(result: ExtractionErr) -> Panel:
    """Panel para un `ExtractionErr`; incluye la pista de instalación si existe."""

    body = Text(result.message.strip())
    if result.hint and result.hint not in result.message:
        body.append(f"\n\n{result.hint}", style="yellow")
    title = Text(f"Failed to save clipboard image ({result.kind.value})", style="bold red")
    return Panel(body, title=title, border_style="red")


def build_doctor_table() -> Table:
    table = Table(title="clip-paste Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table
