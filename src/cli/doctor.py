"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from adapters.clipboard_sources import select_backend
from adapters.process_runner import AsyncProcessRunner
from cli.ui_components import build_doctor_table
from core.config import AppSettings
from core.domain.errors import ClipboardError, install_hint
from core.domain.models import EnvironmentSnapshot, PlatformKind, SessionKind
from core.platform import detect_platform, detect_session

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and helper checks.")

_console = Console()


@app.command()
def run() -> None:
    """Detect platform/session and check that the clipboard helpers are installed."""

    settings = AppSettings()
    runner = AsyncProcessRunner()
    snapshot = EnvironmentSnapshot.from_host(windows_mount=settings.windows_mount_path)

    table = build_doctor_table()

    platform = detect_platform(snapshot)
    table.add_row(
        "Platform",
        "OK" if platform is not PlatformKind.UNSUPPORTED else "FAIL",
        f"{platform.value} (system={snapshot.system})",
    )

    session: SessionKind | None = None
    if platform is PlatformKind.LINUX:
        session = asyncio.run(
            detect_session(snapshot, runner, timeout=settings.session_query_timeout_seconds)
        )
        table.add_row(
            "Session",
            "OK" if session is not SessionKind.UNKNOWN else "FAIL",
            session.value,
        )

    ok = True
    try:
        backend = select_backend(platform, session, runner=runner, settings=settings)
    except ClipboardError as exc:
        ok = False
        table.add_row("Backend", "FAIL", exc.message)
    else:
        probe_detail = "fast probe" if backend.supports_probe else "no fast probe (extraction decides)"
        table.add_row("Backend", "OK", f"{backend.name}, {probe_detail}")
        for helper in backend.helpers:
            if runner.available(helper):
                table.add_row(f"Helper {helper}", "OK", "found on PATH")
            else:
                ok = False
                table.add_row(f"Helper {helper}", "MISSING", install_hint(helper))

    target = settings.temp_dir_name
    table.add_row("Target folder", "OK", f"<workspace>/{target}")
    table.add_row(
        "Limits",
        "OK",
        f"{settings.min_image_bytes}B..{settings.max_image_bytes}B, "
        f"extract timeout {settings.extraction_timeout_seconds:g}s",
    )

    _console.print(table)

    if not ok:
        _console.print("\n[yellow]Note:[/yellow] `clip-paste save` will fail until the items above are fixed.")
        raise typer.Exit(code=1)
