"""CLI principal (Typer).

Por qué una capa fina:
- El Core devuelve un `ExtractionResult`; aquí solo se decide cómo mostrarlo
  (Rich o JSON) y con qué exit code terminar.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli import doctor
from cli.ui_components import build_error_panel, build_saved_panel, print_banner
from core.config import AppSettings
from core.domain.errors import ClipboardError
from core.domain.models import ExtractionErr, ExtractionRequest, ExtractionResult
from core.services.clipboard_pipeline import (
    PipelineHooks,
    paste_clipboard_image,
    probe_clipboard,
    resolve_target_directory,
)

app = typer.Typer(
    no_args_is_help=True,
    help="Save the image currently on the clipboard into a project folder.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False, rich_tracebacks=True)],
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log helper invocations."),
) -> None:
    _configure_logging(verbose)


@app.command()
def save(
    directory: Path | None = typer.Option(
        None,
        "--dir",
        "-d",
        help="Target directory (default: <workspace>/.temp).",
    ),
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace root used for the default target directory.",
    ),
    no_probe: bool = typer.Option(False, "--no-probe", help="Skip the fast clipboard check."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print the banner."),
) -> None:
    """Extract the clipboard image now."""

    workspace = workspace or Path.cwd()
    settings = AppSettings()
    if no_probe:
        settings = settings.model_copy(update={"probe_before_extract": False})

    try:
        target = resolve_target_directory(settings=settings, workspace=workspace, target=directory)
    except ClipboardError as exc:
        _report(exc.to_result(), workspace=workspace, as_json=as_json)
        raise typer.Exit(code=1)

    if not (as_json or quiet):
        print_banner(_console)

    if as_json:
        result = asyncio.run(paste_clipboard_image(ExtractionRequest(target_directory=target), settings=settings))
    else:
        with _console.status("Retrieving image from clipboard...") as status:
            hooks = PipelineHooks(stage=status.update)
            result = asyncio.run(
                paste_clipboard_image(
                    ExtractionRequest(target_directory=target),
                    settings=settings,
                    hooks=hooks,
                )
            )

    _report(result, workspace=workspace, as_json=as_json)
    if not result.ok:
        raise typer.Exit(code=1)


def _report(result: ExtractionResult, *, workspace: Path, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, sort_keys=True))
        return
    if isinstance(result, ExtractionErr):
        _err_console.print(build_error_panel(result))
        return
    _console.print(build_saved_panel(result, workspace=workspace))


@app.command()
def probe() -> None:
    """Report whether the clipboard currently holds an image."""

    has_image = asyncio.run(probe_clipboard())
    if has_image is None:
        _console.print("[yellow]unknown[/yellow] (no fast check on this platform; run `save` to try)")
        return
    if has_image:
        _console.print("[green]yes[/green]")
        return
    _console.print("[red]no[/red]")
    raise typer.Exit(code=1)


def run() -> None:
    app()
