"""Ejecución de procesos auxiliares (asyncio).

Por qué un wrapper:
- Estandariza timeouts, captura de stdout/stderr y logging para todos los
  helpers (wl-paste, xclip, pngpaste, powershell, wslpath, loginctl).
- Garantiza que un proceso que excede su timeout, o cuya tarea se cancela,
  se mata en lugar de quedar huérfano.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Sequence

from core.domain.errors import ClipboardError
from core.domain.models import CommandOutput

log = logging.getLogger(__name__)

_KILL_GRACE_SECONDS = 2.0


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(proc.wait(), timeout=_KILL_GRACE_SECONDS)
    except TimeoutError:
        log.warning("Process %s did not exit after kill", proc.pid)


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class AsyncProcessRunner:
    """`CommandRunner` backed by `asyncio.create_subprocess_exec` (no shell)."""

    def available(self, binary: str) -> bool:
        return shutil.which(binary) is not None

    async def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float,
        stdout_path: Path | None = None,
    ) -> CommandOutput:
        argv = tuple(argv)
        binary = argv[0]
        log.debug("Running %s (timeout=%ss)", binary, timeout)

        stdout_file = stdout_path.open("wb") if stdout_path is not None else None
        try:
            try:
                proc = await asyncio.create_subprocess_exec(
                    *argv,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=stdout_file if stdout_file is not None else asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except FileNotFoundError as exc:
                raise ClipboardError.helper_missing(binary) from exc

            try:
                stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
            except TimeoutError as exc:
                await _terminate(proc)
                raise ClipboardError.timed_out(binary, timeout) from exc
            except asyncio.CancelledError:
                await _terminate(proc)
                raise
        finally:
            if stdout_file is not None:
                stdout_file.close()

        result = CommandOutput(
            argv=argv,
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
        )
        if not result.ok:
            log.debug("%s exited with %s: %s", binary, result.returncode, result.stderr.strip())
        return result
