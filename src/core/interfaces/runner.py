"""Contrato para ejecutar procesos auxiliares.

Por qué Protocol:
- El Core (detector, backends) solo necesita "lanzar un comando con timeout y
  capturar stdout/stderr/exit code".
- Los tests sustituyen el runner real por uno guionizado, sin tocar el SO.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import CommandOutput


@runtime_checkable
class CommandRunner(Protocol):
    """Ejecuta un comando externo con un timeout estricto.

    Reglas de diseño:
    - Un binario inexistente se reporta como `ClipboardError` de tipo
      `helper_not_installed`, no como `FileNotFoundError`.
    - Al vencer el timeout (o al cancelarse la tarea) el proceso se mata.
    - Un exit code distinto de cero NO es una excepción: lo interpreta quien llama.
    """

    async def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float,
        stdout_path: Path | None = None,
    ) -> CommandOutput:
        """Ejecuta `argv`; si `stdout_path` se indica, la salida estándar va a ese fichero."""

        ...

    def available(self, binary: str) -> bool:
        """True si `binary` se puede resolver en el PATH."""

        ...
