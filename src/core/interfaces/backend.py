"""Contratos de backends de portapapeles.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Cada combinación plataforma/sesión (wayland, x11, macOS, Windows, WSL)
  es un adaptador intercambiable y testeable por separado.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClipboardBackend(Protocol):
    """Contrato mínimo para una estrategia de extracción.

    Reglas de diseño:
    - `has_image` nunca lanza: cualquier fallo interno es `False`.
    - `has_image` devuelve `None` si la estrategia no puede saberlo sin
      extraer; en ese caso `supports_probe` es `False`.
    - `extract` lanza `ClipboardError` y no deja ficheros parciales.
    - `helpers` lista los binarios externos que la estrategia necesita.
    """

    name: str
    helpers: tuple[str, ...]
    supports_probe: bool

    async def has_image(self) -> bool | None:
        """¿Contiene el portapapeles una imagen? Sin escribir nada en disco."""

        ...

    async def extract(self, target_dir: Path, stem: str) -> Path:
        """Escribe la imagen en `target_dir` usando `stem` como nombre base."""

        ...
