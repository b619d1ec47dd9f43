"""Contratos (Protocol) entre el Core y los adaptadores.

El pipeline solo conoce `ClipboardBackend` y `CommandRunner`; los procesos
reales y los tests implementan estas dos piezas.
"""

from core.interfaces.backend import ClipboardBackend
from core.interfaces.runner import CommandRunner

__all__ = ["ClipboardBackend", "CommandRunner"]
