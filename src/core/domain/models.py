"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a subprocesos ni a la CLI.
- El resultado de una extracción es un valor (Ok/Err), no una excepción: la
  capa que llama decide cómo presentarlo.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

import getpass
import os
import platform
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PlatformKind(str, Enum):
    """Entorno de ejecución detectado (uno por invocación)."""

    WINDOWS = "windows"
    WSL = "wsl"
    MACOS = "macos"
    LINUX = "linux"
    UNSUPPORTED = "unsupported"


class SessionKind(str, Enum):
    """Tipo de sesión gráfica en Linux."""

    X11 = "x11"
    WAYLAND = "wayland"
    UNKNOWN = "unknown"


class ErrorKind(str, Enum):
    """Taxonomía única de fallos expuesta al llamador."""

    UNSUPPORTED_PLATFORM = "unsupported_platform"
    NO_CLIPBOARD_BACKEND = "no_clipboard_backend"
    HELPER_NOT_INSTALLED = "helper_not_installed"
    NO_IMAGE_IN_CLIPBOARD = "no_image_in_clipboard"
    EXTRACTION_FAILED = "extraction_failed"
    EMPTY_RESULT = "empty_result"
    SUSPICIOUSLY_SMALL = "suspiciously_small"
    TOO_LARGE = "too_large"
    TIMEOUT = "timeout"
    WORKSPACE_UNAVAILABLE = "workspace_unavailable"


class EnvironmentSnapshot(BaseModel):
    """Foto inmutable del entorno del proceso.

    Por qué existe:
    - El detector y la sonda no leen `os.environ` directamente; reciben este
      valor, de modo que los tests pueden fabricar entornos sintéticos.
    """

    model_config = ConfigDict(frozen=True)

    system: str = Field(
        ...,
        description="Identidad del SO tal como la devuelve `platform.system()`.",
    )
    environ: dict[str, str] = Field(
        default_factory=dict,
        description="Variables de entorno relevantes (sesión, display, usuario).",
    )
    user: str | None = Field(
        default=None,
        description="Usuario actual, usado por la consulta a loginctl.",
    )
    windows_mount_present: bool = Field(
        default=False,
        description="True si el montaje del sistema de ficheros de Windows es visible (WSL).",
    )

    @classmethod
    def from_host(cls, *, windows_mount: Path) -> "EnvironmentSnapshot":
        """Captura el entorno real del proceso actual."""

        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = None
        return cls(
            system=platform.system(),
            environ=dict(os.environ),
            user=user,
            windows_mount_present=windows_mount.exists(),
        )

    def get(self, name: str) -> str | None:
        value = self.environ.get(name)
        if value is None or not value.strip():
            return None
        return value.strip()


class ExtractionRequest(BaseModel):
    """Petición de extracción hecha por la capa externa (CLI, editor)."""

    target_directory: Path = Field(
        ...,
        description="Directorio destino; se crea si no existe.",
    )
    platform: PlatformKind | None = Field(
        default=None,
        description="Fuerza la plataforma; por defecto se detecta.",
    )


class CommandOutput(BaseModel):
    """Resultado crudo de un proceso auxiliar (wl-paste, xclip, powershell...)."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ExtractionOk(BaseModel):
    """Variante de éxito: el fichero existe, no está vacío y está en el destino."""

    status: Literal["ok"] = "ok"
    file_path: Path = Field(..., description="Ruta absoluta de la imagen escrita.")
    size_bytes: int = Field(..., gt=0, description="Tamaño del fichero en bytes.")

    @property
    def ok(self) -> bool:
        return True


class ExtractionErr(BaseModel):
    """Variante de error tipada."""

    status: Literal["error"] = "error"
    kind: ErrorKind
    message: str = Field(..., min_length=1)
    hint: str | None = Field(
        default=None,
        description="Acción sugerida (p.ej. comando de instalación del helper).",
    )

    @property
    def ok(self) -> bool:
        return False


ExtractionResult = ExtractionOk | ExtractionErr
