"""Límites, timeouts y carpeta destino de la extracción.

Por qué aquí:
- Todo valor ajustable se lee de `CLIP_PASTE_*` en un solo modelo.
- Permite que adaptadores (procesos auxiliares, validador) lean límites y
  timeouts de forma consistente.

Nota: solo variables de entorno. No hay fichero de configuración persistente.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class AppSettings(BaseSettings):
    """Ajustes de `clip-paste`, validados al construirse.

    Cada campo se puede sobrescribir con `CLIP_PASTE_<CAMPO>` (p. ej.
    `CLIP_PASTE_EXTRACTION_TIMEOUT_SECONDS=20`).
    """

    model_config = SettingsConfigDict(
        env_prefix="CLIP_PASTE_",
        extra="ignore",
        case_sensitive=False,
    )

    temp_dir_name: str = Field(
        default=".temp",
        min_length=1,
        description="Subdirectorio del workspace donde se guardan las imágenes.",
    )

    probe_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=30,
        description="Timeout de la sonda rápida (¿hay imagen en el portapapeles?).",
    )
    session_query_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        le=30,
        description="Timeout de la consulta a loginctl para el tipo de sesión.",
    )
    path_translation_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        le=30,
        description="Timeout de `wslpath -w` al traducir la carpeta destino (WSL).",
    )
    extraction_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Timeout de cada proceso de extracción (segundos).",
    )
    overall_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=300,
        description="Techo agregado para toda la operación (segundos).",
    )

    min_image_bytes: int = Field(
        default=1024,
        ge=1,
        description="Por debajo de este tamaño la captura se considera corrupta.",
    )
    max_image_bytes: int = Field(
        default=50 * MIB,
        ge=1,
        description="Tamaño máximo aceptado (bytes).",
    )

    probe_before_extract: bool = Field(
        default=True,
        description="Ejecutar la sonda antes de extraer para fallar rápido.",
    )

    # WSL: si este path existe en un Linux, estamos dentro de WSL.
    windows_mount_path: Path = Field(
        default=Path("/mnt/c/Windows"),
        description="Montaje del sistema de ficheros de Windows usado para detectar WSL.",
    )

    @model_validator(mode="after")
    def _check_size_envelope(self) -> "AppSettings":
        if self.min_image_bytes > self.max_image_bytes:
            raise ValueError("min_image_bytes must not exceed max_image_bytes")
        return self
