"""
Shared fixtures: isolated settings, synthetic environments and a scripted runner.
"""

from collections.abc import Callable
from datetime import datetime
import os

import pytest

from core.config import AppSettings
from core.domain.models import EnvironmentSnapshot
from tests.helpers import FakeRunner

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


@pytest.fixture(autouse=True)
def isolate_clip_paste_env(monkeypatch):
    """Remove CLIP_PASTE_* variables so tests only see what they set."""
    for key in list(os.environ.keys()):
        if key.startswith("CLIP_PASTE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        probe_timeout_seconds=1.0,
        session_query_timeout_seconds=1.0,
        path_translation_timeout_seconds=1.5,
        extraction_timeout_seconds=2.0,
        overall_timeout_seconds=5.0,
    )


@pytest.fixture
def make_snapshot() -> Callable[..., EnvironmentSnapshot]:
    def _make(
        system: str = "Linux",
        *,
        environ: dict[str, str] | None = None,
        user: str | None = "u",
        windows_mount_present: bool = False,
    ) -> EnvironmentSnapshot:
        return EnvironmentSnapshot(
            system=system,
            environ=environ or {},
            user=user,
            windows_mount_present=windows_mount_present,
        )

    return _make


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: datetime(2024, 1, 1, 12, 0, 0, 42_000)


@pytest.fixture
def png_bytes() -> bytes:
    """A PNG-looking payload comfortably above the 1 KiB floor."""
    return PNG_HEADER + b"\x00" * 4096
