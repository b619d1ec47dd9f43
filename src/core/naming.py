"""Filename policy for saved clipboard images.

`clipboard-image-2024-01-01_12-00-00_042.png`: local time to the second, then
the millisecond. Two names only collide when taken within the same
millisecond, which is accepted.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

FILENAME_PREFIX = "clipboard-image-"

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now().astimezone()


def build_image_stem(now: datetime) -> str:
    timestamp = now.replace(tzinfo=None).isoformat(timespec="seconds")
    timestamp = timestamp.replace(":", "-").replace(".", "-").replace("T", "_")
    milliseconds = now.microsecond // 1000
    return f"{FILENAME_PREFIX}{timestamp}_{milliseconds:03d}"


def build_image_filename(now: datetime, extension: str = "png") -> str:
    """Full filename for `now`; `extension` may be given with or without the dot."""

    return f"{build_image_stem(now)}.{extension.lstrip('.').lower()}"
