"""Test doubles for the command runner."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence, Union

from core.domain.errors import ClipboardError
from core.domain.models import CommandOutput

Handler = Callable[[tuple[str, ...], Path | None], CommandOutput]
Response = Union[CommandOutput, Exception, Handler, str]


def output(argv: Sequence[str] = ("helper",), returncode: int = 0, stdout: str = "", stderr: str = "") -> CommandOutput:
    return CommandOutput(argv=tuple(argv), returncode=returncode, stdout=stdout, stderr=stderr)


def writes_bytes(data: bytes, returncode: int = 0, stderr: str = "") -> Handler:
    """Handler that behaves like a helper writing `data` to its redirected stdout."""

    def _handler(argv: tuple[str, ...], stdout_path: Path | None) -> CommandOutput:
        assert stdout_path is not None, "expected stdout redirection"
        stdout_path.write_bytes(data)
        return output(argv, returncode=returncode, stderr=stderr)

    return _handler


def writes_file_arg(data: bytes) -> Handler:
    """Handler for helpers that take the destination as last argument (pngpaste)."""

    def _handler(argv: tuple[str, ...], stdout_path: Path | None) -> CommandOutput:
        Path(argv[-1]).write_bytes(data)
        return output(argv)

    return _handler


# Response that writes a few bytes and then never finishes.
HANG = "hang"


@dataclass
class Call:
    argv: tuple[str, ...]
    timeout: float
    stdout_path: Path | None


@dataclass
class FakeRunner:
    """Scripted `CommandRunner`.

    `responses` maps a key (the first argv item, or "binary subcommand" for a
    more specific match) to a `CommandOutput`, an exception to raise, a
    handler, or a list of those consumed in order.
    """

    responses: dict[str, Response | list[Response]] = field(default_factory=dict)
    missing: set[str] = field(default_factory=set)
    calls: list[Call] = field(default_factory=list)

    def available(self, binary: str) -> bool:
        return binary not in self.missing

    def _lookup(self, argv: tuple[str, ...]) -> Response:
        for key in (" ".join(argv[:2]), argv[0]):
            if key in self.responses:
                entry = self.responses[key]
                if isinstance(entry, list):
                    return entry.pop(0)
                return entry
        raise AssertionError(f"unexpected command: {argv}")

    async def run(self, argv: Sequence[str], *, timeout: float, stdout_path: Path | None = None) -> CommandOutput:
        argv = tuple(argv)
        self.calls.append(Call(argv=argv, timeout=timeout, stdout_path=stdout_path))
        if argv[0] in self.missing:
            raise ClipboardError.helper_missing(argv[0])

        response = self._lookup(argv)
        if response == HANG:
            if stdout_path is not None:
                stdout_path.write_bytes(b"partial")
            await asyncio.sleep(3600)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, CommandOutput):
            if stdout_path is not None:
                stdout_path.write_bytes(response.stdout.encode())
            return response.model_copy(update={"argv": argv})
        return response(argv, stdout_path)

    @property
    def binaries(self) -> list[str]:
        return [call.argv[0] for call in self.calls]
