import asyncio
import sys
import time

import pytest

from adapters.process_runner import AsyncProcessRunner
from core.domain.errors import ClipboardError
from core.domain.models import ErrorKind


@pytest.mark.integration
@pytest.mark.asyncio
async def test_captures_stdout_stderr_and_exit_code():
    code = "import sys; print('image/png'); print('oops', file=sys.stderr); sys.exit(3)"

    result = await AsyncProcessRunner().run([sys.executable, "-c", code], timeout=10)

    assert result.returncode == 3
    assert result.stdout.strip() == "image/png"
    assert result.stderr.strip() == "oops"
    assert not result.ok


@pytest.mark.integration
@pytest.mark.asyncio
async def test_redirects_stdout_into_file(tmp_path):
    destination = tmp_path / "out.png"
    code = "import sys; sys.stdout.buffer.write(b'\\x89PNG' + b'\\0' * 2000)"

    result = await AsyncProcessRunner().run([sys.executable, "-c", code], timeout=10, stdout_path=destination)

    assert result.ok
    assert result.stdout == ""
    assert destination.stat().st_size == 2004


@pytest.mark.integration
@pytest.mark.asyncio
async def test_missing_binary_is_helper_not_installed():
    with pytest.raises(ClipboardError) as ei:
        await AsyncProcessRunner().run(["clip-paste-no-such-helper-xyz"], timeout=5)

    assert ei.value.kind is ErrorKind.HELPER_NOT_INSTALLED
    assert "clip-paste-no-such-helper-xyz" in ei.value.message


@pytest.mark.integration
@pytest.mark.asyncio
async def test_timeout_kills_the_process(tmp_path):
    marker = tmp_path / "finished"
    code = f"import time, pathlib; time.sleep(2); pathlib.Path({str(marker)!r}).write_text('done')"

    started = time.monotonic()
    with pytest.raises(ClipboardError) as ei:
        await AsyncProcessRunner().run([sys.executable, "-c", code], timeout=0.3)

    assert ei.value.kind is ErrorKind.TIMEOUT
    assert time.monotonic() - started < 1.5
    await asyncio.sleep(2.5)
    assert not marker.exists()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cancellation_kills_the_process(tmp_path):
    marker = tmp_path / "finished"
    code = f"import time, pathlib; time.sleep(2); pathlib.Path({str(marker)!r}).write_text('done')"

    task = asyncio.create_task(AsyncProcessRunner().run([sys.executable, "-c", code], timeout=30))
    await asyncio.sleep(0.3)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    await asyncio.sleep(2.5)
    assert not marker.exists()


@pytest.mark.unit
def test_available_uses_path_lookup():
    runner = AsyncProcessRunner()

    assert runner.available("clip-paste-no-such-helper-xyz") is False
