import re

import pytest

from core.domain.errors import ClipboardError
from core.domain.models import (
    ErrorKind,
    ExtractionErr,
    ExtractionOk,
    ExtractionRequest,
    PlatformKind,
)
from core.services.clipboard_pipeline import (
    PipelineHooks,
    paste_clipboard_image,
    probe_clipboard,
    resolve_target_directory,
)
from tests.helpers import HANG, output, writes_bytes, writes_file_arg

NAME = re.compile(r"^clipboard-image-\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}_\d{3}\.png$")
WAYLAND = {"WAYLAND_DISPLAY": "wayland-0"}
X11 = {"XDG_SESSION_TYPE": "x11"}


async def _paste(request, *, settings, runner, snapshot, clock=None, hooks=None):
    kwargs = {"settings": settings, "runner": runner, "snapshot": snapshot, "hooks": hooks}
    if clock is not None:
        kwargs["clock"] = clock
    return await paste_clipboard_image(request, **kwargs)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unsupported_platform_short_circuits(tmp_path, settings, runner, make_snapshot):
    target = tmp_path / ".temp"

    result = await _paste(
        ExtractionRequest(target_directory=target),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot("SunOS"),
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.UNSUPPORTED_PLATFORM
    assert runner.calls == []
    assert not target.exists()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_x11_empty_clipboard_reports_no_image(tmp_path, settings, runner, make_snapshot):
    runner.responses = {"xclip": output(stdout="TARGETS\nUTF8_STRING\n")}
    target = tmp_path / ".temp"

    result = await _paste(
        ExtractionRequest(target_directory=target),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot(environ=X11),
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.NO_IMAGE_IN_CLIPBOARD
    assert len(runner.calls) == 1
    assert not target.exists()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_wayland_png_end_to_end(tmp_path, settings, runner, make_snapshot, png_bytes, fixed_clock):
    runner.responses = {
        "wl-paste --list-types": output(stdout="image/png\ntext/html\n"),
        "wl-paste": writes_bytes(png_bytes),
    }
    target = tmp_path / "proj" / ".temp"
    stages: list[str] = []

    result = await _paste(
        ExtractionRequest(target_directory=target),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot(environ=WAYLAND),
        clock=fixed_clock,
        hooks=PipelineHooks(stage=stages.append),
    )

    assert isinstance(result, ExtractionOk)
    assert result.file_path.parent == target.resolve()
    assert result.file_path.name == "clipboard-image-2024-01-01_12-00-00_042.png"
    assert NAME.match(result.file_path.name)
    assert result.size_bytes == len(png_bytes) > 1024
    assert result.file_path.read_bytes() == png_bytes
    assert stages == ["Checking clipboard...", "Retrieving image from clipboard..."]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_helper_timeout_is_reported_and_leaves_no_file(tmp_path, settings, runner, make_snapshot):
    settings = settings.model_copy(update={"probe_before_extract": False})
    runner.responses = {"wl-paste": ClipboardError.timed_out("wl-paste", 2.0)}
    target = tmp_path / ".temp"

    result = await _paste(
        ExtractionRequest(target_directory=target),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot(environ=WAYLAND),
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.TIMEOUT
    assert list(target.iterdir()) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_overall_ceiling_cancels_hanging_helper(tmp_path, settings, runner, make_snapshot):
    settings = settings.model_copy(update={"probe_before_extract": False, "overall_timeout_seconds": 0.2})
    runner.responses = {"xclip": HANG}
    target = tmp_path / ".temp"

    result = await _paste(
        ExtractionRequest(target_directory=target),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot(environ=X11),
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.TIMEOUT
    assert list(target.iterdir()) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_session_has_no_backend(tmp_path, settings, runner, make_snapshot):
    result = await _paste(
        ExtractionRequest(target_directory=tmp_path / ".temp"),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot(user=None),
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.NO_CLIPBOARD_BACKEND
    assert runner.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_helper_message_includes_install_hint(tmp_path, settings, runner, make_snapshot):
    runner.missing = {"xclip"}

    result = await _paste(
        ExtractionRequest(target_directory=tmp_path / ".temp"),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot(environ=X11),
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.HELPER_NOT_INSTALLED
    assert result.hint is not None
    assert result.hint in result.message
    assert "sudo apt-get install xclip" in result.message
    assert runner.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_truncated_capture_is_rejected_and_deleted(tmp_path, settings, runner, make_snapshot):
    runner.responses = {
        "wl-paste --list-types": output(stdout="image/png\n"),
        "wl-paste": writes_bytes(b"\x89PNG" + b"\0" * 496),
    }
    target = tmp_path / ".temp"

    result = await _paste(
        ExtractionRequest(target_directory=target),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot(environ=WAYLAND),
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.SUSPICIOUSLY_SMALL
    assert list(target.iterdir()) == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_macos_goes_straight_to_extraction(tmp_path, settings, runner, make_snapshot, png_bytes):
    runner.responses = {"pngpaste": writes_file_arg(png_bytes)}

    result = await _paste(
        ExtractionRequest(target_directory=tmp_path / ".temp"),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot("Darwin"),
    )

    assert isinstance(result, ExtractionOk)
    assert runner.binaries == ["pngpaste"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_wsl_result_is_reconciled_onto_linux_directory(
    tmp_path, settings, runner, make_snapshot, png_bytes, fixed_clock
):
    target = tmp_path / "proj" / ".temp"

    def fake_powershell(argv, stdout_path):
        written = sorted(target.iterdir()) if target.exists() else []
        assert written == []
        name = "clipboard-image-2024-01-01_12-00-00_042.png"
        (target / name).write_bytes(png_bytes)
        return output(argv, stdout=f"C:\\Users\\u\\proj\\.temp\\{name}\r\n")

    runner.responses = {
        "powershell.exe": [output(stdout="true\r\n"), fake_powershell],
        "wslpath": output(stdout="C:\\Users\\u\\proj\\.temp\n"),
    }

    result = await _paste(
        ExtractionRequest(target_directory=target),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot(windows_mount_present=True),
        clock=fixed_clock,
    )

    assert isinstance(result, ExtractionOk)
    assert result.file_path == target.resolve() / "clipboard-image-2024-01-01_12-00-00_042.png"
    assert runner.binaries == ["powershell.exe", "wslpath", "powershell.exe"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_platform_override_skips_detection(tmp_path, settings, runner, make_snapshot, png_bytes):
    runner.responses = {"pngpaste": writes_file_arg(png_bytes)}

    result = await _paste(
        ExtractionRequest(target_directory=tmp_path, platform=PlatformKind.MACOS),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot("Windows"),
    )

    assert isinstance(result, ExtractionOk)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_uncreatable_target_is_workspace_unavailable(tmp_path, settings, runner, make_snapshot, png_bytes):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    runner.responses = {"pngpaste": writes_file_arg(png_bytes)}

    result = await _paste(
        ExtractionRequest(target_directory=blocker / ".temp"),
        settings=settings,
        runner=runner,
        snapshot=make_snapshot("Darwin"),
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.WORKSPACE_UNAVAILABLE
    assert runner.calls == []


@pytest.mark.unit
def test_resolve_target_directory(tmp_path, settings):
    assert resolve_target_directory(settings=settings, workspace=tmp_path) == tmp_path / ".temp"
    assert resolve_target_directory(settings=settings, workspace=None, target=tmp_path / "x") == tmp_path / "x"

    with pytest.raises(ClipboardError) as ei:
        resolve_target_directory(settings=settings, workspace=None)
    assert ei.value.kind is ErrorKind.WORKSPACE_UNAVAILABLE

    with pytest.raises(ClipboardError):
        resolve_target_directory(settings=settings, workspace=tmp_path / "missing")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_probe_clipboard(settings, runner, make_snapshot):
    runner.responses = {"wl-paste": output(stdout="image/jpeg\n")}

    assert await probe_clipboard(settings=settings, runner=runner, snapshot=make_snapshot(environ=WAYLAND)) is True
    assert await probe_clipboard(settings=settings, runner=runner, snapshot=make_snapshot("Darwin")) is None
    assert await probe_clipboard(settings=settings, runner=runner, snapshot=make_snapshot("Plan9")) is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unstartable_loginctl_means_no_backend(tmp_path, settings, runner, make_snapshot):
    runner.responses = {"loginctl": PermissionError(13, "Permission denied", "loginctl")}
    snapshot = make_snapshot()

    result = await _paste(
        ExtractionRequest(target_directory=tmp_path / ".temp"),
        settings=settings,
        runner=runner,
        snapshot=snapshot,
    )

    assert isinstance(result, ExtractionErr)
    assert result.kind is ErrorKind.NO_CLIPBOARD_BACKEND
    assert await probe_clipboard(settings=settings, runner=runner, snapshot=snapshot) is False
