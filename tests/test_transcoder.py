import subprocess

import pytest

from ffmpeg_api.services.exceptions import ProbeParseError, ToolError, ToolTimeoutError
from ffmpeg_api.services.transcoder import Transcoder


class FakeRun:
    def __init__(self, returncode=0, stdout="", stderr="", side_effect=None, on_call=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.side_effect = side_effect
        self.on_call = on_call
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.side_effect is not None:
            raise self.side_effect
        if self.on_call is not None:
            self.on_call(cmd)
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout, stderr=self.stderr)


@pytest.fixture
def service(api_config):
    return Transcoder(api_config.model_copy(update={
        "ffmpeg_path": "/opt/ffmpeg",
        "ffprobe_path": "/opt/ffprobe",
        "processing_timeout_seconds": 42,
    }))


def test_runs_configured_binary_with_timeout(service, monkeypatch, tmp_path):
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)

    output = tmp_path / "out.flac"
    assert service.compress_for_transcription(tmp_path / "in", output) == output

    cmd, kwargs = fake.calls[0]
    assert cmd[0] == "/opt/ffmpeg"
    assert cmd[-1] == str(output)
    assert kwargs["timeout"] == 42
    assert kwargs["capture_output"] is True


def test_nonzero_exit_carries_stderr(service, monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", FakeRun(returncode=1, stderr="Invalid data found\n"))

    with pytest.raises(ToolError) as excinfo:
        service.convert(tmp_path / "in", tmp_path / "out.mp3")

    assert excinfo.value.details == "Invalid data found"
    assert excinfo.value.return_code == 1


def test_nonzero_exit_without_stderr(service, monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", FakeRun(returncode=69))

    with pytest.raises(ToolError, match="exited with status 69"):
        service.convert(tmp_path / "in", tmp_path / "out.mp3")


def test_timeout(service, monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", FakeRun(side_effect=subprocess.TimeoutExpired("ffmpeg", 42)))

    with pytest.raises(ToolTimeoutError) as excinfo:
        service.extract_audio(tmp_path / "in", tmp_path / "out.mp3", "192k", "mp3")

    assert excinfo.value.timeout_seconds == 42


def test_missing_binary(service, monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", FakeRun(side_effect=FileNotFoundError("/opt/ffmpeg")))

    with pytest.raises(ToolError, match="Could not start /opt/ffmpeg"):
        service.convert(tmp_path / "in", tmp_path / "out.mp3")


def test_split_returns_sorted_segments(service, monkeypatch, tmp_path):
    out_dir = tmp_path / "segments"
    out_dir.mkdir()

    def write_segments(cmd):
        for name in ("segment_002.mp3", "segment_000.mp3", "segment_001.mp3"):
            (out_dir / name).write_bytes(b"x")

    monkeypatch.setattr(subprocess, "run", FakeRun(on_call=write_segments))

    segments = service.split(tmp_path / "in", out_dir, "10", "mp3")

    assert [p.name for p in segments] == ["segment_000.mp3", "segment_001.mp3", "segment_002.mp3"]


def test_probe_parses_json(service, monkeypatch, tmp_path):
    fake = FakeRun(stdout='{"format": {"duration": "1.5"}, "streams": []}')
    monkeypatch.setattr(subprocess, "run", fake)

    assert service.probe(tmp_path / "in") == {"format": {"duration": "1.5"}, "streams": []}
    assert fake.calls[0][0][0] == "/opt/ffprobe"


def test_probe_invalid_json(service, monkeypatch, tmp_path):
    monkeypatch.setattr(subprocess, "run", FakeRun(stdout="not json"))

    with pytest.raises(ProbeParseError):
        service.probe(tmp_path / "in")
