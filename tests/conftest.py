from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from ffmpeg_api.dependencies import get_config, get_transcoder
from ffmpeg_api.main import app
from ffmpeg_api.models.config import APIConfig


class FakeTranscoder:
    """Stands in for ffmpeg: writes canned bytes where the real tool would."""

    def __init__(self):
        self.calls = []
        self.inputs = []
        self.error = None
        self.output = b"encoded"
        self.segment_count = 3
        self.probe_result = {
            "format": {"format_name": "wav", "duration": "12.000000"},
            "streams": [{"codec_type": "audio", "codec_name": "pcm_s16le"}],
        }

    def _record(self, name, input_path, **kwargs):
        self.calls.append((name, kwargs))
        self.inputs.append(Path(input_path).read_bytes())
        if self.error is not None:
            raise self.error

    def compress_for_transcription(self, input_path, output_path):
        self._record("compress_for_transcription", input_path)
        output_path.write_bytes(self.output)
        return output_path

    def compress_custom(self, input_path, output_path, bitrate=None, sample_rate=None, channels=None):
        self._record("compress_custom", input_path, bitrate=bitrate, sample_rate=sample_rate, channels=channels)
        output_path.write_bytes(self.output)
        return output_path

    def convert(self, input_path, output_path):
        self._record("convert", input_path, output_path=output_path)
        output_path.write_bytes(self.output)
        return output_path

    def extract_audio(self, input_path, output_path, bitrate, audio_format):
        self._record("extract_audio", input_path, bitrate=bitrate, audio_format=audio_format)
        output_path.write_bytes(self.output)
        return output_path

    def split(self, input_path, output_dir, segment_time, segment_format):
        self._record("split", input_path, segment_time=segment_time, segment_format=segment_format)
        for i in range(self.segment_count):
            (output_dir / f"segment_{i:03d}.{segment_format}").write_bytes(f"segment-{i}".encode())
        return sorted(output_dir.iterdir())

    def probe(self, input_path):
        self._record("probe", input_path)
        return self.probe_result


@pytest.fixture
def api_config(tmp_path):
    return APIConfig(temp_dir=str(tmp_path / "ffmpeg_api"), max_upload_bytes=1024)


@pytest.fixture
def transcoder():
    return FakeTranscoder()


@pytest.fixture
def client(api_config, transcoder):
    app.dependency_overrides[get_config] = lambda: api_config
    app.dependency_overrides[get_transcoder] = lambda: transcoder
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def upload():
    return {"file": ("input.wav", b"0123456789", "audio/wav")}


@pytest.fixture
def leftovers(api_config):
    """Lists everything left behind in uploads/ and outputs/."""
    def _entries():
        found = []
        for directory in (api_config.uploads_dir, api_config.outputs_dir):
            if Path(directory).exists():
                found.extend(sorted(Path(directory).iterdir()))
        return found
    return _entries
