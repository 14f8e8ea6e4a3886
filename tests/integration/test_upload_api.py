"""Integration tests for the upload endpoint against a real temporary dataset directory."""

import json
from pathlib import Path

import pytest

DEMOGRAPHICS = json.dumps({"gender": "male", "ageGroup": "18-30", "region": "X"})


def _dataset(settings) -> Path:
    return Path(settings.dataset_dir)


def _metadata_lines(settings) -> list[str]:
    path = _dataset(settings) / "metadata.txt"
    return path.read_text().splitlines() if path.exists() else []


async def _post(client, files=None, data=None):
    return await client.post("/api/v1/upload-recordings", files=files or [], data=data or {})


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


async def test_upload_writes_audio_and_metadata(async_client, settings, sample_wav_bytes):
    """Audio parts land in wavs/ verbatim; metadata lines get demographics appended."""
    files = [
        ("audio_files", ("speaker5_0.wav", sample_wav_bytes, "audio/wav")),
        ("audio_files", ("speaker5_2.wav", b"second take", "audio/wav")),
        ("metadata", ("metadata.txt", b"speaker5_0.wav|Hello|Hello\nspeaker5_2.wav|Bye|Bye", "text/plain")),
    ]
    resp = await _post(
        async_client, files, {"speaker_id": "speaker5", "demographics": DEMOGRAPHICS}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body == {
        "message": "Upload successful",
        "speaker_id": "speaker5",
        "files_saved": 2,
        "lines_written": 2,
    }
    wavs = _dataset(settings) / "wavs"
    assert (wavs / "speaker5_0.wav").read_bytes() == sample_wav_bytes
    assert (wavs / "speaker5_2.wav").read_bytes() == b"second take"
    assert _metadata_lines(settings) == [
        "speaker5_0|Hello|Hello|male|18-30|X",
        "speaker5_2|Bye|Bye|male|18-30|X",
    ]


async def test_plain_filenames_example(async_client, settings):
    """``a.wav\\nb.wav`` with the example demographics yields the documented lines."""
    files = [("metadata", ("metadata.txt", b"a.wav\nb.wav", "text/plain"))]
    resp = await _post(async_client, files, {"speaker_id": "s", "demographics": DEMOGRAPHICS})

    assert resp.status_code == 200
    assert _metadata_lines(settings) == ["a|male|18-30|X", "b|male|18-30|X"]


async def test_metadata_accepted_as_plain_field(async_client, settings):
    resp = await _post(
        async_client,
        data={"metadata": "a.wav", "speaker_id": "s", "demographics": DEMOGRAPHICS},
    )
    assert resp.status_code == 200
    assert _metadata_lines(settings) == ["a|male|18-30|X"]


async def test_metadata_file_is_append_only(async_client, settings):
    """A second submission appends; earlier lines are never truncated."""
    for name in ("first.wav", "second.wav"):
        files = [("metadata", ("metadata.txt", name.encode(), "text/plain"))]
        resp = await _post(async_client, files, {"speaker_id": "s", "demographics": DEMOGRAPHICS})
        assert resp.status_code == 200

    assert _metadata_lines(settings) == ["first|male|18-30|X", "second|male|18-30|X"]


async def test_path_components_in_filename_are_dropped(async_client, settings):
    files = [
        ("audio_files", ("../../evil.wav", b"x", "audio/wav")),
        ("metadata", ("metadata.txt", b"evil.wav", "text/plain")),
    ]
    resp = await _post(async_client, files, {"speaker_id": "s", "demographics": DEMOGRAPHICS})

    assert resp.status_code == 200
    assert (_dataset(settings) / "wavs" / "evil.wav").read_bytes() == b"x"


# ---------------------------------------------------------------------------
# Error paths
# ---------------------------------------------------------------------------


async def test_get_is_method_not_allowed(async_client):
    resp = await async_client.get("/api/v1/upload-recordings")
    assert resp.status_code == 405
    assert resp.json()["code"] == "HTTP_405"


async def test_missing_metadata_writes_nothing(async_client, settings):
    files = [("audio_files", ("speaker1_0.wav", b"audio", "audio/wav"))]
    resp = await _post(async_client, files, {"speaker_id": "s", "demographics": DEMOGRAPHICS})

    assert resp.status_code == 400
    assert resp.json()["code"] == "METADATA_MISSING"
    assert _metadata_lines(settings) == []
    assert not (_dataset(settings) / "wavs" / "speaker1_0.wav").exists()


@pytest.mark.parametrize(
    "demographics",
    [
        None,
        "not json",
        json.dumps({"gender": "male", "region": "X"}),
        json.dumps({"gender": "male", "ageGroup": "18-30", "region": "a|b"}),
    ],
)
async def test_invalid_demographics_writes_nothing(async_client, settings, demographics):
    files = [("metadata", ("metadata.txt", b"a.wav", "text/plain"))]
    data = {"speaker_id": "s"}
    if demographics is not None:
        data["demographics"] = demographics
    resp = await _post(async_client, files, data)

    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_DEMOGRAPHICS"
    assert _metadata_lines(settings) == []


async def test_oversized_audio_rejected(async_client, settings, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_file_size", 4)
    files = [
        ("audio_files", ("big.wav", b"0123456789", "audio/wav")),
        ("metadata", ("metadata.txt", b"big.wav", "text/plain")),
    ]
    resp = await _post(async_client, files, {"speaker_id": "s", "demographics": DEMOGRAPHICS})

    assert resp.status_code == 413
    assert resp.json()["code"] == "UPLOAD_TOO_LARGE"
    assert _metadata_lines(settings) == []


async def test_audio_part_without_filename_rejected(async_client, settings):
    """An audio_files value sent as a plain field must not yield a metadata-only batch."""
    files = [("metadata", ("metadata.txt", b"s_0.wav|Hi|Hi", "text/plain"))]
    data = {"audio_files": "raw-bytes-no-filename", "speaker_id": "s", "demographics": DEMOGRAPHICS}
    resp = await _post(async_client, files, data)

    assert resp.status_code == 400
    assert resp.json()["code"] == "UPLOAD_PARSE_ERROR"
    assert _metadata_lines(settings) == []
    assert not (_dataset(settings) / "wavs").exists()


async def test_duplicate_audio_names_rejected(async_client, settings):
    files = [
        ("audio_files", ("a/x.wav", b"first", "audio/wav")),
        ("audio_files", ("b/x.wav", b"second", "audio/wav")),
        ("metadata", ("metadata.txt", b"x.wav|Hi|Hi", "text/plain")),
    ]
    resp = await _post(async_client, files, {"speaker_id": "s", "demographics": DEMOGRAPHICS})

    assert resp.status_code == 400
    assert resp.json()["code"] == "UPLOAD_PARSE_ERROR"
    assert _metadata_lines(settings) == []
    assert not (_dataset(settings) / "wavs" / "x.wav").exists()


async def test_malformed_multipart_rejected(async_client, settings):
    resp = await async_client.post(
        "/api/v1/upload-recordings",
        content=b"--xyz\r\nContent-Disposition: form-data\r\n\r\ngarbage",
        headers={"Content-Type": "multipart/form-data; boundary=xyz"},
    )
    assert resp.status_code == 400
    assert _metadata_lines(settings) == []


async def test_non_multipart_body_reports_missing_metadata(async_client, settings):
    resp = await async_client.post("/api/v1/upload-recordings", json={"metadata": "a.wav"})
    assert resp.status_code == 400
    assert resp.json()["code"] == "METADATA_MISSING"
