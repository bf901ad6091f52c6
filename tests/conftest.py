"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from mediashelf.library import Library
from mediashelf.models.media import MediaRecord, audio, document, image, video
from mediashelf.models.metadata import Metadata


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def document_file() -> MediaRecord:
    return document("book.pdf", "/path/test/book.pdf", [Metadata("creator", "Fake Author")])


@pytest.fixture
def document_file2() -> MediaRecord:
    return document("book2.pdf", "/path/test/book2.pdf", [Metadata("creator", "Fake Author")])


@pytest.fixture
def image_file() -> MediaRecord:
    return image(
        "image.png",
        "/test/path/image.png",
        [Metadata("creator", "Fake Photographer"), Metadata("resolution", "1024x768")],
    )


@pytest.fixture
def image_file2() -> MediaRecord:
    return image(
        "image2.png",
        "/test/path/image2.png",
        [Metadata("creator", "Fake Photographer2"), Metadata("resolution", "1024x700")],
    )


@pytest.fixture
def audio_file() -> MediaRecord:
    return audio(
        "song.mp3",
        "/test/path/song.mp3",
        [Metadata("creator", "Fake Musician"), Metadata("runtime", "78:58")],
    )


@pytest.fixture
def audio_file2() -> MediaRecord:
    return audio(
        "song2.mp3",
        "/test/path/song2.mp3",
        [Metadata("creator", "Fake Composer"), Metadata("runtime", "78:58")],
    )


@pytest.fixture
def video_file() -> MediaRecord:
    return video(
        "movie.mov",
        "/test/path/movie.mov",
        [
            Metadata("creator", "Fake Director"),
            Metadata("resolution", "1024x768"),
            Metadata("runtime", "120:56"),
        ],
    )


@pytest.fixture
def video_file2() -> MediaRecord:
    return video(
        "movie2.mov",
        "/test/path/movie2.mov",
        [
            Metadata("creator", "Fake Director2"),
            Metadata("resolution", "1024x768"),
            Metadata("runtime", "120:56"),
        ],
    )


@pytest.fixture
def library(document_file, image_file, audio_file, video_file) -> Library:
    """A library holding one file of each type."""
    lib = Library()
    for record in (document_file, image_file, audio_file, video_file):
        lib.add(record)
    return lib


@pytest.fixture
def full_library(
    library, document_file2, image_file2, audio_file2, video_file2
) -> Library:
    """A library holding two files of each type."""
    for record in (document_file2, image_file2, audio_file2, video_file2):
        library.add(record)
    return library


@pytest.fixture
def sample_entries() -> list[dict]:
    """Interchange entries: four valid, two invalid."""
    return [
        {
            "fullpath": "/media/docs/report.pdf",
            "type": "document",
            "metadata": {"creator": "Ada", "year": "2018"},
        },
        {
            "fullpath": "/media/music/track.mp3",
            "type": "audio",
            "metadata": {"creator": "Band", "runtime": "3:21", "genre": "rock"},
        },
        {
            "fullpath": "/media/pics/sunset.jpg",
            "type": "image",
            "metadata": {"creator": "Ada", "resolution": "1024x768"},
        },
        {
            "fullpath": "/media/films/trip.mov",
            "type": "video",
            "metadata": {"creator": "Bob", "resolution": "1920x1080", "runtime": "90:00"},
        },
        {
            "fullpath": "/media/pics/blurry.jpg",
            "type": "image",
            "metadata": {"creator": "Ada"},
        },
        {
            "fullpath": "/media/misc/unknown.bin",
            "type": "binary",
            "metadata": {"creator": "Ada"},
        },
    ]


@pytest.fixture
def write_json(temp_dir: Path) -> Callable[[str, object], Path]:
    """Write a JSON document into the temp directory and return its path."""

    def _write(name: str, data: object) -> Path:
        path = temp_dir / name
        path.write_text(json.dumps(data))
        return path

    return _write
