"""Tests for the file validation rules."""

from __future__ import annotations

import itertools

import pytest

from mediashelf.models.media import MediaType, audio, document, image, video
from mediashelf.models.metadata import Metadata
from mediashelf.validator import (
    FileValidator,
    PresenceChecks,
    compute_presence,
    explain_invalid,
    required_fields_for,
    validate_basic,
    validate_metadata,
)

ALL_PRESENCE = [
    PresenceChecks(creator=c, resolution=r, runtime=t)
    for c, r, t in itertools.product([False, True], repeat=3)
]

REQUIRED = {
    "document": {"creator"},
    "audio": {"creator", "runtime"},
    "image": {"creator", "resolution"},
    "video": {"creator", "resolution", "runtime"},
}


class TestValidateBasic:
    """Path and type checks."""

    @pytest.mark.parametrize("media_type", ["document", "audio", "image", "video", "IMAGE", "Video"])
    def test_legal_types(self, media_type):
        assert validate_basic("/a/b.png", media_type)

    @pytest.mark.parametrize("media_type", list(MediaType))
    def test_enum_types(self, media_type):
        assert validate_basic("/a/b.mp3", media_type)

    def test_enum_agrees_with_metadata_check(self):
        checks = PresenceChecks(creator=True, runtime=True)
        assert validate_basic("/a/b.mp3", MediaType.AUDIO)
        assert validate_metadata(MediaType.AUDIO, checks)

    def test_missing_path(self):
        assert not validate_basic("", "image")

    def test_missing_type(self):
        assert not validate_basic("/a/b.png", "")

    def test_unknown_type(self):
        assert not validate_basic("/a/b.png", "binary")


class TestRequiredFields:
    """Required-field tables per type."""

    @pytest.mark.parametrize("media_type,fields", REQUIRED.items())
    def test_tables(self, media_type, fields):
        assert required_fields_for(media_type) == frozenset(fields)
        assert required_fields_for(MediaType(media_type)) == frozenset(fields)

    def test_unknown_type(self):
        assert required_fields_for("binary") == frozenset()


class TestValidateMetadata:
    """Presence must match the required set exactly."""

    @pytest.mark.parametrize("media_type", list(REQUIRED))
    @pytest.mark.parametrize("checks", ALL_PRESENCE)
    def test_exact_match_only(self, media_type, checks):
        expected = checks.present == REQUIRED[media_type]
        assert validate_metadata(media_type, checks) is expected

    def test_image_with_runtime_fails(self):
        checks = PresenceChecks(creator=True, resolution=True, runtime=True)
        assert not validate_metadata("image", checks)

    def test_type_is_case_sensitive(self):
        checks = PresenceChecks(creator=True, resolution=True)
        assert validate_metadata("image", checks)
        assert not validate_metadata("Image", checks)

    def test_unknown_type(self):
        assert not validate_metadata("binary", PresenceChecks(creator=True))


class TestComputePresence:
    """Scanning metadata for tracked fields."""

    def test_from_record(self, video_file):
        assert compute_presence(video_file) == PresenceChecks(True, True, True)

    def test_from_mapping(self):
        checks = compute_presence({"Creator": "Ada", "RESOLUTION": "1x1", "year": "2018"})
        assert checks == PresenceChecks(creator=True, resolution=True, runtime=False)

    def test_from_metadata_list(self):
        checks = compute_presence([Metadata("runtime", "1:00")])
        assert checks == PresenceChecks(runtime=True)

    def test_empty_values_do_not_count(self):
        checks = compute_presence({"creator": "", "runtime": "1:00"})
        assert checks == PresenceChecks(creator=False, runtime=True)

    def test_type_tag_ignored(self, document_file):
        assert compute_presence(document_file) == PresenceChecks(creator=True)


class TestExplainInvalid:
    """Human-readable reasons, in order."""

    def test_missing_path_and_creator_for_image(self):
        reasons = explain_invalid("", "image", PresenceChecks(resolution=True))
        assert reasons == ["does not contain a fullpath", "does not contain a creator"]
        assert not any("resolution" in reason for reason in reasons)

    def test_everything_missing(self):
        reasons = explain_invalid("", "", PresenceChecks())
        assert reasons == [
            "does not contain a fullpath",
            "does not contain a type - may be missing metadata",
            "does not contain a creator",
        ]

    def test_invalid_type(self):
        reasons = explain_invalid("/a.bin", "binary", PresenceChecks(creator=True))
        assert reasons == ['"binary" is not a valid file type']

    def test_video_missing_everything(self):
        reasons = explain_invalid("/a.mov", "video", PresenceChecks())
        assert reasons == [
            "does not contain a creator",
            "does not contain a resolution",
            "does not contain a runtime",
        ]

    def test_audio_needs_runtime_only(self):
        reasons = explain_invalid("/a.mp3", "audio", PresenceChecks(creator=True))
        assert reasons == ["does not contain a runtime"]

    def test_document_missing_creator_only(self):
        reasons = explain_invalid("/a.pdf", "document", PresenceChecks())
        assert reasons == ["does not contain a creator"]

    def test_extra_field_explained(self):
        reasons = explain_invalid(
            "/a.png", "image", PresenceChecks(creator=True, resolution=True, runtime=True)
        )
        assert reasons == ["contains a runtime, which image files do not carry"]

    def test_uppercase_type_explained(self):
        reasons = explain_invalid("/a.png", "Image", PresenceChecks(creator=True, resolution=True))
        assert reasons == ['"Image" must be written in lower case']


class TestFileValidator:
    """The object facade."""

    def test_static_rules(self):
        validator = FileValidator()
        assert validator.validate_basic("/a", "audio")
        assert validator.required_fields_for("document") == frozenset({"creator"})

    @pytest.mark.parametrize("fixture", ["document_file", "audio_file", "image_file", "video_file"])
    def test_fixtures_valid(self, fixture, request):
        assert FileValidator().is_valid(request.getfixturevalue(fixture))

    def test_mutated_record_invalid(self, image_file):
        image_file.add_metadata(Metadata("runtime", "1:00"))
        assert not FileValidator().is_valid(image_file)
