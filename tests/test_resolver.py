"""Tests for the legacy CSV fallback and the two-source existence lookup."""

import pytest

from annotation.errors import MalformedFallbackData
from annotation.fallback import LegacyCsvSource
from annotation.resolver import ExistenceResolver, LookupSource
from annotation.tokens import AnnotationToken
from storage.models import AnnotationDocument
from utils.time_utils import utc_now


def _document(filename: str) -> AnnotationDocument:
    now = utc_now()
    return AnnotationDocument(
        filename=filename,
        annotations=[AnnotationToken(z1="FC", z2="FC", a1="V", a2="E", e="STOP")],
        created_at=now,
        updated_at=now,
    )


@pytest.mark.parametrize("column", ["filename", "file", "video", "video_name", "videoFilename"])
def test_fallback_matches_any_alias_column(legacy_csv, column: str) -> None:
    source = LegacyCsvSource(str(legacy_csv(f"{column},label\nclip.mp4,x\n")))

    assert source.find("clip.mp4") is not None


def test_fallback_returns_first_matching_row(legacy_csv) -> None:
    source = LegacyCsvSource(str(legacy_csv("file,label\nother.mp4,0\nclip.mp4,1\nclip.mp4,2\n")))

    assert source.find("clip.mp4")["label"] == "1"


def test_fallback_match_is_exact_and_case_sensitive(legacy_csv) -> None:
    source = LegacyCsvSource(str(legacy_csv("video,label\nClip.mp4,1\n clip.mp4,2\n")))

    assert source.find("clip.mp4") is None


def test_fallback_ignores_unknown_columns(legacy_csv) -> None:
    source = LegacyCsvSource(str(legacy_csv("name,label\nclip.mp4,1\n")))

    assert source.find("clip.mp4") is None


def test_fallback_missing_file_is_unavailable(tmp_path) -> None:
    source = LegacyCsvSource(str(tmp_path / "missing.csv"))

    assert not source.available()
    assert source.find("clip.mp4") is None


def test_fallback_empty_file_has_no_rows(legacy_csv) -> None:
    source = LegacyCsvSource(str(legacy_csv("")))

    assert source.find("clip.mp4") is None


def test_fallback_unparsable_file_raises(legacy_csv) -> None:
    source = LegacyCsvSource(str(legacy_csv('filename,label\n"clip.mp4,1\nnext.mp4,2,3,4\n')))

    with pytest.raises(MalformedFallbackData):
        source.find("clip.mp4")


def test_lookup_primary_hit_returns_document(store, legacy_csv) -> None:
    store.insert_document(_document("v1.mp4"))
    resolver = ExistenceResolver(store, LegacyCsvSource(str(legacy_csv("filename\nv1.mp4\n"))))

    result = resolver.lookup("v1.mp4")

    assert result.found
    assert result.source is LookupSource.PRIMARY
    assert result.document.annotations[0].token == "<FC→FC : V→E : STOP>"


def test_lookup_fallback_only(store, legacy_csv) -> None:
    resolver = ExistenceResolver(store, LegacyCsvSource(str(legacy_csv("video_name\nold.mp4\n"))))

    result = resolver.lookup("old.mp4")

    assert result.found
    assert result.source is LookupSource.FALLBACK
    assert result.document is None


def test_lookup_absent_everywhere(store, legacy_csv) -> None:
    resolver = ExistenceResolver(store, LegacyCsvSource(str(legacy_csv("video_name\nold.mp4\n"))))

    result = resolver.lookup("new.mp4")

    assert not result.found
    assert result.source is LookupSource.NONE


def test_lookup_without_fallback_source(store) -> None:
    result = ExistenceResolver(store, None).lookup("new.mp4")

    assert (result.found, result.source) == (False, LookupSource.NONE)


def test_lookup_degrades_to_fallback_when_primary_is_down(store, legacy_csv) -> None:
    store.insert_document(_document("v1.mp4"))
    store.available = False
    resolver = ExistenceResolver(store, LegacyCsvSource(str(legacy_csv("file\nv1.mp4\n"))))

    result = resolver.lookup("v1.mp4")

    assert result.source is LookupSource.FALLBACK


def test_lookup_surfaces_malformed_fallback(store, legacy_csv) -> None:
    resolver = ExistenceResolver(store, LegacyCsvSource(str(legacy_csv('file\n"v1.mp4\nx,y,z\n'))))

    with pytest.raises(MalformedFallbackData):
        resolver.lookup("v1.mp4")


def test_fallback_tolerates_a_row_with_extra_fields(legacy_csv) -> None:
    source = LegacyCsvSource(str(legacy_csv("filename,notes\nclip.mp4,done\nother.mp4,a,b\n")))

    assert source.find("clip.mp4") == {"filename": "clip.mp4", "notes": "done"}
    assert source.find("other.mp4") == {"filename": "other.mp4", "notes": "a"}


def test_fallback_trailing_delimiter_does_not_shift_columns(legacy_csv) -> None:
    source = LegacyCsvSource(str(legacy_csv("filename,notes\nclip.mp4,done,\nnext.mp4,todo,\n")))

    assert source.find("clip.mp4") == {"filename": "clip.mp4", "notes": "done"}


def test_lookup_finds_row_in_ragged_fallback(store, legacy_csv) -> None:
    resolver = ExistenceResolver(
        store, LegacyCsvSource(str(legacy_csv("filename,notes\nclip.mp4,done,extra\n")))
    )

    result = resolver.lookup("clip.mp4")

    assert (result.found, result.source) == (True, LookupSource.FALLBACK)


def test_fallback_invalid_utf8_raises(tmp_path) -> None:
    path = tmp_path / "annotations_export.csv"
    path.write_bytes(b"filename\n\xff\xfe\xfaclip.mp4\n")

    with pytest.raises(MalformedFallbackData):
        LegacyCsvSource(str(path)).find("clip.mp4")
