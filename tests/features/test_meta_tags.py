import pytest

from gpm_backend.features.meta import GeoData, GoogleMetadata, build_tags, classification_time_tags
from gpm_backend.features.meta.tags import DESCRIPTION_TAGS, QUICKTIME_TIME_TAGS, SUBSEC_TIME_TAGS
from gpm_backend.shared import MetaType

LOCAL = "2023-08-01 10:15:30+02:00"


def test_classification_time_tags():
    assert classification_time_tags(MetaType.EXIF) == SUBSEC_TIME_TAGS
    assert len(classification_time_tags(MetaType.QUICKTIME)) == 7
    assert classification_time_tags(MetaType.NONE) == ()


def test_unknown_classification_fails_fast():
    with pytest.raises(AssertionError):
        classification_time_tags("bogus")  # type: ignore[arg-type]


@pytest.mark.parametrize("meta_type", list(MetaType))
def test_every_time_tag_has_the_same_value(meta_type):
    tags = build_tags(GoogleMetadata(photo_taken_timestamp="1"), meta_type, LOCAL)
    assert set(tags.values()) == {LOCAL}
    assert tags["ModifyDate"] == LOCAL
    for tag in SUBSEC_TIME_TAGS:
        assert tags[tag] == LOCAL


def test_quicktime_tag_set():
    tags = build_tags(GoogleMetadata(), MetaType.QUICKTIME, LOCAL)
    assert set(tags) == {*SUBSEC_TIME_TAGS, *QUICKTIME_TIME_TAGS}


def test_empty_description_still_written():
    tags = build_tags(GoogleMetadata(description=""), MetaType.EXIF, LOCAL)
    assert [tags[t] for t in DESCRIPTION_TAGS] == ["", "", ""]


@pytest.mark.parametrize(
    "geo",
    [
        GeoData(latitude=1.0, longitude=2.0),
        GeoData(altitude=0.0, longitude=2.0),
        GeoData(altitude=0.0, latitude=1.0),
        GeoData(),
    ],
)
def test_gps_is_all_or_nothing(geo):
    tags = build_tags(GoogleMetadata(geo=geo), MetaType.EXIF, LOCAL)
    assert not any(t.startswith("GPS") for t in tags)


def test_gps_refs_are_stringified_values():
    geo = GeoData(altitude=0.0, latitude=-33.8688, longitude=151)
    tags = build_tags(GoogleMetadata(geo=geo), MetaType.EXIF, LOCAL)
    assert tags["GPSAltitude"] == 0.0
    assert tags["GPSAltitudeRef"] == "0"
    assert tags["GPSLatitudeRef"] == "-33.8688"
    assert tags["GPSLongitudeRef"] == "151"


@pytest.mark.parametrize(
    "value, expected",
    [
        (12.0, "12"),
        (-0.0, "0"),
        (35.6812, "35.6812"),
        (0.00001, "0.00001"),
        (-0.000015, "-0.000015"),
        (1e-07, "1e-7"),
        (-2.5e-08, "-2.5e-8"),
        (1e21, "1e+21"),
        (1.2345678901234568e20, "123456789012345680000"),
    ],
)
def test_gps_ref_number_rendering(value, expected):
    geo = GeoData(altitude=value, latitude=1.5, longitude=2)
    tags = build_tags(GoogleMetadata(geo=geo), MetaType.EXIF, LOCAL)
    assert tags["GPSAltitudeRef"] == expected
