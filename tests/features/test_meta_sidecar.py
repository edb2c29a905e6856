import json
from pathlib import Path

from gpm_backend.features.media import find_sidecar, media_extension, sidecar_candidates
from gpm_backend.features.media.media_file import MediaFile
from gpm_backend.features.meta import GoogleMetadata, read_google_metadata
from gpm_backend.shared import ErrorCode, MetaType


def test_from_json_reads_known_fields():
    meta = GoogleMetadata.from_json(
        {
            "photoTakenTime": {"timestamp": "1690877730"},
            "description": "Hi",
            "geoData": {"altitude": 1, "latitude": 2.5, "longitude": 3.5},
            "people": [{"name": "ignored"}],
        }
    )
    assert meta.photo_taken_timestamp == "1690877730"
    assert meta.description == "Hi"
    assert meta.geo.complete


def test_from_json_tolerates_odd_shapes():
    assert GoogleMetadata.from_json([]) == GoogleMetadata()
    meta = GoogleMetadata.from_json({"photoTakenTime": {"timestamp": 12}, "geoData": {"altitude": "x", "latitude": True}})
    assert meta.photo_taken_timestamp == "12"
    assert meta.geo.altitude is None
    assert meta.geo.latitude is None
    assert not meta.geo.complete


def test_read_google_metadata_errors(tmp_path: Path):
    missing = read_google_metadata(tmp_path / "nope.json")
    assert missing.code == ErrorCode.NOT_FOUND

    bad = tmp_path / "bad.json"
    bad.write_text("[", encoding="utf-8")
    assert read_google_metadata(bad).code == ErrorCode.INVALID_JSON

    good = tmp_path / "good.json"
    good.write_text(json.dumps({"description": "d"}), encoding="utf-8")
    res = read_google_metadata(good)
    assert res.ok and res.data.description == "d"


def test_media_extension_classification():
    assert media_extension("a/B.JPG").meta_type == MetaType.EXIF
    assert media_extension("clip.MOV").suffix == ".mov"
    assert media_extension("anim.gif").meta_type == MetaType.NONE
    assert media_extension("a.json") is None


def test_sidecar_candidates_order(tmp_path: Path):
    names = [p.name for p in sidecar_candidates(tmp_path / "IMG_1.jpg")]
    assert names == ["IMG_1.jpg.json", "IMG_1.jpg.supplemental-metadata.json", "IMG_1.json"]


def test_find_sidecar_variants(tmp_path: Path):
    (tmp_path / "IMG_2.heic.supplemental-metadata.json").write_text("{}")
    assert find_sidecar(tmp_path / "IMG_2.heic").name == "IMG_2.heic.supplemental-metadata.json"

    (tmp_path / "IMG_3.json").write_text("{}")
    assert find_sidecar(tmp_path / "IMG_3.mp4").name == "IMG_3.json"

    (tmp_path / "IMG_4.jpg.json").write_text("{}")
    assert find_sidecar(tmp_path / "IMG_4-edited.jpg").name == "IMG_4.jpg.json"

    assert find_sidecar(tmp_path / "IMG_5.jpg") is None


def test_media_file_with_path_reclassifies(tmp_path: Path):
    mf = MediaFile(path=str(tmp_path / "a.jpg"), json_path="a.jpg.json", ext=media_extension("a.jpg"))
    moved = mf.with_path(str(tmp_path / "a.mp4"))
    assert moved.ext.meta_type == MetaType.QUICKTIME
    assert moved.json_path == mf.json_path
    assert moved.name == "a.mp4"
