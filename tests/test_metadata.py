from datetime import datetime

from media_replicator.metadata import extract
from media_replicator.metadata.extract import MetadataExtractor
from media_replicator.models import ScanConfig
from media_replicator.scanning.filesystem import DiskScanner


def test_get_modified_time_reads_mtime(tmp_path, make_file):
    dt = datetime(2021, 3, 4, 5, 6, 7)
    p = make_file(tmp_path / "a.jpg", mtime=dt)

    assert MetadataExtractor().get_modified_time(p) == dt


def test_get_modified_time_returns_none_when_unreadable(tmp_path):
    assert MetadataExtractor().get_modified_time(tmp_path / "missing.jpg") is None


def test_exif_date_preferred_over_mtime(monkeypatch, tmp_path, make_file):
    p = make_file(tmp_path / "a.jpg", mtime=datetime(2021, 1, 1))
    monkeypatch.setattr(extract.exifread, "process_file",
                        lambda f, details=False: {"EXIF DateTimeOriginal": "2019:05:06 07:08:09"})

    assert MetadataExtractor().get_capture_time(p, "exif") == datetime(2019, 5, 6, 7, 8, 9)
    # mtime source ignores EXIF entirely
    assert MetadataExtractor().get_capture_time(p, "mtime") == datetime(2021, 1, 1)


def test_exif_skips_malformed_tags(monkeypatch, tmp_path, make_file):
    p = make_file(tmp_path / "a.jpg")
    tags = {"EXIF DateTimeOriginal": "0000:00:00 00:00:00", "Image DateTime": "2018:12:24 18:00:00"}
    monkeypatch.setattr(extract.exifread, "process_file", lambda f, details=False: tags)

    assert MetadataExtractor().get_exif_datetime(p) == datetime(2018, 12, 24, 18, 0, 0)


def test_exif_falls_back_to_mtime(monkeypatch, tmp_path, make_file):
    dt = datetime(2020, 2, 2, 2, 2, 2)
    p = make_file(tmp_path / "a.png", mtime=dt)

    monkeypatch.setattr(extract.exifread, "process_file", lambda f, details=False: {})
    assert MetadataExtractor().get_capture_time(p, "exif") == dt

    def boom(f, details=False):
        raise ValueError("corrupt")

    monkeypatch.setattr(extract.exifread, "process_file", boom)
    assert MetadataExtractor().get_capture_time(p, "exif") == dt


def test_scanner_uses_configured_date_source(monkeypatch, tmp_path, make_file):
    src = tmp_path / "src"
    make_file(src / "a.jpg", mtime=datetime(2022, 1, 1))
    monkeypatch.setattr(extract.exifread, "process_file",
                        lambda f, details=False: {"EXIF DateTimeDigitized": "2015:08:09 10:11:12"})

    records = DiskScanner().scan(ScanConfig(root=src, extensions=("jpg",), date_source="exif"))

    assert records[0].modified_at == datetime(2015, 8, 9, 10, 11, 12)
