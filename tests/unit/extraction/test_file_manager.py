import pytest

from checklist_ocr.extraction.domain.exceptions import ExtractionFileNotFoundError, ExtractionFileWriteError
from checklist_ocr.extraction.infrastructure.file_manager import ExtractionFileManager


@pytest.fixture
def manager():
    return ExtractionFileManager()


def test_save_and_load_json(manager, tmp_path):
    path = manager.save_json({"número": "123456"}, tmp_path / "nested" / "out.json")

    assert path.exists()
    assert manager.load_json(path) == {"número": "123456"}


def test_load_missing_json(manager, tmp_path):
    with pytest.raises(ExtractionFileNotFoundError):
        manager.load_json(tmp_path / "missing.json")


def test_load_broken_json(manager, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ExtractionFileWriteError):
        manager.load_json(path)


def test_get_image_files(manager, tmp_path):
    for name in ["b.JPG", "a.png", "notes.txt", "c.webp"]:
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "sub").mkdir()

    files = manager.get_image_files(tmp_path)

    assert [p.name for p in files] == ["a.png", "b.JPG", "c.webp"]


def test_get_image_files_missing_dir(manager, tmp_path):
    assert manager.get_image_files(tmp_path / "nope") == []


def test_read_image(manager, tmp_path):
    path = tmp_path / "img.jpg"
    path.write_bytes(b"\xff\xd8")

    assert manager.read_image(path) == b"\xff\xd8"
    with pytest.raises(ExtractionFileNotFoundError):
        manager.read_image(tmp_path / "other.jpg")
