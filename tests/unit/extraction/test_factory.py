import pytest

from checklist_ocr.extraction.application.attempt_ladder import ATTEMPT_LADDER
from checklist_ocr.extraction.application.factory import ExtractionComponentFactory
from checklist_ocr.extraction.domain.exceptions import (
    ExtractionConfigurationError,
    MissingCredentialsError,
)


def test_extraction_info_lists_ladder():
    info = ExtractionComponentFactory.get_extraction_info()

    assert info["domain"] == "Extraction"
    assert info["ladder"] == [config.name for config in ATTEMPT_LADDER]
    assert info["ladder"][0] == "estandar"
    assert info["components"]["vision_client"] == "OpenAIVisionClient"


@pytest.mark.parametrize("mode", ["contour", "none"])
def test_create_deskewer(mode):
    assert ExtractionComponentFactory.create_deskewer(mode).name == mode


def test_create_deskewer_unknown_mode():
    with pytest.raises(ExtractionConfigurationError):
        ExtractionComponentFactory.create_deskewer("hough")


def test_batch_processor_without_key_rejects_batch():
    processor = ExtractionComponentFactory.create_batch_processor(api_key="")

    # Проверка: без ключа пайплайн не строится, batch отклоняется до обработки
    assert processor.pipeline is None
    with pytest.raises(MissingCredentialsError):
        processor.process_batch([("a.jpg", b"\xff\xd8")])
