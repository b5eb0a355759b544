import pytest

from contracts.extraction_result_dto import CropRegion
from checklist_ocr.extraction.application.attempt_ladder import ATTEMPT_LADDER
from checklist_ocr.extraction.application.extraction_pipeline import (
    ExtractionPipeline,
    confidence_for_attempt,
)
from checklist_ocr.extraction.domain.exceptions import ExtractionConfigurationError
from checklist_ocr.extraction.infrastructure.ocr.prompts import get_prompt

from checklist_stubs import NOT_FOUND, TIMEOUT, ScriptedVisionClient, StubPreprocessor, text


def make_pipeline(client, fake_sleep, preprocessor=None, **kwargs):
    return ExtractionPipeline(
        preprocessor=preprocessor or StubPreprocessor(),
        vision_client=client,
        sleep=fake_sleep,
        **kwargs,
    )


def test_first_attempt_success(fake_sleep, sleeps):
    pipeline = make_pipeline(ScriptedVisionClient([text("123456")]), fake_sleep)
    result = pipeline.process_image(b"img", "a.jpg")

    assert result.success is True
    assert result.error is None
    assert result.checklist_number == "123456"
    assert result.confidence == 95
    assert result.retry_attempt == 1
    assert result.processing_config == "estandar"
    assert result.processing_method == "stub_model"
    assert sleeps == []


def test_third_attempt_success_has_lower_confidence(fake_sleep, sleeps):
    client = ScriptedVisionClient([NOT_FOUND, text("no veo ningún número"), text("Checklist N° 123456")])
    result = make_pipeline(client, fake_sleep).process_image(b"img", "a.jpg")

    first = make_pipeline(ScriptedVisionClient([text("123456")]), lambda s: None).process_image(b"img", "a.jpg")

    assert result.checklist_number == first.checklist_number == "123456"
    assert result.retry_attempt == 3
    assert result.processing_config == "deteccion_papel"
    assert result.confidence == 65
    assert result.confidence < first.confidence
    # Проверка: после промаха короткая пауза
    assert sleeps == [0.5, 0.5]


def test_confusion_letters_in_model_reply(fake_sleep):
    result = make_pipeline(ScriptedVisionClient([text("12B45O")]), fake_sleep).process_image(b"img", "a.jpg")
    assert result.checklist_number == "128450"


def test_exhaustion_with_not_found(fake_sleep, sleeps):
    result = make_pipeline(ScriptedVisionClient([NOT_FOUND]), fake_sleep).process_image(b"img", "a.jpg")

    assert result.success is False
    assert result.checklist_number is None
    assert result.error
    assert result.confidence == 0
    assert result.retry_attempt == len(ATTEMPT_LADDER)
    assert result.extracted_text == "NO_ENCONTRADO"
    assert sleeps == [0.5] * (len(ATTEMPT_LADDER) - 1)


def test_exhaustion_keeps_model_text_as_diagnostic(fake_sleep):
    client = ScriptedVisionClient([text("ilegible"), NOT_FOUND])
    result = make_pipeline(client, fake_sleep).process_image(b"img", "a.jpg")

    assert result.success is False
    assert result.extracted_text == "ilegible"


def test_exhaustion_with_timeouts(fake_sleep, sleeps):
    result = make_pipeline(ScriptedVisionClient([TIMEOUT]), fake_sleep).process_image(b"img", "a.jpg")

    assert result.success is False
    assert "Timeout" in result.error
    # Проверка: после ошибки пауза длиннее
    assert sleeps == [1.0] * (len(ATTEMPT_LADDER) - 1)


def test_client_exception_does_not_escape(fake_sleep):
    client = ScriptedVisionClient([ConnectionError("boom")])
    result = make_pipeline(client, fake_sleep).process_image(b"img", "a.jpg")

    assert result.success is False
    assert "boom" in result.error


def test_preprocessor_failure_moves_to_next_attempt(fake_sleep, sleeps):
    preprocessor = StubPreprocessor(fail_on={0})
    client = ScriptedVisionClient([text("654321")])
    result = make_pipeline(client, fake_sleep, preprocessor=preprocessor).process_image(b"img", "a.jpg")

    assert result.success is True
    assert result.retry_attempt == 2
    assert result.confidence == 80
    assert sleeps == [1.0]


def test_preprocessor_always_failing(fake_sleep):
    preprocessor = StubPreprocessor(fail_on=range(len(ATTEMPT_LADDER)))
    client = ScriptedVisionClient([text("123456")])
    result = make_pipeline(client, fake_sleep, preprocessor=preprocessor).process_image(b"img", "a.jpg")

    assert result.success is False
    assert client.prompts == []


def test_unexpected_error_becomes_failed_result(fake_sleep):
    class BrokenNormalizer:
        def extract(self, text, loose=False):
            raise ValueError("normalizer bug")

    pipeline = make_pipeline(ScriptedVisionClient([text("123456")]), fake_sleep, normalizer=BrokenNormalizer())
    result = pipeline.process_image(b"img", "a.jpg")

    assert result.success is False
    assert result.processing_method == "error"
    assert "normalizer bug" in result.error


def test_prompts_follow_ladder(fake_sleep):
    client = ScriptedVisionClient([NOT_FOUND])
    preprocessor = StubPreprocessor()
    make_pipeline(client, fake_sleep, preprocessor=preprocessor).process_image(b"img", "a.jpg")

    assert [c.name for c in preprocessor.configs] == [c.name for c in ATTEMPT_LADDER]
    assert client.prompts == [get_prompt(c.prompt_variant) for c in ATTEMPT_LADDER]


def test_provenance_copied_from_variant(fake_sleep):
    region = CropRegion(left=5, top=5, width=90, height=90)
    preprocessor = StubPreprocessor(variant_kwargs={"was_cropped": True, "crop_region": region, "rotation": 90.0})
    result = make_pipeline(ScriptedVisionClient([text("123456")]), fake_sleep, preprocessor=preprocessor) \
        .process_image(b"img", "a.jpg")

    assert result.was_cropped is True
    assert result.crop_region == region
    assert result.rotation == 90.0


def test_confidence_non_increasing_over_ladder():
    values = [confidence_for_attempt(i) for i in range(len(ATTEMPT_LADDER))]
    assert values == sorted(values, reverse=True)
    assert values[0] == 95


def test_confidence_floor():
    assert confidence_for_attempt(10) == 0


def test_empty_ladder_rejected():
    with pytest.raises(ExtractionConfigurationError):
        ExtractionPipeline(StubPreprocessor(), ScriptedVisionClient([NOT_FOUND]), ladder=())
