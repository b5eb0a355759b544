import pytest

from contracts.extraction_result_dto import ExtractionResult
from checklist_ocr.extraction.domain.exceptions import ExtractionValidationError
from checklist_ocr.review import (
    apply_manual_correction,
    needs_review,
    replace_result,
    review_queue,
)


@pytest.fixture
def failed_result():
    return ExtractionResult.failure("2.jpg", "No se pudo extraer número de checklist")


def make_success(file_name, number, confidence):
    return ExtractionResult(
        file_name=file_name,
        checklist_number=number,
        confidence=confidence,
        processing_method="mistral_ocr",
        success=True,
    )


def test_manual_correction(failed_result):
    corrected = apply_manual_correction(failed_result, " 12345 ")

    assert corrected.checklist_number == "012345"
    assert corrected.success is True
    assert corrected.error is None
    assert corrected.processing_method == "manual_entry"
    assert corrected.confidence == 100
    assert corrected.file_name == "2.jpg"


def test_manual_correction_does_not_mutate(failed_result):
    apply_manual_correction(failed_result, "123456")

    assert failed_result.success is False
    assert failed_result.checklist_number is None


@pytest.mark.parametrize("value", ["", "abc", "1234", "12345678", "12 3456", "١٢٣٤٥٦", "１２３４５６"])
def test_manual_correction_rejects_invalid(failed_result, value):
    with pytest.raises(ExtractionValidationError):
        apply_manual_correction(failed_result, value)


def test_replace_result(failed_result):
    results = [make_success("1.jpg", "111111", 95), failed_result]
    corrected = apply_manual_correction(failed_result, "222222")

    updated = replace_result(results, corrected)

    assert [r.file_name for r in updated] == ["1.jpg", "2.jpg"]
    assert updated[1].checklist_number == "222222"
    assert results[1].success is False


def test_review_queue(failed_result):
    confident = make_success("1.jpg", "111111", 95)
    doubtful = make_success("3.jpg", "333333", 50)

    assert needs_review(failed_result)
    assert needs_review(doubtful)
    assert not needs_review(confident)
    assert review_queue([confident, failed_result, doubtful]) == [failed_result, doubtful]
    assert review_queue([doubtful], threshold=40) == []
