"""
Ручная коррекция и очередь проверки.

Коррекция - чисто локальная правка результата: пайплайн повторно не вызывается,
создаётся НОВЫЙ ExtractionResult с методом manual_entry и максимальной уверенностью.
"""

import re
from typing import List, Sequence

from loguru import logger

from config.settings import MANUAL_ENTRY_CONFIDENCE, REVIEW_CONFIDENCE_THRESHOLD
from contracts.extraction_result_dto import ExtractionResult
from checklist_ocr.extraction.domain.exceptions import ExtractionValidationError
from checklist_ocr.post_ocr.checklist_extractor import canonicalize


MANUAL_ENTRY_METHOD = "manual_entry"

# Оператор вводит 5-7 цифр, как и в ответе модели
_MANUAL_NUMBER = re.compile(r"[0-9]{5,7}")


def apply_manual_correction(result: ExtractionResult, checklist_number: str) -> ExtractionResult:
    """
    Перезаписывает номер результата введённым вручную.

    Raises:
        ExtractionValidationError: ввод не является серией из 5-7 цифр
    """
    value = (checklist_number or "").strip()
    if not _MANUAL_NUMBER.fullmatch(value):
        raise ExtractionValidationError(
            message=f"El número de checklist debe tener entre 5 y 7 dígitos: {checklist_number!r}",
            component="ManualCorrection"
        )

    number = canonicalize(value)
    logger.info(f"[Review] {result.file_name}: ручной ввод {number}")

    return ExtractionResult.model_validate({
        **result.model_dump(),
        "checklist_number": number,
        "success": True,
        "error": None,
        "processing_method": MANUAL_ENTRY_METHOD,
        "confidence": MANUAL_ENTRY_CONFIDENCE,
    })


def replace_result(
    results: Sequence[ExtractionResult],
    corrected: ExtractionResult,
) -> List[ExtractionResult]:
    """Новый список, где результат с тем же file_name заменён на corrected."""
    return [corrected if r.file_name == corrected.file_name else r for r in results]


def needs_review(result: ExtractionResult, threshold: int = REVIEW_CONFIDENCE_THRESHOLD) -> bool:
    """Неуспешный результат или уверенность ниже порога."""
    return not result.success or result.confidence < threshold


def review_queue(
    results: Sequence[ExtractionResult],
    threshold: int = REVIEW_CONFIDENCE_THRESHOLD,
) -> List[ExtractionResult]:
    """Результаты для ручной проверки, в исходном порядке."""
    return [r for r in results if needs_review(r, threshold)]
