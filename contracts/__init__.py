"""
Контракты DTO проекта Checklist OCR.

Все контракты используют Pydantic v2 для валидации.

Контракты:
- Pipeline -> HTTP граница / клиент: ExtractionResult, BatchExtractionResponse
- Клиент (review/export): ExportDocument
"""

from .extraction_result_dto import (
    CropRegion,
    ExtractionResult,
    ChecklistNumberEntry,
    BatchExtractionResponse,
    ExportSummary,
    ExportDocument,
    CHECKLIST_NUMBER_PATTERN,
)

__all__ = [
    "CropRegion",
    "ExtractionResult",
    "ChecklistNumberEntry",
    "BatchExtractionResponse",
    "ExportSummary",
    "ExportDocument",
    "CHECKLIST_NUMBER_PATTERN",
]
