"""
Экспорт результатов: сводка + список номеров + полные результаты.
"""

from collections import Counter
from datetime import datetime
from typing import Optional, Sequence

from contracts.extraction_result_dto import (
    ChecklistNumberEntry,
    ExportDocument,
    ExportSummary,
    ExtractionResult,
)
from .manual_correction import MANUAL_ENTRY_METHOD


def build_export(
    results: Sequence[ExtractionResult],
    export_date: Optional[datetime] = None,
) -> ExportDocument:
    """Собирает ExportDocument по текущему (возможно, исправленному вручную) списку результатов."""
    successful = [r for r in results if r.success]
    method_counts = Counter(r.processing_method or "unknown" for r in successful)

    summary = ExportSummary(
        total_images=len(results),
        successful_extractions=len(successful),
        failed_extractions=len(results) - len(successful),
        method_counts=dict(method_counts),
        manual_entries=method_counts.get(MANUAL_ENTRY_METHOD, 0),
        export_date=(export_date or datetime.now()).isoformat(),
    )

    return ExportDocument(
        summary=summary,
        checklist_numbers=[
            ChecklistNumberEntry.from_result(r) for r in successful if r.checklist_number
        ],
        detailed_results=list(results),
    )
