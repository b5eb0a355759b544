"""Review: ручная коррекция, очередь проверки и экспорт."""

from .manual_correction import (
    MANUAL_ENTRY_METHOD,
    apply_manual_correction,
    needs_review,
    replace_result,
    review_queue,
)
from .export import build_export

__all__ = [
    "MANUAL_ENTRY_METHOD",
    "apply_manual_correction",
    "needs_review",
    "replace_result",
    "review_queue",
    "build_export",
]
