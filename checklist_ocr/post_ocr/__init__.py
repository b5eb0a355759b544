"""Post-OCR: разбор текста модели в номер checklist."""

from .checklist_extractor import (
    ChecklistNumberExtractor,
    ChecklistNumberResult,
    canonicalize,
    clean_text,
    extract_checklist_number,
    fix_confusions,
)

__all__ = [
    "ChecklistNumberExtractor",
    "ChecklistNumberResult",
    "canonicalize",
    "clean_text",
    "extract_checklist_number",
    "fix_confusions",
]
