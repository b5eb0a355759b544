"""
DTO контракт: Extraction Pipeline -> HTTP граница / клиент (export, review).

Результат извлечения номера checklist для одного изображения и агрегат по batch.

ВАЖНО: Клиент (экспорт, ревью, ручная коррекция) опирается ТОЛЬКО на поля
fileName / checklistNumber / success / processingMethod / confidence.
Имена этих полей в JSON менять нельзя.

Все модели используют Pydantic v2, JSON в camelCase через alias_generator.
"""

import re
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# Только ASCII цифры, без завершающего перевода строки
CHECKLIST_NUMBER_PATTERN = re.compile(r"[0-9]{6}")


class _CamelModel(BaseModel):
    """База: frozen + camelCase алиасы, но конструктор принимает и snake_case."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        """JSON-совместимый dict с camelCase ключами."""
        return self.model_dump(mode="json", by_alias=True)


class CropRegion(_CamelModel):
    """Прямоугольник кропа на изображении (px)."""

    left: int = Field(..., ge=0)
    top: int = Field(..., ge=0)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class ExtractionResult(_CamelModel):
    """
    Результат пайплайна для одного изображения.

    Создаётся один раз Retry Controller'ом (успех или исчерпание попыток),
    после создания не меняется. Ручная коррекция создаёт НОВЫЙ объект.

    Инварианты:
    - error задан тогда и только тогда, когда success == False
    - успешный checklist_number (если не None) - ровно 6 цифр
    """

    file_name: str
    checklist_number: Optional[str] = None
    extracted_text: str = ""
    confidence: int = Field(0, ge=0, le=100)
    processing_method: Optional[str] = None
    processing_config: Optional[str] = None
    retry_attempt: Optional[int] = Field(None, ge=1)
    was_cropped: bool = False
    crop_region: Optional[CropRegion] = None
    rotation: float = 0.0
    success: bool
    error: Optional[str] = None
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())

    @model_validator(mode="after")
    def check_invariants(self) -> "ExtractionResult":
        if self.success and self.error:
            raise ValueError("error должен быть пустым для успешного результата")
        if not self.success and not self.error:
            raise ValueError("error обязателен для неуспешного результата")
        if self.success and self.checklist_number is not None:
            if not CHECKLIST_NUMBER_PATTERN.fullmatch(self.checklist_number):
                raise ValueError(
                    f"checklist_number должен состоять из 6 цифр, получено: {self.checklist_number!r}"
                )
        return self

    @classmethod
    def failure(
        cls,
        file_name: str,
        error: str,
        extracted_text: str = "",
        processing_method: Optional[str] = None,
        processing_config: Optional[str] = None,
        retry_attempt: Optional[int] = None,
    ) -> "ExtractionResult":
        """Неуспешный результат: checklist_number=None, confidence=0."""
        return cls(
            file_name=file_name,
            checklist_number=None,
            extracted_text=extracted_text,
            confidence=0,
            processing_method=processing_method,
            processing_config=processing_config,
            retry_attempt=retry_attempt,
            success=False,
            error=error,
        )


class ChecklistNumberEntry(_CamelModel):
    """Краткая запись об успешном извлечении (для списка checklistNumbers)."""

    file_name: str
    checklist_number: str
    method: Optional[str] = None
    retry_attempt: Optional[int] = None
    processing_config: Optional[str] = None
    was_cropped: bool = False
    rotation: float = 0.0
    confidence: int = 0

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ChecklistNumberEntry":
        return cls(
            file_name=result.file_name,
            checklist_number=result.checklist_number or "",
            method=result.processing_method,
            retry_attempt=result.retry_attempt,
            processing_config=result.processing_config,
            was_cropped=result.was_cropped,
            rotation=result.rotation,
            confidence=result.confidence,
        )


class BatchExtractionResponse(_CamelModel):
    """
    Ответ на batch: агрегаты + полный список результатов.

    results перечисляет ВСЕ входные изображения в исходном порядке.
    """

    success: bool = True
    message: str = "Procesamiento completado"
    session_id: str
    total_images: int = Field(..., ge=0)
    successful_extractions: int = Field(..., ge=0)
    failed_extractions: int = Field(..., ge=0)
    method_counts: Dict[str, int] = Field(default_factory=dict)
    processing_time_ms: int = Field(0, ge=0)
    processing_time_sec: int = Field(0, ge=0)
    results: List[ExtractionResult] = Field(default_factory=list)
    checklist_numbers: List[ChecklistNumberEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_counts(self) -> "BatchExtractionResponse":
        if self.total_images != len(self.results):
            raise ValueError(
                f"total_images={self.total_images} не совпадает с числом результатов {len(self.results)}"
            )
        if self.successful_extractions + self.failed_extractions != self.total_images:
            raise ValueError("successful + failed должно равняться total_images")
        return self


class ExportSummary(_CamelModel):
    """Сводка экспорта."""

    total_images: int
    successful_extractions: int
    failed_extractions: int
    method_counts: Dict[str, int] = Field(default_factory=dict)
    manual_entries: int = 0
    export_date: str = Field(default_factory=lambda: datetime.now().isoformat())


class ExportDocument(_CamelModel):
    """Документ экспорта результатов (JSON-файл для скачивания)."""

    summary: ExportSummary
    checklist_numbers: List[ChecklistNumberEntry] = Field(default_factory=list)
    detailed_results: List[ExtractionResult] = Field(default_factory=list)
