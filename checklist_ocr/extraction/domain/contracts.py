"""
Валидационные контракты (contracts) внутри домена Extraction.

  - ExtractionAttemptConfig: одна ступень лестницы попыток (frozen, валидируется)
  - ImageVariant: одна трансформированная версия изображения для отправки в модель
  - ModelReply: результат одного вызова vision-модели

Без контрактов лестница могла бы содержать, например:
  - jpeg_quality = 150
  - target_size = (0, 0)
  - rotation_angle без use_rotation
"""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from contracts.extraction_result_dto import CropRegion


class PromptVariant(str, Enum):
    """Формулировки промпта, от узкой к исчерпывающей."""
    BASIC = "basic"
    DETAILED = "detailed"
    EXHAUSTIVE = "exhaustive"


class ExtractionAttemptConfig(BaseModel):
    """
    Одна стратегия в лестнице попыток.

    Определяется статически, в runtime не меняется (frozen).
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Порядковый номер в лестнице")
    name: str = Field(..., min_length=1, description="Человекочитаемое имя")
    target_size: Tuple[int, int] = Field(..., description="Вписать в (width, height), без увеличения")
    greyscale: bool = False
    normalize: bool = False
    sharpen: bool = False
    contrast: bool = False
    threshold: bool = False
    detect_paper: bool = False
    use_rotation: bool = False
    rotation_angle: float = 0.0
    deskew: bool = False
    jpeg_quality: int = Field(85, ge=1, le=100)
    prompt_variant: PromptVariant = PromptVariant.BASIC

    @field_validator("target_size")
    @classmethod
    def target_size_positive(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        """Целевой размер должен быть положительным."""
        if v[0] <= 0 or v[1] <= 0:
            raise ValueError(f"Размер должен быть > 0, получено: {v}")
        return v

    @model_validator(mode="after")
    def rotation_consistent(self) -> "ExtractionAttemptConfig":
        if not self.use_rotation and self.rotation_angle:
            raise ValueError("rotation_angle задан, но use_rotation=False")
        return self

    @property
    def enhances(self) -> bool:
        return any((self.greyscale, self.normalize, self.sharpen, self.contrast, self.threshold))


@dataclass
class ImageVariant:
    """
    Одна трансформированная версия исходного изображения.

    Принадлежит Pre-processor'у в рамках одной попытки, между попытками
    и изображениями не переиспользуется.
    """

    jpeg_bytes: bytes
    width: int
    height: int
    was_cropped: bool = False
    crop_region: Optional[CropRegion] = None
    rotation: float = 0.0
    applied: List[str] = field(default_factory=list)

    def to_base64(self) -> str:
        return base64.b64encode(self.jpeg_bytes).decode("ascii")

    def to_data_uri(self) -> str:
        """data URI для поля image_url chat-запроса."""
        return f"data:image/jpeg;base64,{self.to_base64()}"

    def release(self) -> None:
        """Отпускает буфер сразу после кодирования в запрос."""
        self.jpeg_bytes = b""


class ReplyStatus(str, Enum):
    """Исход вызова vision-модели."""
    TEXT = "text"              # Модель вернула текст
    NOT_FOUND = "not_found"    # Модель явно ответила "номер не найден"
    FAILED = "failed"          # Таймаут, транспорт, API или пустой ответ


@dataclass(frozen=True)
class ModelReply:
    """Ответ одного вызова vision-модели. Никогда не бросается как исключение."""

    status: ReplyStatus
    text: str = ""
    error: Optional[str] = None
    timed_out: bool = False
    elapsed_ms: float = 0.0

    @property
    def failed(self) -> bool:
        return self.status == ReplyStatus.FAILED

    @classmethod
    def failure(cls, error: str, timed_out: bool = False, elapsed_ms: float = 0.0) -> "ModelReply":
        return cls(status=ReplyStatus.FAILED, error=error, timed_out=timed_out, elapsed_ms=elapsed_ms)
