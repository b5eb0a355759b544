"""
Интерфейсы (абстрактные классы) для домена Extraction.

Домен Extraction отвечает за:
1. Preprocessing изображения под конкретную попытку (pre-ocr)
2. Вызов vision-модели
3. Оркестрацию попыток (retry ladder) и batch обработку
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

import numpy as np

from contracts.extraction_result_dto import ExtractionResult, BatchExtractionResponse
from .contracts import ExtractionAttemptConfig, ImageVariant, ModelReply


class IImagePreprocessor(ABC):
    """Интерфейс для препроцессоров изображений (домен Extraction)."""

    @abstractmethod
    def process(self, image_content: bytes, config: ExtractionAttemptConfig) -> ImageVariant:
        """
        Превращает исходные байты + конфигурацию попытки в ОДИН ImageVariant.

        Args:
            image_content: Байты изображения (любой распространённый растровый формат)
            config: Конфигурация попытки

        Returns:
            ImageVariant, готовый к отправке
        """
        pass


class IDeskewer(ABC):
    """Возможность выравнивания наклона. Выбирается при сборке, не проверяется в runtime."""

    name: str = "deskew"

    @abstractmethod
    def deskew(self, image: np.ndarray) -> Tuple[np.ndarray, float]:
        """
        Выравнивает изображение.

        Returns:
            (выровненное изображение, применённый угол в градусах)
        """
        pass


class IVisionModelClient(ABC):
    """Интерфейс для клиента vision-модели (одиночный идемпотентный RPC, без ретраев)."""

    method_name: str = "vision_model"

    @abstractmethod
    def complete(
        self,
        image_data_uri: str,
        prompt: str,
        max_tokens: int,
        timeout: float,
    ) -> ModelReply:
        """
        Отправляет изображение и промпт, возвращает сырой текст.

        НЕ бросает исключений: любая ошибка -> ModelReply со статусом FAILED.
        """
        pass


class IExtractionPipeline(ABC):
    """Интерфейс для пайплайна extraction одного изображения."""

    @abstractmethod
    def process_image(self, image_content: bytes, file_name: str) -> ExtractionResult:
        """
        Обрабатывает изображение через всю лестницу попыток.

        Returns:
            ExtractionResult (успех или исчерпание), никогда не бросает
        """
        pass


class IBatchProcessor(ABC):
    """Интерфейс batch обработки."""

    @abstractmethod
    def process_batch(
        self,
        images: Sequence[Tuple[str, bytes]],
        session_id: Optional[str] = None,
    ) -> BatchExtractionResponse:
        """
        Обрабатывает упорядоченный список (имя файла, байты).

        Raises:
            BatchValidationError: batch отклонён до начала обработки
        """
        pass
