"""
Фабрика для создания компонентов домена Extraction.

Единая точка сборки: клиент vision-модели получает ключ в конструкторе,
реализация deskew выбирается здесь по DESKEW_MODE.
"""

from typing import Any, Dict, Optional

from loguru import logger

from config.settings import (
    VISION_API_KEY,
    VISION_BASE_URL,
    VISION_MODEL,
    VISION_METHOD_NAME,
    MODEL_TIMEOUT_SEC,
    DESKEW_MODE,
    BATCH_MODE,
)
from ..domain.interfaces import (
    IBatchProcessor,
    IDeskewer,
    IExtractionPipeline,
    IImagePreprocessor,
    IVisionModelClient,
)
from ..pre_ocr.preprocessor import VariantPreprocessor
from ..pre_ocr.elements.deskew import create_deskewer
from ..infrastructure.ocr.vision_model_client import OpenAIVisionClient
from ..infrastructure.file_manager import ExtractionFileManager
from .attempt_ladder import ATTEMPT_LADDER
from .extraction_pipeline import ExtractionPipeline
from .batch_processor import BatchProcessor


class ExtractionComponentFactory:
    """
    Фабрика для создания компонентов домена Extraction.

    Домен Extraction отвечает за:
    - Построение вариантов изображения
    - Вызов vision-модели
    - Лестницу попыток и batch обработку
    """

    @staticmethod
    def create_deskewer(mode: str = DESKEW_MODE) -> IDeskewer:
        logger.debug(f"[Extraction] Создание deskew: {mode}")
        return create_deskewer(mode)

    @staticmethod
    def create_image_preprocessor(deskew_mode: str = DESKEW_MODE) -> IImagePreprocessor:
        logger.debug("[Extraction] Создание препроцессора изображений")
        return VariantPreprocessor(deskewer=ExtractionComponentFactory.create_deskewer(deskew_mode))

    @staticmethod
    def create_vision_client(
        api_key: Optional[str] = VISION_API_KEY,
        model: str = VISION_MODEL,
        base_url: Optional[str] = VISION_BASE_URL,
    ) -> IVisionModelClient:
        """
        Создает клиента vision-модели.

        Raises:
            ExtractionConfigurationError: ключ не указан
        """
        logger.debug("[Extraction] Создание клиента vision-модели")
        return OpenAIVisionClient(
            api_key=api_key,
            model=model,
            base_url=base_url,
            method_name=VISION_METHOD_NAME,
            timeout=MODEL_TIMEOUT_SEC,
        )

    @staticmethod
    def create_file_manager() -> ExtractionFileManager:
        logger.debug("[Extraction] Создание менеджера файлов")
        return ExtractionFileManager()

    @staticmethod
    def create_extraction_pipeline(
        vision_client: Optional[IVisionModelClient] = None,
        image_preprocessor: Optional[IImagePreprocessor] = None,
    ) -> IExtractionPipeline:
        """
        Создает Retry Controller со стандартной лестницей попыток.

        Args:
            vision_client: Клиент vision-модели (опционально)
            image_preprocessor: Препроцессор (опционально)
        """
        logger.debug("[Extraction] Создание пайплайна extraction")

        if vision_client is None:
            vision_client = ExtractionComponentFactory.create_vision_client()

        if image_preprocessor is None:
            image_preprocessor = ExtractionComponentFactory.create_image_preprocessor()

        return ExtractionPipeline(
            preprocessor=image_preprocessor,
            vision_client=vision_client,
            ladder=ATTEMPT_LADDER,
        )

    @staticmethod
    def create_batch_processor(
        pipeline: Optional[IExtractionPipeline] = None,
        api_key: Optional[str] = VISION_API_KEY,
        mode: str = BATCH_MODE,
    ) -> IBatchProcessor:
        """
        Создает Batch Processor.

        Пайплайн по умолчанию строится только при наличии ключа: без ключа
        batch всё равно будет отклонён на валидации.
        """
        logger.debug(f"[Extraction] Создание batch processor (mode={mode})")

        if pipeline is None and api_key:
            pipeline = ExtractionComponentFactory.create_extraction_pipeline(
                vision_client=ExtractionComponentFactory.create_vision_client(api_key=api_key)
            )

        return BatchProcessor(pipeline=pipeline, api_key=api_key, mode=mode)

    @staticmethod
    def get_extraction_info() -> Dict[str, Any]:
        """Информация о домене Extraction и его компонентах."""
        return {
            "domain": "Extraction",
            "responsibility": "Варианты изображения + vision-модель + лестница попыток",
            "output": "BatchExtractionResponse",
            "ladder": [config.name for config in ATTEMPT_LADDER],
            "components": {
                "image_preprocessor": "VariantPreprocessor",
                "vision_client": "OpenAIVisionClient",
                "extraction_pipeline": "ExtractionPipeline",
                "batch_processor": "BatchProcessor",
                "file_manager": "ExtractionFileManager",
            },
            "dependencies": ["OpenAI-compatible vision API", "OpenCV", "Pillow"],
        }
