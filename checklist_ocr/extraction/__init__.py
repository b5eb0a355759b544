"""
Домен Extraction: изображение checklist -> ExtractionResult.

Этот домен отвечает за:
1. Построение вариантов изображения (resize, crop, rotation, deskew, enhancement)
2. Вызов vision-модели с промптом попытки
3. Лестницу попыток и batch обработку

Граница домена: contracts.ExtractionResult / contracts.BatchExtractionResponse
"""

from .pre_ocr.preprocessor import VariantPreprocessor
from .infrastructure.ocr.vision_model_client import OpenAIVisionClient

from .application.factory import ExtractionComponentFactory
from .application.extraction_pipeline import ExtractionPipeline
from .application.batch_processor import BatchProcessor

__all__ = [
    # Основные классы
    "VariantPreprocessor",
    "OpenAIVisionClient",

    # Application слой
    "ExtractionComponentFactory",
    "ExtractionPipeline",
    "BatchProcessor",
]
