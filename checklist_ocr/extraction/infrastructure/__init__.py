"""
Инфраструктурный слой домена Extraction.

Содержит клиента vision-модели и файловые операции.
"""

from .ocr.vision_model_client import OpenAIVisionClient
from .file_manager import ExtractionFileManager, export_file_name

__all__ = [
    # Model Caller
    "OpenAIVisionClient",

    # Менеджеры
    "ExtractionFileManager",
    "export_file_name",
]
