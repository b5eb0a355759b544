"""
Application слой домена Extraction.

Лестница попыток, Retry Controller, Batch Processor и фабрика компонентов.
"""

from .attempt_ladder import ATTEMPT_LADDER
from .extraction_pipeline import ExtractionPipeline, confidence_for_attempt
from .batch_processor import BatchProcessor, build_batch_response, generate_session_id
from .factory import ExtractionComponentFactory

__all__ = [
    "ATTEMPT_LADDER",
    "ExtractionPipeline",
    "confidence_for_attempt",
    "BatchProcessor",
    "build_batch_response",
    "generate_session_id",
    "ExtractionComponentFactory",
]
