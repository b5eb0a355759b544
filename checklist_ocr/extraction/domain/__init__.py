"""
Domain слой домена Extraction.

Содержит интерфейсы (абстрактные классы), контракты и исключения для Extraction домена.
"""

from .interfaces import (
    IImagePreprocessor,
    IDeskewer,
    IVisionModelClient,
    IExtractionPipeline,
    IBatchProcessor,
)

from .contracts import (
    ExtractionAttemptConfig,
    ImageVariant,
    ModelReply,
    PromptVariant,
    ReplyStatus,
)

from .exceptions import (
    ExtractionError,
    ImageProcessingError,
    ImageDecodingError,
    ModelCallError,
    ModelResponseError,
    ExtractionConfigurationError,
    ExtractionFileSystemError,
    ExtractionFileNotFoundError,
    ExtractionFileWriteError,
    ExtractionValidationError,
    BatchValidationError,
    MissingCredentialsError,
    EmptyBatchError,
    BatchSizeExceededError,
)

__all__ = [
    # Интерфейсы
    "IImagePreprocessor",
    "IDeskewer",
    "IVisionModelClient",
    "IExtractionPipeline",
    "IBatchProcessor",

    # Контракты
    "ExtractionAttemptConfig",
    "ImageVariant",
    "ModelReply",
    "PromptVariant",
    "ReplyStatus",

    # Исключения
    "ExtractionError",
    "ImageProcessingError",
    "ImageDecodingError",
    "ModelCallError",
    "ModelResponseError",
    "ExtractionConfigurationError",
    "ExtractionFileSystemError",
    "ExtractionFileNotFoundError",
    "ExtractionFileWriteError",
    "ExtractionValidationError",
    "BatchValidationError",
    "MissingCredentialsError",
    "EmptyBatchError",
    "BatchSizeExceededError",
]
