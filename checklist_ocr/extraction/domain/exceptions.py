"""
Исключения для домена Extraction.

Специфичные для обработки изображений, вызова vision-модели и batch ошибки.
"""

from typing import Optional


class ExtractionError(Exception):
    """Базовое исключение для ошибок домена Extraction."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Extraction Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class ImageProcessingError(ExtractionError):
    """Ошибка обработки изображения."""
    pass


class ImageDecodingError(ImageProcessingError):
    """Ошибка декодирования изображения."""
    pass


class ModelCallError(ExtractionError):
    """Ошибка вызова vision-модели."""
    pass


class ModelResponseError(ModelCallError):
    """Некорректный ответ vision-модели."""
    pass


class ExtractionConfigurationError(ExtractionError):
    """Ошибка конфигурации домена Extraction."""
    pass


class ExtractionFileSystemError(ExtractionError):
    """Ошибка файловой системы в домене Extraction."""
    pass


class ExtractionFileNotFoundError(ExtractionFileSystemError):
    """Файл не найден в домене Extraction."""
    pass


class ExtractionFileWriteError(ExtractionFileSystemError):
    """Ошибка записи файла в домене Extraction."""
    pass


class ExtractionValidationError(ExtractionError):
    """Ошибка валидации данных в домене Extraction."""
    pass


class BatchValidationError(ExtractionError):
    """
    Batch отклонён ДО начала обработки (ошибка использования или конфигурации).

    error - короткий заголовок, message - текст для пользователя.
    """

    error: str = "Solicitud inválida"

    def __init__(self, message: str, component: Optional[str] = "BatchProcessor"):
        self.user_message = message
        super().__init__(message=message, component=component)


class MissingCredentialsError(BatchValidationError):
    """Не задан ключ vision-модели."""

    error = "Configuración del servidor incompleta"


class EmptyBatchError(BatchValidationError):
    """В batch нет изображений."""

    error = "No se enviaron imágenes"


class BatchSizeExceededError(BatchValidationError):
    """Изображений больше, чем допускает лимит batch."""

    error = "Demasiadas imágenes"

    def __init__(self, received: int, max_allowed: int):
        self.received = received
        self.max_allowed = max_allowed
        super().__init__(
            f"Recibidas {received} imágenes; el máximo por lote es {max_allowed}. "
            f"Procesa como máximo {max_allowed} imágenes a la vez."
        )
