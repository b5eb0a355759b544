"""
Пайплайн (Retry Controller) для домена Extraction.

Состояния на одно изображение:
    pending -> attempting(i) -> {succeeded | attempting(i+1) | exhausted}

Для попытки i:
1. Pre-processor строит ImageVariant по конфигурации i
2. Model Caller отправляет вариант с промптом конфигурации i
3. Text Normalizer (loose) разбирает ответ

Первый ненулевой номер принимается, confidence = CONFIDENCE_BASE - CONFIDENCE_PENALTY * i.

ЦКП: ExtractionResult для КАЖДОГО изображения. Исключения наружу не выходят.
"""

import time
from typing import Callable, Optional, Sequence

from loguru import logger

from config.settings import (
    CONFIDENCE_BASE,
    CONFIDENCE_PENALTY,
    MISS_BACKOFF_SEC,
    ERROR_BACKOFF_SEC,
    MODEL_TIMEOUT_SEC,
    MODEL_MAX_TOKENS,
)
from contracts.extraction_result_dto import ExtractionResult
from checklist_ocr.post_ocr.checklist_extractor import ChecklistNumberExtractor
from ..domain.interfaces import IExtractionPipeline, IImagePreprocessor, IVisionModelClient
from ..domain.contracts import ExtractionAttemptConfig, ReplyStatus
from ..domain.exceptions import ExtractionConfigurationError
from ..infrastructure.ocr.prompts import get_prompt
from .attempt_ladder import ATTEMPT_LADDER


ERROR_METHOD = "error"


def confidence_for_attempt(
    attempt_index: int,
    base: int = CONFIDENCE_BASE,
    penalty: int = CONFIDENCE_PENALTY,
) -> int:
    """Эвристическая уверенность для попытки (0-based), не ниже 0."""
    return max(0, base - penalty * attempt_index)


class ExtractionPipeline(IExtractionPipeline):
    """
    Retry Controller: проводит изображение через лестницу попыток.

    Владеет всей политикой ошибок пайплайна. Паузы между попытками
    выполняются через инжектируемый sleep (в тестах - no-op).
    """

    def __init__(
        self,
        preprocessor: IImagePreprocessor,
        vision_client: IVisionModelClient,
        ladder: Sequence[ExtractionAttemptConfig] = ATTEMPT_LADDER,
        normalizer: Optional[ChecklistNumberExtractor] = None,
        sleep: Callable[[float], None] = time.sleep,
        model_timeout: float = MODEL_TIMEOUT_SEC,
        max_tokens: int = MODEL_MAX_TOKENS,
        miss_backoff: float = MISS_BACKOFF_SEC,
        error_backoff: float = ERROR_BACKOFF_SEC,
    ):
        if not ladder:
            raise ExtractionConfigurationError(
                message="Лестница попыток пуста",
                component="ExtractionPipeline"
            )

        self.preprocessor = preprocessor
        self.vision_client = vision_client
        self.ladder = tuple(ladder)
        self.normalizer = normalizer or ChecklistNumberExtractor()
        self.sleep = sleep
        self.model_timeout = model_timeout
        self.max_tokens = max_tokens
        self.miss_backoff = miss_backoff
        self.error_backoff = error_backoff

        logger.info(f"[RetryController] Pipeline инициализирован ({len(self.ladder)} попыток)")

    def process_image(self, image_content: bytes, file_name: str) -> ExtractionResult:
        try:
            return self._run_ladder(image_content, file_name)
        except Exception as e:
            logger.error(f"[RetryController] {file_name}: непредвиденная ошибка: {e}")
            return ExtractionResult.failure(
                file_name=file_name,
                error=f"Error inesperado al procesar {file_name}: {e}",
                processing_method=ERROR_METHOD,
            )

    def _run_ladder(self, image_content: bytes, file_name: str) -> ExtractionResult:
        total = len(self.ladder)
        diagnostic_text = ""
        last_error: Optional[str] = None

        logger.info(f"[RetryController] Обработка: {file_name}")

        for i, config in enumerate(self.ladder):
            attempt = i + 1
            errored = False

            try:
                variant = self.preprocessor.process(image_content, config)
                data_uri = variant.to_data_uri()
                was_cropped, crop_region, rotation = variant.was_cropped, variant.crop_region, variant.rotation
                variant.release()
                del variant

                reply = self.vision_client.complete(
                    data_uri,
                    get_prompt(config.prompt_variant),
                    self.max_tokens,
                    self.model_timeout,
                )
                del data_uri
            except Exception as e:
                errored = True
                last_error = str(e)
                logger.warning(
                    f"[RetryController] {file_name}: попытка {attempt}/{total} "
                    f"({config.name}) упала: {e}"
                )
            else:
                if reply.status == ReplyStatus.FAILED:
                    errored = True
                    last_error = reply.error
                    logger.warning(
                        f"[RetryController] {file_name}: попытка {attempt}/{total} "
                        f"({config.name}) без ответа: {reply.error}"
                    )
                elif reply.status == ReplyStatus.NOT_FOUND:
                    diagnostic_text = diagnostic_text or reply.text
                    logger.warning(
                        f"[RetryController] {file_name}: попытка {attempt}/{total} "
                        f"({config.name}): модель не нашла номер"
                    )
                else:
                    number = self.normalizer.extract(reply.text, loose=True).number
                    if number:
                        confidence = confidence_for_attempt(i)
                        logger.info(
                            f"[RetryController] {file_name}: {number} "
                            f"(попытка {attempt}, {config.name}, confidence {confidence})"
                        )
                        return ExtractionResult(
                            file_name=file_name,
                            checklist_number=number,
                            extracted_text=reply.text,
                            confidence=confidence,
                            processing_method=self.vision_client.method_name,
                            processing_config=config.name,
                            retry_attempt=attempt,
                            was_cropped=was_cropped,
                            crop_region=crop_region,
                            rotation=rotation,
                            success=True,
                        )

                    # Ответ модели с текстом ценнее, чем NO_ENCONTRADO
                    diagnostic_text = reply.text
                    logger.warning(
                        f"[RetryController] {file_name}: попытка {attempt}/{total} "
                        f"({config.name}): номер не распознан в {reply.text!r}"
                    )

            if attempt < total:
                self.sleep(self.error_backoff if errored else self.miss_backoff)

        error = (
            f"No se pudo extraer número de checklist después de {total} intentos "
            f"con diferentes configuraciones."
        )
        if last_error:
            error = f"{error} Último error: {last_error}"

        logger.error(f"[RetryController] {file_name}: все {total} попыток исчерпаны")
        return ExtractionResult.failure(
            file_name=file_name,
            error=error,
            extracted_text=diagnostic_text,
            retry_attempt=total,
        )
