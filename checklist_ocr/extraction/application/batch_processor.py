"""
Batch Processor для домена Extraction.

Проверяет batch ДО начала работы (ключ, пустой batch, лимит), затем
прогоняет каждое изображение через Retry Controller в одном из режимов:
- sequential: по одному, пауза между изображениями
- grouped: группами фиксированной ширины параллельно, пауза между группами

ВАЖНО: Каждое изображение даёт ровно один результат, порядок результатов
совпадает с порядком входа независимо от режима.
"""

import gc
import time
import uuid
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from config.settings import (
    MAX_IMAGES_PER_BATCH,
    BATCH_MODE,
    BATCH_GROUP_SIZE,
    IMAGE_PAUSE_SEC,
    GROUP_PAUSE_SEC,
    RECLAIM_MEMORY,
)
from contracts.extraction_result_dto import (
    BatchExtractionResponse,
    ChecklistNumberEntry,
    ExtractionResult,
)
from ..domain.interfaces import IBatchProcessor, IExtractionPipeline
from ..domain.exceptions import (
    BatchSizeExceededError,
    EmptyBatchError,
    ExtractionConfigurationError,
    MissingCredentialsError,
)
from .extraction_pipeline import ERROR_METHOD


BATCH_MODES = ("sequential", "grouped")


def generate_session_id() -> str:
    """session_<ms>_<random>"""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def build_batch_response(
    session_id: str,
    results: List[ExtractionResult],
    processing_time_ms: int,
) -> BatchExtractionResponse:
    """Агрегирует результаты batch в BatchExtractionResponse."""
    successful = [r for r in results if r.success]
    method_counts = Counter(r.processing_method or "unknown" for r in successful)

    return BatchExtractionResponse(
        session_id=session_id,
        total_images=len(results),
        successful_extractions=len(successful),
        failed_extractions=len(results) - len(successful),
        method_counts=dict(method_counts),
        processing_time_ms=processing_time_ms,
        processing_time_sec=round(processing_time_ms / 1000),
        results=results,
        checklist_numbers=[
            ChecklistNumberEntry.from_result(r) for r in successful if r.checklist_number
        ],
    )


class BatchProcessor(IBatchProcessor):
    """
    Batch обработка изображений через IExtractionPipeline.

    Результаты изображений независимы: ошибка или медленная обработка одного
    не влияет на остальные.
    """

    def __init__(
        self,
        pipeline: Optional[IExtractionPipeline],
        api_key: Optional[str] = None,
        max_images: int = MAX_IMAGES_PER_BATCH,
        mode: str = BATCH_MODE,
        group_size: int = BATCH_GROUP_SIZE,
        image_pause: float = IMAGE_PAUSE_SEC,
        group_pause: float = GROUP_PAUSE_SEC,
        reclaim_memory: bool = RECLAIM_MEMORY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            pipeline: Retry Controller для одного изображения
            api_key: Ключ vision-модели (проверяется до обработки)
            max_images: Жёсткий лимит изображений в batch
            mode: "sequential" или "grouped"
            group_size: Ширина группы в режиме grouped
            image_pause: Пауза между изображениями (sequential)
            group_pause: Пауза между группами (grouped)
            reclaim_memory: gc.collect() между изображениями/группами
            sleep: Функция паузы (в тестах - no-op)
        """
        if mode not in BATCH_MODES:
            raise ExtractionConfigurationError(
                message=f"Неизвестный режим batch: {mode}",
                component="BatchProcessor"
            )
        if group_size < 1 or max_images < 1:
            raise ExtractionConfigurationError(
                message=f"group_size и max_images должны быть >= 1 ({group_size}, {max_images})",
                component="BatchProcessor"
            )

        self.pipeline = pipeline
        self.api_key = api_key
        self.max_images = max_images
        self.mode = mode
        self.group_size = group_size
        self.image_pause = image_pause
        self.group_pause = group_pause
        self.reclaim_memory = reclaim_memory
        self.sleep = sleep

        logger.debug(f"[Batch] Инициализирован: mode={mode}, max_images={max_images}")

    def validate(self, images: Sequence[Tuple[str, bytes]]) -> None:
        """
        Raises:
            MissingCredentialsError: ключ vision-модели не задан
            EmptyBatchError: изображений нет
            BatchSizeExceededError: изображений больше лимита
        """
        if not self.api_key or self.pipeline is None:
            raise MissingCredentialsError(
                "La clave de API del modelo de visión no está configurada."
            )
        if not images:
            raise EmptyBatchError("Selecciona al menos una imagen para procesar.")
        if len(images) > self.max_images:
            raise BatchSizeExceededError(received=len(images), max_allowed=self.max_images)

    def process_batch(
        self,
        images: Sequence[Tuple[str, bytes]],
        session_id: Optional[str] = None,
    ) -> BatchExtractionResponse:
        self.validate(images)

        session_id = session_id or generate_session_id()
        start = time.perf_counter()

        logger.info(f"[Batch] {session_id}: {len(images)} изображений, режим {self.mode}")

        if self.mode == "grouped":
            results = self._process_grouped(images)
        else:
            results = self._process_sequential(images)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        response = build_batch_response(session_id, results, elapsed_ms)

        logger.info(
            f"[Batch] {session_id}: {response.successful_extractions}/{response.total_images} "
            f"успешно за {elapsed_ms} ms"
        )
        return response

    def _process_sequential(self, images: Sequence[Tuple[str, bytes]]) -> List[ExtractionResult]:
        results: List[ExtractionResult] = []

        for idx, (file_name, content) in enumerate(images):
            logger.info(f"[Batch] Изображение {idx + 1}/{len(images)}: {file_name}")
            results.append(self._process_one(file_name, content))

            if idx < len(images) - 1:
                self._reclaim()
                self.sleep(self.image_pause)

        return results

    def _process_grouped(self, images: Sequence[Tuple[str, bytes]]) -> List[ExtractionResult]:
        results: List[ExtractionResult] = []
        groups = [images[i:i + self.group_size] for i in range(0, len(images), self.group_size)]

        for idx, group in enumerate(groups):
            logger.info(f"[Batch] Группа {idx + 1}/{len(groups)}: {len(group)} изображений")

            with ThreadPoolExecutor(max_workers=len(group), thread_name_prefix="batch") as executor:
                # map сохраняет порядок входа
                results.extend(executor.map(lambda item: self._process_one(*item), group))

            if idx < len(groups) - 1:
                self._reclaim()
                self.sleep(self.group_pause)

        return results

    def _process_one(self, file_name: str, content: bytes) -> ExtractionResult:
        try:
            return self.pipeline.process_image(content, file_name)
        except Exception as e:
            logger.error(f"[Batch] {file_name}: {e}")
            return ExtractionResult.failure(
                file_name=file_name,
                error=f"Error procesando {file_name}: {e}",
                processing_method=ERROR_METHOD,
            )

    def _reclaim(self) -> None:
        if self.reclaim_memory:
            gc.collect()
