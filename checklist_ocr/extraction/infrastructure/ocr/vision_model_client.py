"""
Model Caller: vision-модель через OpenAI-совместимый chat endpoint.

Один вызов = одна попытка:
- Изображение уходит как data URI в image_url, рядом текст промпта
- Вызов гонится против жёсткого таймаута, кто первый - тот и победил
- Любая ошибка (таймаут, сеть, API, пустой ответ) -> ModelReply(FAILED)

ВАЖНО: Внутренних повторов нет (max_retries=0 у SDK). Повторы - только
ответственность Retry Controller.
"""

import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Optional

from loguru import logger
from openai import OpenAI

from config.settings import (
    VISION_BASE_URL,
    VISION_MODEL,
    VISION_METHOD_NAME,
    MODEL_TIMEOUT_SEC,
    MODEL_MAX_TOKENS,
    NOT_FOUND_LITERAL,
)
from ...domain.interfaces import IVisionModelClient
from ...domain.contracts import ModelReply, ReplyStatus
from ...domain.exceptions import ExtractionConfigurationError, ModelResponseError


class OpenAIVisionClient(IVisionModelClient):
    """
    Клиент vision-модели (Mistral pixtral по умолчанию).

    Ключ передаётся в конструктор; можно подставить готовый клиент
    (тестовый двойник с .chat.completions.create).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = VISION_MODEL,
        base_url: Optional[str] = VISION_BASE_URL,
        method_name: str = VISION_METHOD_NAME,
        timeout: float = MODEL_TIMEOUT_SEC,
        client: Optional[Any] = None,
    ):
        """
        Args:
            api_key: Ключ API (обязателен, если client не передан)
            model: Идентификатор модели
            base_url: OpenAI-совместимый endpoint
            method_name: Тег processingMethod для успешных результатов
            timeout: Таймаут HTTP-клиента (секунды)
            client: Готовый клиент вместо openai.OpenAI
        """
        if client is None:
            if not api_key:
                raise ExtractionConfigurationError(
                    message="Не указан ключ API vision-модели",
                    component="OpenAIVisionClient"
                )
            client = OpenAI(
                api_key=api_key,
                base_url=base_url if base_url else None,
                timeout=timeout,
                max_retries=0,
            )

        self.client = client
        self.model = model
        self._method_name = method_name

        logger.info(f"[VisionClient] Клиент инициализирован: model={model}")

    @property
    def method_name(self) -> str:
        return self._method_name

    def complete(
        self,
        image_data_uri: str,
        prompt: str,
        max_tokens: int = MODEL_MAX_TOKENS,
        timeout: float = MODEL_TIMEOUT_SEC,
    ) -> ModelReply:
        start = time.perf_counter()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="vision-call")
        future = executor.submit(self._request, image_data_uri, prompt, max_tokens)

        try:
            content = future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(f"[VisionClient] Таймаут вызова модели ({timeout:g}s)")
            return ModelReply.failure(
                f"Timeout de la llamada al modelo ({timeout:g}s)",
                timed_out=True,
                elapsed_ms=elapsed_ms,
            )
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.error(f"[VisionClient] Ошибка вызова модели: {type(e).__name__}: {e}")
            return ModelReply.failure(f"{type(e).__name__}: {e}", elapsed_ms=elapsed_ms)
        finally:
            # Зависший вызов не держит попытку: поток дорабатывает в фоне
            executor.shutdown(wait=False)

        elapsed_ms = (time.perf_counter() - start) * 1000
        text = (content or "").strip()

        if not text:
            logger.warning("[VisionClient] Пустой ответ модели")
            return ModelReply.failure("Respuesta vacía del modelo", elapsed_ms=elapsed_ms)

        if text.strip("\"'`. ").upper() == NOT_FOUND_LITERAL:
            logger.debug(f"[VisionClient] Модель: {NOT_FOUND_LITERAL} ({elapsed_ms:.0f} ms)")
            return ModelReply(status=ReplyStatus.NOT_FOUND, text=text, elapsed_ms=elapsed_ms)

        logger.debug(f"[VisionClient] Ответ модели: {text!r} ({elapsed_ms:.0f} ms)")
        return ModelReply(status=ReplyStatus.TEXT, text=text, elapsed_ms=elapsed_ms)

    def _request(self, image_data_uri: str, prompt: str, max_tokens: int) -> Optional[str]:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_data_uri}},
                    ],
                }
            ],
            max_tokens=max_tokens,
            temperature=0,
        )

        if not completion.choices:
            raise ModelResponseError(
                message="Ответ модели без choices",
                component="OpenAIVisionClient"
            )
        return completion.choices[0].message.content
