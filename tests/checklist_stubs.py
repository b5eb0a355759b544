"""Тестовые двойники Pre-processor и vision-клиента."""

import time

from contracts.extraction_result_dto import ExtractionResult
from checklist_ocr.extraction.domain.contracts import ImageVariant, ModelReply, ReplyStatus
from checklist_ocr.extraction.domain.interfaces import IExtractionPipeline, IImagePreprocessor, IVisionModelClient


class StubPreprocessor(IImagePreprocessor):
    """Возвращает фиксированный вариант; может падать на заданных попытках."""

    def __init__(self, fail_on=(), variant_kwargs=None):
        self.fail_on = set(fail_on)
        self.variant_kwargs = variant_kwargs or {}
        self.configs = []

    def process(self, image_content, config):
        self.configs.append(config)
        if config.index in self.fail_on:
            raise RuntimeError(f"transform failed on {config.name}")
        return ImageVariant(jpeg_bytes=b"\xff\xd8\xff\xe0", width=10, height=10, **self.variant_kwargs)


class ScriptedVisionClient(IVisionModelClient):
    """Отдаёт ответы по порядку; последний ответ повторяется."""

    method_name = "stub_model"

    def __init__(self, replies):
        self.replies = list(replies)
        self.prompts = []

    def complete(self, image_data_uri, prompt, max_tokens, timeout):
        self.prompts.append(prompt)
        reply = self.replies[min(len(self.prompts) - 1, len(self.replies) - 1)]
        if isinstance(reply, Exception):
            raise reply
        return reply


def text(value):
    return ModelReply(status=ReplyStatus.TEXT, text=value)


NOT_FOUND = ModelReply(status=ReplyStatus.NOT_FOUND, text="NO_ENCONTRADO")
TIMEOUT = ModelReply.failure("Timeout de la llamada al modelo (15s)", timed_out=True)


class StubPipeline(IExtractionPipeline):
    """Пайплайн-двойник: номер по имени файла, None -> неуспех, Exception -> raise."""

    def __init__(self, outcomes, delays=None):
        self.outcomes = outcomes
        self.delays = delays or {}
        self.calls = []

    def process_image(self, image_content, file_name):
        self.calls.append(file_name)
        time.sleep(self.delays.get(file_name, 0))
        outcome = self.outcomes.get(file_name)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return ExtractionResult.failure(file_name, "No se pudo extraer número de checklist")
        return ExtractionResult(
            file_name=file_name,
            checklist_number=outcome,
            extracted_text=outcome,
            confidence=95,
            processing_method="stub_model",
            processing_config="estandar",
            retry_attempt=1,
            success=True,
        )
