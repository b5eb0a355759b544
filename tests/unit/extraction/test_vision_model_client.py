import threading
from types import SimpleNamespace

import pytest

from checklist_ocr.extraction.domain.contracts import ReplyStatus
from checklist_ocr.extraction.domain.exceptions import ExtractionConfigurationError
from checklist_ocr.extraction.infrastructure.ocr.vision_model_client import OpenAIVisionClient


DATA_URI = "data:image/jpeg;base64,AAAA"


class FakeCompletions:
    """Двойник client.chat.completions с записью запросов."""

    def __init__(self, content=None, error=None, block=None, choices=True):
        self.content = content
        self.error = error
        self.block = block
        self.choices = choices
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.block is not None:
            self.block.wait(5)
        if self.error is not None:
            raise self.error
        if not self.choices:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_client(completions):
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIVisionClient(model="pixtral-12b-2409", method_name="mistral_ocr", client=fake)


def test_text_reply():
    completions = FakeCompletions(content="  123456 \n")
    reply = make_client(completions).complete(DATA_URI, "prompt", 30, 5)

    assert reply.status == ReplyStatus.TEXT
    assert reply.text == "123456"
    assert reply.failed is False


def test_request_shape():
    completions = FakeCompletions(content="123456")
    make_client(completions).complete(DATA_URI, "Busca el número", 30, 5)

    request = completions.requests[0]
    assert request["model"] == "pixtral-12b-2409"
    assert request["max_tokens"] == 30
    content = request["messages"][0]["content"]
    assert content[0] == {"type": "text", "text": "Busca el número"}
    assert content[1] == {"type": "image_url", "image_url": {"url": DATA_URI}}


@pytest.mark.parametrize("content", ["NO_ENCONTRADO", "no_encontrado.", '"NO_ENCONTRADO"'])
def test_not_found_literal(content):
    reply = make_client(FakeCompletions(content=content)).complete(DATA_URI, "p", 30, 5)
    assert reply.status == ReplyStatus.NOT_FOUND


@pytest.mark.parametrize("content", [None, "", "   "])
def test_empty_reply_is_failure(content):
    reply = make_client(FakeCompletions(content=content)).complete(DATA_URI, "p", 30, 5)
    assert reply.status == ReplyStatus.FAILED
    assert reply.error


def test_no_choices_is_failure():
    reply = make_client(FakeCompletions(choices=False)).complete(DATA_URI, "p", 30, 5)
    assert reply.failed


def test_transport_error_is_failure():
    completions = FakeCompletions(error=ConnectionError("connection reset"))
    reply = make_client(completions).complete(DATA_URI, "p", 30, 5)

    assert reply.status == ReplyStatus.FAILED
    assert "connection reset" in reply.error
    assert reply.timed_out is False


def test_timeout_is_failure():
    release = threading.Event()
    completions = FakeCompletions(content="123456", block=release)
    try:
        reply = make_client(completions).complete(DATA_URI, "p", 30, 0.05)
    finally:
        release.set()

    # Проверка: таймаут - это ответ FAILED, а не исключение
    assert reply.status == ReplyStatus.FAILED
    assert reply.timed_out is True


def test_method_name():
    assert make_client(FakeCompletions(content="1")).method_name == "mistral_ocr"


def test_missing_api_key():
    with pytest.raises(ExtractionConfigurationError):
        OpenAIVisionClient(api_key="")


def test_real_sdk_client_construction():
    client = OpenAIVisionClient(api_key="test-key", base_url="https://api.mistral.ai/v1")
    assert client.client.max_retries == 0
