"""Model Caller: клиент vision-модели и промпты."""

from .vision_model_client import OpenAIVisionClient
from .prompts import PROMPTS, get_prompt

__all__ = [
    "OpenAIVisionClient",
    "PROMPTS",
    "get_prompt",
]
