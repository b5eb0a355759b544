"""
Промпты vision-модели для лестницы попыток.

От узкой формулировки к исчерпывающей: чем глубже попытка, тем больше
вариантов написания метки перечисляется. Ответ всегда ограничен самим
номером или литералом NOT_FOUND_LITERAL.
"""

from typing import Dict

from config.settings import NOT_FOUND_LITERAL
from ...domain.contracts import PromptVariant


PROMPTS: Dict[PromptVariant, str] = {
    PromptVariant.BASIC: (
        'Busca en esta imagen el texto "Checklist N°" seguido de un número '
        f'de 5-7 dígitos. Responde SOLO el número o "{NOT_FOUND_LITERAL}".'
    ),
    PromptVariant.DETAILED: (
        'Analiza esta imagen de checklist. Busca "Checklist N°", "Checklist Nº", '
        '"CHECKLIST N°" seguido de un número de 5-7 dígitos. '
        f'Responde SOLO el número o "{NOT_FOUND_LITERAL}".'
    ),
    PromptVariant.EXHAUSTIVE: (
        'Examina toda la imagen con atención, incluso si está girada, inclinada, '
        'borrosa o con poca luz. Busca cualquier variante de "Checklist N°", '
        '"Checklist Nº", "Checklist No", "CHECKLIST N", "Checklist #" o similar, '
        'seguida de un número de 5-7 dígitos, normalmente en la parte superior '
        'del documento. No confundas letras con dígitos (B/8, S/5, O/0, G/6, I/1). '
        f'Responde ÚNICAMENTE con el número, sin texto adicional, o "{NOT_FOUND_LITERAL}" '
        'si de verdad no aparece.'
    ),
}


def get_prompt(variant: PromptVariant) -> str:
    """Текст промпта для варианта."""
    return PROMPTS[variant]
