"""
Text Normalizer: свободный текст -> канонический номер checklist (6 цифр) или None.

Алгоритм:
1. Очистка: выбрасываем всё кроме [a-zA-Z0-9º°#:.-] и пробелов, схлопываем пробелы
2. Прямой паттерн: "checklist" + необязательный N-маркер (n, nº, n°, no, n0) + разделитель + серия 5-7
3. Fallback: первое "checklist" и окно 50 символов после него, первая серия 5-7
4. Loose (только для ответов vision-модели): любая отдельно стоящая серия 5-7
5. Исправление путаницы символов: B→8, S→5, O→0, G→6, I→1, l→1
6. Дополнение нулями слева и обрезка до 6 правых символов

Функция чистая и детерминированная: без сети и без I/O изображений.

ВАЖНО: "checklist" ищется без учёта регистра, а серия цифр сохраняет регистр,
иначе буквы B/S/O/G/I до исправления не дожили бы.
"""

import re
from dataclasses import dataclass
from typing import Optional

from loguru import logger


CHECKLIST_NUMBER_LENGTH = 6
FALLBACK_WINDOW = 50

# Буквы, которые модель/OCR выдаёт вместо похожих цифр
CONFUSION_MAP = {"B": "8", "S": "5", "O": "0", "G": "6", "I": "1", "l": "1"}

_DISALLOWED = re.compile(r"[^a-zA-Z0-9º°#:.\s-]")
_WHITESPACE = re.compile(r"\s+")

# Серия 5-7 символов из цифр и букв-двойников, хотя бы одна настоящая цифра в начале серии
_RUN = r"(?=[BSOGIl]{0,6}[0-9])([0-9BSOGIl]{5,7})"

# Начало серии: граница слова, либо буква сразу перед настоящей цифрой ("n123456")
_RUN_START = r"(?:(?<![0-9A-Za-z])|(?<=[A-Za-z])(?=[0-9]))"

_PRIMARY = re.compile(
    r"(?i:checklist)\s*(?:[nN][º°oO0]?)?\s*[:.#-]?\s*" + _RUN_START + _RUN + r"(?![0-9A-Za-z])"
)
_WINDOW_RUN = re.compile(_RUN_START + _RUN + r"(?![0-9A-Za-z])")
_STANDALONE_RUN = re.compile(r"(?<![0-9A-Za-z])" + _RUN + r"(?![0-9A-Za-z])")
_TOKEN = "checklist"


@dataclass(frozen=True)
class ChecklistNumberResult:
    """Результат нормализации."""

    number: Optional[str]
    candidate: Optional[str] = None  # Серия до исправления
    rule: Optional[str] = None       # primary, fallback, loose

    @property
    def found(self) -> bool:
        return self.number is not None


def clean_text(raw: str) -> str:
    """Убирает управляющие и недопустимые символы, схлопывает пробелы."""
    text = _DISALLOWED.sub("", raw or "")
    return _WHITESPACE.sub(" ", text).strip()


def fix_confusions(run: str) -> str:
    """Заменяет буквы-двойники на цифры, остальные символы не трогает."""
    return "".join(CONFUSION_MAP.get(ch, ch) for ch in run)


def canonicalize(run: str) -> str:
    """Дополняет нулями слева и оставляет 6 правых символов."""
    return run.rjust(CHECKLIST_NUMBER_LENGTH, "0")[-CHECKLIST_NUMBER_LENGTH:]


class ChecklistNumberExtractor:
    """
    Извлекает номер checklist из текста.

    loose=True разрешает отдельно стоящую серию без слова "checklist":
    используется только для ответов vision-модели, где промпт уже
    ограничил ответ самим номером.
    """

    def extract(self, text: str, loose: bool = False) -> ChecklistNumberResult:
        clean = clean_text(text)
        if not clean:
            return ChecklistNumberResult(number=None)

        candidate, rule = self._find_candidate(clean, loose)
        if candidate is None:
            logger.trace(f"[Normalizer] Номер не найден в: '{clean[:80]}'")
            return ChecklistNumberResult(number=None)

        number = canonicalize(fix_confusions(candidate))
        logger.debug(f"[Normalizer] {rule}: '{candidate}' -> {number}")
        return ChecklistNumberResult(number=number, candidate=candidate, rule=rule)

    def _find_candidate(self, clean: str, loose: bool) -> tuple[Optional[str], Optional[str]]:
        # 1. Прямой паттерн
        match = _PRIMARY.search(clean)
        if match:
            return match.group(1), "primary"

        # 2. Окно после первого "checklist"
        start = clean.lower().find(_TOKEN)
        if start != -1:
            # Ищем по всей строке: endpos обрезал бы серию на краю окна
            match = _WINDOW_RUN.search(clean, start)
            if match and match.start(1) < start + FALLBACK_WINDOW:
                return match.group(1), "fallback"

        # 3. Любая отдельно стоящая серия (только для ответов модели)
        if loose:
            match = _STANDALONE_RUN.search(clean)
            if match:
                return match.group(1), "loose"

        return None, None


_default_extractor = ChecklistNumberExtractor()


def extract_checklist_number(text: str, loose: bool = False) -> Optional[str]:
    """Удобная функция: текст -> 6-значный номер или None."""
    return _default_extractor.extract(text, loose=loose).number
