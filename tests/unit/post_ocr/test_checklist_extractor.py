import pytest

from checklist_ocr.post_ocr.checklist_extractor import (
    CONFUSION_MAP,
    ChecklistNumberExtractor,
    canonicalize,
    clean_text,
    extract_checklist_number,
    fix_confusions,
)


@pytest.fixture
def extractor():
    return ChecklistNumberExtractor()


@pytest.mark.parametrize("text", [
    "Checklist N° 123456",
    "CHECKLIST N° 123456",
    "checklist nº 123456",
    "Checklist Nº: 123456",
    "Checklist No. 123456",
    "Checklist N°123456",
    "Checklist #123456",
    "Inspección diaria - Checklist N° 123456 - Turno mañana",
])
def test_primary_variants(text):
    assert extract_checklist_number(text) == "123456"


def test_primary_rule_reported(extractor):
    result = extractor.extract("Checklist N° 123456")
    assert result.found
    assert result.rule == "primary"
    assert result.candidate == "123456"


def test_fallback_window(extractor):
    # Между словом и номером посторонний текст: прямой паттерн не срабатывает
    result = extractor.extract("Checklist de inspección vehicular 654321")
    assert result.number == "654321"
    assert result.rule == "fallback"


def test_fallback_window_is_bounded():
    text = "Checklist " + "x" * 60 + " 123456"
    assert extract_checklist_number(text) is None


def test_fallback_run_crossing_window_edge(extractor):
    # Серия начинается внутри окна, заканчивается за его краем
    result = extractor.extract("Checklist " + "x" * 36 + " 123456")
    assert result.number == "123456"
    assert result.rule == "fallback"


def test_fallback_long_run_at_window_edge_rejected():
    # 8 цифр не обрезаются краем окна до 6
    assert extract_checklist_number("Checklist " + "x" * 33 + " 12345678") is None
    assert extract_checklist_number("Checklist " + "x" * 20 + " 12345678") is None


def test_loose_accepts_bare_run():
    # Ответ модели - только номер
    assert extract_checklist_number("123456") is None
    assert extract_checklist_number("123456", loose=True) == "123456"


def test_loose_beyond_window():
    text = "Checklist " + "x" * 60 + " 123456"
    assert extract_checklist_number(text, loose=True) == "123456"


def test_confusion_letters_in_candidate():
    assert extract_checklist_number("Checklist N° 12B456") == "128456"
    assert extract_checklist_number("Checklist N° 1234SO") == "123450"


@pytest.mark.parametrize("letter,digit", sorted(CONFUSION_MAP.items()))
def test_each_confusion_letter(letter, digit):
    assert fix_confusions(letter) == digit
    assert fix_confusions(f"12{letter}45") == f"12{digit}45"


def test_unmapped_characters_pass_through():
    assert fix_confusions("12A4Z9") == "12A4Z9"
    assert fix_confusions("123456") == "123456"


def test_padding_five_digits():
    assert extract_checklist_number("Checklist N° 12345") == "012345"
    assert canonicalize("12345") == "012345"


def test_truncation_seven_digits():
    assert extract_checklist_number("Checklist N° 1234567") == "234567"
    assert canonicalize("1234567") == "234567"


def test_eight_digit_run_rejected():
    assert extract_checklist_number("12345678", loose=True) is None


def test_no_match():
    assert extract_checklist_number("Hola mundo 1234") is None
    assert extract_checklist_number("Hola mundo 1234", loose=True) is None
    assert extract_checklist_number("NO_ENCONTRADO", loose=True) is None
    assert extract_checklist_number("") is None


def test_letters_only_run_is_not_a_number():
    # Серия без единой настоящей цифры не является кандидатом
    assert extract_checklist_number("Checklist N° BOSSIG", loose=True) is None


def test_clean_text_strips_control_characters():
    assert clean_text("Checklist\tN°\x00  123456\n") == "Checklist N° 123456"
    assert extract_checklist_number("Checklist\tN°\x00 123456") == "123456"


def test_deterministic(extractor):
    text = "Checklist N° 12B45O"
    first = extractor.extract(text, loose=True)
    second = extractor.extract(text, loose=True)
    assert first == second
    assert first.number == "128450"
