"""
Настройки проекта Checklist OCR.

ВАЖНО: Перед запуском укажите ключ API vision-модели через переменную окружения
(MISTRAL_API_KEY или OPENAI_API_KEY)!
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
INPUT_DIR = DATA_DIR / "input"
OUTPUT_DIR = DATA_DIR / "output"


# =============================================================================
# VISION MODEL API (OpenAI-совместимый chat endpoint)
# =============================================================================
# Ключ передаётся в конструктор клиента, глобального клиента нет
VISION_API_KEY = os.getenv("MISTRAL_API_KEY") or os.getenv("OPENAI_API_KEY", "")

# Mistral отдаёт OpenAI-совместимый API, поэтому достаточно base_url
VISION_BASE_URL = os.getenv("VISION_BASE_URL", "https://api.mistral.ai/v1")
VISION_MODEL = os.getenv("VISION_MODEL", "pixtral-12b-2409")

# Тег processingMethod для успешных результатов
VISION_METHOD_NAME = os.getenv("VISION_METHOD_NAME", "mistral_ocr")

# Таймаут одного вызова модели (секунды)
MODEL_TIMEOUT_SEC = float(os.getenv("MODEL_TIMEOUT_SEC", "15"))

# Ограничение длины ответа (токены)
MODEL_MAX_TOKENS = 30

# Ответ модели "номер не найден"
NOT_FOUND_LITERAL = "NO_ENCONTRADO"

# =============================================================================
# НАСТРОЙКИ PRE-OCR
# =============================================================================
# Поддерживаемые форматы изображений
SUPPORTED_IMAGE_FORMATS = [".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff"]

# Защита от огромных файлов: всё что больше порога уменьшается до вписывания в квадрат
OVERSIZE_THRESHOLD_MB = 10
OVERSIZE_TARGET_SIZE = 1500
OVERSIZE_JPEG_QUALITY = 90

# Детекция бумаги: фиксированный отступ от краёв кадра (доля)
PAPER_INSET_RATIO = 0.05

# Выравнивание: "contour" (OpenCV minAreaRect) или "none" (passthrough)
DESKEW_MODE = os.getenv("DESKEW_MODE", "contour")
DESKEW_MAX_ANGLE = 45.0
DESKEW_MIN_ANGLE = 0.1

# Заливка при повороте (BGR)
ROTATION_BACKGROUND = (255, 255, 255)

# Параметры улучшения
CONTRAST_FACTOR = 1.2
THRESHOLD_VALUE = 128

# Качество JPEG по умолчанию (0-100)
JPEG_QUALITY = 85

# =============================================================================
# НАСТРОЙКИ RETRY CONTROLLER
# =============================================================================
# confidence = CONFIDENCE_BASE - CONFIDENCE_PENALTY * attempt_index
CONFIDENCE_BASE = 95
CONFIDENCE_PENALTY = 15

# Пауза между попытками: после промаха и после ошибки
MISS_BACKOFF_SEC = 0.5
ERROR_BACKOFF_SEC = 1.0

# =============================================================================
# НАСТРОЙКИ BATCH
# =============================================================================
MAX_IMAGES_PER_BATCH = 5

# "sequential" - по одному с паузой, "grouped" - группами параллельно
BATCH_MODE = os.getenv("BATCH_MODE", "sequential")
BATCH_GROUP_SIZE = 5
IMAGE_PAUSE_SEC = 0.5
GROUP_PAUSE_SEC = 1.0

# gc.collect() между изображениями
RECLAIM_MEMORY = True

# =============================================================================
# НАСТРОЙКИ REVIEW
# =============================================================================
# Результаты ниже порога попадают в очередь ручной проверки
REVIEW_CONFIDENCE_THRESHOLD = 70
MANUAL_ENTRY_CONFIDENCE = 100


# =============================================================================
# ПРОВЕРКА КОНФИГУРАЦИИ
# =============================================================================
def validate_config():
    """Проверяет корректность конфигурации."""
    errors = []

    if not VISION_API_KEY:
        errors.append(
            "Ключ vision-модели не указан!\n"
            "Задайте MISTRAL_API_KEY или OPENAI_API_KEY в переменных окружения."
        )

    if MODEL_TIMEOUT_SEC <= 0:
        errors.append(f"MODEL_TIMEOUT_SEC должен быть > 0, получено: {MODEL_TIMEOUT_SEC}")

    if DESKEW_MODE not in ("contour", "none"):
        errors.append(f"Неизвестный DESKEW_MODE: {DESKEW_MODE} (ожидается contour или none)")

    if BATCH_MODE not in ("sequential", "grouped"):
        errors.append(f"Неизвестный BATCH_MODE: {BATCH_MODE} (ожидается sequential или grouped)")

    if errors:
        raise ValueError("\n".join(errors))

    # Создаём директории если не существуют
    INPUT_DIR.mkdir(parents=True, exist_ok=True)
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    return True
