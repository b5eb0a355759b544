"""
Deskew для pre-OCR пайплайна.

Две реализации одной возможности (IDeskewer):
- ContourDeskewer: Otsu-бинаризация + minAreaRect по всем тёмным пикселям
- PassthroughDeskewer: ничего не делает

Выбор делается при сборке компонентов (DESKEW_MODE), а не проверкой
доступности OpenCV во время вызова.
"""

from typing import Tuple

import cv2
import numpy as np
from loguru import logger

from config.settings import DESKEW_MAX_ANGLE, DESKEW_MIN_ANGLE
from ...domain.interfaces import IDeskewer
from ...domain.exceptions import ExtractionConfigurationError
from ..infrastructure.filters import apply_grayscale


class ContourDeskewer(IDeskewer):
    """Выравнивание по минимальному описанному прямоугольнику текста."""

    name = "contour"

    def __init__(self, min_angle: float = DESKEW_MIN_ANGLE, max_angle: float = DESKEW_MAX_ANGLE):
        self.min_angle = min_angle
        self.max_angle = max_angle

    def detect_angle(self, image: np.ndarray) -> float:
        """
        Угол наклона содержимого в градусах, в диапазоне [-45, 45].

        Пустое (однотонное) изображение -> 0.
        """
        gray = apply_grayscale(image)
        _, thresh = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)

        coords = cv2.findNonZero(thresh)
        if coords is None or len(coords) < 5:
            return 0.0

        angle = float(cv2.minAreaRect(coords)[-1])
        # OpenCV < 4.5 отдаёт [-90, 0), новые версии (0, 90]
        if angle < -45:
            angle = 90 + angle
        elif angle > 45:
            angle = angle - 90
        return angle

    def deskew(self, image: np.ndarray) -> Tuple[np.ndarray, float]:
        angle = self.detect_angle(image)

        if abs(angle) < self.min_angle or abs(angle) > self.max_angle:
            logger.debug(f"[Deskew] Угол {angle:.2f}° вне рабочего диапазона, пропускаю")
            return image, 0.0

        h, w = image.shape[:2]
        matrix = cv2.getRotationMatrix2D((w / 2, h / 2), angle, 1.0)
        rotated = cv2.warpAffine(
            image, matrix, (w, h),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_REPLICATE,
        )
        logger.debug(f"[Deskew] Выровнено на {angle:.2f}°")
        return rotated, angle


class PassthroughDeskewer(IDeskewer):
    """Заглушка: возвращает изображение без изменений."""

    name = "none"

    def deskew(self, image: np.ndarray) -> Tuple[np.ndarray, float]:
        return image, 0.0


def create_deskewer(mode: str) -> IDeskewer:
    """
    Создаёт реализацию deskew по имени режима.

    Raises:
        ExtractionConfigurationError: неизвестный режим
    """
    if mode == "contour":
        return ContourDeskewer()
    if mode == "none":
        return PassthroughDeskewer()
    raise ExtractionConfigurationError(
        message=f"Неизвестный режим deskew: {mode}",
        component="create_deskewer"
    )
