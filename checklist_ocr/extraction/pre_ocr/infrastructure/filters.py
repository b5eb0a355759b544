"""
Pre-OCR Infrastructure: Фильтры и операции обработки изображений.

Утилиты низкого уровня для применения фильтров к numpy массивам (BGR или Grayscale).
"""

from typing import Tuple

import cv2
import numpy as np
import numpy.typing as npt

from config.settings import CONTRAST_FACTOR, THRESHOLD_VALUE, ROTATION_BACKGROUND


def apply_grayscale(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Преобразует изображение в grayscale."""
    if len(image.shape) == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)  # type: ignore[return-value]
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)  # type: ignore[return-value]


def apply_normalize(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """
    Растягивает гистограмму яркости на весь диапазон [0, 255].

    Для цветного изображения растягивается только канал яркости (YCrCb).
    """
    if len(image.shape) == 2:
        return cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX)  # type: ignore[return-value]

    ycrcb = cv2.cvtColor(image, cv2.COLOR_BGR2YCrCb)
    ycrcb[:, :, 0] = cv2.normalize(ycrcb[:, :, 0], None, 0, 255, cv2.NORM_MINMAX)
    return cv2.cvtColor(ycrcb, cv2.COLOR_YCrCb2BGR)  # type: ignore[return-value]


def apply_contrast(image: npt.NDArray[np.uint8], factor: float = CONTRAST_FACTOR) -> npt.NDArray[np.uint8]:
    """
    Модуляция контраста вокруг серого (128).

    Args:
        image: Исходное изображение
        factor: Коэффициент контраста (>1 усиливает)
    """
    beta = 128.0 * (1.0 - factor)
    return cv2.convertScaleAbs(image, alpha=factor, beta=beta)  # type: ignore[return-value]


def apply_sharpen(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Повышение резкости ядром 3x3."""
    kernel = np.array([[-1, -1, -1],
                       [-1,  9, -1],
                       [-1, -1, -1]])
    return cv2.filter2D(image, -1, kernel)  # type: ignore[return-value]


def apply_threshold(image: npt.NDArray[np.uint8], level: int = THRESHOLD_VALUE) -> npt.NDArray[np.uint8]:
    """
    Жёсткая бинаризация: пиксели > level становятся белыми, остальные чёрными.

    Args:
        image: Исходное изображение (цветное конвертируется в grayscale)
        level: Порог [0-255]
    """
    gray = apply_grayscale(image)
    _, binary = cv2.threshold(gray, level, 255, cv2.THRESH_BINARY)
    return binary  # type: ignore[return-value]


def apply_rotation(
    image: npt.NDArray[np.uint8],
    angle: float,
    background: Tuple[int, int, int] = ROTATION_BACKGROUND,
    border_mode: int = cv2.BORDER_CONSTANT,
) -> npt.NDArray[np.uint8]:
    """
    Поворот на произвольный угол по часовой стрелке с расширением холста.

    Углы, кратные 90, поворачиваются без интерполяции.
    """
    normalized = angle % 360
    if normalized == 0:
        return image
    if normalized == 90:
        return cv2.rotate(image, cv2.ROTATE_90_CLOCKWISE)  # type: ignore[return-value]
    if normalized == 180:
        return cv2.rotate(image, cv2.ROTATE_180)  # type: ignore[return-value]
    if normalized == 270:
        return cv2.rotate(image, cv2.ROTATE_90_COUNTERCLOCKWISE)  # type: ignore[return-value]

    h, w = image.shape[:2]
    center = (w / 2, h / 2)
    # cv2: положительный угол = против часовой
    matrix = cv2.getRotationMatrix2D(center, -angle, 1.0)
    cos, sin = abs(matrix[0, 0]), abs(matrix[0, 1])
    new_w = int(h * sin + w * cos)
    new_h = int(h * cos + w * sin)
    matrix[0, 2] += new_w / 2 - center[0]
    matrix[1, 2] += new_h / 2 - center[1]

    fill = background[0] if len(image.shape) == 2 else background
    return cv2.warpAffine(  # type: ignore[return-value]
        image, matrix, (new_w, new_h),
        flags=cv2.INTER_LINEAR,
        borderMode=border_mode,
        borderValue=fill,
    )


def apply_crop(image: npt.NDArray[np.uint8], left: int, top: int, width: int, height: int) -> npt.NDArray[np.uint8]:
    """Прямоугольный кроп. Прямоугольник должен лежать внутри изображения."""
    h, w = image.shape[:2]
    if left < 0 or top < 0 or width <= 0 or height <= 0 or left + width > w or top + height > h:
        raise ValueError(f"Кроп ({left}, {top}, {width}, {height}) выходит за границы {w}x{h}")
    return image[top:top + height, left:left + width].copy()


def fit_inside(w: int, h: int, max_w: int, max_h: int) -> Tuple[int, int]:
    """Размер с сохранением aspect ratio, вписанный в (max_w, max_h). Без увеличения."""
    scale = min(max_w / w, max_h / h, 1.0)
    return max(1, int(w * scale)), max(1, int(h * scale))


def resize_inside(image: npt.NDArray[np.uint8], max_w: int, max_h: int) -> npt.NDArray[np.uint8]:
    """Уменьшает изображение до вписывания в (max_w, max_h). Маленькие не увеличивает."""
    h, w = image.shape[:2]
    target = fit_inside(w, h, max_w, max_h)
    if target == (w, h):
        return image
    return cv2.resize(image, target, interpolation=cv2.INTER_AREA)  # type: ignore[return-value]
