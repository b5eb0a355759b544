"""
Image Encoder: numpy array -> JPEG bytes для data URI запроса к модели.
"""

import cv2
import numpy as np
from loguru import logger

from config.settings import JPEG_QUALITY
from ..domain.exceptions import ImageProcessingError


class ImageEncoder:
    """Кодирует BGR или grayscale массив в JPEG заданного качества."""

    @staticmethod
    def encode(image: np.ndarray, quality: int = JPEG_QUALITY) -> bytes:
        """
        Raises:
            ImageProcessingError: пустой массив или cv2.imencode вернул False
        """
        if image is None or image.size == 0:
            raise ImageProcessingError(
                message="Пустое изображение нельзя закодировать",
                component="ImageEncoder"
            )

        quality = min(100, max(1, int(quality)))
        ok, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, quality])
        if not ok:
            raise ImageProcessingError(
                message=f"cv2.imencode не смог закодировать {image.shape} в JPEG",
                component="ImageEncoder"
            )

        jpeg = buffer.tobytes()
        logger.debug(f"[ImageEncoder] {image.shape[1]}x{image.shape[0]} -> {len(jpeg)} bytes (q{quality})")
        return jpeg
