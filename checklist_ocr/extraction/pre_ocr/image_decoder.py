"""
Image Decoder для pre-OCR пайплайна.

Декодирование байтов изображения в numpy array.
Операция отвечает только за декодирование, файлов не читает.
"""

import cv2
import numpy as np
from loguru import logger

from ..domain.exceptions import ImageDecodingError


class ImageDecoder:
    """
    Декодирует байты изображения (jpeg, png, webp, bmp, tiff) в numpy array.

    ЦКП: декодированное изображение (numpy.ndarray, BGR).
    """

    @staticmethod
    def decode(image_content: bytes, source: str = "buffer") -> np.ndarray:
        """
        Args:
            image_content: Исходные байты
            source: Имя источника (для логов и ошибок)

        Returns:
            numpy.ndarray (BGR формат)

        Raises:
            ImageDecodingError: Если байты пусты или не являются изображением
        """
        if not image_content:
            raise ImageDecodingError(
                message=f"Пустой буфер изображения: {source}",
                component="ImageDecoder"
            )

        nparr = np.frombuffer(image_content, np.uint8)
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

        if image is None:
            raise ImageDecodingError(
                message=f"Не удалось декодировать изображение: {source}",
                component="ImageDecoder"
            )

        logger.debug(f"[ImageDecoder] Изображение декодировано: {source}, размер: {image.shape}")

        return image
