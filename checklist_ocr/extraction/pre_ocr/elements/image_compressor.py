"""
Image Compressor (oversize guard) для pre-OCR пайплайна.

Жёсткое предусловие перед любой трансформацией:
- Буфер больше порога (МБ) уменьшается до вписывания в квадрат OVERSIZE_TARGET_SIZE
- JPEG декодируется сразу в уменьшенном масштабе (Pillow draft), полный кадр в память не грузится
- Не зависит от того, какая конфигурация попытки активна
"""

import io
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from PIL import Image

from config.settings import OVERSIZE_THRESHOLD_MB, OVERSIZE_TARGET_SIZE, OVERSIZE_JPEG_QUALITY
from ...domain.exceptions import ImageDecodingError


@dataclass
class CompressionResult:
    """Результат проверки/сжатия буфера."""

    image_content: bytes
    original_bytes: int
    compressed_bytes: int
    original_size: Optional[tuple[int, int]] = None    # (width, height), если декодировали
    compressed_size: Optional[tuple[int, int]] = None  # (width, height)
    was_compressed: bool = False


class ImageCompressor:
    """
    Ограничивает память на огромных входах.

    Буфер до порога возвращается как есть (без декодирования).
    """

    def __init__(
        self,
        threshold_mb: float = OVERSIZE_THRESHOLD_MB,
        target_size: int = OVERSIZE_TARGET_SIZE,
        quality: int = OVERSIZE_JPEG_QUALITY,
    ):
        """
        Args:
            threshold_mb: Порог размера буфера в МБ
            target_size: Сторона квадрата, в который вписывается изображение
            quality: Качество JPEG после уменьшения
        """
        self.threshold_mb = threshold_mb
        self.target_size = target_size
        self.quality = quality

    def compress(self, image_content: bytes, source: str = "buffer") -> CompressionResult:
        """
        Уменьшает буфер, если он больше порога.

        Raises:
            ImageDecodingError: Если большой буфер не удалось открыть
        """
        original_bytes = len(image_content)
        size_mb = original_bytes / (1024 * 1024)

        if size_mb <= self.threshold_mb:
            return CompressionResult(
                image_content=image_content,
                original_bytes=original_bytes,
                compressed_bytes=original_bytes,
            )

        logger.info(
            f"[Compressor] {source}: {size_mb:.2f} MB > {self.threshold_mb} MB, "
            f"уменьшаю до {self.target_size}px"
        )

        box = (self.target_size, self.target_size)
        try:
            with Image.open(io.BytesIO(image_content)) as pil_img:
                original_size = pil_img.size
                # Для JPEG декодер сразу работает в уменьшенном масштабе
                pil_img.draft("RGB", box)
                image = pil_img.convert("RGB")
            image.thumbnail(box, Image.Resampling.LANCZOS)

            out = io.BytesIO()
            image.save(out, format="JPEG", quality=self.quality)
            compressed_size = image.size
            image.close()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodingError(
                message=f"Не удалось уменьшить большое изображение: {source}",
                component="ImageCompressor",
                original_error=e
            )

        compressed = out.getvalue()
        logger.info(
            f"[Compressor] {original_size[0]}x{original_size[1]} -> "
            f"{compressed_size[0]}x{compressed_size[1]}, "
            f"{original_bytes} -> {len(compressed)} bytes"
        )

        return CompressionResult(
            image_content=compressed,
            original_bytes=original_bytes,
            compressed_bytes=len(compressed),
            original_size=original_size,
            compressed_size=compressed_size,
            was_compressed=True,
        )
