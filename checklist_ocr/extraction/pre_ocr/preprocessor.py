"""
Pre-processor для домена Extraction.

Строит ОДНУ трансформированную версию изображения по конфигурации попытки:
0. Oversize guard (жёсткое предусловие, всегда)
1. Decode
2. Resize (вписать в target_size, без увеличения)
3. Paper crop (detect_paper)
4. Rotation + deskew (use_rotation / deskew)
5. Enhancement: greyscale, normalize, contrast, sharpen, threshold
6. Encode в JPEG (jpeg_quality)

ВАЖНО: Любой шаг 2-5 может упасть. Ошибка логируется, шаг пропускается,
работа продолжается с последним успешно полученным изображением.
Вызов process() падает только если вход вообще не декодируется.
"""

from typing import Callable, List, Optional

import numpy as np
from loguru import logger

from config.settings import CONTRAST_FACTOR, THRESHOLD_VALUE
from contracts.extraction_result_dto import CropRegion
from ..domain.interfaces import IImagePreprocessor, IDeskewer
from ..domain.contracts import ExtractionAttemptConfig, ImageVariant
from ..domain.exceptions import ImageProcessingError
from .image_decoder import ImageDecoder
from .image_encoder import ImageEncoder
from .elements.image_compressor import ImageCompressor
from .elements.paper_detector import InsetPaperDetector
from .elements.deskew import PassthroughDeskewer
from .infrastructure.filters import (
    apply_grayscale,
    apply_normalize,
    apply_contrast,
    apply_sharpen,
    apply_threshold,
    apply_rotation,
    resize_inside,
)


class VariantPreprocessor(IImagePreprocessor):
    """
    Pre-processor: байты + ExtractionAttemptConfig -> ImageVariant.

    ЦКП: JPEG буфер, готовый к отправке в vision-модель, с provenance
    (was_cropped, crop_region, rotation, applied).
    """

    def __init__(
        self,
        compressor: Optional[ImageCompressor] = None,
        paper_detector: Optional[InsetPaperDetector] = None,
        deskewer: Optional[IDeskewer] = None,
        decoder: Optional[ImageDecoder] = None,
        encoder: Optional[ImageEncoder] = None,
    ):
        self.compressor = compressor or ImageCompressor()
        self.paper_detector = paper_detector or InsetPaperDetector()
        self.deskewer = deskewer or PassthroughDeskewer()
        self.decoder = decoder or ImageDecoder()
        self.encoder = encoder or ImageEncoder()

        logger.debug(f"[Preprocessor] Инициализирован (deskew={self.deskewer.name})")

    def process(self, image_content: bytes, config: ExtractionAttemptConfig) -> ImageVariant:
        """
        Raises:
            ImageDecodingError: Вход не является изображением
            ImageProcessingError: Не удалось закодировать даже исходное изображение
        """
        # 0. Oversize guard
        guarded = self.compressor.compress(image_content)

        # 1. Decode
        base = self.decoder.decode(guarded.image_content)
        del guarded

        applied: List[str] = []
        image = base
        was_cropped = False
        crop_region: Optional[CropRegion] = None
        rotation = 0.0

        # 2. Resize
        tw, th = config.target_size
        resized = self._run_step("resize", image, lambda img: resize_inside(img, tw, th))
        if resized is not None:
            if resized is not image:
                applied.append("resize")
            image = resized

        # 3. Paper crop
        if config.detect_paper:
            try:
                detection = self.paper_detector.detect(image)
                image = detection.image
                crop_region = detection.crop_region
                was_cropped = True
                applied.append("paper_crop")
            except Exception as e:
                logger.warning(f"[Preprocessor] Шаг paper_crop пропущен: {e}")

        # 4. Rotation + deskew
        if config.use_rotation and config.rotation_angle:
            angle = config.rotation_angle
            rotated = self._run_step("rotate", image, lambda img: apply_rotation(img, angle))
            if rotated is not None:
                image = rotated
                rotation += angle
                applied.append(f"rotate_{angle:g}")

        if config.deskew:
            try:
                deskewed, skew = self.deskewer.deskew(image)
                image = deskewed
                if skew:
                    rotation += skew
                    applied.append("deskew")
            except Exception as e:
                logger.warning(f"[Preprocessor] Шаг deskew пропущен: {e}")

        # 5. Enhancement
        enhancement_steps: List[tuple[str, bool, Callable[[np.ndarray], np.ndarray]]] = [
            ("greyscale", config.greyscale, apply_grayscale),
            ("normalize", config.normalize, apply_normalize),
            ("contrast", config.contrast, lambda img: apply_contrast(img, CONTRAST_FACTOR)),
            ("sharpen", config.sharpen, apply_sharpen),
            ("threshold", config.threshold, lambda img: apply_threshold(img, THRESHOLD_VALUE)),
        ]
        for name, enabled, fn in enhancement_steps:
            if not enabled:
                continue
            result = self._run_step(name, image, fn)
            if result is not None:
                image = result
                applied.append(name)

        # 6. Encode
        jpeg_bytes = self._encode(image, base, config.jpeg_quality)
        if jpeg_bytes is None:
            # Откатились на исходник: трансформации в выходе не отражены
            image = base
            applied, was_cropped, crop_region, rotation = [], False, None, 0.0
            jpeg_bytes = self._encode_or_raise(base, config.jpeg_quality)

        h, w = image.shape[:2]
        variant = ImageVariant(
            jpeg_bytes=jpeg_bytes,
            width=w,
            height=h,
            was_cropped=was_cropped,
            crop_region=crop_region,
            rotation=rotation,
            applied=applied,
        )
        del image, base

        logger.debug(
            f"[Preprocessor] [{config.name}] {w}x{h}, "
            f"{len(jpeg_bytes)} bytes, applied={applied}"
        )
        return variant

    @staticmethod
    def _run_step(
        name: str,
        image: np.ndarray,
        fn: Callable[[np.ndarray], np.ndarray],
    ) -> Optional[np.ndarray]:
        """Выполняет шаг; при ошибке логирует и возвращает None."""
        try:
            return fn(image)
        except Exception as e:
            logger.warning(f"[Preprocessor] Шаг {name} пропущен: {e}")
            return None

    def _encode(self, image: np.ndarray, base: np.ndarray, quality: int) -> Optional[bytes]:
        try:
            return self.encoder.encode(image, quality)
        except Exception as e:
            if image is base:
                raise ImageProcessingError(
                    message="Не удалось закодировать изображение в JPEG",
                    component="VariantPreprocessor",
                    original_error=e
                )
            logger.warning(f"[Preprocessor] Кодирование обработанного изображения не удалось: {e}")
            return None

    def _encode_or_raise(self, image: np.ndarray, quality: int) -> bytes:
        try:
            return self.encoder.encode(image, quality)
        except Exception as e:
            raise ImageProcessingError(
                message="Не удалось закодировать изображение в JPEG",
                component="VariantPreprocessor",
                original_error=e
            )
