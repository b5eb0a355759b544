"""
Paper Detector для pre-OCR пайплайна.

Приблизительный кроп к границам документа: фиксированный отступ от краёв кадра.
Настоящий поиск контуров не выполняется - это сознательная аппроксимация,
фото checklist обычно снято с небольшими полями вокруг листа.
"""

from dataclasses import dataclass

import numpy as np
from loguru import logger

from config.settings import PAPER_INSET_RATIO
from contracts.extraction_result_dto import CropRegion
from ..infrastructure.filters import apply_crop


@dataclass
class PaperDetectionResult:
    """Результат детекции бумаги."""

    image: np.ndarray
    crop_region: CropRegion


class InsetPaperDetector:
    """Кропает фиксированную долю с каждого края."""

    def __init__(self, inset_ratio: float = PAPER_INSET_RATIO):
        if not 0 <= inset_ratio < 0.5:
            raise ValueError(f"inset_ratio должен быть в [0, 0.5), получено: {inset_ratio}")
        self.inset_ratio = inset_ratio

    def region_for(self, width: int, height: int) -> CropRegion:
        """Прямоугольник бумаги для кадра width x height."""
        left = int(width * self.inset_ratio)
        top = int(height * self.inset_ratio)
        return CropRegion(
            left=left,
            top=top,
            width=max(1, int(width * (1 - 2 * self.inset_ratio))),
            height=max(1, int(height * (1 - 2 * self.inset_ratio))),
        )

    def detect(self, image: np.ndarray) -> PaperDetectionResult:
        h, w = image.shape[:2]
        region = self.region_for(w, h)
        cropped = apply_crop(image, region.left, region.top, region.width, region.height)

        logger.debug(
            f"[PaperDetector] {w}x{h} -> crop "
            f"({region.left}, {region.top}, {region.width}, {region.height})"
        )
        return PaperDetectionResult(image=cropped, crop_region=region)
