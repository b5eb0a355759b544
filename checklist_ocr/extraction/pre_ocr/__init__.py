"""Pre-OCR: построение трансформированных версий изображения для vision-модели."""

from .preprocessor import VariantPreprocessor
from .image_decoder import ImageDecoder
from .image_encoder import ImageEncoder

__all__ = [
    'VariantPreprocessor',
    'ImageDecoder',
    'ImageEncoder',
]
