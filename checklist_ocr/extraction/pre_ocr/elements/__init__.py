"""Pre-OCR elements: oversize guard, paper detection, deskew."""

from .image_compressor import ImageCompressor, CompressionResult
from .paper_detector import InsetPaperDetector, PaperDetectionResult
from .deskew import ContourDeskewer, PassthroughDeskewer, create_deskewer

__all__ = [
    'ImageCompressor',
    'CompressionResult',
    'InsetPaperDetector',
    'PaperDetectionResult',
    'ContourDeskewer',
    'PassthroughDeskewer',
    'create_deskewer',
]
