"""Pre-OCR Infrastructure exports."""

from .filters import (
    apply_grayscale,
    apply_normalize,
    apply_contrast,
    apply_sharpen,
    apply_threshold,
    apply_rotation,
    apply_crop,
    fit_inside,
    resize_inside,
)

__all__ = [
    'apply_grayscale',
    'apply_normalize',
    'apply_contrast',
    'apply_sharpen',
    'apply_threshold',
    'apply_rotation',
    'apply_crop',
    'fit_inside',
    'resize_inside',
]
