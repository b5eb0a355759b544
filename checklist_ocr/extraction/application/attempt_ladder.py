"""
Лестница попыток: статический упорядоченный список ExtractionAttemptConfig.

От мягкой к агрессивной обработке. Определяется один раз, в runtime не меняется.
"""

from typing import Tuple

from ..domain.contracts import ExtractionAttemptConfig, PromptVariant


ATTEMPT_LADDER: Tuple[ExtractionAttemptConfig, ...] = (
    ExtractionAttemptConfig(
        index=0,
        name="estandar",
        target_size=(1500, 1500),
        jpeg_quality=85,
        prompt_variant=PromptVariant.BASIC,
    ),
    ExtractionAttemptConfig(
        index=1,
        name="mejorado",
        target_size=(2000, 2000),
        greyscale=True,
        normalize=True,
        sharpen=True,
        contrast=True,
        jpeg_quality=90,
        prompt_variant=PromptVariant.DETAILED,
    ),
    ExtractionAttemptConfig(
        index=2,
        name="deteccion_papel",
        target_size=(2000, 2000),
        greyscale=True,
        normalize=True,
        sharpen=True,
        contrast=True,
        detect_paper=True,
        jpeg_quality=90,
        prompt_variant=PromptVariant.DETAILED,
    ),
    ExtractionAttemptConfig(
        index=3,
        name="alta_resolucion",
        target_size=(3000, 3000),
        greyscale=True,
        normalize=True,
        sharpen=True,
        contrast=True,
        detect_paper=True,
        jpeg_quality=95,
        prompt_variant=PromptVariant.DETAILED,
    ),
    ExtractionAttemptConfig(
        index=4,
        name="rotacion",
        target_size=(2000, 2000),
        greyscale=True,
        normalize=True,
        sharpen=True,
        contrast=True,
        use_rotation=True,
        rotation_angle=90,
        deskew=True,
        jpeg_quality=90,
        prompt_variant=PromptVariant.EXHAUSTIVE,
    ),
    ExtractionAttemptConfig(
        index=5,
        name="ultimo_recurso",
        target_size=(3000, 3000),
        greyscale=True,
        normalize=True,
        sharpen=True,
        contrast=True,
        threshold=True,
        detect_paper=True,
        deskew=True,
        jpeg_quality=100,
        prompt_variant=PromptVariant.EXHAUSTIVE,
    ),
)
