import numpy as np
import pytest

from checklist_ocr.extraction.domain.exceptions import ImageDecodingError, ImageProcessingError
from checklist_ocr.extraction.pre_ocr.image_decoder import ImageDecoder
from checklist_ocr.extraction.pre_ocr.image_encoder import ImageEncoder


def test_decode_jpeg(document_jpeg):
    image = ImageDecoder.decode(document_jpeg)
    assert image.shape == (300, 400, 3)


def test_decode_empty_buffer():
    with pytest.raises(ImageDecodingError):
        ImageDecoder.decode(b"")


def test_decode_garbage():
    with pytest.raises(ImageDecodingError):
        ImageDecoder.decode(b"definitely not an image")


def test_encode_produces_jpeg(document_image):
    encoded = ImageEncoder.encode(document_image)

    # Проверка: JPEG signature
    assert encoded[:3] == b"\xff\xd8\xff"


def test_encode_grayscale():
    gray = np.full((50, 50), 128, dtype=np.uint8)
    assert ImageEncoder.encode(gray)[:2] == b"\xff\xd8"


def test_quality_affects_size(noisy_jpeg):
    image = ImageDecoder.decode(noisy_jpeg)
    assert len(ImageEncoder.encode(image, quality=30)) < len(ImageEncoder.encode(image, quality=95))


def test_encode_empty_array_rejected():
    with pytest.raises(ImageProcessingError):
        ImageEncoder.encode(np.zeros((0, 0, 3), dtype=np.uint8))
