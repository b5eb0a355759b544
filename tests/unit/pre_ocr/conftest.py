import cv2
import numpy as np
import pytest


@pytest.fixture
def document_image():
    """Fixture: белый лист 300x400 с тёмной надписью (BGR numpy array)."""
    image = np.full((300, 400, 3), 255, dtype=np.uint8)
    cv2.putText(image, "Checklist N 123456", (20, 150), cv2.FONT_HERSHEY_SIMPLEX, 0.9, (0, 0, 0), 2)
    return image


@pytest.fixture
def document_jpeg(document_image):
    """Fixture: JPEG байты документа."""
    ok, buffer = cv2.imencode(".jpg", document_image)
    assert ok
    return buffer.tobytes()


@pytest.fixture
def noisy_jpeg():
    """Fixture: JPEG 800x600 с шумом (плохо сжимается)."""
    rng = np.random.default_rng(0)
    image = rng.integers(0, 256, size=(600, 800, 3), dtype=np.uint8)
    ok, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, 95])
    assert ok
    return buffer.tobytes()
