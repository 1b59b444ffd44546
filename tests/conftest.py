"""Synthetic images shared by the test suite."""

import numpy as np
import pytest

from iris_locator.types import FaceRegion

BACKGROUND = 220
BLOB = 30
BLOB_RADIUS = 12

# Face box and eye centres used by the two-blob image.
FACE = FaceRegion(20, 20, 120, 160)
LEFT_EYE = (50, 60)
RIGHT_EYE = (110, 60)


def draw_disc(image, center, radius, value):
    yy, xx = np.mgrid[0:image.shape[0], 0:image.shape[1]]
    mask = (xx - center[0]) ** 2 + (yy - center[1]) ** 2 <= radius * radius
    image[mask] = value
    return image


@pytest.fixture
def two_blob_image():
    image = np.full((220, 200), BACKGROUND, dtype=np.uint8)
    draw_disc(image, LEFT_EYE, BLOB_RADIUS, BLOB)
    draw_disc(image, RIGHT_EYE, BLOB_RADIUS, BLOB)
    return image


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(200, 240), dtype=np.uint8)


class StaticFaceDetector:
    """Detector stand-in returning a fixed list of boxes."""

    def __init__(self, faces, min_face_size=0):
        self.faces = list(faces)
        self.min_face_size = min_face_size
        self.calls = 0

    def detect_faces(self, image, resize_factor=1.0):
        self.calls += 1
        return list(self.faces)

    def filter_faces(self, faces, min_face_size=None):
        if min_face_size is None:
            min_face_size = self.min_face_size
        return [face for face in faces if face.height >= min_face_size]


@pytest.fixture
def static_detector():
    return StaticFaceDetector
