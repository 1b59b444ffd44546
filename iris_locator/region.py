"""Face region preparation: grayscale conversion and upper-half cropping."""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import cv2
import numpy as np

from .errors import InvalidRegion
from .types import FaceRegion


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Return a single-channel uint8 view or copy of ``image``."""
    if image is None or image.size == 0:
        raise ValueError("image is empty")

    if image.ndim == 3:
        if image.shape[2] == 4:
            gray = cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
        elif image.shape[2] == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        elif image.shape[2] == 1:
            gray = image[:, :, 0]
        else:
            raise ValueError(f"unsupported channel count: {image.shape[2]}")
    elif image.ndim == 2:
        gray = image
    else:
        raise ValueError(f"unsupported image shape: {image.shape}")

    if gray.dtype != np.uint8:
        gray = np.clip(gray, 0, 255).astype(np.uint8)
    return gray


def validate_region(face: FaceRegion, image_shape: Tuple[int, ...]) -> None:
    """Raise ``InvalidRegion`` unless ``face`` is non-empty and inside the image."""
    img_h, img_w = image_shape[:2]

    if face.width <= 0 or face.height <= 0:
        raise InvalidRegion(f"degenerate face box {face.as_rect()}")

    if face.x < 0 or face.y < 0 or face.x + face.width > img_w or face.y + face.height > img_h:
        raise InvalidRegion(
            f"face box {face.as_rect()} outside image bounds {img_w}x{img_h}"
        )


def prepare_region(
    gray: np.ndarray,
    face: Union[FaceRegion, Sequence[int]],
) -> Tuple[FaceRegion, np.ndarray]:
    """
    Restrict the search to the upper half of a face box.

    Returns the halved region and a view into ``gray`` covering it. The view
    shares memory with the image; nothing is resized or copied.
    """
    face = FaceRegion.from_rect(face)
    validate_region(face, gray.shape)

    upper = face.upper_half()
    crop = gray[upper.y:upper.y + upper.height, upper.x:upper.x + upper.width]
    return upper, crop
