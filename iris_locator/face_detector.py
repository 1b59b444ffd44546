#!/usr/bin/env python3
"""
Face Detection Module
Haar cascade face detector supplying face boxes to the iris locator

Created: 2025
"""

import os
from typing import List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from .region import to_grayscale
from .types import FaceRegion

DEFAULT_CASCADE = "haarcascade_frontalface_alt.xml"


def default_cascade_path(name: str = DEFAULT_CASCADE) -> str:
    """Resolve a cascade shipped with opencv-python"""
    return os.path.join(cv2.data.haarcascades, name)


class FaceDetector:
    """Face detection using OpenCV Haar cascades"""

    def __init__(
        self,
        cascade_path: Optional[str] = None,
        scale_factor: float = 1.1,
        min_neighbors: int = 4,
        min_face_size: int = 90,
    ):
        """
        Initialize face detector
        Args:
            cascade_path: Path to a Haar cascade XML file
            scale_factor: Pyramid step passed to detectMultiScale
            min_neighbors: Neighbour count a candidate needs to be kept
            min_face_size: Minimum face height in pixels kept by filter_faces
        """
        self.cascade_path = cascade_path or default_cascade_path()
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_face_size = min_face_size

        self.cascade = cv2.CascadeClassifier(self.cascade_path)
        if self.cascade.empty():
            raise RuntimeError(f"Cannot load face cascade: {self.cascade_path}")

    @classmethod
    def from_config(cls, config) -> "FaceDetector":
        """Build from a ConfigManager"""
        return cls(
            cascade_path=config.get("face_detector.cascade_path"),
            scale_factor=float(config.get("face_detector.scale_factor", 1.1)),
            min_neighbors=int(config.get("face_detector.min_neighbors", 4)),
            min_face_size=int(config.get("face_detector.min_face_size", 90)),
        )

    def detect_faces(
        self,
        frame: np.ndarray,
        resize_factor: Union[float, Tuple[float, float], None] = 1.0,
    ) -> List[FaceRegion]:
        """
        Detect faces in the input frame
        Args:
            frame: Input image, colour or grayscale
            resize_factor: Optional scaling factor (<1.0 downsamples before detection).
                            Can be a float (uniform) or (fx, fy) tuple for per-axis scaling.
        Returns:
            List of face regions in original frame coordinates
        """
        scale_x, scale_y = self._parse_resize_factor(resize_factor)
        gray = to_grayscale(frame)

        if not np.isclose(scale_x, 1.0) or not np.isclose(scale_y, 1.0):
            small = cv2.resize(
                gray,
                None,
                fx=scale_x,
                fy=scale_y,
                interpolation=cv2.INTER_LINEAR,
            )
        else:
            small = gray

        face_rects = self.cascade.detectMultiScale(small, self.scale_factor, self.min_neighbors)
        faces = [FaceRegion.from_rect(rect) for rect in face_rects]

        if faces and (not np.isclose(scale_x, 1.0) or not np.isclose(scale_y, 1.0)):
            faces = self._rescale_faces(faces, 1.0 / scale_x, 1.0 / scale_y, gray.shape)

        return faces

    @staticmethod
    def _parse_resize_factor(
        resize_factor: Union[float, Sequence[float], None],
    ) -> Tuple[float, float]:
        if resize_factor is None:
            scale_x = scale_y = 1.0
        elif isinstance(resize_factor, (tuple, list)):
            if len(resize_factor) == 0:
                scale_x = scale_y = 1.0
            elif len(resize_factor) == 1:
                scale_x = scale_y = float(resize_factor[0])
            else:
                scale_x = float(resize_factor[0])
                scale_y = float(resize_factor[1])
        else:
            scale_x = scale_y = float(resize_factor)

        if scale_x <= 0 or np.isnan(scale_x):
            scale_x = 1.0
        if scale_y <= 0 or np.isnan(scale_y):
            scale_y = 1.0

        return min(scale_x, 1.0), min(scale_y, 1.0)

    @staticmethod
    def _rescale_faces(
        faces: List[FaceRegion],
        scale_x: float,
        scale_y: float,
        image_shape: Tuple[int, ...],
    ) -> List[FaceRegion]:
        """Scale detected face boxes back to the original frame size, clamped to it."""
        img_h, img_w = image_shape[:2]
        rescaled = []

        for face in faces:
            x = int(round(face.x * scale_x))
            y = int(round(face.y * scale_y))
            w = int(max(round(face.width * scale_x), 1))
            h = int(max(round(face.height * scale_y), 1))
            w = min(w, img_w - x)
            h = min(h, img_h - y)
            rescaled.append(FaceRegion(x, y, w, h))

        return rescaled

    def filter_faces(
        self,
        faces: Sequence[FaceRegion],
        min_face_size: Optional[int] = None,
    ) -> List[FaceRegion]:
        """
        Filter faces based on size
        Args:
            faces: List of detected faces
            min_face_size: Minimum face height in pixels (defaults to the detector's)
        Returns:
            Filtered list of faces
        """
        if min_face_size is None:
            min_face_size = self.min_face_size

        return [face for face in faces if face.height >= min_face_size]
