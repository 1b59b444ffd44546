#!/usr/bin/env python3
"""
Iris Locator Module
Runs region preparation, window search and candidate scoring for every face

Created: 2025
"""

import sys
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .config_manager import SearchConfig
from .errors import IrisLocatorError
from .region import prepare_region, to_grayscale
from .scoring import CandidateScorer
from .types import FaceRegion, IrisPair
from .window_search import WindowSearch

FaceInput = Union[FaceRegion, Sequence[int]]


class IrisLocator:
    """Locate one iris centre per eye inside detected face boxes"""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        face_detector=None,
        verbose: bool = False,
    ):
        """
        Initialize iris locator
        Args:
            config: Search tunables (defaults to SearchConfig())
            face_detector: Any object with ``detect_faces(image)``; only needed by extract_iris
            verbose: Print a warning for every skipped face
        """
        self.config = config or SearchConfig()
        self.face_detector = face_detector
        self.verbose = verbose
        self.window_search = WindowSearch(self.config)

    def locate_face(self, gray: np.ndarray, face: FaceInput) -> IrisPair:
        """
        Locate the irises of a single face
        Raises:
            InvalidRegion: face box is degenerate or outside the image
            EmptySearchSpace: no search window fits the upper half of the face
        """
        face = FaceRegion.from_rect(face)
        upper, _ = prepare_region(gray, face)
        windows = self.window_search.search(gray, upper)

        radius = self.window_search.geometry_for(upper).radius
        return CandidateScorer(radius).score(gray, face, windows)

    def locate_irises_detailed(
        self,
        image: np.ndarray,
        faces: Sequence[FaceInput],
    ) -> List[Tuple[FaceInput, Optional[IrisPair]]]:
        """Per-face results in input order; ``None`` marks an omitted face"""
        gray = to_grayscale(image)
        results = []

        for face in faces:
            try:
                pair = self.locate_face(gray, face)
            except IrisLocatorError as exc:
                if self.verbose:
                    print(f"⚠️  Skipping face {face}: {exc}", file=sys.stderr)
                pair = None
            results.append((face, pair))

        return results

    def locate_irises(self, image: np.ndarray, faces: Sequence[FaceInput]) -> List[IrisPair]:
        """
        Locate irises for every face box
        Args:
            image: Grayscale (or BGR) image; never modified
            faces: Face boxes as FaceRegion or (x, y, w, h)
        Returns:
            One IrisPair per successfully processed face, in input order
        """
        return [
            pair for _, pair in self.locate_irises_detailed(image, faces) if pair is not None
        ]

    def extract_iris(self, image: np.ndarray) -> List[IrisPair]:
        """Detect faces with the configured detector, then locate their irises"""
        if self.face_detector is None:
            raise RuntimeError("extract_iris needs a face_detector")

        gray = to_grayscale(image)
        faces = self.face_detector.detect_faces(gray)
        return self.locate_irises(gray, faces)


def locate_irises(
    image: np.ndarray,
    faces: Sequence[FaceInput],
    config: Optional[SearchConfig] = None,
) -> List[IrisPair]:
    """Convenience wrapper around IrisLocator.locate_irises"""
    return IrisLocator(config).locate_irises(image, faces)
