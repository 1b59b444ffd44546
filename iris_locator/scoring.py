"""Darkness scoring, score normalisation and per-side window selection."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .types import FaceRegion, IrisPair, SearchWindow


def darkness_score(gray: np.ndarray, window: SearchWindow, radius: float) -> int:
    """
    Sum of inverted intensities (255 - I) inside the circle of ``radius``
    centred on the window, clipped to the window. Darker pixels add more.
    """
    pixels = gray[window.y:window.y + window.height, window.x:window.x + window.width]
    rows, cols = pixels.shape[:2]

    # Absolute image coordinates for both the mask test and the pixels.
    ys = np.arange(window.y, window.y + rows)[:, None]
    xs = np.arange(window.x, window.x + cols)[None, :]
    cx, cy = window.center
    mask = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius * radius

    return int(np.sum(255 - pixels[mask], dtype=np.int64))


def normalize_scores(windows: Sequence[SearchWindow]) -> Tuple[List[float], List[float]]:
    """
    Return per-window ``(Hscore, Cscore)`` lists.

    Each term is the window's share of the set total, or 0 for every window
    when that total is 0.
    """
    total_entropy = sum(w.entropy_score for w in windows)
    total_darkness = sum(w.darkness_score for w in windows)

    if total_entropy > 0:
        h_scores = [w.entropy_score / total_entropy for w in windows]
    else:
        h_scores = [0.0] * len(windows)

    if total_darkness > 0:
        c_scores = [w.darkness_score / float(total_darkness) for w in windows]
    else:
        c_scores = [0.0] * len(windows)

    return h_scores, c_scores


def is_left_window(window: SearchWindow, face: FaceRegion) -> bool:
    """Left pool iff the window's x-offset is below half the face width."""
    return 2 * (window.x - face.x) < face.width


def partition_windows(
    windows: Sequence[SearchWindow],
    face: FaceRegion,
) -> Tuple[List[int], List[int]]:
    """Split window indices into (left, right) pools."""
    left: List[int] = []
    right: List[int] = []
    for index, window in enumerate(windows):
        (left if is_left_window(window, face) else right).append(index)
    return left, right


def select_best(indices: Sequence[int], scores: Sequence[float]) -> Optional[int]:
    """Index with the highest score; the earliest wins a tie."""
    best_index = None
    best_score = None
    for index in indices:
        if best_score is None or scores[index] > best_score:
            best_index = index
            best_score = scores[index]
    return best_index


class CandidateScorer:
    """Combine entropy and darkness and pick one window per side of the face."""

    def __init__(self, radius: float) -> None:
        self.radius = radius

    def total_scores(self, gray: np.ndarray, windows: Sequence[SearchWindow]) -> List[float]:
        for window in windows:
            window.darkness_score = darkness_score(gray, window, self.radius)

        h_scores, c_scores = normalize_scores(windows)
        return [h + c for h, c in zip(h_scores, c_scores)]

    def score(self, gray: np.ndarray, face: FaceRegion, windows: Sequence[SearchWindow]) -> IrisPair:
        windows = sorted(windows, key=lambda w: w.order)
        scores = self.total_scores(gray, windows)
        left_pool, right_pool = partition_windows(windows, face)

        best_left = select_best(left_pool, scores)
        best_right = select_best(right_pool, scores)

        return IrisPair(
            left=windows[best_left].center if best_left is not None else None,
            right=windows[best_right].center if best_right is not None else None,
        )
