"""Sliding-window candidate search ranked by local Shannon entropy."""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .config_manager import SearchConfig
from .errors import EmptySearchSpace
from .types import FaceRegion, SearchWindow


@dataclass(frozen=True)
class WindowGeometry:
    """Window size and iris radius derived from a face width."""

    radius: float
    width: int
    height: int

    @classmethod
    def from_face_width(cls, face_width: int, config: Optional[SearchConfig] = None) -> "WindowGeometry":
        config = config or SearchConfig()
        radius = face_width / config.iris_radius_divisor
        return cls(
            radius=radius,
            width=int(2 * radius + config.window_width_pad),
            height=int(2 * radius + config.window_height_pad),
        )


def window_entropy(pixels: np.ndarray) -> float:
    """Shannon entropy (bits) of the 256-bin intensity histogram of ``pixels``."""
    total = pixels.size
    if total == 0:
        return 0.0

    counts = np.bincount(pixels.ravel(), minlength=256)
    probs = counts[counts > 0] / float(total)
    entropy = -float(np.sum(probs * np.log2(probs)))
    return entropy if entropy > 0.0 else 0.0


def iter_grid(
    rows: int,
    cols: int,
    geometry: WindowGeometry,
    step_x: int,
    step_y: int,
) -> Iterator[Tuple[int, int]]:
    """Yield ``(x, y)`` offsets of every window that fits fully in a rows x cols area."""
    for y in range(0, rows - geometry.height + 1, step_y):
        for x in range(0, cols - geometry.width + 1, step_x):
            yield x, y


class WindowSearch:
    """Keep the K highest-entropy windows over the upper half of a face."""

    def __init__(self, config: Optional[SearchConfig] = None) -> None:
        self.config = config or SearchConfig()

    def geometry_for(self, face: FaceRegion) -> WindowGeometry:
        return WindowGeometry.from_face_width(face.width, self.config)

    def search(self, gray: np.ndarray, region: FaceRegion) -> List[SearchWindow]:
        """
        Scan ``region`` of ``gray`` and return the retained windows.

        Windows are returned in absolute image coordinates, ordered by scan
        position. Raises ``EmptySearchSpace`` if no window fits.
        """
        geometry = self.geometry_for(region)
        crop = gray[region.y:region.y + region.height, region.x:region.x + region.width]
        rows, cols = crop.shape[:2]

        if geometry.width <= 0 or geometry.height <= 0 or geometry.width > cols or geometry.height > rows:
            raise EmptySearchSpace(
                f"window {geometry.width}x{geometry.height} does not fit in {cols}x{rows} region"
            )

        capacity = self.config.retained_window_count
        heap: List[Tuple[float, int, SearchWindow]] = []

        for order, (x, y) in enumerate(
            iter_grid(rows, cols, geometry, self.config.grid_step_x, self.config.grid_step_y)
        ):
            score = window_entropy(crop[y:y + geometry.height, x:x + geometry.width])

            if len(heap) >= capacity and score <= heap[0][0]:
                continue

            window = SearchWindow(
                x=region.x + x,
                y=region.y + y,
                width=geometry.width,
                height=geometry.height,
                entropy_score=score,
                order=order,
            )
            if len(heap) < capacity:
                heapq.heappush(heap, (score, order, window))
            else:
                heapq.heapreplace(heap, (score, order, window))

        return sorted((entry[2] for entry in heap), key=lambda w: w.order)
