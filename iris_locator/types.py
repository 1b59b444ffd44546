"""Shared data structures for the iris localisation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Union

from .errors import InvalidRegion

Point = Tuple[int, int]


@dataclass(frozen=True)
class FaceRegion:
    """Axis-aligned face box in image pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_rect(cls, rect: Union["FaceRegion", Sequence[int]]) -> "FaceRegion":
        if isinstance(rect, FaceRegion):
            return rect
        try:
            x, y, w, h = rect
            return cls(int(x), int(y), int(w), int(h))
        except (TypeError, ValueError) as exc:
            raise InvalidRegion(f"malformed face box {rect!r}") from exc

    def upper_half(self) -> "FaceRegion":
        """Return the top half of the box; x, y and width are unchanged."""
        return FaceRegion(self.x, self.y, self.width, self.height // 2)

    def as_rect(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


@dataclass
class SearchWindow:
    """Candidate eye window with its entropy and darkness scores."""

    x: int
    y: int
    width: int
    height: int
    entropy_score: float
    darkness_score: int = 0
    order: int = 0  # scan position, used for first-seen tie breaking

    @property
    def center(self) -> Point:
        return (self.x + self.width // 2, self.y + self.height // 2)


@dataclass(frozen=True)
class IrisPair:
    """Iris centres for one face; a side is ``None`` when no window fell there."""

    left: Optional[Point] = None
    right: Optional[Point] = None

    def to_dict(self) -> Dict[str, Optional[Dict[str, int]]]:
        def _point(p: Optional[Point]) -> Optional[Dict[str, int]]:
            if p is None:
                return None
            return {"x": int(p[0]), "y": int(p[1])}

        return {"left": _point(self.left), "right": _point(self.right)}
