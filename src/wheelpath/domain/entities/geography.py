from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

import numpy as np

from wheelpath.domain.errors import InvalidGeometryError

T = TypeVar("T")

FREE = 0
PINNED = 1


# Core geometry type shared by every pipeline stage
@dataclass(frozen=True)
class Position(Generic[T]):
    x: float  # meters
    y: float
    tag: int = FREE
    payload: T | None = None  # opaque to geometry; carried, never inspected

    @classmethod
    def make_tagged(cls, tag: int, x: float, y: float, payload: T | None = None) -> "Position[T]":
        return cls(float(x), float(y), tag, payload)

    @property
    def pinned(self) -> bool:
        return self.tag == PINNED

    def moved(self, x: float, y: float) -> "Position[T]":
        return replace(self, x=float(x), y=float(y))

    def retagged(self, tag: int) -> "Position[T]":
        return replace(self, tag=tag)


Path = list[Position[T]]


def to_xy(path: Sequence[Position]) -> np.ndarray:
    """(n, 2) float array of the path's coordinates."""
    return np.array([(p.x, p.y) for p in path], dtype=float).reshape(-1, 2)


def with_xy(path: Sequence[Position[T]], xy: np.ndarray) -> Path:
    """New path with the coordinates of `xy`, keeping tags and payloads."""
    return [p.moved(x, y) for p, (x, y) in zip(path, xy, strict=True)]


def pin_mask(path: Sequence[Position]) -> np.ndarray:
    return np.array([p.pinned for p in path], dtype=bool)


def from_points(points: Iterable[tuple[float, float]], tag: int = FREE) -> Path:
    return [Position.make_tagged(tag, x, y) for x, y in points]


def pin(path: Sequence[Position[T]], indices: Iterable[int]) -> Path:
    """Return a copy of `path` with the given indices (negative allowed) tagged pinned."""
    n = len(path)
    out = list(path)
    for i in indices:
        if not -n <= i < n:
            raise InvalidGeometryError(f"pin index {i} out of range for {n} control points")
        out[i] = out[i].retagged(PINNED)
    return out


def path_length(path: Sequence[Position]) -> float:
    xy = to_xy(path)
    if len(xy) < 2:
        return 0.0
    return float(np.hypot(*np.diff(xy, axis=0).T).sum())
