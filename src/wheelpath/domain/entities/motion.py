import math
from dataclasses import dataclass

import numpy as np

from wheelpath.domain.entities.geography import Path, Position


@dataclass(frozen=True)
class Pose:
    x: float
    y: float
    heading: float  # radians, counter-clockwise from +x

    @classmethod
    def facing(cls, a: Position, b: Position) -> "Pose":
        """Pose at `a` looking toward `b`."""
        return cls(a.x, a.y, math.atan2(b.y - a.y, b.x - a.x))


@dataclass(frozen=True)
class VelocityProfile:
    center: np.ndarray
    left: np.ndarray
    right: np.ndarray

    def __len__(self) -> int:
        return len(self.center)

    def peak(self) -> float:
        return float(max(self.center.max(), self.left.max(), self.right.max())) if len(self) else 0.0


@dataclass(frozen=True)
class Plan:
    control_points: Path
    path: Path
    left: Path
    right: Path
    curvature: np.ndarray
    velocity: np.ndarray
    left_velocity: np.ndarray
    right_velocity: np.ndarray
    reconstructed: Path

    @property
    def profile(self) -> VelocityProfile:
        return VelocityProfile(self.velocity, self.left_velocity, self.right_velocity)
