import math
from collections.abc import Sequence

import numpy as np

from wheelpath.app.protocols import Integrator
from wheelpath.domain.entities.geography import Path, Position, to_xy
from wheelpath.domain.entities.motion import Pose


class EulerReconstructor(Integrator):
    """First-order dead reckoning of a differential-drive base from its wheel speeds."""

    def __init__(self, robot_width: float):
        if robot_width <= 0:
            raise ValueError(f"robot_width must be > 0, got {robot_width}")
        self.width = robot_width

    def reconstruct(
        self,
        center_v: np.ndarray,
        left_v: np.ndarray,
        right_v: np.ndarray,
        time_step: float,
        initial_pose: Pose,
    ) -> Path:
        n = len(center_v)
        if not (len(left_v) == len(right_v) == n):
            raise ValueError("velocity profiles must be index-aligned")
        x, y, h = initial_pose.x, initial_pose.y, initial_pose.heading
        out: Path = []
        for v, vl, vr in zip(center_v, left_v, right_v):
            out.append(Position(x, y))
            omega = (vr - vl) / self.width
            x += v * time_step * math.cos(h)
            y += v * time_step * math.sin(h)
            h += omega * time_step
        return out


def max_deviation(reconstructed: Sequence[Position], center: Sequence[Position]) -> float:
    """Largest index-aligned distance between two paths of equal length."""
    if len(reconstructed) != len(center):
        raise ValueError(f"length mismatch: {len(reconstructed)} vs {len(center)}")
    if not center:
        return 0.0
    d = to_xy(reconstructed) - to_xy(center)
    return float(np.hypot(*d.T).max())
