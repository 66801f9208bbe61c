from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np

from wheelpath.domain.entities.geography import Path, Position
from wheelpath.domain.entities.motion import Pose, VelocityProfile


# ------------- Mechanics --------------------
@runtime_checkable
class SpeedCap(Protocol):
    """
    Map curvature to an upper bound on center-line speed.
    Must be monotone: larger |kappa| never gives a larger cap, and the cap
    never exceeds max_speed.
    """

    def cap(self, kappa: np.ndarray) -> np.ndarray: ...


@runtime_checkable
class Profiler(Protocol):
    """
    Responsibilities:
      • Assign a feasible center speed to every sample of a resampled path.
      • Split it into left/right wheel speeds.
    Units: meters, seconds, radians.
    """

    def profile(self, center: Sequence[Position], curvature: np.ndarray) -> VelocityProfile: ...


@runtime_checkable
class Integrator(Protocol):
    def reconstruct(
        self,
        center_v: np.ndarray,
        left_v: np.ndarray,
        right_v: np.ndarray,
        time_step: float,
        initial_pose: Pose,
    ) -> Path: ...
