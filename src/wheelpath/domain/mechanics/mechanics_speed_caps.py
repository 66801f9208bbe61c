import numpy as np

from wheelpath.app.protocols import SpeedCap


class CentripetalSpeedCap(SpeedCap):
    """v <= sqrt(a_lat / |kappa|), bounded by max_speed; straight runs get max_speed."""

    def __init__(self, max_speed: float, lateral_acceleration: float):
        self.vmax, self.a_lat = max_speed, lateral_acceleration

    def cap(self, kappa: np.ndarray) -> np.ndarray:
        k = np.abs(np.asarray(kappa, dtype=float))
        v = np.full_like(k, self.vmax)
        bent = k > 1e-12
        v[bent] = np.minimum(self.vmax, np.sqrt(self.a_lat / k[bent]))
        return v


class WheelSpeedCap(SpeedCap):
    """
    Largest center speed whose outer wheel still stays under max_speed.
    Turns tighter than half the track width would reverse the inner wheel,
    so they are capped at a standstill.
    """

    def __init__(self, max_speed: float, robot_width: float):
        self.vmax, self.half = max_speed, robot_width / 2.0

    def cap(self, kappa: np.ndarray) -> np.ndarray:
        k = np.abs(np.asarray(kappa, dtype=float))
        return np.where(k * self.half >= 1.0, 0.0, self.vmax / (1.0 + k * self.half))
