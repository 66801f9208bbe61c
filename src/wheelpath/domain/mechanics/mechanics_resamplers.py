import math
from collections.abc import Sequence

import numpy as np

from wheelpath.domain.entities.geography import FREE, Path, Position, to_xy

_EPS = 1e-9


def resample(smoothed: Sequence[Position], dist_step: float) -> tuple[Path, np.ndarray]:
    """
    Walk the polyline by arc length, emitting a point every `dist_step`.
    The final input point is always emitted; a step landing within _EPS of it is
    replaced by it. Returns the new path and its per-point signed curvature.
    Only the two end points keep their tags; interior pinned vertices are not
    sampled themselves, so the samples may cut across a pinned corner.
    """
    if dist_step <= 0:
        raise ValueError(f"dist_step must be > 0, got {dist_step}")
    if not smoothed:
        return [], np.zeros(0)

    first, last = smoothed[0], smoothed[-1]
    out: Path = [first]
    carry = 0.0  # arc length already travelled since the last emitted point
    for a, b in zip(smoothed, smoothed[1:]):
        L = math.hypot(b.x - a.x, b.y - a.y)
        if L < _EPS:
            continue
        s = dist_step - carry  # position of the next sample on this segment
        while s <= L + _EPS:
            f = min(s / L, 1.0)
            out.append(Position(a.x + f * (b.x - a.x), a.y + f * (b.y - a.y), FREE, a.payload))
            s += dist_step
        carry = L - (s - dist_step)

    if len(smoothed) > 1:
        if len(out) > 1 and math.hypot(out[-1].x - last.x, out[-1].y - last.y) < _EPS:
            out[-1] = last
        else:
            out.append(last)
    return out, curvature(out)


def curvature(path: Sequence[Position]) -> np.ndarray:
    """
    Signed curvature from the circumscribed circle of each point and its neighbours:
    kappa = 2*sin(dtheta)/|c - a|. Positive turns left. Open ends copy their
    nearest interior neighbour; degenerate triples give 0.
    """
    xy = to_xy(path)
    n = len(xy)
    k = np.zeros(n)
    if n < 3:
        return k

    u = xy[1:-1] - xy[:-2]
    v = xy[2:] - xy[1:-1]
    chord = np.hypot(*(xy[2:] - xy[:-2]).T)
    lu, lv = np.hypot(*u.T), np.hypot(*v.T)
    cross = u[:, 0] * v[:, 1] - u[:, 1] * v[:, 0]
    denom = lu * lv * chord
    ok = denom > _EPS
    k[1:-1] = np.divide(2.0 * cross, denom, out=np.zeros(n - 2), where=ok)
    k[0], k[-1] = k[1], k[-2]
    return k


def spacing(path: Sequence[Position]) -> np.ndarray:
    """Length of each of the n-1 segments."""
    xy = to_xy(path)
    return np.hypot(*np.diff(xy, axis=0).T) if len(xy) > 1 else np.zeros(0)
