import math
from collections.abc import Sequence

from wheelpath.domain.entities.geography import FREE, Path, Position, pin_mask, to_xy, with_xy
from wheelpath.domain.mechanics.mechanics_relaxation import relax


def smooth(raw: Sequence[Position], path_alpha: float, path_beta: float, passes: int) -> Path:
    """Relax free waypoints toward a low-curvature curve; pinned ones are anchors."""
    if len(raw) < 3:
        return list(raw)
    xy = relax(to_xy(raw), pin_mask(raw), path_alpha, path_beta, passes)
    out = with_xy(raw, xy)
    # pinned entries are handed through as the caller's own objects
    return [r if r.pinned else p for r, p in zip(raw, out)]


def densify(path: Sequence[Position], step: float) -> Path:
    """
    Insert evenly spaced free points on each segment so no gap exceeds `step`.
    Original vertices keep tag and payload; inserted points carry the payload
    of their segment's start.
    """
    if len(path) < 2 or step <= 0:
        return list(path)
    out: Path = [path[0]]
    for a, b in zip(path, path[1:]):
        L = math.hypot(b.x - a.x, b.y - a.y)
        k = max(1, math.ceil(L / step))
        for j in range(1, k):
            f = j / k
            out.append(
                Position(a.x + f * (b.x - a.x), a.y + f * (b.y - a.y), FREE, a.payload)
            )
        out.append(b)
    return out
