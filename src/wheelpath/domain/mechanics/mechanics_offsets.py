import math
from collections.abc import Sequence

from wheelpath.domain.entities.geography import Path, Position
from wheelpath.domain.errors import InvalidGeometryError


def normals(center: Sequence[Position]) -> list[tuple[float, float]]:
    """
    Unit left normal at each point: the direction to the next point rotated +90 deg
    (backward difference at the final point). A zero-length step reuses the
    previous normal.
    """
    n = len(center)
    out: list[tuple[float, float]] = []
    prev: tuple[float, float] | None = None
    for i in range(n):
        a, b = (center[i], center[i + 1]) if i < n - 1 else (center[i - 1], center[i])
        dx, dy = b.x - a.x, b.y - a.y
        L = math.hypot(dx, dy)
        if L < 1e-12:
            if prev is None:
                # look ahead for the first usable direction
                prev = _first_normal(center)
            out.append(prev)
            continue
        prev = (-dy / L, dx / L)
        out.append(prev)
    return out


def _first_normal(center: Sequence[Position]) -> tuple[float, float]:
    for a, b in zip(center, center[1:]):
        dx, dy = b.x - a.x, b.y - a.y
        L = math.hypot(dx, dy)
        if L >= 1e-12:
            return (-dy / L, dx / L)
    raise InvalidGeometryError("path has no segment of non-zero length; normal is undefined")


def offset(center: Sequence[Position], robot_width: float) -> tuple[Path, Path]:
    """Left and right wheel paths at +/- robot_width/2 along the local left normal."""
    if len(center) < 2:
        raise InvalidGeometryError(f"offset needs at least 2 points, got {len(center)}")
    h = robot_width / 2.0
    left: Path = []
    right: Path = []
    for p, (nx, ny) in zip(center, normals(center)):
        left.append(p.moved(p.x + h * nx, p.y + h * ny))
        right.append(p.moved(p.x - h * nx, p.y - h * ny))
    return left, right
