class PlannerError(ValueError):
    """Base class for conditions the planner rejects before producing output."""


class InvalidGeometryError(PlannerError):
    """Control points cannot define a path (too few points, zero-length ends, NaNs)."""
