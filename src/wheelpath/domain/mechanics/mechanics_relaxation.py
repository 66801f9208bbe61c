import numpy as np


def relax(
    values: np.ndarray,
    pinned: np.ndarray | None,
    alpha: float,
    beta: float,
    passes: int,
) -> np.ndarray:
    """
    Gradient-descent ("elastic band") relaxation shared by path and speed smoothing.

    values: (n,) or (n, d) samples; a new array is returned, the input is untouched.
    pinned: boolean mask of samples that never move; endpoints never move either.
    alpha pulls a sample back toward its original value, beta toward the midpoint
    of its neighbours. Each pass is an in-place sweep, so sample i already sees the
    updated sample i-1. No convergence test: `passes` is the whole budget.
    """
    orig = np.asarray(values, dtype=float)
    p = orig.copy()
    n = len(p)
    if n < 3 or passes <= 0:
        return p

    free = np.ones(n, dtype=bool) if pinned is None else ~np.asarray(pinned, dtype=bool)
    free[0] = free[-1] = False
    idx = np.flatnonzero(free)
    if idx.size == 0:
        return p

    for _ in range(passes):
        for i in idx:
            p[i] += alpha * (orig[i] - p[i]) + beta * (p[i - 1] + p[i + 1] - 2.0 * p[i])
    return p
