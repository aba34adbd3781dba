"""Hash noise used by every displacement kernel.

``fract(sin(x*12.9898 + y*78.233 + z*37.719 + s) * 43758.5453) * 2 - 1``

A cheap deterministic value in [-1, 1) per sample point; ``s`` is a small
offset derived from the distortion seed so different seeds decorrelate.
"""
from __future__ import annotations

import numpy as np

_SEED_PERIOD = 9973


def seed_offset(seed: int) -> float:
    return float(int(seed) % _SEED_PERIOD) * 0.618


def hash_noise(points: np.ndarray, seed: int = 0) -> np.ndarray:
    """Noise for an ``(N, 3)`` array of sample points → ``(N,)``."""
    p = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    n = np.sin(p[:, 0] * 12.9898 + p[:, 1] * 78.233 + p[:, 2] * 37.719 + seed_offset(seed)) * 43758.5453
    return (n - np.floor(n)) * 2.0 - 1.0
