"""
#WHERE
    Called by builder.GeometryBuilder after base-shape construction.

#WHAT
    Per-vertex displacement kernels, vectorised over the whole vertex
    array.  Modifier flags run in a fixed order:

        twist → decay → fracture → organic → sharp → smooth → distortion

    Each explicit DistortionType maps to one offset kernel in DISTORTIONS.
    Only ``pulse`` reads a clock and only ``glitch`` draws from the seeded
    generator; every other kernel is a pure function of the vertex array.

#INPUT
    (N, 3) vertex array, GeometryModifiers, horror level, numpy Generator,
    clock value in seconds.

#OUTPUT
    New (N, 3) vertex array.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict

import numpy as np

from promptforge.modules.m1_prompt_parser.models import DistortionSpec, GeometryModifiers
from promptforge.shared.mem_profile import profile_memory
from promptforge.shared.vocabulary import DistortionType
from .noise import hash_noise

log = logging.getLogger(__name__)

TWIST_RATE = 0.5
DECAY_STRENGTH = 0.2
FRACTURE_THRESHOLD = 0.3
FRACTURE_PUSH = 0.3
SHARP_EXPONENT = 1.2
SMOOTH_EXPONENT = 0.8
GLITCH_PROBABILITY = 0.05


def _unit(v: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(v, axis=1, keepdims=True)
    return np.divide(v, length, out=np.zeros_like(v), where=length > 0)


def _rotate_y(v: np.ndarray, angle: np.ndarray) -> np.ndarray:
    cos, sin = np.cos(angle), np.sin(angle)
    return np.stack([v[:, 0] * cos - v[:, 2] * sin, v[:, 1], v[:, 0] * sin + v[:, 2] * cos], axis=1)


def _radial_power(v: np.ndarray, exponent: float) -> np.ndarray:
    length = np.linalg.norm(v, axis=1, keepdims=True)
    return _unit(v) * np.power(length, exponent)


# ── Modifier flags ───────────────────────────────────────────────────────

def twist(v: np.ndarray) -> np.ndarray:
    return _rotate_y(v, v[:, 1] * TWIST_RATE)


def decay(v: np.ndarray, horror_level: int, seed: int = 0) -> np.ndarray:
    erosion = hash_noise(v * 2, seed) * DECAY_STRENGTH * (horror_level / 10)
    return v * (1 - np.abs(erosion))[:, None]


def fracture(v: np.ndarray, seed: int = 0) -> np.ndarray:
    n = hash_noise(v * 3, seed)
    factor = np.where(n > FRACTURE_THRESHOLD, 1 + n * FRACTURE_PUSH, 1.0)
    return v * factor[:, None]


def organic_jitter(v: np.ndarray, seed: int = 0) -> np.ndarray:
    n1 = hash_noise(v, seed)
    n2 = hash_noise(v * 2, seed)
    return v + np.stack([n1 * 0.2, n2 * 0.2, n1 * 0.15], axis=1)


# ── Explicit distortions (return offsets) ────────────────────────────────

Kernel = Callable[[np.ndarray, DistortionSpec, np.random.Generator, float], np.ndarray]


def _noise(v, spec, rng, clock):
    n = hash_noise(v * spec.frequency, spec.seed)
    return _unit(v) * (n * spec.intensity)[:, None]


def _twist(v, spec, rng, clock):
    return _rotate_y(v, v[:, 1] * spec.intensity * spec.frequency) - v


def _decay(v, spec, rng, clock):
    n = hash_noise(v * 2 * spec.frequency, spec.seed)
    return np.where((n > 0)[:, None], -v * (n * spec.intensity * 0.3)[:, None], 0.0)


def _melt(v, spec, rng, clock):
    lateral = v.copy()
    lateral[:, 1] = 0.0
    n = np.abs(hash_noise(lateral * spec.frequency, spec.seed))
    offset = np.zeros_like(v)
    offset[:, 1] = np.where(v[:, 1] > 0, -n * spec.intensity * v[:, 1] * 0.5, 0.0)
    return offset


def _pulse(v, spec, rng, clock):
    factor = np.sin(clock * spec.frequency) * 0.5 + 0.5
    return _unit(v) * (factor * spec.intensity * 0.1)


def _erosion(v, spec, rng, clock):
    n = hash_noise(v * 3 * spec.frequency, spec.seed)
    return np.where((np.abs(n) > 0.5)[:, None], -v * (n * spec.intensity * 0.2)[:, None], 0.0)


def _stretch(v, spec, rng, clock):
    offset = np.zeros_like(v)
    offset[:, 1] = hash_noise(v * spec.frequency, spec.seed) * spec.intensity * 0.5
    return offset


def _shatter(v, spec, rng, clock):
    n = hash_noise(v * 4 * spec.frequency, spec.seed)
    return np.where((n > 0.3)[:, None], _unit(v) * (n * spec.intensity * 0.4)[:, None], 0.0)


def _glitch(v, spec, rng, clock):
    count = len(v)
    gate = rng.random(count) < GLITCH_PROBABILITY
    factor = np.where(gate, rng.random(count), 0.0)
    return (rng.random((count, 3)) - 0.5) * (factor * spec.intensity)[:, None]


DISTORTIONS: Dict[DistortionType, Kernel] = {
    DistortionType.NOISE:   _noise,
    DistortionType.TWIST:   _twist,
    DistortionType.DECAY:   _decay,
    DistortionType.MELT:    _melt,
    DistortionType.PULSE:   _pulse,
    DistortionType.EROSION: _erosion,
    DistortionType.STRETCH: _stretch,
    DistortionType.SHATTER: _shatter,
    DistortionType.GLITCH:  _glitch,
}


def distortion_offsets(v: np.ndarray, spec: DistortionSpec, rng: np.random.Generator,
                       clock: float) -> np.ndarray:
    return DISTORTIONS[DistortionType(spec.type)](v, spec, rng, clock)


@profile_memory
def apply_modifiers(vertices: np.ndarray, modifiers: GeometryModifiers, horror_level: int,
                    rng: np.random.Generator, clock: float, seed: int = 0) -> np.ndarray:
    """Run every active modifier over the vertex array in the fixed order."""
    v = np.array(vertices, dtype=np.float64, copy=True)
    if modifiers.twisted:
        v = twist(v)
    if modifiers.decayed:
        v = decay(v, horror_level, seed)
    if modifiers.fractured:
        v = fracture(v, seed)
    if modifiers.organic:
        v = organic_jitter(v, seed)
    if modifiers.sharp:
        v = _radial_power(v, SHARP_EXPONENT)
    if modifiers.smooth:
        v = _radial_power(v, SMOOTH_EXPONENT)
    if modifiers.distortion is not None:
        v = v + distortion_offsets(v, modifiers.distortion, rng, clock)
    log.debug("[M2] modifiers %s applied to %d vertices", modifiers.active_flags(), len(v))
    return v
