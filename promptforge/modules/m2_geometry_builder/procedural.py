"""
#WHERE
    Called by builder.GeometryBuilder for the twisted, organic, extrusion,
    fractal and text base shapes.

#WHAT
    Procedural constructors.  Recursive generators (organic branches,
    fractal cubes) run under a GrowthBudget that enforces a max depth and a
    max node count; hitting either ceiling is recorded as a warning on the
    resulting mesh instead of raising.

#INPUT
    Scale vector (sx, sy, sz), seeded numpy Generator, GrowthBudget.

#OUTPUT
    Mesh (normals not yet computed).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np
from scipy.spatial.transform import Rotation

from promptforge.shared.constants import (
    CYLINDER_SEGMENTS,
    FRACTAL_MAX_DEPTH,
    FRACTAL_MIN_SIZE,
    MAX_GEOMETRY_NODES,
    ORGANIC_MAX_DEPTH,
    TWIST_COUNT,
)
from .mesh import Mesh, merge_meshes
from .primitives import box, cylinder

log = logging.getLogger(__name__)

BRANCH_SCALE = 0.7
BRANCH_SPREAD = np.pi * 0.4
FRACTAL_CHILD_SCALE = 0.4
FRACTAL_OFFSET = 0.5
ARCH_CURVE_SEGMENTS = 12
BEVEL_SIZE = 0.1
BEVEL_THICKNESS = 0.1
BEVEL_SEGMENTS = 3


@dataclass(slots=True)
class GrowthBudget:
    """Recursion ceiling shared by one recursive build."""
    max_depth: int = ORGANIC_MAX_DEPTH
    max_nodes: int = MAX_GEOMETRY_NODES
    nodes: int = 0
    warnings: List[str] = field(default_factory=list)

    def clip_depth(self, requested: int, label: str) -> int:
        if requested > self.max_depth:
            self._warn(f"{label} recursion depth {requested} clipped to {self.max_depth}")
            return self.max_depth
        return requested

    def take(self, label: str) -> bool:
        if self.nodes >= self.max_nodes:
            self._warn(f"{label} node ceiling reached ({self.max_nodes}); remaining branches skipped")
            return False
        self.nodes += 1
        return True

    def _warn(self, message: str) -> None:
        if message not in self.warnings:
            log.warning("[M2] %s", message)
            self.warnings.append(message)


# ── Twisted ──────────────────────────────────────────────────────────────

def twisted(scale, twists: int = TWIST_COUNT) -> Mesh:
    """Cylinder sheared helically: angle = (y / height) * pi * twists."""
    sx, sy, _ = scale
    mesh = cylinder(sx, sx, sy * 2, CYLINDER_SEGMENTS, 20)
    v = mesh.vertices
    angle = (v[:, 1] / (sy * 2)) * np.pi * twists
    cos, sin = np.cos(angle), np.sin(angle)
    x = v[:, 0] * cos - v[:, 2] * sin
    z = v[:, 0] * sin + v[:, 2] * cos
    mesh.vertices = np.stack([x, v[:, 1], z], axis=1)
    return mesh


# ── Organic ──────────────────────────────────────────────────────────────

def _segment(base: np.ndarray, orient: Rotation, length: float,
             r_top: float, r_bottom: float, segments: int) -> Mesh:
    """Cylinder whose bottom sits at ``base`` and which grows along orient(+Y)."""
    local = cylinder(r_top, r_bottom, length, segments, 1).translated((0.0, length / 2, 0.0))
    return local.transformed(orient.as_matrix(), base)


def organic(scale, rng: np.random.Generator, budget: GrowthBudget,
            depth: int = ORGANIC_MAX_DEPTH) -> Mesh:
    """Trunk plus depth-limited recursive branches (2-3 children per level)."""
    sx, sy, _ = scale
    parts = [cylinder(sx * 0.3, sx * 0.4, sy * 2, 8)]
    budget.take("organic")
    depth = budget.clip_depth(depth, "organic")

    def grow(base: np.ndarray, orient: Rotation, level: int, length: float, thickness: float) -> None:
        if level == 0:
            return
        count = 2 + int(rng.integers(2))
        for i in range(count):
            if not budget.take("organic"):
                return
            pitch, roll = (rng.random(2) - 0.5) * BRANCH_SPREAD
            yaw = i / count * 2 * np.pi
            child = orient * Rotation.from_euler("yzx", [yaw, roll, pitch])
            parts.append(_segment(base, child, length, thickness * 0.6, thickness, 6))
            tip = base + child.apply([0.0, length * BRANCH_SCALE, 0.0])
            grow(tip, child, level - 1, length * BRANCH_SCALE, thickness * BRANCH_SCALE)

    grow(np.array([0.0, sy * 0.4, 0.0]), Rotation.identity(), depth, sy * 0.8, sx * 0.2)
    mesh = merge_meshes(parts)
    mesh.warnings.extend(budget.warnings)
    return mesh


# ── Extrusion ────────────────────────────────────────────────────────────

def _quadratic(p0, p1, p2, segments: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, segments + 1)[1:, None]
    p0, p1, p2 = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2))
    return (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t ** 2 * p2


def gothic_arch_profile(width: float, height: float,
                        curve_segments: int = ARCH_CURVE_SEGMENTS) -> np.ndarray:
    """Closed 2D outline (no repeated end point), counter-clockwise."""
    pts = [np.array([[-width, 0.0], [-width, height * 0.6]])]
    pts.append(_quadratic((-width, height * 0.6), (-width * 0.5, height), (0.0, height), curve_segments))
    pts.append(_quadratic((0.0, height), (width * 0.5, height), (width, height * 0.6), curve_segments))
    pts.append(np.array([[width, 0.0]]))
    outline = np.vstack(pts)

    x, y = outline[:, 0], outline[:, 1]
    area = 0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y)
    return outline if area > 0 else outline[::-1].copy()


def _outline_normals(outline: np.ndarray) -> np.ndarray:
    edge = np.roll(outline, -1, axis=0) - outline
    edge_n = np.stack([edge[:, 1], -edge[:, 0]], axis=1)
    edge_n /= np.linalg.norm(edge_n, axis=1, keepdims=True)
    vert_n = edge_n + np.roll(edge_n, 1, axis=0)
    return vert_n / np.linalg.norm(vert_n, axis=1, keepdims=True)


def extrude(outline: np.ndarray, depth: float, bevel_size: float = BEVEL_SIZE,
            bevel_thickness: float = BEVEL_THICKNESS, bevel_segments: int = BEVEL_SEGMENTS) -> Mesh:
    """Extrude a convex CCW outline along +Z with rounded bevels; fan-capped."""
    normals = _outline_normals(outline)
    n = len(outline)

    layers = []
    for k in range(bevel_segments + 1):                  # front bevel, inset → full
        t = k / bevel_segments
        layers.append((-bevel_thickness * np.cos(t * np.pi / 2), bevel_size * np.sin(t * np.pi / 2)))
    for k in range(bevel_segments, -1, -1):              # back bevel, full → inset
        t = k / bevel_segments
        layers.append((depth + bevel_thickness * np.cos(t * np.pi / 2), bevel_size * np.sin(t * np.pi / 2)))

    rings = []
    for z, grow in layers:
        ring = outline + normals * grow
        rings.append(np.column_stack([ring, np.full(n, z)]))
    verts = np.vstack(rings)

    k = np.arange(n)
    k1 = (k + 1) % n
    faces = []
    for L in range(len(rings) - 1):
        lo, hi = L * n, (L + 1) * n
        faces.append(np.stack([lo + k, lo + k1, hi + k1], 1))
        faces.append(np.stack([lo + k, hi + k1, hi + k], 1))

    front_c, back_c = len(verts), len(verts) + 1
    last = (len(rings) - 1) * n
    centre = outline.mean(axis=0)
    verts = np.vstack([verts,
                       [centre[0], centre[1], layers[0][0]],
                       [centre[0], centre[1], layers[-1][0]]])
    faces.append(np.stack([np.full(n, front_c), k1, k], 1))
    faces.append(np.stack([np.full(n, back_c), last + k, last + k1], 1))
    return Mesh(verts, np.vstack(faces))


def gothic_extrusion(scale) -> Mesh:
    sx, sy, sz = scale
    return extrude(gothic_arch_profile(sx, sy * 2), sz)


# ── Fractal ──────────────────────────────────────────────────────────────

_FRACTAL_DIRS = np.array([(1, 1, 1), (-1, 1, 1), (1, -1, 1), (1, 1, -1)], dtype=np.float64)


def fractal(scale, budget: GrowthBudget, depth: int = FRACTAL_MAX_DEPTH,
            min_size: float = FRACTAL_MIN_SIZE) -> Mesh:
    """Sierpinski-like cube cluster: each cube spawns 4 children at 0.4x size."""
    parts: List[Mesh] = []
    depth = budget.clip_depth(depth, "fractal")

    def add_cube(centre: np.ndarray, size: float, level: int) -> None:
        parts.append(box(size, size, size, 1).translated(centre))
        child = size * FRACTAL_CHILD_SCALE
        if level <= 1 or child < min_size:
            return
        for direction in _FRACTAL_DIRS:
            if not budget.take("fractal"):
                return
            add_cube(centre + direction * size * FRACTAL_OFFSET, child, level - 1)

    # the root cube is always built, like the organic trunk
    budget.take("fractal")
    add_cube(np.zeros(3), float(scale[0]), depth)
    mesh = merge_meshes(parts)
    mesh.warnings.extend(budget.warnings)
    return mesh


# ── Text ─────────────────────────────────────────────────────────────────

def glyph_row(text: str, scale) -> Mesh:
    """One slab per visible character, laid out left to right and centred."""
    sx, sy, sz = scale
    width, thickness = 0.6 * sx, sz * 0.2
    advance = width * 1.25
    text = text or "A"

    origin = -advance * (len(text) - 1) / 2
    slabs = [
        box(width, sy, thickness, 1).translated((origin + i * advance, 0.0, 0.0))
        for i, ch in enumerate(text) if not ch.isspace()
    ]
    if not slabs:
        slabs = [box(width, sy, thickness, 1)]
    return merge_meshes(slabs)
