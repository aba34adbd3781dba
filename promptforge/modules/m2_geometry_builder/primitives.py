"""
#WHERE
    Used by builder.py (scene shapes), procedural.py (branches, fractal
    cubes, glyph slabs) and character_mesh.py (placeholder bodies).

#WHAT
    Closed-form parametric primitives: box, sphere, cylinder (optionally
    tapered / capped), cone, torus.  All centred on the origin, outward
    facing, vertices duplicated along UV seams.

#INPUT
    Dimensions and segment counts.

#OUTPUT
    Mesh (normals not yet computed).
"""
from __future__ import annotations

import numpy as np

from promptforge.shared.constants import (
    BOX_SEGMENTS,
    CYLINDER_SEGMENTS,
    SPHERE_SEGMENTS,
    TORUS_RADIAL_SEGMENTS,
    TORUS_TUBULAR_SEGMENTS,
)
from .mesh import GeometryBuildError, Mesh, merge_meshes


def grid_faces(rows: int, cols: int, flip: bool = False) -> np.ndarray:
    """Two triangles per cell of a ``(rows+1) x (cols+1)`` vertex grid.

    Face normal is ``d(row) x d(col)``; pass ``flip`` to reverse it.
    """
    i, j = np.meshgrid(np.arange(rows), np.arange(cols), indexing="ij")
    stride = cols + 1
    a = (i * stride + j + 1).ravel()
    b = (i * stride + j).ravel()
    c = ((i + 1) * stride + j).ravel()
    d = ((i + 1) * stride + j + 1).ravel()
    if flip:
        tris = np.stack([np.stack([a, d, b], 1), np.stack([b, d, c], 1)], 1)
    else:
        tris = np.stack([np.stack([a, b, d], 1), np.stack([b, c, d], 1)], 1)
    return tris.reshape(-1, 3)


def _check_positive(**dims: float) -> None:
    for name, value in dims.items():
        if not np.isfinite(value) or value <= 0:
            raise GeometryBuildError(f"{name} must be a positive finite number, got {value!r}")


def plane(center, u_vec, v_vec, u_segments: int = 1, v_segments: int = 1) -> Mesh:
    """Rectangle spanned by ``u_vec`` (columns) and ``v_vec`` (rows); normal is ``v x u``."""
    center, u_vec, v_vec = (np.asarray(x, dtype=np.float64) for x in (center, u_vec, v_vec))
    s = np.linspace(-0.5, 0.5, u_segments + 1)
    t = np.linspace(-0.5, 0.5, v_segments + 1)
    tt, ss = np.meshgrid(t, s, indexing="ij")
    verts = center + ss[..., None] * u_vec + tt[..., None] * v_vec
    return Mesh(verts.reshape(-1, 3), grid_faces(v_segments, u_segments))


def box(width: float, height: float, depth: float, segments: int = BOX_SEGMENTS) -> Mesh:
    _check_positive(width=width, height=height, depth=depth)
    hx, hy, hz = width / 2, height / 2, depth / 2
    X, Y, Z = np.array([width, 0, 0]), np.array([0, height, 0]), np.array([0, 0, depth])
    faces = [
        plane((hx, 0, 0), Z, Y, segments, segments),
        plane((-hx, 0, 0), -Z, Y, segments, segments),
        plane((0, hy, 0), X, Z, segments, segments),
        plane((0, -hy, 0), -X, Z, segments, segments),
        plane((0, 0, hz), Y, X, segments, segments),
        plane((0, 0, -hz), -Y, X, segments, segments),
    ]
    return merge_meshes(faces)


def sphere(radius: float, width_segments: int = SPHERE_SEGMENTS,
           height_segments: int = SPHERE_SEGMENTS) -> Mesh:
    _check_positive(radius=radius)
    theta = np.linspace(0.0, np.pi, height_segments + 1)[:, None]
    phi = np.linspace(0.0, 2 * np.pi, width_segments + 1)[None, :]
    verts = np.stack([
        -radius * np.cos(phi) * np.sin(theta),
        radius * np.cos(theta) * np.ones_like(phi),
        radius * np.sin(phi) * np.sin(theta),
    ], axis=-1)
    return Mesh(verts.reshape(-1, 3), grid_faces(height_segments, width_segments))


def cylinder(radius_top: float, radius_bottom: float, height: float,
             radial_segments: int = CYLINDER_SEGMENTS, height_segments: int = 1,
             capped: bool = True) -> Mesh:
    """Tapered cylinder along Y.  ``radius_top`` may be 0 (cone)."""
    _check_positive(radius_bottom=radius_bottom, height=height)
    if radius_top < 0:
        raise GeometryBuildError(f"radius_top must be >= 0, got {radius_top!r}")

    v = np.linspace(0.0, 1.0, height_segments + 1)[:, None]
    theta = np.linspace(0.0, 2 * np.pi, radial_segments + 1)[None, :]
    radius = radius_top + v * (radius_bottom - radius_top)
    verts = np.stack([
        radius * np.sin(theta),
        (height / 2 - v * height) * np.ones_like(theta),
        radius * np.cos(theta),
    ], axis=-1)
    parts = [Mesh(verts.reshape(-1, 3), grid_faces(height_segments, radial_segments))]

    if capped:
        if radius_top > 0:
            parts.append(_cap(radius_top, height / 2, radial_segments, up=True))
        parts.append(_cap(radius_bottom, -height / 2, radial_segments, up=False))
    return merge_meshes(parts)


def _cap(radius: float, y: float, segments: int, up: bool) -> Mesh:
    theta = np.linspace(0.0, 2 * np.pi, segments + 1)
    ring = np.stack([radius * np.sin(theta), np.full_like(theta, y), radius * np.cos(theta)], 1)
    verts = np.vstack([[0.0, y, 0.0], ring])
    k = np.arange(1, segments + 1)
    centre = np.zeros_like(k)
    faces = np.stack([centre, k, k + 1], 1) if up else np.stack([centre, k + 1, k], 1)
    return Mesh(verts, faces)


def cone(radius: float, height: float, radial_segments: int = CYLINDER_SEGMENTS) -> Mesh:
    return cylinder(0.0, radius, height, radial_segments, 1)


def torus(radius: float, tube: float, radial_segments: int = TORUS_RADIAL_SEGMENTS,
          tubular_segments: int = TORUS_TUBULAR_SEGMENTS) -> Mesh:
    """Torus in the XY plane."""
    _check_positive(radius=radius, tube=tube)
    v = np.linspace(0.0, 2 * np.pi, radial_segments + 1)[:, None]
    u = np.linspace(0.0, 2 * np.pi, tubular_segments + 1)[None, :]
    ring = radius + tube * np.cos(v)
    verts = np.stack([
        ring * np.cos(u),
        ring * np.sin(u),
        tube * np.sin(v) * np.ones_like(u),
    ], axis=-1)
    return Mesh(verts.reshape(-1, 3), grid_faces(radial_segments, tubular_segments, flip=True))
