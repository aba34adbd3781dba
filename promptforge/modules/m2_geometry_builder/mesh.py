"""Triangle mesh container shared by the geometry builder, skinning and assemblers.

Vertices are an ``(N, 3)`` float64 array, faces an ``(M, 3)`` int64 array of
vertex indices (counter-clockwise winding seen from outside), normals an
``(N, 3)`` array of unit vectors recomputed after every deformation.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import numpy as np

log = logging.getLogger(__name__)


class GeometryBuildError(ValueError):
    """Malformed geometry request or corrupt geometry output."""


@dataclass(slots=True)
class Mesh:
    vertices: np.ndarray
    faces: np.ndarray
    normals: Optional[np.ndarray] = None
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=np.float64).reshape(-1, 3)
        self.faces = np.asarray(self.faces, dtype=np.int64).reshape(-1, 3)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def face_count(self) -> int:
        return int(self.faces.shape[0])

    def bounds(self) -> tuple[np.ndarray, np.ndarray]:
        if self.vertex_count == 0:
            zero = np.zeros(3)
            return zero, zero
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def copy(self) -> "Mesh":
        return Mesh(
            self.vertices.copy(),
            self.faces.copy(),
            None if self.normals is None else self.normals.copy(),
            list(self.warnings),
        )

    # ── transforms (return new meshes) ───────────────────────────────────

    def translated(self, offset: Sequence[float]) -> "Mesh":
        return Mesh(self.vertices + np.asarray(offset, dtype=np.float64), self.faces.copy(),
                    warnings=list(self.warnings))

    def scaled(self, factors: Sequence[float]) -> "Mesh":
        return Mesh(self.vertices * np.asarray(factors, dtype=np.float64), self.faces.copy(),
                    warnings=list(self.warnings))

    def transformed(self, rotation: np.ndarray, offset: Sequence[float] = (0.0, 0.0, 0.0)) -> "Mesh":
        """Apply ``v' = R @ v + offset`` to every vertex."""
        verts = self.vertices @ np.asarray(rotation, dtype=np.float64).T
        return Mesh(verts + np.asarray(offset, dtype=np.float64), self.faces.copy(),
                    warnings=list(self.warnings))

    def flipped(self) -> "Mesh":
        """Same surface with reversed winding (normals point the other way)."""
        return Mesh(self.vertices.copy(), self.faces[:, ::-1].copy(), warnings=list(self.warnings))

    # ── normals / validation ─────────────────────────────────────────────

    def compute_normals(self) -> "Mesh":
        """Area-weighted vertex normals; isolated or degenerate vertices get +Y."""
        normals = np.zeros_like(self.vertices)
        if self.face_count:
            tri = self.vertices[self.faces]
            face_n = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
            for corner in range(3):
                np.add.at(normals, self.faces[:, corner], face_n)
        length = np.linalg.norm(normals, axis=1, keepdims=True)
        degenerate = length[:, 0] < 1e-12
        normals = np.divide(normals, length, out=np.zeros_like(normals), where=length > 1e-12)
        normals[degenerate] = (0.0, 1.0, 0.0)
        self.normals = normals
        return self

    def validate(self) -> None:
        if self.vertex_count == 0:
            raise GeometryBuildError("Mesh has no vertices")
        if not np.all(np.isfinite(self.vertices)):
            raise GeometryBuildError("Mesh contains non-finite vertex positions")
        if self.face_count and (self.faces.min() < 0 or self.faces.max() >= self.vertex_count):
            raise GeometryBuildError("Face index out of range")


def merge_meshes(meshes: Iterable[Mesh]) -> Mesh:
    """Concatenate meshes into one, re-basing face indices."""
    meshes = [m for m in meshes if m is not None]
    if not meshes:
        raise GeometryBuildError("Cannot merge an empty geometry list")

    vertices, faces, warnings = [], [], []
    offset = 0
    for mesh in meshes:
        vertices.append(mesh.vertices)
        faces.append(mesh.faces + offset)
        warnings.extend(mesh.warnings)
        offset += mesh.vertex_count
    return Mesh(np.concatenate(vertices), np.concatenate(faces), warnings=warnings)
