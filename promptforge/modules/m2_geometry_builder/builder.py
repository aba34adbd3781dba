from __future__ import annotations

import logging
import math
import time
from typing import Callable, Dict, Optional, Sequence

import numpy as np

from promptforge.modules.m1_prompt_parser.models import GeometryModifiers, SceneConfig
from promptforge.shared.constants import (
    FRACTAL_MAX_DEPTH,
    HOLLOW_INNER_SCALE,
    MAX_GEOMETRY_NODES,
    ORGANIC_MAX_DEPTH,
    SCORE_MAX,
    SCORE_MIN,
)
from promptforge.shared.vocabulary import BaseShape, DistortionType
from . import primitives, procedural
from .mesh import GeometryBuildError, Mesh, merge_meshes
from .modifiers import apply_modifiers
from .procedural import GrowthBudget

log = logging.getLogger(__name__)


class GeometryBuilder:
    """(shape, scale, modifiers) → Mesh.

    Builds the base shape, runs the modifier chain, adds the hollow inner
    shell and recomputes normals.  Malformed requests raise
    GeometryBuildError; nothing is silently patched.
    """

    def __init__(self, organic_max_depth: int = ORGANIC_MAX_DEPTH,
                 fractal_max_depth: int = FRACTAL_MAX_DEPTH,
                 max_nodes: int = MAX_GEOMETRY_NODES):
        self.organic_max_depth = organic_max_depth
        self.fractal_max_depth = fractal_max_depth
        self.max_nodes = max_nodes

    def build(self, shape, scale: Sequence[float], modifiers: Optional[GeometryModifiers] = None,
              horror_level: int = 0, text: Optional[str] = None, seed: Optional[int] = None,
              clock: Optional[float] = None) -> Mesh:
        shape = self._check_shape(shape)
        scale = self._check_scale(scale)
        modifiers = modifiers or GeometryModifiers()
        self._check_modifiers(modifiers)
        if not SCORE_MIN <= horror_level <= SCORE_MAX:
            raise GeometryBuildError(f"horror_level out of range: {horror_level!r}")

        if seed is None:
            seed = modifiers.distortion.seed if modifiers.distortion else 0
        rng = np.random.default_rng(seed)

        mesh = self._base(shape, scale, rng, text)
        warnings = list(mesh.warnings)

        if not modifiers.is_empty:
            mesh.vertices = apply_modifiers(
                mesh.vertices, modifiers, horror_level, rng,
                clock=time.time() if clock is None else clock, seed=seed,
            )
        if modifiers.hollow:
            inner = mesh.scaled((HOLLOW_INNER_SCALE,) * 3).flipped()
            mesh = merge_meshes([mesh, inner])

        mesh.warnings = warnings
        mesh.validate()
        mesh.compute_normals()
        log.info("[M2] built %s: %d vertices, %d faces", shape.value, mesh.vertex_count, mesh.face_count)
        return mesh

    def build_from_config(self, config: SceneConfig, clock: Optional[float] = None) -> Mesh:
        return self.build(config.base_shape, config.scale, config.modifiers,
                          horror_level=config.horror_level, text=config.text, clock=clock)

    # ── base shapes ──────────────────────────────────────────────────────

    def _base(self, shape: BaseShape, scale: tuple, rng: np.random.Generator,
              text: Optional[str]) -> Mesh:
        sx, sy, sz = scale
        builders: Dict[BaseShape, Callable[[], Mesh]] = {
            BaseShape.BOX:       lambda: primitives.box(sx, sy, sz),
            BaseShape.SPHERE:    lambda: primitives.sphere(sx),
            BaseShape.CYLINDER:  lambda: primitives.cylinder(sx, sx, sy * 2),
            BaseShape.TORUS:     lambda: primitives.torus(sx, sx * 0.3),
            BaseShape.CONE:      lambda: primitives.cone(sx, sy * 2),
            BaseShape.TWISTED:   lambda: procedural.twisted(scale),
            BaseShape.ORGANIC:   lambda: procedural.organic(
                scale, rng, GrowthBudget(self.organic_max_depth, self.max_nodes)),
            BaseShape.EXTRUSION: lambda: procedural.gothic_extrusion(scale),
            BaseShape.FRACTAL:   lambda: procedural.fractal(
                scale, GrowthBudget(self.fractal_max_depth, self.max_nodes)),
            BaseShape.TEXT:      lambda: procedural.glyph_row(text or "A", scale),
        }
        return builders[shape]()

    # ── request validation ───────────────────────────────────────────────

    @staticmethod
    def _check_shape(shape) -> BaseShape:
        try:
            return BaseShape(shape)
        except ValueError:
            raise GeometryBuildError(f"Unknown shape: {shape!r}") from None

    @staticmethod
    def _check_scale(scale) -> tuple:
        try:
            values = tuple(float(s) for s in scale)
        except (TypeError, ValueError):
            raise GeometryBuildError(f"Malformed scale: {scale!r}") from None
        if len(values) != 3 or not all(math.isfinite(s) and s > 0 for s in values):
            raise GeometryBuildError(f"Scale must be three positive finite numbers, got {scale!r}")
        return values

    @staticmethod
    def _check_modifiers(modifiers: GeometryModifiers) -> None:
        spec = modifiers.distortion
        if spec is None:
            return
        try:
            DistortionType(spec.type)
        except ValueError:
            raise GeometryBuildError(f"Unknown distortion: {spec.type!r}") from None
        for name in ("intensity", "frequency"):
            value = getattr(spec, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise GeometryBuildError(f"Distortion {name} must be finite, got {value!r}")
