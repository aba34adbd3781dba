from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from promptforge.modules.m1_prompt_parser.models import CharacterIntent, MaterialConfig
from promptforge.shared.constants import DEFAULT_CHARACTER_COLOR
from promptforge.shared.vocabulary import CharacterType, TextureHint
from .models import RGB, AnimatedMaterialKind, CharacterMaterial, MaterialError, RenderableMaterial, parse_color

log = logging.getLogger(__name__)

DEFAULT_EMISSIVE_INTENSITY = 1.0
SUBSURFACE_COLOR = "#ffccaa"
SUBSURFACE_THICKNESS = 0.5
TEXTURE_ROUGHNESS = {
    TextureHint.SMOOTH:   0.2,
    TextureHint.ROUGH:    0.8,
    TextureHint.SCALY:    0.6,
    TextureHint.FURRY:    0.9,
    TextureHint.METALLIC: 0.3,
}
_VIEW_AXIS = np.array([0.0, 0.0, 1.0])


def _unit_factor(name: str, value: float) -> float:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise MaterialError(f"{name} must be within [0, 1], got {value!r}")
    return float(value)


class MaterialComposer:
    """MaterialConfig → RenderableMaterial (parse colors, clamp nothing, reject out-of-range)."""

    def compose(self, config: MaterialConfig) -> RenderableMaterial:
        emissive = parse_color(config.emissive) if config.emissive else None
        material = RenderableMaterial(
            color=parse_color(config.color),
            roughness=_unit_factor("roughness", config.roughness),
            metalness=_unit_factor("metalness", config.metalness),
            opacity=1.0 if config.opacity is None else _unit_factor("opacity", config.opacity),
            transparent=bool(config.transparent),
            wireframe=bool(config.wireframe),
            emissive=emissive,
            emissive_intensity=(config.emissive_intensity or DEFAULT_EMISSIVE_INTENSITY) if emissive else 0.0,
            transmission=config.transmission,
            ior=config.ior,
            thickness=config.thickness,
            clearcoat=config.clearcoat,
        )
        log.debug("[M3] composed material %s (physical=%s)", material.hex_color, material.is_physical)
        return material

    def compose_animated(self, config: MaterialConfig, kind) -> "AnimatedMaterial":
        try:
            kind = AnimatedMaterialKind(kind)
        except ValueError:
            raise MaterialError(f"Unknown animated material: {kind!r}") from None
        base = parse_color(config.color)
        return AnimatedMaterial(
            kind=kind,
            color=base,
            emissive=parse_color(config.emissive) if config.emissive else base,
            opacity=config.opacity or 1.0,
            transparent=bool(config.transparent),
        )

    def compose_character(self, intent: CharacterIntent) -> CharacterMaterial:
        texture = intent.material_hints.texture
        base = intent.material_hints.colors[0] if intent.material_hints.colors else DEFAULT_CHARACTER_COLOR
        parse_color(base)  # raises MaterialError for an unknown color
        humanoid = intent.character_type is CharacterType.HUMANOID
        return CharacterMaterial(
            base_color=base,
            roughness=TEXTURE_ROUGHNESS.get(texture, 0.5),
            metalness=0.8 if texture is TextureHint.METALLIC else 0.1,
            skin_shader=humanoid or intent.character_type is CharacterType.CREATURE,
            subsurface_color=SUBSURFACE_COLOR if humanoid else None,
            subsurface_thickness=SUBSURFACE_THICKNESS if humanoid else None,
        )


@dataclass(slots=True, frozen=True)
class AnimatedMaterial:
    """Time-driven color blend; every method is a pure function of ``time``
    (seconds, supplied by the caller's clock) and the sampled geometry."""
    kind: AnimatedMaterialKind
    color: RGB
    emissive: RGB
    opacity: float = 1.0
    transparent: bool = False

    def blend_factor(self, time: float, normals: Optional[np.ndarray] = None,
                     positions: Optional[np.ndarray] = None) -> np.ndarray:
        """Per-sample mix weight between ``color`` (0) and ``emissive`` (1)."""
        count = len(normals) if normals is not None else len(positions) if positions is not None else 1
        if self.kind is AnimatedMaterialKind.GLOW:
            if normals is None:
                raise MaterialError("glow blend needs surface normals")
            return np.power(1.0 - np.abs(np.asarray(normals) @ _VIEW_AXIS), 2.0)
        if self.kind is AnimatedMaterialKind.PULSE:
            return np.full(count, np.sin(time * 3.0) * 0.5 + 0.5)
        if self.kind is AnimatedMaterialKind.PHASE:
            if positions is None:
                raise MaterialError("phase blend needs vertex positions")
            return np.sin(np.asarray(positions)[:, 1] * 5.0 + time * 2.0) * 0.5 + 0.5
        return np.zeros(count)

    def glitch_active(self, time: float) -> bool:
        return self.kind is AnimatedMaterialKind.GLITCH and math.sin(time * 50.0) >= 0.98

    def color_at(self, time: float, normals: Optional[np.ndarray] = None,
                 positions: Optional[np.ndarray] = None) -> np.ndarray:
        """``(N, 3)`` RGB per sample (``(1, 3)`` when no geometry is given)."""
        t = self.blend_factor(time, normals, positions)[:, None]
        rgb = (1.0 - t) * np.asarray(self.color) + t * np.asarray(self.emissive)
        if self.glitch_active(time):
            rgb = 1.0 - rgb
        return rgb

    def vertex_scale(self, time: float) -> float:
        if self.kind is AnimatedMaterialKind.PULSE:
            return 1.0 + math.sin(time * 2.0) * 0.1
        return 1.0

    def vertex_offset_x(self, positions: np.ndarray, time: float) -> np.ndarray:
        """Horizontal tear applied by the glitch variant."""
        y = np.asarray(positions)[:, 1]
        if self.kind is not AnimatedMaterialKind.GLITCH or math.sin(time * 20.0) < 0.95:
            return np.zeros_like(y)
        return np.sin(y * 10.0 + time * 10.0) * 0.1
