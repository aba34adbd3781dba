from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from promptforge.shared.vocabulary import COLOR_KEYWORDS

RGB = Tuple[float, float, float]

_HEX = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class MaterialError(ValueError):
    """Malformed material parameters (bad color string, out-of-range factor)."""


def parse_color(value: str) -> RGB:
    """``#rgb`` / ``#rrggbb`` / lexicon color name → linear 0-1 RGB triple."""
    if not isinstance(value, str):
        raise MaterialError(f"Color must be a string, got {value!r}")
    text = COLOR_KEYWORDS.get(value.strip().lower(), value.strip())
    if not _HEX.match(text):
        raise MaterialError(f"Unrecognised color: {value!r}")
    digits = text[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return tuple(int(digits[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def to_hex(rgb: RGB) -> str:
    return "#" + "".join(f"{round(max(0.0, min(1.0, c)) * 255):02x}" for c in rgb)


class AnimatedMaterialKind(str, Enum):
    GLOW   = "glow"
    PULSE  = "pulse"
    PHASE  = "phase"
    GLITCH = "glitch"


@dataclass(slots=True, frozen=True)
class RenderableMaterial:
    """Resolved material parameters handed to the renderer."""
    color: RGB
    roughness: float
    metalness: float
    opacity: float = 1.0
    transparent: bool = False
    wireframe: bool = False
    emissive: Optional[RGB] = None
    emissive_intensity: float = 0.0
    transmission: Optional[float] = None
    ior: Optional[float] = None
    thickness: Optional[float] = None
    clearcoat: Optional[float] = None

    @property
    def is_physical(self) -> bool:
        """Needs a physically-based (transmission / clearcoat) shading model."""
        return self.transmission is not None or self.clearcoat is not None

    @property
    def hex_color(self) -> str:
        return to_hex(self.color)


@dataclass(slots=True, frozen=True)
class CharacterMaterial:
    base_color: str
    roughness: float
    metalness: float
    emissive: Optional[str] = None
    skin_shader: bool = False
    subsurface_color: Optional[str] = None
    subsurface_thickness: Optional[float] = None
