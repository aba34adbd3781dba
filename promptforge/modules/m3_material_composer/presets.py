"""Named material bundles for the horror and editorial libraries."""
from __future__ import annotations

import copy
import logging
from typing import Dict

from promptforge.modules.m1_prompt_parser.models import MaterialConfig

log = logging.getLogger(__name__)

HORROR_MATERIAL_PRESETS: Dict[str, MaterialConfig] = {
    "spectral": MaterialConfig(color="#00ffaa", roughness=0.1, metalness=0.0, emissive="#00ffaa",
                               emissive_intensity=1.5, transparent=True, opacity=0.7),
    "decayed": MaterialConfig(color="#3a2f2f", roughness=0.95, metalness=0.1, emissive="#1a0a00",
                              emissive_intensity=0.2),
    "blood": MaterialConfig(color="#8b0000", roughness=0.6, metalness=0.2, emissive="#ff0000",
                            emissive_intensity=0.5),
    "bone": MaterialConfig(color="#f5f5dc", roughness=0.7, metalness=0.0),
    "shadow": MaterialConfig(color="#000000", roughness=0.9, metalness=0.0, transparent=True, opacity=0.8),
    "cursedMetal": MaterialConfig(color="#1a1a1a", roughness=0.3, metalness=0.9, emissive="#330000",
                                  emissive_intensity=1.0),
    "ethereal": MaterialConfig(color="#ffffff", roughness=0.0, metalness=0.0, transparent=True,
                               opacity=0.3, transmission=1.0, ior=1.5),
}

EDITORIAL_MATERIAL_PRESETS: Dict[str, MaterialConfig] = {
    "newsprint": MaterialConfig(color="#f5f5f0", roughness=0.9, metalness=0.0),
    "ink": MaterialConfig(color="#000000", roughness=0.4, metalness=0.1),
    "highlighter": MaterialConfig(color="#ffff00", roughness=0.2, metalness=0.0, transparent=True, opacity=0.6),
    "paper": MaterialConfig(color="#ffffff", roughness=0.8, metalness=0.0),
    "glossyMagazine": MaterialConfig(color="#ffffff", roughness=0.1, metalness=0.0, clearcoat=1.0),
}

FALLBACK_PRESET = MaterialConfig(color="#ffffff", roughness=0.5, metalness=0.5)


def get_material_preset(name: str) -> MaterialConfig:
    """Copy of the named preset; unknown names get the neutral fallback."""
    preset = HORROR_MATERIAL_PRESETS.get(name) or EDITORIAL_MATERIAL_PRESETS.get(name)
    if preset is None:
        log.warning("[M3] unknown material preset %r, using fallback", name)
        preset = FALLBACK_PRESET
    return copy.deepcopy(preset)


def preset_names() -> list[str]:
    return [*HORROR_MATERIAL_PRESETS, *EDITORIAL_MATERIAL_PRESETS]
