"""
#WHERE
    Top-level facade used by main.py and the test-suite.

#WHAT
    Scenes: parse the prompt (M1), merge a creation template under it, then
    build geometry (M2) and a material (M3).
    Characters: parse (M1), rig (M4), animate (M6), mesh and skin (M2, M5)
    and package everything (M7).

#INPUT
    Text prompt string, PipelineConfig.

#OUTPUT
    GenerationResult. Build failures come back as success=False.
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from promptforge.modules.m1_prompt_parser.templates import ALL_TEMPLATES, CreationTemplate, get_templates_by_category
from promptforge.modules.m2_geometry_builder import GeometryBuilder
from promptforge.modules.m6_animation_synthesizer import AnimationSynthesizer
from promptforge.modules.m7_assembler import CharacterAssembler, GenerationResult, SceneAssembler, validate
from promptforge.shared.constants import (
    DEFAULT_ANIMATION_INTENSITY,
    DEFAULT_INTERACTION_RADIUS,
    DEFAULT_MESH_QUALITY,
    FRACTAL_MAX_DEPTH,
    MAX_GEOMETRY_NODES,
    ORGANIC_MAX_DEPTH,
)
from promptforge.shared.mem_profile import tracemalloc_snapshot
from promptforge.shared.vocabulary import ThemeCategory

log = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    use_templates: bool = True            # M1: merge the best creation template under the parse
    mesh_quality: str = DEFAULT_MESH_QUALITY
    interaction_radius: float = DEFAULT_INTERACTION_RADIUS
    organic_max_depth: int = ORGANIC_MAX_DEPTH     # M2 recursion ceilings
    fractal_max_depth: int = FRACTAL_MAX_DEPTH
    max_geometry_nodes: int = MAX_GEOMETRY_NODES
    enable_physics: bool = True           # M7: collision boxes + mass
    build_character_mesh: bool = True     # M2/M5: placeholder body + skin weights
    trace_memory: bool = False            # log tracemalloc deltas per stage
    default_intensity: float = DEFAULT_ANIMATION_INTENSITY


class Pipeline:
    """Turns prompts into scene or character descriptors. Assemblers are built lazily."""

    def __init__(self, config: PipelineConfig | None = None) -> None:
        self.config = config or PipelineConfig()
        self._scene: Optional[SceneAssembler] = None
        self._character: Optional[CharacterAssembler] = None

    def setup(self) -> None:
        cfg = self.config
        builder = GeometryBuilder(cfg.organic_max_depth, cfg.fractal_max_depth, cfg.max_geometry_nodes)
        self._scene = SceneAssembler(builder=builder, use_templates=cfg.use_templates)
        self._character = CharacterAssembler(
            animator=AnimationSynthesizer(cfg.default_intensity),
            interaction_radius=cfg.interaction_radius,
            enable_physics=cfg.enable_physics,
            build_mesh=cfg.build_character_mesh,
        )
        log.info("[M7] pipeline ready (templates=%s, quality=%s)", cfg.use_templates, cfg.mesh_quality)

    def _stage(self, label: str):
        return tracemalloc_snapshot(label) if self.config.trace_memory else contextlib.nullcontext()

    def run(self, prompt: str, clock: Optional[float] = None, theme: Optional[ThemeCategory] = None,
            scale: Optional[Sequence[float]] = None) -> GenerationResult:
        if self._scene is None:
            self.setup()
        with self._stage("scene"):
            result = self._scene.assemble(prompt, clock=clock, theme=theme, scale=scale)
        self._append_violations(result)
        return result

    def run_character(self, prompt: str, mesh_quality: Optional[str] = None,
                      intensity: Optional[float] = None,
                      scale: Optional[Sequence[float]] = None) -> GenerationResult:
        if self._character is None:
            self.setup()
        with self._stage("character"):
            result = self._character.assemble(prompt, mesh_quality or self.config.mesh_quality, intensity,
                                              scale=scale)
        self._append_violations(result)
        return result

    @staticmethod
    def templates(category: Optional[ThemeCategory] = None) -> List[CreationTemplate]:
        if category is None:
            return list(ALL_TEMPLATES)
        return get_templates_by_category(ThemeCategory(category))

    @staticmethod
    def _append_violations(result: GenerationResult) -> None:
        if not result.success or result.config is None:
            return
        for problem in validate(result.config):
            log.warning("[M7] validation: %s", problem)
            result.warnings.append(problem)
