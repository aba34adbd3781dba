"""
#WHERE
    Called by pipeline.py (scene path) and main.py.

#WHAT
    prompt → SceneConfig (optionally merged over the best-matching creation
    template) → Mesh + RenderableMaterial → GenerationResult.  Build errors
    are caught here and turned into a failed result.

#INPUT
    Prompt string (or an already-parsed SceneConfig).

#OUTPUT
    GenerationResult with config, mesh, material and a renderer snippet.
"""
from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional, Sequence

from promptforge.modules.m1_prompt_parser import ScenePromptParser, find_best_template, merge_configs
from promptforge.modules.m1_prompt_parser.models import SceneConfig
from promptforge.modules.m2_geometry_builder import GeometryBuilder
from promptforge.modules.m3_material_composer import MaterialComposer
from promptforge.shared.vocabulary import ThemeCategory
from .models import GenerationResult
from .snippet import generate_component_code

log = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def apply_overrides(config: SceneConfig, theme=None, scale: Optional[Sequence[float]] = None) -> SceneConfig:
    """Caller-supplied theme and scale replace whatever the prompt produced."""
    changes = {}
    if theme is not None:
        changes["theme"] = ThemeCategory(theme)
    if scale is not None:
        changes["scale"] = tuple(float(s) for s in scale)
    return replace(config, **changes) if changes else config


class SceneAssembler:

    def __init__(self, builder: Optional[GeometryBuilder] = None, composer: Optional[MaterialComposer] = None,
                 parser: Optional[ScenePromptParser] = None, use_templates: bool = True):
        self.builder = builder or GeometryBuilder()
        self.composer = composer or MaterialComposer()
        self.parser = parser or ScenePromptParser()
        self.use_templates = use_templates

    def resolve_config(self, prompt: str) -> tuple[SceneConfig, Optional[str]]:
        """Parse ``prompt``; merge it over the best template when one matches."""
        parsed = self.parser.parse(prompt)
        if not self.use_templates:
            return parsed, None
        template = find_best_template(prompt)
        if template is None:
            log.debug("[M7] no template for %r", prompt)
            return parsed, None
        log.info("[M7] template %s matched", template.id)
        return merge_configs(template.base_config, parsed), template.id

    def assemble(self, prompt: str, clock: Optional[float] = None, theme=None,
                 scale: Optional[Sequence[float]] = None) -> GenerationResult:
        start = time.perf_counter()
        config, template_id = None, None
        try:
            config, template_id = self.resolve_config(prompt or "")
            config = apply_overrides(config, theme, scale)
        except Exception as exc:
            log.error("[M7] could not prepare scene config: %s", exc)
            return GenerationResult(success=False, config=config, error=f"Generation failed: {exc}",
                                    processing_time=_elapsed_ms(start), template_id=template_id)
        result = self.assemble_config(config, prompt or "", clock=clock, start=start)
        result.template_id = template_id
        return result

    def assemble_config(self, config: SceneConfig, prompt: str = "", clock: Optional[float] = None,
                        start: Optional[float] = None) -> GenerationResult:
        start = time.perf_counter() if start is None else start
        try:
            mesh = self.builder.build_from_config(config, clock=clock)
            material = self.composer.compose(config.materials)
        except Exception as exc:
            log.error("[M7] scene generation failed: %s", exc)
            return GenerationResult(
                success=False,
                config=config,
                error=f"Generation failed: {exc}",
                processing_time=_elapsed_ms(start),
            )

        elapsed = _elapsed_ms(start)
        log.info("[M7] scene %s ready in %.1f ms (horror=%d, complexity=%d)",
                 config.base_shape.value, elapsed, config.horror_level, config.complexity)
        return GenerationResult(
            success=True,
            config=config,
            warnings=list(mesh.warnings),
            processing_time=elapsed,
            mesh=mesh,
            material=material,
            component_code=generate_component_code(config, prompt),
        )
