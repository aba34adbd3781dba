#!/usr/bin/env python3
"""promptforge command line: print a JSON summary of a generated scene or character."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from promptforge.pipeline import Pipeline, PipelineConfig
from promptforge.shared.constants import DEFAULT_MESH_QUALITY, MESH_QUALITY_TIERS
from promptforge.shared.vocabulary import ThemeCategory


def _args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Procedural 3D content from text prompts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            '  python main.py "a haunted twisted cathedral glowing red"\n'
            '  python main.py "a tiny furry creature with a tail" --character --quality high\n'
        ),
    )
    p.add_argument("prompt", nargs="?", default="a haunted twisted cathedral glowing red")
    p.add_argument("--character", action="store_true", help="generate a rigged character instead of a scene")
    p.add_argument("--quality", default=DEFAULT_MESH_QUALITY, choices=list(MESH_QUALITY_TIERS))
    p.add_argument("--no-templates", dest="templates", action="store_false", default=True)
    p.add_argument("--intensity", type=float, default=None, help="animation intensity multiplier")
    p.add_argument("--theme", default=None, choices=[t.value for t in ThemeCategory], help="force the scene theme")
    p.add_argument("--scale", type=float, nargs=3, metavar=("X", "Y", "Z"), default=None, help="force the output scale")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)


def summarize(result, character: bool) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "success": result.success,
        "error": result.error,
        "warnings": list(result.warnings),
        "processing_time_ms": round(result.processing_time, 2),
    }
    if result.mesh is not None:
        out["mesh"] = {"vertices": result.mesh.vertex_count, "faces": result.mesh.face_count}

    if character:
        cfg = result.character
        if cfg is not None:
            out["character"] = {
                "id": cfg.id,
                "name": cfg.name,
                "type": cfg.character_type.value,
                "bones": cfg.skeleton.names,
                "animations": {clip.name: {"duration": clip.duration, "keyframes": len(clip.keyframes)}
                               for clip in cfg.animations},
                "vertex_budget": cfg.mesh_extraction.vertex_count,
                "texture_size": cfg.mesh_extraction.texture_size,
                "mass": round(cfg.mass, 3),
                "tags": cfg.tags,
            }
        return out

    scene = result.scene
    if scene is not None:
        out["scene"] = {
            "shape": scene.base_shape.value,
            "scale": list(scene.scale),
            "theme": scene.theme.value,
            "horror_level": scene.horror_level,
            "complexity": scene.complexity,
            "color": scene.materials.color,
            "emissive": scene.materials.emissive,
            "modifiers": scene.modifiers.active_flags(),
            "distortion": scene.modifiers.distortion.type.value if scene.modifiers.distortion else None,
            "animations": [a.type.value for a in scene.animations],
            "tags": scene.tags,
            "template": result.template_id,
        }
    return out


def main(argv: Optional[List[str]] = None) -> int:
    args = _args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s  %(levelname)-8s  %(message)s", datefmt="%H:%M:%S")
    pipeline = Pipeline(PipelineConfig(use_templates=args.templates, mesh_quality=args.quality))
    if args.character:
        result = pipeline.run_character(args.prompt, intensity=args.intensity, scale=args.scale)
    else:
        result = pipeline.run(args.prompt, theme=args.theme, scale=args.scale)
    print(json.dumps(summarize(result, args.character), indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
