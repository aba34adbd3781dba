"""promptforge: text prompts to procedural 3D scene and character descriptors."""

from .pipeline import Pipeline, PipelineConfig

__all__ = ["Pipeline", "PipelineConfig"]

__version__ = "0.1.0"
