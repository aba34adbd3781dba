"""
#WHERE
    Imported by the character assembler and test_animation_synthesizer.py.

#WHAT
    Animation Synthesizer Module (Module 6): keyframe clips for idle,
    walk, run, jump, wave, dance, attack and the idle-derived presets.

#INPUT
    Preset, SkeletonConfig, intensity, optional duration.

#OUTPUT
    AnimationClip.
"""

from .models import AnimationClip, BlendMode, Keyframe
from .synthesizer import PRESET_GENERATORS, AnimationSynthesizer

__all__ = ["AnimationSynthesizer", "AnimationClip", "Keyframe", "BlendMode", "PRESET_GENERATORS"]
