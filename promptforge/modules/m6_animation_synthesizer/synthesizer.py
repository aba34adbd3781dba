"""
#WHERE
    Called by m7_assembler/character_assembler.py for every suggested
    preset of a character.

#WHAT
    Closed-form keyframe generators, one per preset.  Each generator writes
    keys on the preset's default timeline (see ANIMATION_DEFAULTS) and only
    for bones the skeleton actually has.  A caller-supplied duration
    rescales every key time uniformly.

#INPUT
    CharacterAnimationPreset, SkeletonConfig, intensity, optional duration.

#OUTPUT
    AnimationClip with key times inside [0, duration].
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from promptforge.modules.m4_skeleton_generator.models import SkeletonConfig
from promptforge.shared.constants import (
    ANIMATION_DEFAULTS,
    DEFAULT_ANIMATION_INTENSITY,
    RUN_INTENSITY_SCALE,
    RUN_TIME_SCALE,
)
from promptforge.shared.vocabulary import CharacterAnimationPreset
from .models import AnimationClip, BlendMode, Keyframe

log = logging.getLogger(__name__)

Sample = Tuple[float, Tuple[float, float, float]]
KeyGenerator = Callable[[SkeletonConfig, float], List[Keyframe]]


def _track(skeleton: SkeletonConfig, bone: str, channel: str, samples: Iterable[Sample]) -> List[Keyframe]:
    if not skeleton.has_bone(bone):
        return []
    return [Keyframe(time=t, bone=bone, **{channel: value}) for t, value in samples]


def _swing(a: float, times: Sequence[float], axis: int = 0) -> List[Sample]:
    """Alternate +a / -a across ``times`` on one rotation axis."""
    out = []
    for i, t in enumerate(times):
        v = [0.0, 0.0, 0.0]
        v[axis] = a if i % 2 == 0 else -a
        out.append((t, tuple(v)))
    return out


def _is_biped(skeleton: SkeletonConfig) -> bool:
    return skeleton.has_bone("leg_upper_l") or skeleton.has_bone("leg_upper_r")


def _is_quadruped(skeleton: SkeletonConfig) -> bool:
    return skeleton.has_bone("leg_front_upper_l") or skeleton.has_bone("leg_back_upper_l")


# ── presets ──────────────────────────────────────────────────────────────

def idle_keys(skeleton: SkeletonConfig, intensity: float) -> List[Keyframe]:
    breathe = 0.03 * intensity
    keys = _track(skeleton, "spine", "scale", [
        (0.0, (1.0, 1.0 - breathe, 1.0)),
        (1.5, (1.0, 1.0 + breathe, 1.0)),
        (3.0, (1.0, 1.0 - breathe, 1.0)),
    ])
    keys += _track(skeleton, "head", "rotation", _swing(0.05 * intensity, (0.0, 2.0, 3.0)))
    keys += _track(skeleton, "tail_base", "rotation", _swing(0.2 * intensity, (0.0, 1.5, 3.0), axis=2))
    keys += _track(skeleton, "tail_mid", "rotation", _swing(0.3 * intensity, (0.0, 1.5, 3.0), axis=2))
    return keys


def walk_keys(skeleton: SkeletonConfig, intensity: float) -> List[Keyframe]:
    swing = 0.6 * intensity
    cycle = (0.0, 0.6, 1.2)
    keys: List[Keyframe] = []
    if _is_biped(skeleton):
        keys += _track(skeleton, "leg_upper_l", "rotation", _swing(swing, cycle))
        keys += _track(skeleton, "leg_upper_r", "rotation", _swing(-swing, cycle))
        keys += _track(skeleton, "arm_upper_l", "rotation", _swing(-swing * 0.5, cycle))
        keys += _track(skeleton, "arm_upper_r", "rotation", _swing(swing * 0.5, cycle))
        bob = 0.05 * intensity
        keys += _track(skeleton, "root", "position",
                       [(t, (0.0, bob if i % 2 == 0 else -bob, 0.0))
                        for i, t in enumerate((0.0, 0.3, 0.6, 0.9, 1.2))])
    elif _is_quadruped(skeleton):
        keys += _track(skeleton, "leg_front_upper_l", "rotation", _swing(swing, cycle))
        keys += _track(skeleton, "leg_front_upper_r", "rotation", _swing(-swing, cycle))
        keys += _track(skeleton, "leg_mid_upper_l", "rotation", _swing(swing, cycle))
        keys += _track(skeleton, "leg_mid_upper_r", "rotation", _swing(-swing, cycle))
        keys += _track(skeleton, "leg_back_upper_l", "rotation", _swing(-swing, cycle))
        keys += _track(skeleton, "leg_back_upper_r", "rotation", _swing(swing, cycle))
        keys += _track(skeleton, "tail_base", "rotation", _swing(0.3 * intensity, cycle, axis=1))
    return keys


def run_keys(skeleton: SkeletonConfig, intensity: float) -> List[Keyframe]:
    keys = walk_keys(skeleton, intensity * RUN_INTENSITY_SCALE)
    for kf in keys:
        kf.time *= RUN_TIME_SCALE
    return keys


def jump_keys(skeleton: SkeletonConfig, intensity: float) -> List[Keyframe]:
    peak = 2.0 * intensity
    keys = _track(skeleton, "root", "position", [
        (0.0, (0.0, -0.3 * intensity, 0.0)),
        (0.3, (0.0, peak, 0.0)),
        (0.5, (0.0, peak, 0.0)),
        (0.8, (0.0, 0.0, 0.0)),
    ])
    legs = [(0.0, (0.8 * intensity, 0.0, 0.0)),
            (0.3, (-0.3 * intensity, 0.0, 0.0)),
            (0.8, (0.5 * intensity, 0.0, 0.0))]
    keys += _track(skeleton, "leg_upper_l", "rotation", legs)
    keys += _track(skeleton, "leg_upper_r", "rotation", legs)
    return keys


def wave_keys(skeleton: SkeletonConfig, intensity: float) -> List[Keyframe]:
    if not skeleton.has_bone("arm_upper_r"):
        return []
    keys = _track(skeleton, "arm_upper_r", "rotation", [
        (0.0, (0.0, 0.0, 0.0)),
        (0.3, (-1.5 * intensity, 0.0, 0.5 * intensity)),
        (1.8, (0.0, 0.0, 0.0)),
    ])
    hand = _swing(0.3 * intensity, (0.5, 0.8, 1.1), axis=2) + [(1.4, (0.0, 0.0, 0.0))]
    keys += _track(skeleton, "hand_r", "rotation", hand)
    return keys


def dance_keys(skeleton: SkeletonConfig, intensity: float) -> List[Keyframe]:
    keys = _track(skeleton, "spine", "rotation", _swing(0.3 * intensity, (0.0, 1.0, 2.0, 3.0, 4.0), axis=1))
    keys += _track(skeleton, "arm_upper_l", "rotation", [
        (0.0, (-0.5 * intensity, 0.0, -0.5 * intensity)),
        (1.0, (-1.0 * intensity, 0.0, -0.8 * intensity)),
        (2.0, (-0.5 * intensity, 0.0, -0.5 * intensity)),
    ])
    return keys


def attack_keys(skeleton: SkeletonConfig, intensity: float) -> List[Keyframe]:
    return _track(skeleton, "arm_upper_r", "rotation", [
        (0.0, (-1.2 * intensity, 0.0, 0.5 * intensity)),
        (0.2, (0.8 * intensity, 0.0, -0.3 * intensity)),
        (0.5, (0.0, 0.0, 0.0)),
    ])


def _retimed_idle(target: CharacterAnimationPreset) -> KeyGenerator:
    factor = ANIMATION_DEFAULTS[target.value][0] / ANIMATION_DEFAULTS["idle"][0]

    def generate(skeleton: SkeletonConfig, intensity: float) -> List[Keyframe]:
        keys = idle_keys(skeleton, intensity)
        for kf in keys:
            kf.time *= factor
        return keys
    return generate


PRESET_GENERATORS: Dict[CharacterAnimationPreset, KeyGenerator] = {
    CharacterAnimationPreset.IDLE:     idle_keys,
    CharacterAnimationPreset.WALK:     walk_keys,
    CharacterAnimationPreset.RUN:      run_keys,
    CharacterAnimationPreset.JUMP:     jump_keys,
    CharacterAnimationPreset.WAVE:     wave_keys,
    CharacterAnimationPreset.DANCE:    dance_keys,
    CharacterAnimationPreset.ATTACK:   attack_keys,
    CharacterAnimationPreset.INTERACT: _retimed_idle(CharacterAnimationPreset.INTERACT),
    CharacterAnimationPreset.EMOTE:    _retimed_idle(CharacterAnimationPreset.EMOTE),
    CharacterAnimationPreset.CUSTOM:   _retimed_idle(CharacterAnimationPreset.CUSTOM),
}


class AnimationSynthesizer:

    def __init__(self, default_intensity: float = DEFAULT_ANIMATION_INTENSITY) -> None:
        self.default_intensity = default_intensity

    def synthesize(self, preset, skeleton: SkeletonConfig, intensity: Optional[float] = None,
                   duration: Optional[float] = None) -> AnimationClip:
        preset = CharacterAnimationPreset(preset)
        intensity = self.default_intensity if intensity is None else float(intensity)
        if not math.isfinite(intensity):
            raise ValueError(f"Animation intensity must be finite, got {intensity!r}")

        default_duration, loop = ANIMATION_DEFAULTS[preset.value]
        if duration is None:
            duration = default_duration
        elif not (math.isfinite(duration) and duration > 0):
            raise ValueError(f"Animation duration must be positive, got {duration!r}")

        keys = PRESET_GENERATORS[preset](skeleton, intensity)
        stretch = duration / default_duration
        for kf in keys:
            # clamp absorbs float drift at the end of the timeline
            kf.time = min(max(kf.time * stretch, 0.0), duration)
        keys.sort(key=lambda kf: kf.time)

        clip = AnimationClip(
            name=preset.value,
            duration=duration,
            loop=loop,
            keyframes=keys,
            preset=preset,
            blend_mode=BlendMode.OVERRIDE,
            weight=1.0,
        )
        log.debug("[M6] %s: %d keys over %.2fs on %d bones", preset.value, len(keys), duration, len(clip.bones))
        return clip

    def synthesize_library(self, skeleton: SkeletonConfig, presets: Iterable,
                           intensity: Optional[float] = None) -> List[AnimationClip]:
        """One clip per distinct preset, in first-seen order."""
        clips: List[AnimationClip] = []
        seen = set()
        for preset in presets:
            preset = CharacterAnimationPreset(preset)
            if preset in seen:
                continue
            seen.add(preset)
            clips.append(self.synthesize(preset, skeleton, intensity))
        log.info("[M6] synthesized %d clips: %s", len(clips), ", ".join(c.name for c in clips))
        return clips
