"""Tests for Module 6: procedural keyframe clips."""

import math

import pytest

from promptforge.modules.m1_prompt_parser.models import CharacterFeatures
from promptforge.modules.m4_skeleton_generator import SkeletonGenerator
from promptforge.modules.m6_animation_synthesizer import (
    PRESET_GENERATORS,
    AnimationSynthesizer,
    BlendMode,
)
from promptforge.shared.constants import ANIMATION_DEFAULTS
from promptforge.shared.vocabulary import CharacterAnimationPreset, CharacterType

Preset = CharacterAnimationPreset


@pytest.fixture(scope="module")
def humanoid():
    return SkeletonGenerator().generate(CharacterType.HUMANOID)


@pytest.fixture(scope="module")
def lizard():
    return SkeletonGenerator().generate(CharacterType.CREATURE, CharacterFeatures(has_tail=True))


@pytest.fixture(scope="module")
def prop():
    return SkeletonGenerator().generate(CharacterType.OBJECT)


class TestAnimationSynthesizer:

    def setup_method(self):
        self.synth = AnimationSynthesizer()

    def test_every_preset_has_a_generator(self):
        assert set(PRESET_GENERATORS) == set(Preset)

    @pytest.mark.parametrize("preset", list(Preset))
    def test_default_timeline(self, preset, humanoid):
        clip = self.synth.synthesize(preset, humanoid)
        duration, loop = ANIMATION_DEFAULTS[preset.value]
        assert clip.name == preset.value
        assert clip.duration == pytest.approx(duration)
        assert clip.loop is loop
        assert clip.preset is preset
        assert clip.blend_mode is BlendMode.OVERRIDE
        assert clip.weight == 1.0
        times = [kf.time for kf in clip.keyframes]
        assert times == sorted(times)
        assert all(0.0 <= t <= clip.duration for t in times)

    @pytest.mark.parametrize("preset", list(Preset))
    def test_keys_only_for_existing_bones(self, preset, lizard, prop):
        for skel in (lizard, prop):
            clip = self.synth.synthesize(preset, skel)
            assert set(clip.bones) <= set(skel.names)

    def test_idle_breathing(self, humanoid):
        clip = self.synth.synthesize(Preset.IDLE, humanoid)
        spine = clip.track("spine")
        assert [kf.time for kf in spine] == [0.0, 1.5, 3.0]
        assert spine[0].scale == pytest.approx((1.0, 0.97, 1.0))
        assert spine[1].scale == pytest.approx((1.0, 1.03, 1.0))
        assert clip.track("tail_base") == []

    def test_idle_tail_sway(self, lizard):
        clip = self.synth.synthesize(Preset.IDLE, lizard)
        assert [kf.rotation[2] for kf in clip.track("tail_mid")] == pytest.approx([0.3, -0.3, 0.3])

    def test_walk_biped_legs_in_anti_phase(self, humanoid):
        clip = self.synth.synthesize(Preset.WALK, humanoid)
        left = [kf.rotation[0] for kf in clip.track("leg_upper_l")]
        right = [kf.rotation[0] for kf in clip.track("leg_upper_r")]
        assert left == pytest.approx([0.6, -0.6, 0.6])
        assert right == pytest.approx([-0.6, 0.6, -0.6])
        assert len(clip.track("root")) == 5

    def test_walk_quadruped(self, lizard):
        clip = self.synth.synthesize(Preset.WALK, lizard)
        assert clip.track("leg_upper_l") == []
        front = clip.track("leg_front_upper_l")[0].rotation[0]
        back = clip.track("leg_back_upper_l")[0].rotation[0]
        assert front == pytest.approx(-back)
        assert clip.track("tail_base")[0].rotation[1] == pytest.approx(0.3)

    def test_walk_six_legs(self):
        spider = SkeletonGenerator().generate(CharacterType.CREATURE, CharacterFeatures(limb_count=6))
        clip = AnimationSynthesizer().synthesize(Preset.WALK, spider)
        assert clip.track("leg_mid_upper_l")[0].rotation == clip.track("leg_front_upper_l")[0].rotation

    def test_run_is_faster_and_stronger(self, humanoid):
        clip = self.synth.synthesize(Preset.RUN, humanoid)
        legs = clip.track("leg_upper_l")
        assert [kf.time for kf in legs] == pytest.approx([0.0, 0.36, 0.72])
        assert legs[0].rotation[0] == pytest.approx(0.9)

    def test_jump(self, humanoid):
        clip = self.synth.synthesize(Preset.JUMP, humanoid)
        heights = [kf.position[1] for kf in clip.track("root")]
        assert heights == pytest.approx([-0.3, 2.0, 2.0, 0.0])
        assert clip.loop is False

    def test_wave_needs_right_arm(self, humanoid, lizard):
        clip = self.synth.synthesize(Preset.WAVE, humanoid)
        assert [kf.time for kf in clip.track("hand_r")] == pytest.approx([0.5, 0.8, 1.1, 1.4])
        assert self.synth.synthesize(Preset.WAVE, lizard).keyframes == []

    def test_attack(self, humanoid):
        clip = self.synth.synthesize(Preset.ATTACK, humanoid)
        assert clip.bones == ["arm_upper_r"]
        assert clip.track("arm_upper_r")[-1].rotation == (0.0, 0.0, 0.0)

    def test_retimed_idle_variants(self, humanoid):
        emote = self.synth.synthesize(Preset.EMOTE, humanoid)
        assert [kf.time for kf in emote.track("spine")] == pytest.approx([0.0, 0.6, 1.2])

    def test_duration_override_rescales(self, humanoid):
        clip = self.synth.synthesize(Preset.WALK, humanoid, duration=2.4)
        assert clip.duration == 2.4
        assert [kf.time for kf in clip.track("leg_upper_l")] == pytest.approx([0.0, 1.2, 2.4])
        assert max(kf.time for kf in clip.keyframes) <= 2.4

    def test_intensity_scales_magnitudes(self, humanoid):
        calm = self.synth.synthesize(Preset.DANCE, humanoid, intensity=0.5)
        wild = self.synth.synthesize(Preset.DANCE, humanoid, intensity=2.0)
        assert calm.track("spine")[0].rotation[1] == pytest.approx(0.15)
        assert wild.track("spine")[0].rotation[1] == pytest.approx(0.6)

    def test_default_intensity_from_constructor(self, humanoid):
        clip = AnimationSynthesizer(default_intensity=2.0).synthesize(Preset.JUMP, humanoid)
        assert clip.track("root")[1].position[1] == pytest.approx(4.0)

    def test_accepts_preset_strings(self, humanoid):
        assert self.synth.synthesize("dance", humanoid).preset is Preset.DANCE

    @pytest.mark.parametrize("kwargs", [
        {"intensity": math.nan}, {"intensity": math.inf}, {"duration": 0.0}, {"duration": -1.0},
        {"duration": math.nan},
    ])
    def test_bad_arguments(self, kwargs, humanoid):
        with pytest.raises(ValueError):
            self.synth.synthesize(Preset.IDLE, humanoid, **kwargs)

    def test_unknown_preset(self, humanoid):
        with pytest.raises(ValueError):
            self.synth.synthesize("moonwalk", humanoid)

    def test_library_dedups_in_order(self, humanoid):
        clips = self.synth.synthesize_library(humanoid, [Preset.IDLE, "walk", Preset.IDLE, Preset.DANCE])
        assert [c.name for c in clips] == ["idle", "walk", "dance"]

    def test_clips_are_independent(self, humanoid):
        a = self.synth.synthesize(Preset.IDLE, humanoid)
        b = self.synth.synthesize(Preset.IDLE, humanoid, duration=6.0)
        assert a.track("spine")[-1].time == pytest.approx(3.0)
        assert b.track("spine")[-1].time == pytest.approx(6.0)
