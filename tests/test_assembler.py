"""Tests for Module 7: scene and character assembly, validation and snippets."""

import dataclasses
from datetime import datetime, timezone

import numpy as np
import pytest

from promptforge.modules.m1_prompt_parser import ScenePromptParser
from promptforge.modules.m1_prompt_parser.models import DistortionSpec, SceneConfig
from promptforge.modules.m4_skeleton_generator import SkeletonGenerator
from promptforge.modules.m6_animation_synthesizer import AnimationClip, Keyframe
from promptforge.modules.m7_assembler import (
    CharacterAssembler,
    CharacterConfig,
    CollisionBox,
    CollisionBoxType,
    CollisionTag,
    MeshExtractionConfig,
    SceneAssembler,
    character_mass,
    collision_boxes,
    collision_event,
    generate_component_code,
    validate,
    validate_character_config,
    validate_scene_config,
)
from promptforge.modules.m7_assembler.character_assembler import MANY_FEATURES_WARNING
from promptforge.shared.vocabulary import BaseShape, CharacterType, DistortionType


class TestSceneAssembler:

    def setup_method(self):
        self.assembler = SceneAssembler()

    def test_cathedral(self):
        result = self.assembler.assemble("a haunted twisted cathedral glowing red", clock=0.0)
        assert result.success is True
        assert result.error is None
        assert result.scene is result.config
        assert result.character is None
        assert result.mesh.vertex_count > 0
        assert result.material.emissive == (1.0, 0.0, 0.0)
        assert result.processing_time >= 0.0
        assert "Generated3DCreation" in result.component_code

    def test_template_merge(self):
        result = self.assembler.assemble("a glowing spectral orb floating in darkness", clock=0.0)
        assert result.template_id == "spectral-orb"
        assert result.config.atmosphere.particles is not None

    def test_templates_disabled(self):
        result = SceneAssembler(use_templates=False).assemble("a glowing spectral orb", clock=0.0)
        assert result.template_id is None
        assert result.config.atmosphere.particles is None

    def test_empty_prompt_builds_default_sphere(self):
        result = self.assembler.assemble("", clock=0.0)
        assert result.success is True
        assert result.config.base_shape is BaseShape.SPHERE

    def test_deterministic_without_pulse(self):
        a = self.assembler.assemble("a twisted decayed organic tree", clock=0.0)
        b = self.assembler.assemble("a twisted decayed organic tree", clock=99.0)
        np.testing.assert_array_equal(a.mesh.vertices, b.mesh.vertices)

    def test_build_failure_becomes_result(self):
        config = ScenePromptParser().parse("a cube")
        config.modifiers.distortion = DistortionSpec(DistortionType.NOISE, intensity=float("nan"))
        result = self.assembler.assemble_config(config, "a cube")
        assert result.success is False
        assert result.error.startswith("Generation failed: ")
        assert result.config is config
        assert result.mesh is None

    def test_material_failure_becomes_result(self):
        config = ScenePromptParser().parse("a cube")
        config.materials.roughness = 3.0
        result = self.assembler.assemble_config(config)
        assert result.success is False
        assert "roughness" in result.error

    def test_recursion_warnings_forwarded(self):
        from promptforge.modules.m2_geometry_builder import GeometryBuilder
        result = SceneAssembler(GeometryBuilder(fractal_max_depth=1)).assemble("a fractal", clock=0.0)
        assert result.success is True
        assert any("clipped" in w for w in result.warnings)

    def test_theme_and_scale_overrides(self):
        result = self.assembler.assemble("a cube", clock=0.0, theme="cinematic", scale=(2, 2, 2))
        assert result.success is True
        assert result.config.scale == (2.0, 2.0, 2.0)
        assert result.config.theme.value == "cinematic"

    def test_lone_surrogate_prompt_builds(self):
        result = self.assembler.assemble("a twisted tower \udcff", clock=0.0)
        assert result.success is True
        assert result.config.modifiers.twisted is True

    def test_prepare_failure_becomes_result(self, monkeypatch):
        def broken(prompt):
            raise RuntimeError("lexicon unavailable")

        monkeypatch.setattr(self.assembler, "resolve_config", broken)
        result = self.assembler.assemble("a cube")
        assert result.success is False
        assert result.config is None
        assert "lexicon unavailable" in result.error

    def test_bad_theme_override_fails(self):
        result = self.assembler.assemble("a cube", theme="bogus")
        assert result.success is False
        assert result.error.startswith("Generation failed: ")
        assert result.mesh is None


class TestCharacterAssembler:

    def setup_method(self):
        self.assembler = CharacterAssembler()

    def test_humanoid(self):
        result = self.assembler.assemble("a dancing man")
        assert result.success is True
        char = result.character
        assert char.character_type is CharacterType.HUMANOID
        assert [c.name for c in char.animations] == ["idle", "walk", "dance"]
        assert char.mass == pytest.approx(70.0)
        assert char.id.startswith("char_")
        assert char.mesh_extraction.vertex_count == 15_000
        assert char.materials.subsurface_color == "#ffccaa"
        assert [b.name for b in char.collision_boxes] == ["body", "head", "interaction_trigger"]
        assert result.parsed.name == char.name
        assert result.mesh is char.skinned_mesh.mesh

    def test_tiny_creature_scales_rig_and_mass(self):
        char = self.assembler.assemble("a tiny furry creature").character
        assert char.scale == pytest.approx((0.3, 0.3, 0.3))
        assert char.mass == pytest.approx(50.0 * 0.3 ** 3)
        assert char.skeleton.bone("head").position[1] == pytest.approx(0.5 * 0.3)
        assert char.materials.roughness == 0.9

    def test_ids_unique(self):
        assert self.assembler.assemble("a cat").config.id != self.assembler.assemble("a cat").config.id

    def test_many_features_warning(self):
        result = self.assembler.assemble("a dragon with horns, claws, fangs and spikes")
        assert result.success is True
        assert result.warnings == [MANY_FEATURES_WARNING]

    def test_quality_tiers(self):
        char = self.assembler.assemble("a robot", mesh_quality="ultra").character
        assert char.mesh_extraction.texture_size == 4096

    def test_unknown_quality_fails(self):
        result = self.assembler.assemble("a robot", mesh_quality="cinematic")
        assert result.success is False
        assert "Unknown mesh quality" in result.error
        assert result.parsed is not None

    def test_bad_intensity_fails(self):
        result = self.assembler.assemble("a robot", intensity=float("nan"))
        assert result.success is False

    def test_physics_disabled(self):
        char = CharacterAssembler(enable_physics=False).assemble("a robot").character
        assert char.collision_boxes == []
        assert char.mass == 0.0

    def test_mesh_disabled(self):
        result = CharacterAssembler(build_mesh=False).assemble("a robot")
        assert result.character.skinned_mesh is None
        assert result.mesh is None

    def test_object_rig(self):
        char = self.assembler.assemble("a furniture prop").character
        assert char.skeleton.names == ["root"]
        assert char.mass == pytest.approx(20.0)
        assert [b.name for b in char.collision_boxes] == ["body", "interaction_trigger"]

    def test_custom_interaction_radius(self):
        char = CharacterAssembler(interaction_radius=5.0).assemble("a wolf").character
        assert char.interaction_radius == 5.0

    def test_scale_override(self):
        char = self.assembler.assemble("a dancing man", scale=(1, 2, 1)).character
        assert char.scale == (1.0, 2.0, 1.0)
        assert char.mass == pytest.approx(140.0)
        assert char.skeleton.bone("head").position[1] == pytest.approx(1.05 * 2)

    def test_short_scale_override_fails(self):
        result = self.assembler.assemble("a dancing man", scale=(1.0, 2.0))
        assert result.success is False


class TestPhysicsHelpers:

    def test_mass(self):
        assert character_mass(CharacterType.HUMANOID, (1.0, 2.0, 1.0)) == pytest.approx(140.0)
        assert character_mass(CharacterType.CUSTOM, (1.0, 1.0, 1.0)) == pytest.approx(20.0)

    def test_collision_boxes(self):
        boxes = collision_boxes(SkeletonGenerator().generate(CharacterType.CREATURE))
        trigger = boxes[-1]
        assert trigger.type is CollisionBoxType.TRIGGER
        assert trigger.size == (2.0, 2.0, 2.0)
        assert boxes[0].bone == "spine"

    def test_collision_event(self):
        box = CollisionBox("body", (0, 0, 0), (1, 1, 1))
        event = collision_event(box, "player_1", "player")
        assert event.other_tag is CollisionTag.PLAYER
        assert event.box == "body"
        assert collision_event(dataclasses.replace(box, enabled=False), "player_1", "player") is None

    def test_collision_event_bad_tag(self):
        with pytest.raises(ValueError):
            collision_event(CollisionBox("body", (0, 0, 0), (1, 1, 1)), "x", "ghost")

    def test_mesh_extraction_tiers(self):
        low = MeshExtractionConfig.for_quality("low")
        assert (low.vertex_count, low.texture_size) == (5_000, 512)
        assert low.smoothness == 0.7
        with pytest.raises(ValueError):
            MeshExtractionConfig.for_quality("potato")


class TestValidation:

    def test_clean_scene(self):
        assert validate_scene_config(ScenePromptParser().parse("a cube")) == []

    def test_scene_violations(self):
        config = SceneConfig()
        config.complexity = 12
        config.scale = (1.0, float("nan"), 1.0)
        config.materials = None
        problems = validate_scene_config(config)
        assert "Complexity too high (max: 10)" in problems
        assert "Invalid scale" in problems
        assert "Missing materials configuration" in problems

    def test_character_violations(self):
        char = CharacterAssembler().assemble("a robot").character
        assert validate_character_config(char) == []

        bad_clip = AnimationClip("broken", 1.0, False, [Keyframe(2.0, "root")])
        broken = dataclasses.replace(char, id="", name="", animations=[bad_clip])
        problems = validate(broken)
        assert "Missing character ID" in problems
        assert "Missing character name" in problems
        assert any("outside [0, 1.0]" in p for p in problems)

        empty = dataclasses.replace(char, animations=[])
        assert "No animations configured" in validate(empty)

    def test_unsupported(self):
        assert validate(object()) == ["Unsupported config type: object"]


class TestSnippet:

    def test_scene_snippet(self):
        config = ScenePromptParser().parse('a rotating glass cube called "it"')
        when = datetime(2024, 1, 1, tzinfo=timezone.utc)
        code = generate_component_code(config, 'a rotating glass cube called "it"', created=when)
        assert "export default function Generated3DCreation()" in code
        assert "<boxGeometry args={[1.5, 1.5, 1.5]} />" in code
        assert "meshPhysicalMaterial" in code
        assert "rotation.y +=" in code
        assert '\\"it\\"' in code
        assert "2024-01-01T00:00:00+00:00" in code

    def test_procedural_shape_uses_buffer_geometry(self):
        code = generate_component_code(ScenePromptParser().parse("a fractal"), "a fractal")
        assert "bufferGeometry" in code
        assert "// No animations" in code

    def test_fog_and_lights(self):
        code = generate_component_code(ScenePromptParser().parse("a cursed orb in the fog"), "x")
        assert "<spotLight" in code
        assert "<fog attach=\"fog\"" in code
