"""Tests for Module 3: colors, composition, presets and animated materials."""

import math

import numpy as np
import pytest

from promptforge.modules.m1_prompt_parser.models import CharacterIntent, MaterialConfig, MaterialHints
from promptforge.modules.m3_material_composer import (
    EDITORIAL_MATERIAL_PRESETS,
    HORROR_MATERIAL_PRESETS,
    AnimatedMaterialKind,
    MaterialComposer,
    MaterialError,
    get_material_preset,
    parse_color,
    preset_names,
    to_hex,
)
from promptforge.shared.vocabulary import CharacterType, TextureHint


class TestColors:

    def test_hex_forms(self):
        assert parse_color("#ff0000") == (1.0, 0.0, 0.0)
        assert parse_color("#0f0") == (0.0, 1.0, 0.0)

    def test_color_names(self):
        assert parse_color("Crimson") == parse_color("#dc143c")

    @pytest.mark.parametrize("bad", ["", "#12", "#gggggg", "chartreuse-ish", None, 42])
    def test_rejects_garbage(self, bad):
        with pytest.raises(MaterialError):
            parse_color(bad)

    def test_to_hex_clamps(self):
        assert to_hex((1.2, 0.0, -0.5)) == "#ff0000"
        assert to_hex(parse_color("#8b0000")) == "#8b0000"


class TestMaterialComposer:

    def setup_method(self):
        self.composer = MaterialComposer()

    def test_defaults(self):
        mat = self.composer.compose(MaterialConfig())
        assert mat.color == (1.0, 1.0, 1.0)
        assert mat.opacity == 1.0
        assert mat.emissive is None
        assert mat.emissive_intensity == 0.0
        assert mat.is_physical is False

    def test_emissive_default_intensity(self):
        mat = self.composer.compose(MaterialConfig(color="#000000", emissive="#ff0000"))
        assert mat.emissive == (1.0, 0.0, 0.0)
        assert mat.emissive_intensity == 1.0

    def test_glass_is_physical(self):
        mat = self.composer.compose(MaterialConfig(transparent=True, opacity=0.3, transmission=1.0, ior=1.5))
        assert mat.is_physical is True
        assert mat.transparent is True

    @pytest.mark.parametrize("field,value", [
        ("roughness", 1.5), ("metalness", -0.1), ("opacity", 2.0), ("roughness", float("nan")),
    ])
    def test_out_of_range(self, field, value):
        with pytest.raises(MaterialError):
            self.composer.compose(MaterialConfig(**{field: value}))

    def test_bad_color(self):
        with pytest.raises(MaterialError):
            self.composer.compose(MaterialConfig(color="not-a-color"))

    def test_error_is_value_error(self):
        assert issubclass(MaterialError, ValueError)


class TestPresets:

    def test_libraries(self):
        assert set(HORROR_MATERIAL_PRESETS) == {
            "spectral", "decayed", "blood", "bone", "shadow", "cursedMetal", "ethereal"}
        assert set(EDITORIAL_MATERIAL_PRESETS) == {
            "newsprint", "ink", "highlighter", "paper", "glossyMagazine"}
        assert preset_names()[0] == "spectral"

    def test_lookup_returns_copy(self):
        preset = get_material_preset("blood")
        preset.color = "#00ff00"
        assert HORROR_MATERIAL_PRESETS["blood"].color == "#8b0000"

    def test_unknown_falls_back(self):
        preset = get_material_preset("velvet")
        assert preset.color == "#ffffff"
        assert preset.roughness == 0.5
        assert preset.metalness == 0.5

    @pytest.mark.parametrize("name", preset_names())
    def test_every_preset_composes(self, name):
        MaterialComposer().compose(get_material_preset(name))


class TestAnimatedMaterial:

    def setup_method(self):
        self.config = MaterialConfig(color="#000000", emissive="#ffffff")
        self.composer = MaterialComposer()

    def test_unknown_kind(self):
        with pytest.raises(MaterialError):
            self.composer.compose_animated(self.config, "sparkle")

    def test_pulse_is_pure_function_of_time(self):
        mat = self.composer.compose_animated(self.config, "pulse")
        np.testing.assert_allclose(mat.color_at(0.0), [[0.5, 0.5, 0.5]])
        np.testing.assert_array_equal(mat.color_at(1.3), mat.color_at(1.3))
        assert mat.vertex_scale(math.pi / 4) == pytest.approx(1.1)

    def test_glow_needs_normals(self):
        mat = self.composer.compose_animated(self.config, AnimatedMaterialKind.GLOW)
        with pytest.raises(MaterialError):
            mat.blend_factor(0.0)
        rim = mat.blend_factor(0.0, normals=np.array([[0.0, 0.0, 1.0], [1.0, 0.0, 0.0]]))
        np.testing.assert_allclose(rim, [0.0, 1.0])

    def test_phase_follows_height(self):
        mat = self.composer.compose_animated(self.config, "phase")
        positions = np.array([[0.0, 0.0, 0.0], [0.0, math.pi / 10, 0.0]])
        np.testing.assert_allclose(mat.blend_factor(0.0, positions=positions), [0.5, 1.0])

    def test_glitch_inverts_when_active(self):
        mat = self.composer.compose_animated(self.config, "glitch")
        peak = (math.pi / 2) / 50.0
        assert mat.glitch_active(peak) is True
        assert mat.glitch_active(0.0) is False
        np.testing.assert_allclose(mat.color_at(peak), [[1.0, 1.0, 1.0]])

    def test_glitch_tear(self):
        mat = self.composer.compose_animated(self.config, "glitch")
        positions = np.zeros((4, 3))
        np.testing.assert_array_equal(mat.vertex_offset_x(positions, 0.0), np.zeros(4))


class TestCharacterMaterial:

    def setup_method(self):
        self.composer = MaterialComposer()

    def test_humanoid_gets_subsurface(self):
        mat = self.composer.compose_character(CharacterIntent(character_type=CharacterType.HUMANOID))
        assert mat.base_color == "#8b7355"
        assert mat.skin_shader is True
        assert mat.subsurface_color == "#ffccaa"
        assert mat.subsurface_thickness == 0.5

    def test_metallic_creature(self):
        intent = CharacterIntent(material_hints=MaterialHints(colors=["silver"], texture=TextureHint.METALLIC))
        mat = self.composer.compose_character(intent)
        assert mat.base_color == "silver"
        assert mat.metalness == 0.8
        assert mat.roughness == 0.3
        assert mat.skin_shader is True
        assert mat.subsurface_color is None

    def test_object_has_no_skin_shader(self):
        mat = self.composer.compose_character(CharacterIntent(character_type=CharacterType.OBJECT))
        assert mat.skin_shader is False
        assert mat.roughness == 0.2

    def test_furry_roughness(self):
        intent = CharacterIntent(material_hints=MaterialHints(texture=TextureHint.FURRY))
        assert self.composer.compose_character(intent).roughness == 0.9
