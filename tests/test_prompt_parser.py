"""Tests for Module 1: scene and character prompt parsers."""

import numpy as np
import pytest

from promptforge.modules.m1_prompt_parser import (
    CharacterPromptParser,
    ScenePromptParser,
    enhance_prompt,
    extract_character_name,
    extract_text_content,
    parse_character_prompt,
    parse_scene_prompt,
)
from promptforge.modules.m1_prompt_parser.rules import PromptContext, tokenize
from promptforge.modules.m1_prompt_parser.scene_parser import prompt_seed
from promptforge.shared.vocabulary import (
    PROMPT_ENHANCEMENTS,
    AnimationType,
    BaseShape,
    CharacterAnimationPreset,
    CharacterType,
    DistortionType,
    TextureHint,
    ThemeCategory,
    get_character_type_by_keyword,
    get_horror_intensity,
    get_shape_by_keyword,
)


class TestTokenizer:

    def test_lowercases_and_strips_punctuation(self):
        assert tokenize("A Haunted, twisted CATHEDRAL!") == ["a", "haunted", "twisted", "cathedral"]

    def test_empty(self):
        assert tokenize("") == []
        assert PromptContext.from_prompt(None).tokens == []

    def test_vocabulary_lookups(self):
        assert get_shape_by_keyword("Cube") is BaseShape.BOX
        assert get_horror_intensity("blood") == 9
        assert get_horror_intensity("teapot") == 0
        assert get_character_type_by_keyword("robot") is CharacterType.HUMANOID


class TestScenePromptParser:

    def setup_method(self):
        self.parser = ScenePromptParser()

    def test_lone_surrogate_in_prompt(self):
        prompt = "a twisted tower \udcff"
        config = self.parser.parse(prompt)
        assert config.modifiers.twisted is True
        assert config.modifiers.distortion.seed == prompt_seed(prompt.lower())
        assert self.parser.parse(prompt).modifiers.distortion.seed == config.modifiers.distortion.seed

    def test_haunted_cathedral(self):
        config = self.parser.parse("a haunted twisted cathedral glowing red")
        assert config.theme in (ThemeCategory.HORROR, ThemeCategory.HYBRID)
        assert config.horror_level >= 4
        assert config.base_shape is BaseShape.EXTRUSION
        assert config.modifiers.twisted is True
        assert config.materials.emissive is not None
        assert config.materials.color == "#ff0000"

    def test_empty_prompt_defaults(self):
        for prompt in ("", None, "   "):
            config = self.parser.parse(prompt)
            assert config.base_shape is BaseShape.SPHERE
            assert config.horror_level == 0
            assert config.complexity == 2
            assert config.theme is ThemeCategory.ABSTRACT
            assert config.scale == (1.5, 1.5, 1.5)
            assert config.tags == ["abstract", "sphere"]

    def test_horror_level_clamped(self):
        config = self.parser.parse("gore blood nightmare terror death corpse visceral")
        assert config.horror_level == 10

    def test_horror_average_rounds(self):
        # (2 + 4) / 2 = 3, which is not above the horror threshold
        config = self.parser.parse("an eerie haunted sphere")
        assert config.horror_level == 3
        assert config.theme is ThemeCategory.ABSTRACT

    def test_complexity_clamped(self):
        config = self.parser.parse(
            "twisted decayed fractured organic rotating spinning floating pulsing fog dust dramatic glow glitch")
        assert config.complexity == 10

    @pytest.mark.parametrize("prompt", [
        "", "a cube", "a haunted twisted cathedral glowing red", "blood " * 40,
        "!!!", "a tiny rotating glass orb in the mist", "the word \"DOOM\" dripping blood",
    ])
    def test_scores_always_in_range(self, prompt):
        config = self.parser.parse(prompt)
        assert 0 <= config.horror_level <= 10
        assert 0 <= config.complexity <= 10

    def test_hybrid_beats_editorial_and_horror(self):
        config = self.parser.parse("a haunted newspaper article about blood")
        assert config.theme is ThemeCategory.HYBRID

    def test_editorial_and_cinematic(self):
        assert self.parser.parse("a newspaper headline").theme is ThemeCategory.EDITORIAL
        config = self.parser.parse("a dramatic cube")
        assert config.theme is ThemeCategory.CINEMATIC
        assert config.atmosphere.lighting[0].color == "#ffffff"

    def test_shape_table_order_wins(self):
        assert self.parser.parse("a ball on a cube").base_shape is BaseShape.BOX

    def test_shape_context_fallback(self):
        assert self.parser.parse("a tower of doom").base_shape is BaseShape.EXTRUSION
        assert self.parser.parse("a treehouse").base_shape is BaseShape.ORGANIC

    def test_compound_colors_follow_single_words(self):
        ctx = PromptContext.from_prompt("a dark red sphere")
        assert self.parser.detect_colors(ctx) == ["#ff0000", "#8b0000"]

    def test_glass_material(self):
        mat = self.parser.parse("a glass orb").materials
        assert mat.transmission == 1.0
        assert mat.opacity == 0.3
        assert mat.ior == 1.5
        assert mat.roughness == 0.1
        assert mat.transparent is True

    def test_rough_metal(self):
        mat = self.parser.parse("a rough metal box").materials
        assert mat.roughness == 0.9
        assert mat.metalness == 0.9

    def test_glow_uses_second_color(self):
        mat = self.parser.parse("a blue orb glowing green").materials
        assert mat.color == "#0000ff"
        assert mat.emissive == "#00ff00"
        assert mat.emissive_intensity == 1.0

    def test_auto_distortion_is_seeded_from_prompt(self):
        prompt = "A Twisted decayed pillar"
        config = self.parser.parse(prompt)
        assert config.modifiers.decayed is True
        assert config.modifiers.distortion.type is DistortionType.TWIST
        assert config.modifiers.distortion.seed == prompt_seed(prompt.lower())
        assert self.parser.parse("a shattered vase").modifiers.distortion.type is DistortionType.SHATTER

    def test_animations(self):
        kinds = [a.type for a in self.parser.parse("a rotating floating cube").animations]
        assert kinds == [AnimationType.ROTATE, AnimationType.FLOAT]

        hover = self.parser.parse("a cube that hovers").animations
        assert len(hover) == 1
        assert hover[0].type is AnimationType.FLOAT
        assert hover[0].speed == 0.5
        assert hover[0].intensity == 0.3

    def test_fog_preset(self):
        config = self.parser.parse("a misty cube")
        assert config.atmosphere.fog.color == "#cccccc"
        assert config.atmosphere.lighting == []

    def test_horror_darkens_fog_and_reddens_light(self):
        config = self.parser.parse("a cursed diseased orb in the fog")
        assert config.horror_level > 6
        assert config.atmosphere.fog.color == "#111111"
        assert config.atmosphere.lighting[0].color == "#ff0033"
        assert config.atmosphere.post_processing.vignette is True

    def test_scale_words(self):
        assert self.parser.parse("a tiny cube").scale == (0.5, 0.5, 0.5)
        assert self.parser.parse("a giant cube").scale == (5.0, 5.0, 5.0)

    def test_tags(self):
        config = self.parser.parse("a decayed glowing box")
        assert config.tags == ["abstract", "box", "decay", "glowing"]

    def test_idempotent(self):
        prompt = "a haunted twisted cathedral glowing red in the fog"
        assert self.parser.parse(prompt) == self.parser.parse(prompt)
        assert parse_scene_prompt(prompt) == self.parser.parse(prompt)

    def test_text_shape_content(self):
        config = self.parser.parse("the letter Q")
        assert config.base_shape is BaseShape.TEXT
        assert config.text == "Q"


class TestTextHelpers:

    def test_extract_text_content(self):
        assert extract_text_content('the word "DOOM" in letters') == "DOOM"
        assert extract_text_content("the letter Q") == "Q"
        assert extract_text_content("the word hello") == "hello"
        assert extract_text_content("some typography") == "A"

    def test_enhance_prompt_is_seeded(self):
        a = enhance_prompt("a cube", np.random.default_rng(7))
        b = enhance_prompt("a cube", np.random.default_rng(7))
        assert a == b
        assert a.startswith("a cube")
        assert a[len("a cube"):] in PROMPT_ENHANCEMENTS
        assert enhance_prompt("a cube") == enhance_prompt("a cube")


class TestCharacterPromptParser:

    def setup_method(self):
        self.parser = CharacterPromptParser()

    def test_tiny_furry_creature(self):
        intent = self.parser.parse("a tiny furry creature")
        assert intent.character_type is CharacterType.CREATURE
        assert intent.scale == pytest.approx((0.3, 0.3, 0.3))
        assert intent.material_hints.texture is TextureHint.FURRY

    def test_toad_with_tail(self):
        intent = self.parser.parse("a toad with a tail")
        assert intent.character_type is CharacterType.CREATURE
        assert intent.features.has_tail is True
        assert intent.name == "Toad"
        assert "tailed" in intent.tags

    def test_defaults(self):
        intent = self.parser.parse("")
        assert intent.character_type is CharacterType.CREATURE
        assert intent.name == "Character"
        assert intent.suggested_animations == [CharacterAnimationPreset.IDLE, CharacterAnimationPreset.WALK]
        assert intent.material_hints.texture is TextureHint.SMOOTH
        assert intent.scale == (1.0, 1.0, 1.0)

    def test_humanoid_with_wings(self):
        intent = self.parser.parse("a robot with wings")
        assert intent.character_type is CharacterType.HUMANOID
        assert intent.features.has_wings is True
        assert intent.tags[:2] == ["humanoid", "winged"]

    def test_extra_limbs(self):
        assert self.parser.parse("a spider with six legs").features.limb_count == 6
        assert self.parser.parse("a spider").features.limb_count == 4

    def test_special_features_exclude_textures(self):
        features = self.parser.parse("a dragon with horns, claws, fangs, spikes and scales").features
        assert features.special_features == ["horns", "spikes", "claws", "fangs"]

    def test_animation_suggestions_append_unique(self):
        presets = self.parser.parse("a dancing man, dancing and waving").suggested_animations
        assert presets == [CharacterAnimationPreset.IDLE, CharacterAnimationPreset.WALK,
                           CharacterAnimationPreset.DANCE, CharacterAnimationPreset.WAVE]

    def test_texture_priority(self):
        assert self.parser.parse("a scaly furry beast").material_hints.texture is TextureHint.SCALY
        assert self.parser.parse("a shiny robot").material_hints.texture is TextureHint.METALLIC

    def test_colors(self):
        assert self.parser.parse("a red and gold lizard").material_hints.colors == ["red", "gold"]

    def test_idempotent(self):
        assert parse_character_prompt("a huge green dragon") == self.parser.parse("a huge green dragon")


class TestCharacterName:

    def test_article_pattern(self):
        assert extract_character_name("The dark wizard") == "Dark Wizard"
        assert extract_character_name("an owl") == "Owl"

    def test_leading_words(self):
        assert extract_character_name("wizard casting spells") == "Wizard Casting"

    def test_fallback(self):
        assert extract_character_name("") == "Character"
        assert extract_character_name("!!!") == "Character"
