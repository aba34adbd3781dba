from __future__ import annotations

import logging
import re
from typing import List, Optional

from promptforge.shared.vocabulary import (
    CHARACTER_ANIMATION_KEYWORDS,
    CHARACTER_COLOR_WORDS,
    CHARACTER_FEATURE_KEYWORDS,
    CHARACTER_SCALE_WORDS,
    CHARACTER_TYPE_KEYWORDS,
    DEFAULT_CHARACTER_ANIMATIONS,
    DEFAULT_CHARACTER_TYPE,
    NAME_STOPWORDS,
    TEXTURE_FEATURES,
    TEXTURE_RULES,
    CharacterAnimationPreset,
    CharacterType,
    TextureHint,
)
from .models import CharacterFeatures, CharacterIntent, MaterialHints
from .rules import PromptContext, Rule, all_matches, any_substring, first_match, phrase, phrase_rules

log = logging.getLogger(__name__)

_NAME_PATTERNS = (
    re.compile(r"\b(?:a|an|the)\s+(\w+(?:\s+\w+)?)", re.IGNORECASE),
    re.compile(r"^\s*(\w+(?:\s+\w+)?)"),
)
DEFAULT_NAME = "Character"
EXTRA_LIMB_COUNT = 6


class CharacterPromptParser:
    """Prompt → CharacterIntent.  Never raises; unknown prompts become a generic creature."""

    def __init__(self) -> None:
        self._type_rules = phrase_rules(CHARACTER_TYPE_KEYWORDS)
        self._feature_rules = phrase_rules(CHARACTER_FEATURE_KEYWORDS)
        self._animation_rules = phrase_rules(CHARACTER_ANIMATION_KEYWORDS)
        self._color_rules = [Rule(phrase(c), c, c) for c in CHARACTER_COLOR_WORDS]
        self._texture_rules = [Rule(any_substring(*subs), tex) for subs, tex in TEXTURE_RULES]
        self._scale_rules = phrase_rules(CHARACTER_SCALE_WORDS)

    def parse(self, prompt: Optional[str]) -> CharacterIntent:
        ctx = PromptContext.from_prompt(prompt)

        character_type = first_match(self._type_rules, ctx, DEFAULT_CHARACTER_TYPE)
        features = self.detect_features(ctx)
        texture = first_match(self._texture_rules, ctx, TextureHint.SMOOTH)
        colors = all_matches(self._color_rules, ctx)
        size = first_match(self._scale_rules, ctx, 1.0)

        intent = CharacterIntent(
            description=ctx.prompt,
            character_type=character_type,
            features=features,
            suggested_animations=self.suggest_animations(ctx),
            material_hints=MaterialHints(colors=colors, texture=texture),
            scale=(size, size, size),
            tags=self.generate_tags(character_type, features, texture, colors),
            name=extract_character_name(ctx.prompt),
        )
        log.debug("[M1] character parse: type=%s name=%r features=%s",
                  character_type.value, intent.name, features)
        return intent

    def detect_features(self, ctx: PromptContext) -> CharacterFeatures:
        features = CharacterFeatures()
        for feature in all_matches(self._feature_rules, ctx):
            if feature == "hasTail":
                features.has_tail = True
            elif feature == "hasWings":
                features.has_wings = True
            elif feature == "extraLimbs":
                features.limb_count = EXTRA_LIMB_COUNT
            elif feature not in TEXTURE_FEATURES and feature not in features.special_features:
                features.special_features.append(feature)
        return features

    def suggest_animations(self, ctx: PromptContext) -> List[CharacterAnimationPreset]:
        suggested = list(DEFAULT_CHARACTER_ANIMATIONS)
        for preset in all_matches(self._animation_rules, ctx):
            if preset not in suggested:
                suggested.append(preset)
        return suggested

    @staticmethod
    def generate_tags(character_type: CharacterType, features: CharacterFeatures,
                      texture: TextureHint, colors: List[str]) -> List[str]:
        tags = [character_type.value]
        if features.has_tail:
            tags.append("tailed")
        if features.has_wings:
            tags.append("winged")
        tags.append(texture.value)
        tags.extend(colors)
        return list(dict.fromkeys(tags))


def extract_character_name(prompt: str) -> str:
    """Display name from "a/an/the <word(s)>" or the leading words, title-cased.

    Connector words end the name: "a toad with a tail" → "Toad".
    """
    for pattern in _NAME_PATTERNS:
        match = pattern.search(prompt or "")
        if not match:
            continue
        words: List[str] = []
        for word in match.group(1).split():
            if word.lower() in NAME_STOPWORDS:
                break
            words.append(word)
        if words:
            return " ".join(w[:1].upper() + w[1:] for w in words)
    return DEFAULT_NAME


_DEFAULT_PARSER: Optional[CharacterPromptParser] = None


def parse_character_prompt(prompt: Optional[str]) -> CharacterIntent:
    global _DEFAULT_PARSER
    if _DEFAULT_PARSER is None:
        _DEFAULT_PARSER = CharacterPromptParser()
    return _DEFAULT_PARSER.parse(prompt)
