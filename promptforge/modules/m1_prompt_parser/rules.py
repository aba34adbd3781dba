"""Declarative keyword rules evaluated once per prompt.

A rule is a ``(predicate, effect)`` pair.  Tables in shared/vocabulary.py are
compiled into ordered rule lists here so new vocabulary only touches the
tables, never the parsing logic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

_EDGE_PUNCT = re.compile(r"^[^\w]+|[^\w]+$")


def tokenize(prompt: str) -> List[str]:
    """Whitespace split, lower-cased, surrounding punctuation stripped."""
    tokens = (_EDGE_PUNCT.sub("", tok) for tok in prompt.lower().split())
    return [tok for tok in tokens if tok]


@dataclass(slots=True)
class PromptContext:
    """Lower-cased prompt text plus its token list and token set."""
    prompt: str
    text: str = ""
    tokens: List[str] = field(default_factory=list)
    words: frozenset[str] = frozenset()

    @classmethod
    def from_prompt(cls, prompt: Optional[str]) -> "PromptContext":
        prompt = prompt or ""
        tokens = tokenize(prompt)
        return cls(prompt=prompt, text=prompt.lower(), tokens=tokens, words=frozenset(tokens))

    def contains(self, substring: str) -> bool:
        return substring in self.text


Predicate = Callable[[PromptContext], bool]


@dataclass(slots=True, frozen=True)
class Rule(Generic[T]):
    predicate: Predicate
    effect: T
    label: str = ""


def any_word(*words: str) -> Predicate:
    wanted = frozenset(words)
    return lambda ctx: not wanted.isdisjoint(ctx.words)


def any_substring(*subs: str) -> Predicate:
    return lambda ctx: any(s in ctx.text for s in subs)


def matches(pattern: str) -> Predicate:
    compiled = re.compile(pattern)
    return lambda ctx: compiled.search(ctx.text) is not None


def phrase(keyword: str) -> Predicate:
    """Word-boundary match of a word or phrase, tolerating a plural 's'."""
    compiled = re.compile(r"\b" + re.escape(keyword) + r"s?\b")
    return lambda ctx: compiled.search(ctx.text) is not None


def first_match(rules: Sequence[Rule[T]], ctx: PromptContext, default: T) -> T:
    for rule in rules:
        if rule.predicate(ctx):
            return rule.effect
    return default


def all_matches(rules: Iterable[Rule[T]], ctx: PromptContext) -> List[T]:
    return [rule.effect for rule in rules if rule.predicate(ctx)]


def word_rules(table: dict[str, T]) -> List[Rule[T]]:
    """One whole-word rule per table entry, in declaration order."""
    return [Rule(any_word(kw), value, kw) for kw, value in table.items()]


def phrase_rules(table: dict[str, T]) -> List[Rule[T]]:
    return [Rule(phrase(kw), value, kw) for kw, value in table.items()]
