"""Parsing and merging of per-level percentage effect values.

An effect value is one ``NN%`` token per level, joined by newlines
(``"10%\\n20%"``). Values sharing a class and effect text are summed
token by token. Anything that is not a plain percentage, the ``-``
placeholder included, cannot be summed and poisons the merged result.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

_TOKEN_PATTERN = re.compile(r"^\s*([+-]?\d+)\s*%?\s*$")
UNMERGEABLE_TEXT = "-"


class EffectValueMismatchError(ValueError):
    """Raised when two effect values disagree on their number of levels."""


@dataclass(frozen=True, slots=True)
class MergedValue:
    tokens: tuple[int, ...]

    def __str__(self) -> str:
        return "\n".join(f"{token}%" for token in self.tokens)


@dataclass(frozen=True, slots=True)
class Unmergeable:
    def __str__(self) -> str:
        return UNMERGEABLE_TEXT


UNMERGEABLE = Unmergeable()

EffectValue = Union[MergedValue, Unmergeable]


def parse_effect_value(text: Optional[str]) -> Optional[EffectValue]:
    """Parse raw effect text; ``None`` or blank text means no value."""
    if text is None or not text.strip():
        return None
    tokens: list[int] = []
    for line in text.rstrip("\r\n").split("\n"):
        match = _TOKEN_PATTERN.match(line)
        if match is None:
            return UNMERGEABLE
        tokens.append(int(match.group(1)))
    return MergedValue(tokens=tuple(tokens))


def merge_effect_values(
    current: Optional[EffectValue], incoming: Optional[EffectValue]
) -> Optional[EffectValue]:
    """Sum two effect values level by level.

    A missing value is the identity; an unmergeable value absorbs the other.
    """
    if current is None:
        return incoming
    if incoming is None:
        return current
    if isinstance(current, Unmergeable) or isinstance(incoming, Unmergeable):
        return UNMERGEABLE
    if len(current.tokens) != len(incoming.tokens):
        raise EffectValueMismatchError(
            f"Cannot merge effect values with {len(current.tokens)} and "
            f"{len(incoming.tokens)} levels ({str(current)!r} + {str(incoming)!r})."
        )
    return MergedValue(tokens=tuple(a + b for a, b in zip(current.tokens, incoming.tokens)))


def format_effect_value(value: Optional[EffectValue]) -> str:
    if value is None:
        return ""
    return str(value)
