from __future__ import annotations

from collections.abc import Callable

from .constants import (
    FALLBACK_HEADLINE,
    HL_CHECKBOX_CHECKED,
    HL_CHECKBOX_HALF,
    HL_HEADLINE,
    LIST_GROUPS,
    NodeKind,
)
from .models import BulletsConfig, Segment

Handler = Callable[[str, BulletsConfig], "tuple[Segment, ...] | None"]


def add_symbol_padding(symbol: str, padding_spaces: int, padding_in_front: bool) -> str:
    if padding_in_front:
        return " " * max(padding_spaces - 1, 0) + symbol
    return symbol + " " * max(padding_spaces, 0)


def headline_glyph(level: int, config: BulletsConfig) -> str:
    headlines = config.symbols.headlines
    if 1 <= level <= len(headlines):
        return headlines[level - 1]
    return headlines[0] if headlines else FALLBACK_HEADLINE


def stars(text: str, config: BulletsConfig) -> tuple[Segment, ...]:
    level = len(text.strip())
    symbol = add_symbol_padding(headline_glyph(level, config), level, config.indent)
    return (Segment(symbol, f"{HL_HEADLINE}{level}"),)


def bullet(text: str, config: BulletsConfig) -> tuple[Segment, ...]:
    symbol = add_symbol_padding(config.symbols.bullet, len(text) - 1, True)
    return (Segment(symbol, LIST_GROUPS.get(text.strip())),)


def checkbox(text: str, config: BulletsConfig) -> tuple[Segment, ...] | None:
    checkboxes = config.symbols.checkboxes
    if "X" in text:
        return (
            Segment("[", HL_CHECKBOX_CHECKED),
            checkboxes.done.as_segment(),
            Segment("]", HL_CHECKBOX_CHECKED),
        )
    if "-" in text:
        return (
            Segment("[", HL_CHECKBOX_HALF),
            checkboxes.half.as_segment(),
            Segment("]", HL_CHECKBOX_HALF),
        )
    # "[ ]" is left as typed.
    return None


MARKERS: dict[NodeKind, Handler] = {
    NodeKind.HEADLINE_MARKER: stars,
    NodeKind.LIST_BULLET: bullet,
    NodeKind.CHECKBOX_DONE: checkbox,
    NodeKind.CHECKBOX_HALF: checkbox,
}


def resolve(kind: NodeKind, text: str, config: BulletsConfig) -> tuple[Segment, ...] | None:
    handler = MARKERS.get(kind)
    if handler is None:
        return None
    return handler(text, config) or None
