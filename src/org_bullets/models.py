from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from .constants import (
    DEFAULT_BULLET,
    DEFAULT_DONE,
    DEFAULT_HALF,
    DEFAULT_HEADLINES,
    NodeKind,
)


class Segment(NamedTuple):
    text: str
    style: str | None = None


@dataclass(frozen=True, slots=True)
class Span:
    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @property
    def is_valid(self) -> bool:
        return self.start_col > -1 and self.end_col > -1 and self.end_col >= self.start_col


@dataclass(frozen=True, slots=True)
class NodeOccurrence:
    kind: NodeKind
    raw_text: str
    span: Span


@dataclass(frozen=True, slots=True)
class CheckboxSymbol:
    glyph: str
    style: str

    def as_segment(self) -> Segment:
        return Segment(self.glyph, self.style)


@dataclass(frozen=True, slots=True)
class Checkboxes:
    done: CheckboxSymbol = CheckboxSymbol(*DEFAULT_DONE)
    half: CheckboxSymbol = CheckboxSymbol(*DEFAULT_HALF)


@dataclass(frozen=True, slots=True)
class Symbols:
    headlines: tuple[str, ...] = DEFAULT_HEADLINES
    checkboxes: Checkboxes = field(default_factory=Checkboxes)
    bullet: str = DEFAULT_BULLET


@dataclass(frozen=True, slots=True)
class BulletsConfig:
    symbols: Symbols = field(default_factory=Symbols)
    indent: bool = True
    show_current_line: bool = False
