"""An in-memory host: buffers, a cursor and a list of drawn overlays."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .constants import ORG_CONTENT_TYPE
from .host import ParserHandle
from .models import Segment

logger = logging.getLogger(__name__)


@dataclass(eq=False, slots=True)
class Buffer:
    lines: list[str] = field(default_factory=list)
    content_type: str = ORG_CONTENT_TYPE
    generation: int = 0
    cursor: tuple[int, int] = (0, 0)

    @classmethod
    def from_text(cls, text: str, **kwargs: Any) -> Buffer:
        return cls(lines=text.split("\n"), **kwargs)

    @property
    def numrows(self) -> int:
        return len(self.lines)

    def source(self) -> bytes:
        return "\n".join(self.lines).encode("utf-8")

    def set_line(self, row: int, text: str) -> None:
        if row == self.numrows:
            self.lines.append(text)
        else:
            self.lines[row] = text
        self.generation += 1


@dataclass(frozen=True, slots=True)
class Overlay:
    namespace: str
    row: int
    start_col: int
    end_col: int
    segments: tuple[Segment, ...]
    position: str
    blend: str


class BufferHost:
    """Host side of the decoration protocol for ``Buffer`` documents.

    Overlays are ephemeral: a window redraw replaces every overlay of the
    buffer, a line redraw replaces the overlays of that row and only reaches
    providers whose last window pass accepted the buffer. Scheduled
    callbacks run only when ``run_pending`` is called, after the redraw.
    """

    def __init__(self, parser_factory: Callable[[Buffer], ParserHandle]) -> None:
        self.parser_factory = parser_factory
        self.providers: dict[str, Any] = {}
        self.overlays: dict[Buffer, list[Overlay]] = {}
        self.notifications: list[tuple[str, str, str]] = []
        self._pending: list[Callable[[], None]] = []
        # Last on_win result per (namespace, document); on_line only runs in
        # windows the provider accepted.
        self._windows: dict[tuple[str, Buffer], bool] = {}

    # Decoration host interface.

    def create_overlay(
        self,
        document: Buffer,
        namespace: str,
        row: int,
        start_col: int,
        end_col: int,
        segments: Sequence[Segment],
        *,
        position: str,
        blend: str,
        ephemeral: bool,
    ) -> Overlay:
        if not 0 <= row < document.numrows:
            raise ValueError(f"Invalid 'line': out of range ({row})")
        if not 0 <= start_col <= end_col <= len(document.lines[row]):
            raise ValueError(f"Invalid 'end_col': out of range ({start_col}-{end_col})")
        overlay = Overlay(namespace, row, start_col, end_col, tuple(segments), position, blend)
        self.overlays.setdefault(document, []).append(overlay)
        return overlay

    def get_cursor_position(self, document: Buffer) -> tuple[int, int]:
        return document.cursor

    def get_content_type(self, document: Buffer) -> str:
        return document.content_type

    def get_parser(self, document: Buffer) -> ParserHandle:
        return self.parser_factory(document)

    def schedule(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def notify(self, message: str, level: str, title: str) -> None:
        logger.log(logging.ERROR if level == "error" else logging.INFO, "[%s] %s", title, message)
        self.notifications.append((message, level, title))

    def set_decoration_provider(self, namespace: str, provider: Any) -> None:
        self.providers[namespace] = provider

    # Redraw driving.

    def run_pending(self) -> int:
        pending, self._pending = self._pending, []
        for callback in pending:
            callback()
        return len(pending)

    def redraw(self, document: Buffer, top: int = 0, bottom: int | None = None) -> list[Overlay]:
        if bottom is None:
            bottom = document.numrows
        for namespace, provider in self.providers.items():
            if not provider.on_start(document, document.generation):
                continue
            self.overlays[document] = []
            self._windows[(namespace, document)] = provider.on_win(document, top, bottom) is not False
        return self.overlays_for(document)

    def redraw_line(self, document: Buffer, row: int) -> list[Overlay]:
        drawn = self.overlays.get(document, [])
        self.overlays[document] = [overlay for overlay in drawn if overlay.row != row]
        for namespace, provider in self.providers.items():
            if not self._windows.get((namespace, document), False):
                continue
            provider.on_line(document, row)
        return self.overlays_for(document, row)

    def overlays_for(self, document: Buffer, row: int | None = None) -> list[Overlay]:
        drawn = self.overlays.get(document, [])
        if row is None:
            return list(drawn)
        return [overlay for overlay in drawn if overlay.row == row]
