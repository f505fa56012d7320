"""Interfaces the decoration engine expects from its host editor.

Everything here is structural: the engine only calls these methods, it never
imports a concrete editor. ``buffer.BufferHost`` is an in-memory
implementation used by the preview renderer and the tests.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import Any, Protocol

from .constants import NOTIFY_TITLE
from .models import Segment


Document = Hashable
Point = tuple[int, int]


class SyntaxNode(Protocol):
    @property
    def start_point(self) -> Point: ...

    @property
    def end_point(self) -> Point: ...

    @property
    def text(self) -> bytes | None: ...


class ParserHandle(Protocol):
    def for_each_tree(self, callback: Callable[[Any], None]) -> None: ...

    def iter_captures(
        self, query_source: str, tree: Any, start_row: int, end_row: int
    ) -> Iterable[tuple[str, SyntaxNode, dict[str, Any]]]: ...


class DecorationHost(Protocol):
    def create_overlay(
        self,
        document: Document,
        namespace: str,
        row: int,
        start_col: int,
        end_col: int,
        segments: Sequence[Segment],
        *,
        position: str,
        blend: str,
        ephemeral: bool,
    ) -> Any: ...

    def get_cursor_position(self, document: Document) -> Point: ...

    def get_content_type(self, document: Document) -> str: ...

    def get_parser(self, document: Document) -> ParserHandle: ...

    def schedule(self, callback: Callable[[], None]) -> None: ...

    def notify(self, message: str, level: str, title: str) -> None: ...

    def set_decoration_provider(self, namespace: str, provider: Any) -> None: ...


class Notifier:
    """Report errors to the user once per distinct message.

    Delivery goes through ``host.schedule`` so it never runs inside the
    redraw callback that produced the error.
    """

    def __init__(self, host: DecorationHost, title: str = NOTIFY_TITLE) -> None:
        self.host = host
        self.title = title
        self._seen: set[str] = set()

    def error(self, message: str) -> bool:
        if message in self._seen:
            return False
        self._seen.add(message)
        self.host.schedule(lambda: self.host.notify(message, "error", self.title))
        return True
