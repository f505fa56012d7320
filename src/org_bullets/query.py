from __future__ import annotations

import logging
from typing import Any

from .constants import CAPTURE_KINDS, QUERY_SOURCE
from .host import DecorationHost, Document, ParserHandle, SyntaxNode
from .models import NodeOccurrence, Span

logger = logging.getLogger(__name__)


class QueryError(RuntimeError):
    """The parser could not run the structural query."""


class ParserCache:
    """Parser handles per document, created on first use."""

    def __init__(self, host: DecorationHost) -> None:
        self.host = host
        self._parsers: dict[Document, ParserHandle] = {}

    def get(self, document: Document) -> ParserHandle:
        parser = self._parsers.get(document)
        if parser is None:
            parser = self.host.get_parser(document)
            self._parsers[document] = parser
        return parser

    def forget(self, document: Document) -> None:
        self._parsers.pop(document, None)

    def __contains__(self, document: object) -> bool:
        return document in self._parsers

    def __len__(self) -> int:
        return len(self._parsers)


def node_text(node: SyntaxNode) -> str:
    text = node.text
    if text is None:
        return ""
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    return str(text)


def to_occurrence(capture: str, node: SyntaxNode) -> NodeOccurrence | None:
    kind = CAPTURE_KINDS.get(capture)
    if kind is None:
        return None
    row1, col1 = node.start_point
    row2, col2 = node.end_point
    return NodeOccurrence(
        kind=kind,
        raw_text=node_text(node),
        span=Span(start_row=row1, start_col=col1, end_row=row2, end_col=col2),
    )


def tree_positions(
    parser: ParserHandle, tree: Any, start_row: int, end_row: int
) -> list[NodeOccurrence]:
    positions: list[NodeOccurrence] = []
    for capture, node, _metadata in parser.iter_captures(QUERY_SOURCE, tree, start_row, end_row):
        # "_done" and "_half" only exist to carry the #eq? predicate.
        if capture.startswith("_"):
            continue
        occurrence = to_occurrence(capture, node)
        if occurrence is None:
            continue
        if not start_row <= occurrence.span.start_row < end_row:
            continue
        positions.append(occurrence)
    return positions


def query_range(
    parsers: ParserCache, document: Document, start_row: int, end_row: int
) -> list[NodeOccurrence]:
    """Return the decoratable nodes whose start row is in [start_row, end_row)."""
    if end_row <= start_row:
        return []
    positions: list[NodeOccurrence] = []

    def collect(tree: Any) -> None:
        positions.extend(tree_positions(parser, tree, start_row, end_row))

    try:
        parser = parsers.get(document)
        parser.for_each_tree(collect)
    except Exception as exc:  # noqa: BLE001
        logger.debug("No parse for %r rows %d-%d: %s", document, start_row, end_row, exc)
        return []
    return positions
