from __future__ import annotations

import ctypes
import logging
import warnings
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

from tree_sitter import Language, Node, Parser, Point, Query, QueryCursor, Tree

from .query import QueryError

logger = logging.getLogger(__name__)


def load_language(path: str | Path, name: str = "org") -> Language:
    """Load a compiled grammar (``org.so``) and wrap it in a Language.

    The shared object must export ``tree_sitter_<name>()``.
    """
    try:
        lib = ctypes.cdll.LoadLibrary(str(path))
    except OSError as exc:
        raise QueryError(f"Cannot load grammar library {path}: {exc}") from exc
    fn = getattr(lib, f"tree_sitter_{name.replace('-', '_')}", None)
    if fn is None:
        raise QueryError(f"{path} does not export tree_sitter_{name}")
    fn.restype = ctypes.c_void_p
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DeprecationWarning)
        return Language(fn())


class TreeSitterParser:
    """Parser handle for one document backed by tree-sitter.

    ``read_source`` returns the current document bytes. The tree is reparsed
    lazily when the source differs from the last parse; after ``edit`` the old
    tree is reused so tree-sitter only reparses the changed region.
    """

    def __init__(self, language: Language, read_source: Callable[[], bytes]) -> None:
        self.language = language
        self.parser = Parser(language)
        self.tree: Tree | None = None
        self._read_source = read_source
        self._source: bytes | None = None
        self._edited = False
        self._queries: dict[str, Query] = {}

    def edit(
        self,
        start_byte: int,
        old_end_byte: int,
        new_end_byte: int,
        start_point: Point | tuple[int, int],
        old_end_point: Point | tuple[int, int],
        new_end_point: Point | tuple[int, int],
    ) -> None:
        if self.tree is None:
            return
        self.tree.edit(
            start_byte=start_byte,
            old_end_byte=old_end_byte,
            new_end_byte=new_end_byte,
            start_point=start_point,
            old_end_point=old_end_point,
            new_end_point=new_end_point,
        )
        self._edited = True

    def parse(self) -> Tree:
        source = self._read_source()
        if self.tree is not None and not self._edited and source == self._source:
            return self.tree
        if self.tree is not None and self._edited:
            self.tree = self.parser.parse(source, self.tree)
        else:
            self.tree = self.parser.parse(source)
        self._source = source
        self._edited = False
        return self.tree

    def for_each_tree(self, callback: Callable[[Tree], None]) -> None:
        callback(self.parse())

    def query(self, source: str) -> Query:
        query = self._queries.get(source)
        if query is None:
            try:
                query = Query(self.language, source)
            except Exception as exc:  # noqa: BLE001
                raise QueryError(f"Invalid query: {exc}") from exc
            self._queries[source] = query
        return query

    def iter_captures(
        self, query_source: str, tree: Tree, start_row: int, end_row: int
    ) -> Iterator[tuple[str, Node, dict[str, Any]]]:
        cursor = QueryCursor(self.query(query_source))
        cursor.set_point_range((start_row, 0), (end_row, 0))
        captures: list[tuple[str, Node, dict[str, Any]]] = []
        for pattern, match in cursor.matches(tree.root_node):
            for name, nodes in match.items():
                for node in nodes:
                    captures.append((name, node, {"pattern": pattern}))
        captures.sort(key=lambda capture: (tuple(capture[1].start_point), capture[2]["pattern"]))
        yield from captures


def org_parser_factory(language: Language | str | Path) -> Callable[[Any], TreeSitterParser]:
    """Parser factory for ``BufferHost``; a path is loaded with ``load_language``."""
    if not isinstance(language, Language):
        language = load_language(language)
    return lambda document: TreeSitterParser(language, document.source)
