import ctypes.util

import pytest
from tree_sitter import Language

from org_bullets.buffer import Buffer, BufferHost
from org_bullets.query import ParserCache, QueryError, query_range
from org_bullets.treesitter import TreeSitterParser, load_language, org_parser_factory

tree_sitter_python = pytest.importorskip("tree_sitter_python")

SOURCE = "a = 1\nb = a\nc = b\n"


@pytest.fixture
def language():
    return Language(tree_sitter_python.language())


def _handle(language, doc: Buffer) -> TreeSitterParser:
    return TreeSitterParser(language, doc.source)


def _captures(handle: TreeSitterParser, query: str, start: int, end: int):
    out = []
    handle.for_each_tree(lambda tree: out.extend(handle.iter_captures(query, tree, start, end)))
    return out


def test_captures_are_limited_to_rows(language):
    handle = _handle(language, Buffer.from_text(SOURCE))

    captures = _captures(handle, "(identifier) @name", 1, 2)

    rows = {node.start_point[0] for _, node, _ in captures}
    assert 0 not in rows
    assert [node.text for _, node, _ in captures if node.start_point[0] == 1] == [b"b", b"a"]
    assert {name for name, _, _ in captures} == {"name"}


def test_eq_predicate_filters_by_text(language):
    handle = _handle(language, Buffer.from_text(SOURCE))

    captures = _captures(handle, '((identifier) @_x (#eq? @_x "a")) @hit', 0, 3)

    hits = [node for name, node, _ in captures if name == "hit"]
    assert [node.start_point[0] for node in hits] == [0, 1]
    assert all(node.text == b"a" for node in hits)


def test_tree_is_reused_until_source_changes(language):
    doc = Buffer.from_text(SOURCE)
    handle = _handle(language, doc)

    tree = handle.parse()
    assert handle.parse() is tree

    doc.set_line(0, "alpha = 1")
    changed = handle.parse()
    assert changed is not tree
    assert changed.root_node.child(0).text.startswith(b"alpha")


def test_incremental_edit(language):
    doc = Buffer.from_text(SOURCE)
    handle = _handle(language, doc)
    handle.parse()

    doc.set_line(0, "ab = 1")
    handle.edit(1, 1, 2, (0, 1), (0, 1), (0, 2))

    captures = _captures(handle, "(identifier) @name", 0, 1)
    assert [node.text for _, node, _ in captures if node.start_point[0] == 0] == [b"ab"]


def test_bad_query_raises_query_error(language):
    handle = _handle(language, Buffer.from_text(SOURCE))

    with pytest.raises(QueryError):
        handle.query("(no_such_node) @x")


def test_org_query_on_wrong_grammar_yields_nothing(language):
    host = BufferHost(lambda doc: _handle(language, doc))
    doc = Buffer.from_text(SOURCE)

    assert query_range(ParserCache(host), doc, 0, 3) == []


def test_load_language_missing_library(tmp_path):
    with pytest.raises(QueryError):
        load_language(tmp_path / "org.so")


def test_load_language_missing_symbol():
    libc = ctypes.util.find_library("c")
    if libc is None:
        pytest.skip("no C library to load")

    with pytest.raises(QueryError, match="tree_sitter_org"):
        load_language(libc, "org")


def test_org_parser_factory_builds_handles(language):
    host = BufferHost(org_parser_factory(language))
    doc = Buffer.from_text(SOURCE)

    handle = host.get_parser(doc)

    assert isinstance(handle, TreeSitterParser)
    assert handle.language is language
    assert [node.text for _, node, _ in _captures(handle, "(identifier) @name", 2, 3)][:1] == [b"c"]


def test_org_parser_factory_missing_grammar(tmp_path):
    with pytest.raises(QueryError):
        org_parser_factory(tmp_path / "org.so")
