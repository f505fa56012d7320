from fakes import FakeOrgParser, RejectingHost, make_host

from org_bullets.buffer import Buffer
from org_bullets.config import build_config
from org_bullets.constants import NodeKind
from org_bullets.decorate import apply, set_mark
from org_bullets.host import Notifier
from org_bullets.models import NodeOccurrence, Segment, Span


def occ(kind, text, row, start, end) -> NodeOccurrence:
    return NodeOccurrence(kind, text, Span(row, start, row, end))


def test_headline_overlay_parameters():
    host = make_host()
    doc = Buffer.from_text("*** \nbody", cursor=(1, 0))

    apply(host, doc, [occ(NodeKind.HEADLINE_MARKER, "***", 0, 0, 3)], build_config())

    [overlay] = host.overlays_for(doc)
    assert (overlay.row, overlay.start_col, overlay.end_col) == (0, 0, 3)
    assert overlay.segments == (Segment("  ✸", "HeadlineLevel3"),)
    assert overlay.position == "overlay"
    assert overlay.blend == "combine"
    assert overlay.namespace == "org-bullets"


def test_cursor_line_is_left_raw_by_default():
    host = make_host()
    doc = Buffer.from_text("* a\n* b", cursor=(0, 2))
    positions = [occ(NodeKind.HEADLINE_MARKER, "*", 0, 0, 1), occ(NodeKind.HEADLINE_MARKER, "*", 1, 0, 1)]

    assert apply(host, doc, positions, build_config()) == 1
    assert [o.row for o in host.overlays_for(doc)] == [1]


def test_cursor_line_decorated_when_show_current_line():
    host = make_host()
    doc = Buffer.from_text("* a\n* b", cursor=(0, 2))
    positions = [occ(NodeKind.HEADLINE_MARKER, "*", 0, 0, 1), occ(NodeKind.HEADLINE_MARKER, "*", 1, 0, 1)]

    assert apply(host, doc, positions, build_config({"show_current_line": True})) == 2


def test_cursor_is_read_for_every_occurrence():
    host = make_host()
    doc = Buffer.from_text("* a\n* b", cursor=(5, 0))
    rows = []
    original = host.get_cursor_position

    def moving_cursor(document):
        rows.append(document.cursor[0])
        document.cursor = (1, 0)
        return original(document)

    host.get_cursor_position = moving_cursor
    positions = [occ(NodeKind.HEADLINE_MARKER, "*", 0, 0, 1), occ(NodeKind.HEADLINE_MARKER, "*", 1, 0, 1)]

    apply(host, doc, positions, build_config())

    assert rows == [5, 1]
    assert [o.row for o in host.overlays_for(doc)] == [0]


def test_invalid_spans_are_skipped_silently():
    host = make_host()
    doc = Buffer.from_text("- a", cursor=(9, 0))
    positions = [
        occ(NodeKind.LIST_BULLET, "-", 0, -1, 1),
        occ(NodeKind.LIST_BULLET, "-", 0, 0, -1),
        occ(NodeKind.LIST_BULLET, "-", 0, 1, 0),
    ]

    assert apply(host, doc, positions, build_config()) == 0
    assert host.overlays_for(doc) == []
    assert host.run_pending() == 0


def test_unchecked_box_issues_nothing():
    host = make_host()
    doc = Buffer.from_text("- [ ] a", cursor=(9, 0))

    assert apply(host, doc, [occ(NodeKind.CHECKBOX_DONE, "[ ]", 0, 2, 5)], build_config()) == 0


def test_rejected_overlay_does_not_abort_batch():
    host = RejectingHost(FakeOrgParser, reject_rows={0})
    doc = Buffer.from_text("* a\n* b\n* c", cursor=(9, 0))
    positions = [occ(NodeKind.HEADLINE_MARKER, "*", row, 0, 1) for row in range(3)]
    notifier = Notifier(host)

    assert apply(host, doc, positions, build_config(), notifier) == 2
    assert [call[0] for call in host.calls] == [0, 1, 2]
    assert [o.row for o in host.overlays_for(doc)] == [1, 2]


def test_rejection_is_notified_once_after_redraw():
    host = RejectingHost(FakeOrgParser, reject_rows={0, 1})
    doc = Buffer.from_text("* a\n* b", cursor=(9, 0))
    positions = [occ(NodeKind.HEADLINE_MARKER, "*", row, 0, 1) for row in range(2)]
    notifier = Notifier(host)

    apply(host, doc, positions, build_config(), notifier)
    apply(host, doc, positions, build_config(), notifier)

    assert host.notifications == []
    assert host.run_pending() == 1
    assert host.notifications == [("Invalid 'end_col': out of range", "error", "Org bullets")]


def test_set_mark_reports_failure_without_notifier():
    host = RejectingHost(FakeOrgParser, reject_rows={0})
    doc = Buffer.from_text("* a")

    assert set_mark(host, doc, [Segment("◉", "HeadlineLevel1")], 0, 0, 1) is False
    assert host.run_pending() == 0


def test_apply_is_deterministic():
    host = RejectingHost(FakeOrgParser)
    doc = Buffer.from_text("- [X] task", cursor=(3, 0))
    positions = [occ(NodeKind.LIST_BULLET, "-", 0, 0, 1), occ(NodeKind.CHECKBOX_DONE, "[X]", 0, 2, 5)]
    config = build_config()

    apply(host, doc, positions, config)
    first = list(host.calls)
    host.calls.clear()
    apply(host, doc, positions, config)

    assert host.calls == first
    assert len(first) == 2
