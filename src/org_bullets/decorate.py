from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .constants import HL_MODE, NAMESPACE, VIRT_TEXT_POS
from .host import DecorationHost, Document, Notifier
from .models import BulletsConfig, NodeOccurrence, Segment
from .rules import resolve

logger = logging.getLogger(__name__)


def set_mark(
    host: DecorationHost,
    document: Document,
    segments: Sequence[Segment],
    row: int,
    start_col: int,
    end_col: int,
    notifier: Notifier | None = None,
) -> bool:
    """Ask the host for one overlay; a rejected request never raises."""
    try:
        host.create_overlay(
            document,
            NAMESPACE,
            row,
            start_col,
            end_col,
            tuple(segments),
            position=VIRT_TEXT_POS,
            blend=HL_MODE,
            ephemeral=True,
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Overlay rejected at %r %d:%d-%d", document, row, start_col, end_col)
        if notifier is not None:
            notifier.error(str(exc) or type(exc).__name__)
        return False
    return True


def is_cursor_line(host: DecorationHost, document: Document, row: int) -> bool:
    cursor_row, _ = host.get_cursor_position(document)
    return cursor_row == row


def apply(
    host: DecorationHost,
    document: Document,
    positions: Iterable[NodeOccurrence],
    config: BulletsConfig,
    notifier: Notifier | None = None,
) -> int:
    marked = 0
    for position in positions:
        span = position.span
        # Keep raw markup visible on the line being edited.
        if not config.show_current_line and is_cursor_line(host, document, span.start_row):
            continue
        if not span.is_valid:
            continue
        segments = resolve(position.kind, position.raw_text, config)
        if not segments:
            continue
        if set_mark(host, document, segments, span.start_row, span.start_col, span.end_col, notifier):
            marked += 1
    return marked
