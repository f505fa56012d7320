from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .config import build_config
from .constants import NAMESPACE, ORG_CONTENT_TYPE
from .decorate import apply
from .host import DecorationHost, Document, Notifier
from .models import BulletsConfig
from .query import ParserCache, query_range

logger = logging.getLogger(__name__)


class DecorationProvider:
    """Redraw callbacks the host invokes while it paints a window."""

    def __init__(
        self,
        host: DecorationHost,
        config: BulletsConfig,
        parsers: ParserCache | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.host = host
        self.config = config
        self.parsers = parsers if parsers is not None else ParserCache(host)
        self.notifier = notifier if notifier is not None else Notifier(host)
        self.ticks: dict[Document, int] = {}

    def on_start(self, document: Document, generation: int) -> bool:
        if self.ticks.get(document) == generation:
            return False
        self.ticks[document] = generation
        return True

    def on_win(self, document: Document, top_row: int, bottom_row: int) -> bool:
        if self.host.get_content_type(document) != ORG_CONTENT_TYPE:
            return False
        self.decorate(document, top_row, bottom_row)
        return True

    def on_line(self, document: Document, row: int) -> None:
        self.decorate(document, row, row + 1)

    def decorate(self, document: Document, start_row: int, end_row: int) -> int:
        positions = query_range(self.parsers, document, start_row, end_row)
        return apply(self.host, document, positions, self.config, self.notifier)

    def forget(self, document: Document) -> None:
        self.ticks.pop(document, None)
        self.parsers.forget(document)


def setup(host: DecorationHost, conf: Mapping[str, Any] | None = None) -> DecorationProvider:
    """Save the user config and register the provider with the host."""
    config = build_config(conf)
    provider = DecorationProvider(host, config)
    host.set_decoration_provider(NAMESPACE, provider)
    logger.debug("Registered %s provider with %r", NAMESPACE, config)
    return provider
