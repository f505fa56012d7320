from __future__ import annotations

from enum import Enum

NAMESPACE = "org-bullets"
NOTIFY_TITLE = "Org bullets"
ORG_CONTENT_TYPE = "org"


class NodeKind(str, Enum):
    HEADLINE_MARKER = "headline_marker"
    LIST_BULLET = "list_bullet"
    CHECKBOX_DONE = "checkbox_done"
    CHECKBOX_HALF = "checkbox_half"


# Capture names used in QUERY_SOURCE.
CAPTURE_KINDS = {
    "stars": NodeKind.HEADLINE_MARKER,
    "bullet": NodeKind.LIST_BULLET,
    "done": NodeKind.CHECKBOX_DONE,
    "half": NodeKind.CHECKBOX_HALF,
}

# The org grammar tokenizes "[ ]" as three expressions, so an unchecked box
# cannot be matched with a single #eq? test.
QUERY_SOURCE = """
(stars) @stars
(bullet) @bullet
((expr) @_done (#eq? @_done "[X]")) @done
((expr) @_half (#eq? @_half "[-]")) @half
"""

# Style tags.
HL_HEADLINE = "HeadlineLevel"
HL_CHECKBOX_CHECKED = "CheckboxChecked"
HL_CHECKBOX_HALF = "CheckboxHalfChecked"

LIST_GROUPS = {
    "-": HL_HEADLINE + "1",
    "+": HL_HEADLINE + "2",
    "*": HL_HEADLINE + "3",
}

# Overlay options passed to the host.
VIRT_TEXT_POS = "overlay"
HL_MODE = "combine"

DEFAULT_HEADLINES = ("◉", "○", "✸", "✿")
FALLBACK_HEADLINE = "◉"
DEFAULT_BULLET = "•"
DEFAULT_DONE = ("✓", "OrgDone")
DEFAULT_HALF = ("", "OrgCancelled")
