from __future__ import annotations

from collections.abc import Iterable

from .buffer import Buffer, BufferHost, Overlay
from .constants import HL_CHECKBOX_CHECKED, HL_CHECKBOX_HALF, HL_HEADLINE

ANSI_RESET_FG = "\x1b[39m"

STYLE_COLORS = {
    HL_HEADLINE + "1": 34,
    HL_HEADLINE + "2": 33,
    HL_HEADLINE + "3": 36,
    HL_HEADLINE + "4": 35,
    HL_CHECKBOX_CHECKED: 32,
    HL_CHECKBOX_HALF: 31,
    "OrgDone": 32,
    "OrgCancelled": 31,
}


def style_to_color(style: str | None) -> int | None:
    if style is None:
        return None
    color = STYLE_COLORS.get(style)
    if color is None and style.startswith(HL_HEADLINE):
        return 37
    return color


def decorate_cells(text: str, overlays: Iterable[Overlay]) -> list[tuple[str, str | None]]:
    """Lay overlay text over the raw line, one cell per character.

    An overlay owns every cell of its span; cells its text does not reach are
    blanked.
    """
    cells: list[tuple[str, str | None]] = [(ch, None) for ch in text]
    for overlay in sorted(overlays, key=lambda o: o.start_col):
        for col in range(overlay.start_col, min(overlay.end_col, len(cells))):
            cells[col] = (" ", None)
        col = overlay.start_col
        for segment in overlay.segments:
            for ch in segment.text:
                if col < len(cells):
                    cells[col] = (ch, segment.style)
                else:
                    cells.append((ch, segment.style))
                col += 1
    return cells


def render_line(text: str, overlays: Iterable[Overlay], color: bool = True) -> str:
    cells = decorate_cells(text, overlays)
    if not color:
        return "".join(ch for ch, _ in cells)

    ab: list[str] = []
    current_color: int | None = None
    for ch, style in cells:
        c = style_to_color(style)
        if c is None:
            if current_color is not None:
                ab.append(ANSI_RESET_FG)
                current_color = None
        elif c != current_color:
            ab.append(f"\x1b[{c}m")
            current_color = c
        ab.append(ch)
    if current_color is not None:
        ab.append(ANSI_RESET_FG)
    return "".join(ab)


def render_window(
    host: BufferHost,
    document: Buffer,
    top: int = 0,
    bottom: int | None = None,
    color: bool = True,
) -> str:
    if bottom is None:
        bottom = document.numrows
    bottom = min(bottom, document.numrows)
    host.redraw(document, top, bottom)
    out: list[str] = []
    for row in range(top, bottom):
        out.append(render_line(document.lines[row], host.overlays_for(document, row), color))
    return "\n".join(out)
