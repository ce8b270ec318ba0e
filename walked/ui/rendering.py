"""Curses rendering of the panel grid."""

import curses
from dataclasses import dataclass

from ..constants import PANEL_MIN_HEIGHT, PANEL_MIN_WIDTH
from ..core.panel import PanelMode
from ..utils import cell_width, draw_box, fit_text_to_cells, safe_addstr, theme_attr


@dataclass(frozen=True)
class PanelRect:
    """Screen rectangle assigned to one panel."""

    panel: object
    y: int
    x: int
    h: int
    w: int
    focused: bool = False


def _split(total, parts):
    """Split ``total`` cells into ``parts`` near-equal spans."""
    base, extra = divmod(total, parts)
    spans = []
    start = 0
    for i in range(parts):
        size = base + (1 if i < extra else 0)
        spans.append((start, size))
        start += size
    return spans


def layout_panels(window, height, width):
    """Return a PanelRect for every panel of ``window``.

    Rows share the height evenly and panels share their row's width evenly.
    """
    rects = []
    for r, (y, h) in enumerate(_split(height, len(window.panels))):
        row = window.panels[r]
        for c, (x, w) in enumerate(_split(width, len(row))):
            rects.append(PanelRect(
                panel=row[c],
                y=y,
                x=x,
                h=h,
                w=w,
                focused=(r, c) == window.focus,
            ))
    return rects


def scroll_offset(cursor_index, body_height):
    """First visible entry index so that the cursor row stays on screen."""
    if cursor_index is None or body_height <= 0:
        return 0
    return max(0, cursor_index - body_height + 1)


def _row_attr(row, focused):
    if row.selected and focused:
        return theme_attr('cursor')
    if row.in_range:
        return theme_attr('range')
    if row.kind == 'dir':
        return theme_attr('body') | curses.A_BOLD
    return theme_attr('body')


def _draw_text_cursor(stdscr, y, x, text, offset, limit):
    """Highlight the cell at ``offset`` inside ``text`` drawn at (y, x)."""
    col = x + sum(cell_width(ch) for ch in text[:offset])
    if col >= x + limit:
        return
    ch = text[offset] if offset < len(text) else ' '
    safe_addstr(stdscr, y, col, ch, curses.A_REVERSE)


def draw_panel(stdscr, rect, config):
    """Draw one panel: border, title, listing and mode line."""
    panel = rect.panel
    if rect.w < PANEL_MIN_WIDTH or rect.h < PANEL_MIN_HEIGHT:
        return

    border_attr = theme_attr('border_focus' if rect.focused else 'border')
    draw_box(stdscr, rect.y, rect.x, rect.h, rect.w, border_attr)

    inner_x = rect.x + 1
    inner_w = rect.w - 2
    title = panel.title(config)
    if title:
        title_attr = theme_attr('error') if panel.errors else theme_attr('title')
        if rect.focused:
            title_attr |= curses.A_BOLD
        safe_addstr(stdscr, rect.y, inner_x + 1, fit_text_to_cells(f' {title} ', inner_w - 2).rstrip(), title_attr)

    rows = panel.rows(config)
    body_y = rect.y + 1
    body_h = rect.h - 2
    header_w = max((len(row.header) for row in rows), default=0)
    name_x = inner_x + (header_w + 1 if header_w else 0)
    name_w = max(0, inner_x + inner_w - name_x)

    top = scroll_offset(panel.cursor_index, body_h)
    for k, row in enumerate(rows[top:top + body_h]):
        y = body_y + k
        attr = _row_attr(row, rect.focused)
        if header_w:
            safe_addstr(stdscr, y, inner_x, row.header.rjust(header_w) + ' ', theme_attr('header'))
        safe_addstr(stdscr, y, name_x, fit_text_to_cells(row.name, name_w), attr)
        if row.selected and rect.focused and panel.mode != PanelMode.PROMPT:
            _draw_text_cursor(stdscr, y, name_x, row.name, panel.cursor_offset, name_w)

    status = f' {panel.status(config)} '
    status_y = rect.y + rect.h - 1
    safe_addstr(stdscr, status_y, inner_x + 1, status, theme_attr('status') | curses.A_BOLD)
    if panel.mode == PanelMode.PROMPT:
        prompt_x = inner_x + 1 + len(status)
        prompt_w = max(0, inner_x + inner_w - prompt_x - 1)
        safe_addstr(stdscr, status_y, prompt_x, fit_text_to_cells(panel.edit_buffer, prompt_w), theme_attr('body'))
        if rect.focused:
            _draw_text_cursor(stdscr, status_y, prompt_x, panel.edit_buffer, panel.cursor_offset, prompt_w)


def draw_window(stdscr, window):
    """Draw every panel of ``window`` onto ``stdscr``."""
    height, width = stdscr.getmaxyx()
    for rect in layout_panels(window, height, width):
        draw_panel(stdscr, rect, window.config)
