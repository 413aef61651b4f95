"""Cursor-to-screen mapping: vertical and horizontal scrolling."""

from dataclasses import dataclass

from .buffer import CursorPosition, TextBuffer
from .constants import EditorConstants


@dataclass
class Viewport:
    """Visible window onto the buffer.

    Attributes:
        scroll: First buffer row shown
        h_scroll: First column shown
        height: Number of text rows on screen
        width: Number of text columns on screen (gutter excluded)
    """
    scroll: int = 0
    h_scroll: int = 0
    height: int = 23
    width: int = 75


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


class ViewportController:
    """Keeps the cursor inside the viewport.

    After any cursor-moving method returns, the cursor row lies in
    [scroll, scroll + height) and its column in [h_scroll, h_scroll + width).
    The only exception is scroll_by, which may scroll away from a cursor
    that cannot follow.
    """

    def __init__(self, buffer: TextBuffer, cursor: CursorPosition, viewport: Viewport):
        self.buffer = buffer
        self.cursor = cursor
        self.viewport = viewport

    # --- Dimensions ---

    def resize(self, height: int, width: int) -> None:
        """Set new text-area dimensions and bring the cursor back into view."""
        self.viewport.height = max(1, height)
        self.viewport.width = max(1, width)
        self.ensure_cursor_visible()

    # --- Cursor movement ---

    def move_cursor_vertically(self, delta: int) -> None:
        self.cursor.row = _clamp(self.cursor.row + delta, 0, len(self.buffer) - 1)
        self._clamp_col()
        self.ensure_cursor_visible()

    def move_cursor_horizontally(self, delta: int) -> None:
        self._clamp_row()
        line_length = self.buffer.line_length(self.cursor.row)
        self.cursor.col = _clamp(self.cursor.col + delta, 0, line_length)
        self._scroll_horizontally_to_cursor()

    def page_up(self) -> None:
        vp = self.viewport
        if vp.scroll > 0:
            vp.scroll -= min(vp.scroll, vp.height)
            self.cursor.row = vp.scroll
        else:
            self.cursor.row = 0
        self._clamp_col()
        self.ensure_cursor_visible()

    def page_down(self) -> None:
        vp = self.viewport
        total = len(self.buffer)
        margin = EditorConstants.PAGE_DOWN_MARGIN
        if vp.scroll + vp.height < total:
            vp.scroll += min(vp.height, total - vp.scroll - vp.height)
            row = vp.scroll + vp.height - margin
        else:
            row = total - margin
        # Stay inside the buffer and inside the window just scrolled to
        row = _clamp(row, vp.scroll, vp.scroll + vp.height - 1)
        self.cursor.row = _clamp(row, 0, total - 1)
        self._clamp_col()
        self.ensure_cursor_visible()

    def scroll_by(self, delta: int) -> None:
        """Scroll one step for a mouse-wheel event.

        The cursor follows by the same amount only when the moved row is
        still in the buffer and on screen; otherwise it stays put.
        """
        vp = self.viewport
        step = 1 if delta > 0 else -1 if delta < 0 else 0
        max_scroll = max(0, len(self.buffer) - vp.height)
        new_scroll = _clamp(vp.scroll + step, 0, max_scroll)
        shift = new_scroll - vp.scroll
        if shift == 0:
            return
        vp.scroll = new_scroll
        new_row = self.cursor.row + shift
        if 0 <= new_row < len(self.buffer) and new_scroll <= new_row < new_scroll + vp.height:
            self.cursor.row = new_row
            self._clamp_col()
            self._scroll_horizontally_to_cursor()

    def ensure_cursor_visible(self) -> None:
        """Adjust both scroll offsets so the cursor is on screen."""
        self._clamp_row()
        self._clamp_col()
        vp = self.viewport
        if self.cursor.row < vp.scroll:
            vp.scroll = self.cursor.row
        elif self.cursor.row >= vp.scroll + vp.height:
            vp.scroll = self.cursor.row - vp.height + 1
        self._scroll_horizontally_to_cursor()

    # --- Render contract ---

    def visible_rows(self) -> list[tuple[int, str]]:
        """Return (1-based line number, visible text) for each row on screen."""
        vp = self.viewport
        end = min(len(self.buffer), vp.scroll + vp.height)
        rows = []
        for row in range(vp.scroll, end):
            text = self.buffer.line(row)[vp.h_scroll:vp.h_scroll + vp.width]
            rows.append((row + 1, text.replace('\t', ' ')))
        return rows

    def cursor_screen_position(self) -> tuple[int, int]:
        """Cursor (y, x) relative to the top-left of the text area."""
        return (self.cursor.row - self.viewport.scroll,
                self.cursor.col - self.viewport.h_scroll)

    # --- Internals ---

    def _clamp_row(self) -> None:
        self.cursor.row = _clamp(self.cursor.row, 0, len(self.buffer) - 1)

    def _clamp_col(self) -> None:
        self.cursor.col = _clamp(self.cursor.col, 0, self.buffer.line_length(self.cursor.row))

    def _scroll_horizontally_to_cursor(self) -> None:
        # Coarse jumps to the right, never past the cursor column
        vp = self.viewport
        col = self.cursor.col
        width = max(1, vp.width)
        while col >= vp.h_scroll + width:
            vp.h_scroll = min(vp.h_scroll + EditorConstants.HORIZONTAL_SCROLL_STRIDE, col)
        while col < vp.h_scroll:
            vp.h_scroll = max(col, vp.h_scroll - EditorConstants.HORIZONTAL_SCROLL_BACK_STRIDE, 0)
