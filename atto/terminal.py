"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
from typing import Optional, TYPE_CHECKING

import blessed
from curtsies.events import PasteEvent

from .constants import EditorConstants

if TYPE_CHECKING:
    from .session import Frame

logger = logging.getLogger(__name__)


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False
        self._pending_keys: list[str] = []

    def setup(self):
        """Enter fullscreen mode, enable wheel reporting and prepare input."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.clear, end='')
        print(EditorConstants.ENABLE_MOUSE, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                # Enter raw mode immediately so reads work
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
                self._curtsies_active = True
            except Exception as e:
                # No tty (pipes, CI): run without key input
                logger.warning(f"Could not start curtsies input: {e}")
                self._curtsies_input = None
                self._curtsies_active = False

    def cleanup(self):
        """Disable wheel reporting, exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(EditorConstants.DISABLE_MOUSE, end='')
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception as e:
                logger.warning(f"Could not leave raw mode: {e}")
            finally:
                self._curtsies_input = None
                self._curtsies_active = False

    def draw_frame(self, frame: 'Frame'):
        """Draw buffer rows, the status bar and (optionally) the help overlay."""
        width = self.term.width
        print(self.term.home + self.term.clear, end='')

        for y, line in enumerate(frame.lines):
            print(self.term.move(y, 0) + line[:width], end='')

        # Status bar on the last row
        print(self.term.move(self.term.height - 1, 0), end='')
        print(self.term.reverse + frame.status[:width].ljust(width) + self.term.normal, end='')

        if frame.help_visible:
            self._draw_help_overlay(frame.help_lines)

        cursor_x = min(frame.cursor_x, max(0, width - 1))
        print(self.term.move(frame.cursor_y, cursor_x) + self.term.normal_cursor, end='', flush=True)

    def _draw_help_overlay(self, help_lines: list[str]):
        """Draw a bordered box listing key bindings in the lower half."""
        width = self.term.width
        top = self.term.height // 2
        bottom = self.term.height - 2  # Keep the status bar visible
        if bottom - top < 2 or width < 4:
            return
        inner = width - 2
        title = " Keybindings "
        print(self.term.move(top, 0) + "┌" + title.center(inner, "─")[:inner] + "┐", end='')
        for i, y in enumerate(range(top + 1, bottom)):
            text = help_lines[i] if i < len(help_lines) else ""
            body = (" " + text)[:inner].ljust(inner)
            print(self.term.move(y, 0) + "│" + self.term.yellow(body) + "│", end='')
        print(self.term.move(bottom, 0) + "└" + "─" * inner + "┘", end='')

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Keys curtsies has already read come back first, so a caller can
        drain everything from one read with timeout=0.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name, or None when nothing is available
        """
        if self._pending_keys:
            return self._pending_keys.pop(0)
        if self._curtsies_input is None:
            # Curtsies is required; if not initialized, return None
            return None
        evt = self._curtsies_input.send(timeout)  # type: ignore
        if evt is None:
            return None
        if isinstance(evt, PasteEvent):
            # Large reads (pastes, mouse reports) arrive bundled
            self._pending_keys.extend(evt.events)
            return self._pending_keys.pop(0) if self._pending_keys else None
        return str(evt)

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (including the status line)."""
        return self.term.height
