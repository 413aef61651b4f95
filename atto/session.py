"""Editing session state.

An EditorSession owns the buffer, the cursor, the viewport and the input
mode for the single open file, and is the only thing the run loop talks
to: events go in through handle_event and a Frame comes out of frame().
"""

import errno
import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from typing import Optional

from . import keybindings
from .buffer import CursorPosition, TextBuffer
from .commands import CommandRegistry
from .constants import EditorConstants
from .dispatcher import InputDispatcher
from .keyboard import KeyEvent, KeyType
from .mode import Mode
from .viewport import Viewport, ViewportController

logger = logging.getLogger(__name__)


@dataclass
class Frame:
    """Everything the renderer needs to draw one screen.

    Attributes:
        lines: Visible text rows, each prefixed with its line number
        cursor_y: Cursor screen row
        cursor_x: Cursor screen column
        status: Status bar text
        help_visible: Whether the key binding overlay is shown
        help_lines: Overlay content
    """
    lines: list[str]
    cursor_y: int
    cursor_x: int
    status: str
    help_visible: bool = False
    help_lines: list[str] = field(default_factory=list)


class EditorSession:
    """State of one editing session."""

    def __init__(self, filename: Optional[str] = None,
                 preset: Optional[str] = keybindings.DEFAULT_PRESET,
                 vim_mode: bool = False, height: int = 24, width: int = 80):
        """Create an empty session.

        Args:
            filename: File to edit; call load_file() to read it
            preset: Key binding preset name
            vim_mode: Enable the ':' command line
            height: Terminal rows
            width: Terminal columns
        """
        self.filename = filename
        self.vim_mode = vim_mode
        self.key_bindings = keybindings.resolve(preset)
        self.buffer = TextBuffer()
        self.cursor = CursorPosition()
        self.viewport = Viewport()
        self.view = ViewportController(self.buffer, self.cursor, self.viewport)
        self.dispatcher = InputDispatcher(self.key_bindings, CommandRegistry(vim_mode=vim_mode))
        self.mode = Mode.NORMAL
        self.command_input = ""
        self.help_visible = False
        self.status_message: Optional[str] = None
        self.last_error: Optional[str] = None
        self.modified = False
        self.running = True
        self.save_on_exit = False
        self.resize(height, width)

    def resize(self, height: int, width: int) -> None:
        """Update the viewport from the terminal's size."""
        self.view.resize(height - EditorConstants.STATUS_ROWS,
                         width - EditorConstants.GUTTER_WIDTH)

    # --- Files ---

    def _replace_buffer(self, buffer: TextBuffer) -> None:
        self.buffer = buffer
        self.view.buffer = buffer
        self.cursor.row = 0
        self.cursor.col = 0
        self.viewport.scroll = 0
        self.viewport.h_scroll = 0

    def load_file(self) -> None:
        """Read the session's file into the buffer.

        A missing file gives an empty buffer. Other IO errors propagate.
        """
        if not self.filename:
            return
        try:
            with open(self.filename, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            logger.info(f"{self.filename} does not exist, starting empty")
            content = ""
        self._replace_buffer(TextBuffer.from_text(content))
        self.modified = False

    def reload_file(self) -> bool:
        """Discard the buffer and read the file again, reporting failures."""
        try:
            self.load_file()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not reload {self.filename}: {e}")
            self.status_message = f"Error: Cannot read {self.filename}"
            return False
        self.status_message = f"Reloaded {self.filename}" if self.filename else None
        return True

    def save_file(self, filename: Optional[str] = None) -> bool:
        """Save the buffer atomically.

        Args:
            filename: Path to save to; defaults to the session's file

        Returns:
            True if save succeeded, False otherwise (status_message and
            last_error describe the failure)
        """
        filename = filename or self.filename
        if not filename:
            return self._save_failed("No file name")

        temp_filename = None
        try:
            # Temp file in the same directory so the rename stays on one filesystem
            dir_name = os.path.dirname(filename) or '.'
            suffix = os.path.splitext(filename)[1]
            with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8',
                                             dir=dir_name, suffix=suffix,
                                             delete=False) as temp_file:
                temp_filename = temp_file.name
                temp_file.write(self.buffer.to_text())
                temp_file.flush()
                os.fsync(temp_file.fileno())
            # Keep the permissions of the file being replaced
            if os.path.exists(filename):
                os.chmod(temp_filename, stat.S_IMODE(os.stat(filename).st_mode))
            os.replace(temp_filename, filename)
        except PermissionError as e:
            self._remove_temp(temp_filename)
            logger.warning(f"Could not save {filename}: {e}")
            return self._save_failed(f"Error: Permission denied saving {filename}")
        except OSError as e:
            self._remove_temp(temp_filename)
            logger.warning(f"Could not save {filename}: {e}")
            if e.errno == errno.ENOSPC:
                return self._save_failed("Error: No space left on device")
            return self._save_failed(f"Error: Cannot save to {filename}")

        self.filename = filename
        self.modified = False
        self.last_error = None
        logger.info(f"Saved {len(self.buffer)} lines to {filename}")
        return True

    def _save_failed(self, message: str) -> bool:
        self.last_error = message
        self.status_message = message
        return False

    @staticmethod
    def _remove_temp(temp_filename: Optional[str]) -> None:
        if temp_filename and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError as e:
                logger.warning(f"Could not remove {temp_filename}: {e}")

    def quit(self, save: bool = False) -> None:
        """Stop the session; with save=True the run loop writes the file on exit."""
        self.save_on_exit = save
        self.running = False

    # --- Edits at the cursor ---

    def insert_char(self, ch: str) -> bool:
        if not self.buffer.insert_char(self.cursor.row, self.cursor.col, ch):
            return False
        self.cursor.col += 1
        return True

    def insert_tab(self) -> bool:
        spaces = " " * EditorConstants.TAB_WIDTH
        if not self.buffer.insert_text(self.cursor.row, self.cursor.col, spaces):
            return False
        self.cursor.col += len(spaces)
        return True

    def new_line(self) -> bool:
        if not self.buffer.split_line(self.cursor.row, self.cursor.col):
            return False
        self.cursor.row += 1
        self.cursor.col = 0
        return True

    def backspace(self) -> bool:
        """Delete the character before the cursor, or join with the previous line."""
        if self.cursor.col > 0:
            if not self.buffer.delete_char(self.cursor.row, self.cursor.col - 1):
                return False
            self.cursor.col -= 1
            return True
        join_col = self.buffer.join_with_previous(self.cursor.row)
        if join_col is None:
            return False
        self.cursor.row -= 1
        self.cursor.col = join_col
        return True

    def delete_forward(self) -> bool:
        """Delete the character under the cursor, or join the next line onto this one."""
        if self.buffer.delete_char(self.cursor.row, self.cursor.col):
            return True
        return self.buffer.join_with_previous(self.cursor.row + 1) is not None

    # --- Modes and overlays ---

    def enter_command_line(self) -> None:
        self.mode = Mode.COMMAND_LINE
        self.command_input = ""

    def cancel_command_line(self) -> None:
        self.mode = Mode.NORMAL
        self.command_input = ""

    def toggle_help(self) -> None:
        self.help_visible = not self.help_visible

    # --- Events ---

    def handle_event(self, event: KeyEvent) -> None:
        """Process one input event."""
        # Messages last until the next key press
        if event.key_type != KeyType.MOUSE:
            self.status_message = None
        self.dispatcher.handle(self, event)

    # --- Render contract ---

    def status_line(self) -> str:
        name = self.filename or "[No Name]"
        marker = " [+]" if self.modified else ""
        status = f" {name}{marker} | Ln {self.cursor.row + 1}, Col {self.cursor.col + 1}"
        if self.mode == Mode.COMMAND_LINE:
            return f"{status} :{self.command_input}"
        if self.status_message:
            return f"{status} | {self.status_message}"
        return status

    def help_lines(self) -> list[str]:
        hints = self.key_bindings.hints()
        hints.append(("Ctrl-R", "Reload"))
        hints.append(("Esc", "Toggle this help"))
        if self.vim_mode:
            hints.append((":", "Command line (q, w, wq)"))
        return [f"{label:<8} {description}" for label, description in hints]

    def frame(self) -> Frame:
        width = EditorConstants.LINE_NUMBER_WIDTH
        lines = [f"{number:>{width}} {text}" for number, text in self.view.visible_rows()]
        status = self.status_line()
        if self.mode == Mode.COMMAND_LINE:
            # Cursor sits at the end of the typed command
            cursor_y, cursor_x = self.viewport.height, len(status)
        else:
            y, x = self.view.cursor_screen_position()
            cursor_y, cursor_x = y, x + EditorConstants.GUTTER_WIDTH
        return Frame(
            lines=lines,
            cursor_y=cursor_y,
            cursor_x=cursor_x,
            status=status,
            help_visible=self.help_visible,
            help_lines=self.help_lines(),
        )
