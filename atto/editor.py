"""Main editor controller: terminal lifecycle and the event loop."""

import logging
import os
import sys
import select
import signal
import termios
from typing import Optional

from .config import EditorConfig
from .constants import EditorConstants
from .keyboard import KeyboardHandler, ctrl
from .session import EditorSession
from .terminal import TerminalInterface

logger = logging.getLogger(__name__)


class Editor:
    """Runs one EditorSession in the terminal."""

    def __init__(self, filename: Optional[str] = None, config: Optional[EditorConfig] = None):
        """Initialize the editor components."""
        config = config or EditorConfig()
        self.terminal = TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.session = EditorSession(
            filename=filename,
            preset=config.key_binding_preset,
            vim_mode=config.vim_mode,
            height=self.terminal.height,
            width=self.terminal.width,
        )
        self.exit_message: Optional[str] = None
        self._ctrl_c_pressed = False
        # Create pipe for resize and interrupt signaling
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def _handle_sigint(self, signum, frame):
        """Handle SIGINT (Ctrl-C) - deliver it as a key press."""
        del signum, frame # Unused
        self._ctrl_c_pressed = True
        os.write(self._resize_pipe_w, EditorConstants.INTERRUPT_PIPE_MARKER)

    def _configure_tty(self):
        """Let flow-control, literal-next and CR keys reach the editor.

        Returns:
            The previous termios settings, or None if they could not be read
        """
        try:
            old_settings = termios.tcgetattr(sys.stdin)
        except (termios.error, AttributeError, OSError):
            return None
        new_settings = list(old_settings)
        # Ctrl-S/Ctrl-Q must not pause output; Enter must stay '\r' so Ctrl-J is bindable
        new_settings[0] &= ~(termios.IXON | termios.IXOFF | termios.ICRNL)
        if hasattr(termios, 'IEXTEN'):
            new_settings[3] &= ~termios.IEXTEN
        try:
            termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
        except (termios.error, OSError) as e:
            logger.warning(f"Could not adjust terminal settings: {e}")
        return old_settings

    def _restore_tty(self, old_settings):
        if old_settings is None:
            return
        try:
            termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
        except (termios.error, OSError) as e:
            logger.warning(f"Could not restore terminal settings: {e}")

    def run(self):
        """Run the main editor loop until the session stops."""
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        original_int_handler = signal.signal(signal.SIGINT, self._handle_sigint)
        old_settings = None
        self.terminal.setup()
        try:
            old_settings = self._configure_tty()
            need_draw = True
            while self.session.running:
                if need_draw:
                    self._draw()
                    need_draw = False

                # Wait for input on stdin or the signal pipe
                ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                if self._resize_pipe_r in ready:
                    os.read(self._resize_pipe_r, 1024)
                    if self._ctrl_c_pressed:
                        self._ctrl_c_pressed = False
                        self.session.handle_event(ctrl('c'))
                    else:
                        self.session.resize(self.terminal.height, self.terminal.width)
                    need_draw = True
                elif 0 in ready:
                    # Handle everything this read produced before waiting again
                    for key_event in self.keyboard.read_events():
                        self.session.handle_event(key_event)
                        need_draw = True
                        if not self.session.running:
                            break
        finally:
            self._restore_tty(old_settings)
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGINT, original_int_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.terminal.cleanup()
        self._finish()

    def _finish(self):
        """Write the file on exit when the quit action asked for it."""
        session = self.session
        if session.save_on_exit and session.filename:
            if not session.save_file():
                self.exit_message = session.last_error
        elif session.status_message and session.last_error == session.status_message:
            # e.g. `:wq` whose save failed
            self.exit_message = session.last_error

    def _draw(self):
        """Draw the current session state to the terminal."""
        self.terminal.draw_frame(self.session.frame())
