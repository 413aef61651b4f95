"""Modal input dispatch."""

import logging
from typing import Callable, Dict, Optional, TYPE_CHECKING

from .command_line import CommandLineInterpreter
from .commands import ACTION_COMMANDS, CommandRegistry, InsertTextCommand
from .keybindings import KeyBindings
from .keyboard import KeyEvent, KeyType
from .mode import Mode

if TYPE_CHECKING:
    from .session import EditorSession

logger = logging.getLogger(__name__)

_INSERT_TEXT = InsertTextCommand()


class InputDispatcher:
    """Routes one input event to the handler for the session's mode.

    Mouse-wheel events scroll in every mode. In normal mode an event is
    tried against the preset bindings, then the structural keys, then
    treated as typed text; the first match wins.
    """

    def __init__(self, key_bindings: KeyBindings, registry: CommandRegistry,
                 interpreter: Optional[CommandLineInterpreter] = None):
        self.key_bindings = key_bindings
        self.registry = registry
        self.interpreter = interpreter or CommandLineInterpreter()
        self._handlers: Dict[Mode, Callable[['EditorSession', KeyEvent], None]] = {
            Mode.NORMAL: self._handle_normal,
            Mode.COMMAND_LINE: self._handle_command_line,
        }

    def handle(self, session: 'EditorSession', event: KeyEvent) -> None:
        if event.key_type == KeyType.MOUSE:
            self._handle_mouse(session, event)
            return
        self._handlers[session.mode](session, event)

    def _handle_mouse(self, session: 'EditorSession', event: KeyEvent) -> None:
        if event.value == 'scroll_up':
            session.view.scroll_by(-1)
        elif event.value == 'scroll_down':
            session.view.scroll_by(1)

    def _handle_normal(self, session: 'EditorSession', event: KeyEvent) -> None:
        action = self.key_bindings.action_for(event)
        if action is not None:
            command = ACTION_COMMANDS[action]
        else:
            command = self.registry.get_command(event.key_type, event.value)
        if command is None and event.is_printable:
            command = _INSERT_TEXT
        if command is None:
            logger.debug(f"Ignoring unbound key {event.raw!r}")
            return
        if command.execute(session, event):
            session.modified = True

    def _handle_command_line(self, session: 'EditorSession', event: KeyEvent) -> None:
        if event.key_type == KeyType.SPECIAL and event.value == 'escape':
            session.cancel_command_line()
        elif event.key_type == KeyType.SPECIAL and event.value == 'enter':
            outcome = self.interpreter.execute(session.command_input, session)
            session.status_message = outcome.status_text
            if outcome.terminates:
                session.quit()
        elif event.key_type == KeyType.SPECIAL and event.value == 'backspace':
            session.command_input = session.command_input[:-1]
        elif event.is_printable:
            session.command_input += event.value
