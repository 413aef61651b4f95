"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Tuple, Optional, TYPE_CHECKING
from .keybindings import Action
from .keyboard import KeyType

if TYPE_CHECKING:
    from .session import EditorSession
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, session: 'EditorSession', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            session: Session the command acts on
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the buffer
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    def execute(self, session: 'EditorSession', key_event: 'KeyEvent') -> bool:
        """Movement commands don't modify the buffer."""
        self._move(session, key_event)
        return False

    @abstractmethod
    def _move(self, session: 'EditorSession', key_event: 'KeyEvent'):
        """Perform the movement."""
        pass


class LeftCharCommand(MovementCommand):
    def _move(self, session, key_event):
        session.view.move_cursor_horizontally(-1)


class RightCharCommand(MovementCommand):
    def _move(self, session, key_event):
        session.view.move_cursor_horizontally(1)


class UpLineCommand(MovementCommand):
    def _move(self, session, key_event):
        session.view.move_cursor_vertically(-1)


class DownLineCommand(MovementCommand):
    def _move(self, session, key_event):
        session.view.move_cursor_vertically(1)


class PageUpCommand(MovementCommand):
    def _move(self, session, key_event):
        session.view.page_up()


class PageDownCommand(MovementCommand):
    def _move(self, session, key_event):
        session.view.page_down()


class EditCommand(EditorCommand):
    """Base class for editing commands."""

    def execute(self, session: 'EditorSession', key_event: 'KeyEvent') -> bool:
        """Editing commands modify the buffer unless _edit reports otherwise."""
        changed = self._edit(session, key_event)
        session.view.ensure_cursor_visible()
        return changed is not False

    @abstractmethod
    def _edit(self, session: 'EditorSession', key_event: 'KeyEvent') -> Optional[bool]:
        """Perform the edit."""
        pass


class BackspaceCommand(EditCommand):
    def _edit(self, session, key_event):
        return session.backspace()


class DeleteCharCommand(EditCommand):
    def _edit(self, session, key_event):
        return session.delete_forward()


class InsertNewlineCommand(EditCommand):
    def _edit(self, session, key_event):
        return session.new_line()


class InsertTabCommand(EditCommand):
    def _edit(self, session, key_event):
        return session.insert_tab()


class InsertTextCommand(EditCommand):
    def _edit(self, session, key_event):
        # Filter out control characters
        if not key_event.is_printable:
            return False
        return session.insert_char(key_event.value)


class SystemCommand(EditorCommand):
    """Base class for system commands like save, quit, help."""

    def execute(self, session: 'EditorSession', key_event: 'KeyEvent') -> bool:
        """System commands don't modify buffer content directly."""
        self._execute_system(session, key_event)
        return False

    @abstractmethod
    def _execute_system(self, session: 'EditorSession', key_event: 'KeyEvent'):
        """Perform the system action."""
        pass


class QuitCommand(SystemCommand):
    def _execute_system(self, session, key_event):
        session.quit(save=True)


class SaveCommand(SystemCommand):
    def _execute_system(self, session, key_event):
        if session.save_file():
            session.status_message = f"Saved to {session.filename}"


class ReloadCommand(SystemCommand):
    def _execute_system(self, session, key_event):
        session.reload_file()


class ToggleHelpCommand(SystemCommand):
    def _execute_system(self, session, key_event):
        session.toggle_help()


class EnterCommandLineCommand(SystemCommand):
    def _execute_system(self, session, key_event):
        session.enter_command_line()


ACTION_COMMANDS: Mapping[Action, EditorCommand] = {
    Action.SAVE: SaveCommand(),
    Action.QUIT: QuitCommand(),
    Action.MOVE_UP: UpLineCommand(),
    Action.MOVE_DOWN: DownLineCommand(),
    Action.MOVE_LEFT: LeftCharCommand(),
    Action.MOVE_RIGHT: RightCharCommand(),
}

COMMAND_LINE_TRIGGER = (KeyType.REGULAR, ':')


class CommandRegistry:
    """Registry for mapping structural keys to commands.

    Preset-bound actions are looked up separately; this table holds the
    keys every session understands. The command-line trigger is only
    registered for sessions using the vi-like style.
    """

    def __init__(self, vim_mode: bool = False):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._setup_default_commands()
        if vim_mode:
            self.register(COMMAND_LINE_TRIGGER, EnterCommandLineCommand())

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.SPECIAL, 'left'), LeftCharCommand())
        self.register((KeyType.SPECIAL, 'right'), RightCharCommand())
        self.register((KeyType.SPECIAL, 'up'), UpLineCommand())
        self.register((KeyType.SPECIAL, 'down'), DownLineCommand())

        # Editing commands
        self.register((KeyType.SPECIAL, 'enter'), InsertNewlineCommand())
        self.register((KeyType.SPECIAL, 'backspace'), BackspaceCommand())
        self.register((KeyType.SPECIAL, 'delete'), DeleteCharCommand())
        self.register((KeyType.SPECIAL, 'tab'), InsertTabCommand())

        # Paging (PageDown/PageUp)
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())

        # System commands
        self.register((KeyType.SPECIAL, 'escape'), ToggleHelpCommand())
        self.register((KeyType.CTRL, 'r'), ReloadCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))
