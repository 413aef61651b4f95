"""Colon commands typed in command-line mode."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

from .mode import Mode

if TYPE_CHECKING:
    from .session import EditorSession

logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    CONTINUE = "continue"
    TERMINATE = "terminate"
    SAVE_FAILED = "save_failed"


@dataclass(frozen=True)
class Outcome:
    """Result of running a colon command.

    Attributes:
        kind: What the session should do next
        reason: Why a save failed, if one did (also set for a `wq` whose
            save failed, which still terminates)
        message: Informational text for the status bar
    """
    kind: OutcomeKind
    reason: Optional[str] = None
    message: Optional[str] = None

    @property
    def terminates(self) -> bool:
        return self.kind == OutcomeKind.TERMINATE

    @property
    def status_text(self) -> Optional[str]:
        return self.reason or self.message

    @classmethod
    def proceed(cls, message: Optional[str] = None) -> "Outcome":
        return cls(OutcomeKind.CONTINUE, message=message)

    @classmethod
    def terminate(cls, reason: Optional[str] = None) -> "Outcome":
        return cls(OutcomeKind.TERMINATE, reason=reason)

    @classmethod
    def save_failed(cls, reason: str) -> "Outcome":
        return cls(OutcomeKind.SAVE_FAILED, reason=reason)


class CommandLineInterpreter:
    """Runs `q`, `w` and `wq`."""

    def execute(self, command_input: str, session: 'EditorSession') -> Outcome:
        """Execute a command and leave the session in normal mode.

        `wq` terminates even when the save fails; the failure is carried in
        the outcome's reason so the caller can still report it.
        """
        command = command_input.strip()
        try:
            return self._run(command, session)
        finally:
            session.command_input = ""
            session.mode = Mode.NORMAL

    def _run(self, command: str, session: 'EditorSession') -> Outcome:
        if command == "q":
            return Outcome.terminate()
        if command == "w":
            if not session.save_file():
                return Outcome.save_failed(session.last_error or "Save failed")
            return Outcome.proceed(f"Saved to {session.filename}")
        if command == "wq":
            if not session.save_file():
                logger.warning(f"Quitting after failed save of {session.filename}")
                return Outcome.terminate(session.last_error or "Save failed")
            return Outcome.terminate()
        if not command:
            return Outcome.proceed()
        return Outcome.proceed(f"Not an editor command: {command}")
