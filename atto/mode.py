from enum import Enum


class Mode(Enum):
    """Input modes of an editing session."""
    NORMAL = "normal"
    COMMAND_LINE = "command_line"
