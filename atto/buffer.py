from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class CursorPosition:
    row: int = 0
    col: int = 0


class TextBuffer:
    """Ordered list of lines being edited.

    The buffer is never empty; an empty document is a single empty line.
    Operations that would index out of bounds do nothing and return a
    falsy value instead of raising, so callers clamp first.
    """

    def __init__(self, lines: Optional[list[str]] = None):
        self._lines: list[str] = list(lines) if lines else [""]

    @classmethod
    def from_text(cls, text: str) -> "TextBuffer":
        """Build a buffer from file contents, one entry per line.

        Lines end at '\\n' with an optional preceding '\\r'; a final
        terminator does not start an extra empty line.
        """
        lines = text.split('\n')
        if text.endswith('\n'):
            lines.pop()
        return cls([line[:-1] if line.endswith('\r') else line for line in lines])

    def to_text(self) -> str:
        """Serialize with exactly one terminator after every line."""
        return ''.join(line + '\n' for line in self._lines)

    @property
    def lines(self) -> list[str]:
        """A copy of the current lines."""
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def line(self, row: int) -> str:
        return self._lines[row]

    def line_length(self, row: int) -> int:
        return len(self._lines[row])

    def is_valid_row(self, row: int) -> bool:
        return 0 <= row < len(self._lines)

    def insert_char(self, row: int, col: int, ch: str) -> bool:
        """Insert a single character at (row, col).

        Returns:
            True if inserted, False if the position is out of bounds
        """
        if len(ch) != 1:
            return False
        return self.insert_text(row, col, ch)

    def insert_text(self, row: int, col: int, text: str) -> bool:
        """Insert a run of characters (no line breaks) at (row, col)."""
        if '\n' in text or '\r' in text:
            return False
        if not self.is_valid_row(row) or not 0 <= col <= len(self._lines[row]):
            return False
        line = self._lines[row]
        self._lines[row] = line[:col] + text + line[col:]
        return True

    def delete_char(self, row: int, col: int) -> bool:
        """Remove the character at (row, col); col must be inside the line."""
        if not self.is_valid_row(row) or not 0 <= col < len(self._lines[row]):
            return False
        line = self._lines[row]
        self._lines[row] = line[:col] + line[col + 1:]
        return True

    def split_line(self, row: int, col: int) -> bool:
        """Split a line at col; the tail becomes a new line at row + 1."""
        if not self.is_valid_row(row):
            return False
        line = self._lines[row]
        col = max(0, min(col, len(line)))
        self._lines[row] = line[:col]
        self._lines.insert(row + 1, line[col:])
        return True

    def join_with_previous(self, row: int) -> Optional[int]:
        """Append line `row` to line `row - 1` and remove it.

        Returns:
            The column of the join point in the merged line, or None if
            row is 0 or out of range
        """
        if row <= 0 or not self.is_valid_row(row):
            return None
        join_col = len(self._lines[row - 1])
        self._lines[row - 1] += self._lines[row]
        del self._lines[row]
        return join_col
