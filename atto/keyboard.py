"""Keyboard and mouse-wheel input handling using curtsies-style tokens."""

import logging
import re
from typing import Optional
from dataclasses import dataclass
from enum import Enum

from .constants import EditorConstants

logger = logging.getLogger(__name__)


class KeyType(Enum):
    """Types of input events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"
    MOUSE = "mouse"  # Mouse wheel; value is 'scroll_up' or 'scroll_down'


@dataclass(frozen=True)
class KeyEvent:
    """Represents a parsed input event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace', 'scroll_up')
    raw: str = ""  # The raw key string from the input source

    @property
    def trigger(self) -> tuple[KeyType, str]:
        """The (key type, value) pair used for binding lookups."""
        return (self.key_type, self.value)

    @property
    def is_printable(self) -> bool:
        return (self.key_type == KeyType.REGULAR and len(self.value) == 1
                and ord(self.value) >= 32 and self.value != '\x7f')


# SGR extended mouse report: ESC [ < button ; column ; row (M|m)
_SGR_MOUSE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])$")
# curtsies knows no mouse reports: it passes the introducer through and
# then every digit, separator and final letter as a key of its own
_SGR_MOUSE_PREFIX = "\x1b[<"
_SGR_MOUSE_MAX_LENGTH = 32

_SPECIALS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
    'delete', 'page_up', 'page_down', 'insert', 'tab',
}


def ctrl(letter: str) -> KeyEvent:
    """Build the event a terminal delivers for Ctrl-<letter>."""
    return KeyEvent(key_type=KeyType.CTRL, value=letter,
                    raw=chr(ord(letter) - ord('a') + 1))


def special(name: str) -> KeyEvent:
    """Build the event for a named special key such as 'up' or 'enter'."""
    return KeyEvent(key_type=KeyType.SPECIAL, value=name, raw=f"<{name.upper()}>")


def char(ch: str) -> KeyEvent:
    """Build the event for a plain typed character."""
    return KeyEvent(key_type=KeyType.REGULAR, value=ch, raw=ch)


def wheel(direction: str) -> KeyEvent:
    """Build a mouse-wheel event; direction is 'up' or 'down'."""
    return KeyEvent(key_type=KeyType.MOUSE, value=f"scroll_{direction}", raw="")


class KeyboardHandler:
    """Handles keyboard input using curtsies-style key names."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface
        # Mouse report collected so far, or None outside of one
        self._mouse_report: Optional[str] = None

    def read_events(self) -> list[KeyEvent]:
        """Parse every key the terminal already has, without blocking.

        One read from stdin can hold several keys (typing ahead, pastes,
        mouse reports), so keep asking until the terminal has nothing left.
        """
        events = []
        while True:
            key = self.terminal.get_key(timeout=0)
            if not key:
                return events
            event = self.parse_key(key)
            if event is not None:
                events.append(event)

    def parse_key(self, key) -> Optional[KeyEvent]:
        """Parse a key token into a KeyEvent.

        Args:
            key: curtsies key name or raw key string

        Returns:
            Parsed KeyEvent, or None while a mouse report is incomplete and
            for mouse reports other than the wheel
        """
        key_str = str(key)

        if self._mouse_report is not None:
            return self._continue_mouse_report(key_str)
        if key_str == _SGR_MOUSE_PREFIX:
            self._mouse_report = key_str
            return None
        if _SGR_MOUSE.match(key_str):
            return self._parse_mouse(key_str)

        # Fast-path: curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Esc+u>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            name = key_str[1:-1]
            lower = name.lower()
            # Support both '-' and '+' as modifier separators (e.g., '<Esc+u>')
            lower = lower.replace('+', '-')
            parts = lower.split('-') if '-' in lower else [lower]
            mods = set()
            base = parts[-1]
            if len(parts) > 1:
                mods = set(parts[:-1])
            # Normalize meta/esc prefixes to alt
            if 'meta' in mods or 'esc' in mods:
                mods.add('alt')
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'

            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
            if 'ctrl' in mods and len(base) == 1:
                # Ctrl-M is carriage return; Ctrl-J stays a bindable key
                if base == 'm':
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str)
            if 'alt' in mods:
                if base in _SPECIALS or len(base) == 1:
                    return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str)
            if base in _SPECIALS:
                return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str)
            if base in ('esc', 'escape'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
            # Fallback: treat unknown token as special
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str)

        if len(key_str) == 1:
            o = ord(key_str)
            if key_str == '\r':
                return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
            if key_str == '\t':
                return KeyEvent(key_type=KeyType.SPECIAL, value='tab', raw=key_str)
            if o == 127:
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
                ch = chr(ord('a') + o - 1)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str)

        # Bare ESC
        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')

        # Regular character
        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)

    def _continue_mouse_report(self, key_str: str) -> Optional[KeyEvent]:
        report = self._mouse_report + key_str
        if key_str in ('M', 'm'):
            self._mouse_report = None
            return self._parse_mouse(report)
        if (key_str.isdigit() or key_str == ';') and len(report) < _SGR_MOUSE_MAX_LENGTH:
            self._mouse_report = report
            return None
        # Not a mouse report after all; the key stands on its own
        logger.debug(f"Dropping incomplete mouse report {self._mouse_report!r}")
        self._mouse_report = None
        return self.parse_key(key_str)

    def _parse_mouse(self, report: str) -> Optional[KeyEvent]:
        m = _SGR_MOUSE.match(report)
        if not m:
            logger.debug(f"Ignoring malformed mouse report {report!r}")
            return None
        button = int(m.group(1))
        if button == EditorConstants.MOUSE_WHEEL_UP:
            return KeyEvent(key_type=KeyType.MOUSE, value='scroll_up', raw=report)
        if button == EditorConstants.MOUSE_WHEEL_DOWN:
            return KeyEvent(key_type=KeyType.MOUSE, value='scroll_down', raw=report)
        # Clicks and drags are reported but not used
        return None
