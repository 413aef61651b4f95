"""Key binding presets.

A preset name picks one of a handful of fixed tables mapping the six
bindable actions to Ctrl-modified keys. Resolution never fails: unknown
names get the default table.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from .keyboard import KeyEvent, KeyType

Trigger = tuple[KeyType, str]

DEFAULT_PRESET = "atto"


class Action(Enum):
    """Logical actions that a preset can bind."""
    SAVE = "save"
    QUIT = "quit"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"


_DESCRIPTIONS = {
    Action.SAVE: "Save",
    Action.QUIT: "Quit",
    Action.MOVE_UP: "Up",
    Action.MOVE_DOWN: "Down",
    Action.MOVE_LEFT: "Left",
    Action.MOVE_RIGHT: "Right",
}


def _ctrl(letter: str) -> Trigger:
    return (KeyType.CTRL, letter)


@dataclass(frozen=True)
class KeyBindings:
    """Immutable action-to-trigger table for one session."""
    save: Trigger
    quit: Trigger
    move_up: Trigger
    move_down: Trigger
    move_left: Trigger
    move_right: Trigger

    def __post_init__(self) -> None:
        # Reverse lookup; field order decides which action wins a shared trigger
        lookup: dict[Trigger, Action] = {}
        for f in fields(self):
            lookup.setdefault(getattr(self, f.name), Action(f.name))
        object.__setattr__(self, "_lookup", MappingProxyType(lookup))

    @property
    def by_trigger(self) -> Mapping[Trigger, Action]:
        return self._lookup  # type: ignore[attr-defined]

    def trigger_for(self, action: Action) -> Trigger:
        return getattr(self, action.value)

    def action_for(self, event: KeyEvent) -> Optional[Action]:
        """Return the bound action for an event, if any."""
        return self.by_trigger.get(event.trigger)

    def hints(self) -> list[tuple[str, str]]:
        """Return (key label, description) pairs for the help overlay."""
        return [(format_trigger(self.trigger_for(action)), _DESCRIPTIONS[action])
                for action in Action]


def format_trigger(trigger: Trigger) -> str:
    """Format a trigger the way it is shown to the user, e.g. 'Ctrl-W'."""
    key_type, value = trigger
    label = value.upper() if len(value) == 1 else value.replace('_', ' ').title()
    if key_type == KeyType.CTRL:
        return f"Ctrl-{label}"
    if key_type == KeyType.ALT:
        return f"Alt-{label}"
    return label


def _preset(save: str, quit: str, up: str = 'k', down: str = 'j',
            left: str = 'h', right: str = 'l') -> KeyBindings:
    return KeyBindings(
        save=_ctrl(save),
        quit=_ctrl(quit),
        move_up=_ctrl(up),
        move_down=_ctrl(down),
        move_left=_ctrl(left),
        move_right=_ctrl(right),
    )


PRESETS: Mapping[str, KeyBindings] = MappingProxyType({
    "atto": _preset(save='w', quit='q'),
    "nano": _preset(save='o', quit='x'),
    "micro": _preset(save='s', quit='q'),
    "emacs": _preset(save='x', quit='c', up='p', down='n', left='b', right='f'),
})

FALLBACK_BINDINGS = _preset(save='t', quit='w')


def resolve(preset: Optional[str]) -> KeyBindings:
    """Resolve a preset name to its key bindings.

    Names are matched case-insensitively after trimming. Unknown names and
    None map to the fallback table instead of failing.
    """
    if not isinstance(preset, str):
        return FALLBACK_BINDINGS
    return PRESETS.get(preset.strip().lower(), FALLBACK_BINDINGS)
