"""Test key binding presets."""

import pytest
from atto.keybindings import (
    Action,
    FALLBACK_BINDINGS,
    KeyBindings,
    PRESETS,
    format_trigger,
    resolve,
)
from atto.keyboard import KeyType, char, ctrl, special


@pytest.mark.parametrize("preset", ["atto", "nano", "micro", "emacs", "bogus-name", "", None])
def test_resolve_is_total(preset):
    """Every preset name yields a fully populated table."""
    bindings = resolve(preset)
    assert isinstance(bindings, KeyBindings)
    for action in Action:
        key_type, value = bindings.trigger_for(action)
        assert key_type == KeyType.CTRL
        assert len(value) == 1


def test_resolve_is_deterministic():
    assert resolve("nano") == resolve("nano")
    assert resolve("emacs") == resolve("emacs")
    assert resolve("bogus-name") == resolve("another-bogus-name")


def test_unknown_preset_gets_fallback_table():
    bindings = resolve("bogus-name")
    assert bindings == FALLBACK_BINDINGS
    assert bindings.save == (KeyType.CTRL, 't')
    assert bindings.quit == (KeyType.CTRL, 'w')


def test_preset_names_are_normalized():
    assert resolve("  NaNo ") == PRESETS["nano"]


def test_nano_preset():
    bindings = resolve("nano")
    assert bindings.save == (KeyType.CTRL, 'o')
    assert bindings.quit == (KeyType.CTRL, 'x')
    assert bindings.move_down == (KeyType.CTRL, 'j')


def test_emacs_preset_movement():
    bindings = resolve("emacs")
    assert bindings.action_for(ctrl('p')) == Action.MOVE_UP
    assert bindings.action_for(ctrl('n')) == Action.MOVE_DOWN
    assert bindings.action_for(ctrl('b')) == Action.MOVE_LEFT
    assert bindings.action_for(ctrl('f')) == Action.MOVE_RIGHT
    assert bindings.action_for(ctrl('x')) == Action.SAVE
    assert bindings.action_for(ctrl('c')) == Action.QUIT


def test_action_for_ignores_unbound_events():
    bindings = resolve("atto")
    assert bindings.action_for(ctrl('z')) is None
    # A plain 'w' is not Ctrl-W
    assert bindings.action_for(char('w')) is None
    assert bindings.action_for(special('up')) is None


def test_hints_cover_every_action():
    hints = resolve("atto").hints()
    assert ("Ctrl-W", "Save") in hints
    assert ("Ctrl-Q", "Quit") in hints
    assert len(hints) == len(Action)


def test_format_trigger():
    assert format_trigger((KeyType.CTRL, 'o')) == "Ctrl-O"
    assert format_trigger((KeyType.SPECIAL, 'page_up')) == "Page Up"
