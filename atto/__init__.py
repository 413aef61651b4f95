"""Atto - a small terminal text editor."""

from .buffer import CursorPosition, TextBuffer
from .keybindings import Action, KeyBindings, resolve
from .session import EditorSession, Frame
from .viewport import Viewport, ViewportController

__version__ = "0.2.0"

__all__ = [
    'Action',
    'CursorPosition',
    'EditorSession',
    'Frame',
    'KeyBindings',
    'TextBuffer',
    'Viewport',
    'ViewportController',
    'resolve',
]
