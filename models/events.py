"""
Input event values delivered to the editor.

Coordinates are logical canvas units; device-pixel scaling is done by
whoever produces the events.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union


class PointerButton(Enum):
    LEFT = auto()
    MIDDLE = auto()
    RIGHT = auto()


class Key(Enum):
    """Keys the editor reacts to. Everything else maps to OTHER."""
    ENTER = auto()
    KEYPAD_ENTER = auto()
    ESCAPE = auto()
    BACKSPACE = auto()
    DELETE = auto()
    OTHER = auto()


@dataclass(frozen=True)
class PointerDown:
    button: PointerButton
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    button: PointerButton
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class KeyDown:
    key: Key
    is_repeat: bool = False


@dataclass(frozen=True)
class TextInput:
    """Printable text typed by the user (one or more characters)."""
    text: str


@dataclass(frozen=True)
class Tick:
    """Fired once per rendered frame, after that frame's pending events."""


EditorEvent = Union[PointerDown, PointerUp, PointerMove, KeyDown, TextInput, Tick]
