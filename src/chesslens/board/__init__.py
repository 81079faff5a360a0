"""Board interaction: input events and the mode-gated controller."""

from chesslens.board.controller import HighlightState, InteractionController, PositionInfo
from chesslens.board.events import (
    OFFBOARD,
    SPARE,
    DragStart,
    Drop,
    HoverEnter,
    HoverLeave,
    InputEvent,
    Tap,
)

__all__ = [
    "OFFBOARD",
    "SPARE",
    "DragStart",
    "Drop",
    "HighlightState",
    "HoverEnter",
    "HoverLeave",
    "InputEvent",
    "InteractionController",
    "PositionInfo",
    "Tap",
]
