"""Input events fed to the interaction controller.

Taps and drag gestures share one stream so a single dispatcher owns the
selection model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from chesslens.core.types import PieceCode, Square

SPARE = "spare"  # drag source outside the board (unlimited piece supply)
OFFBOARD = "offboard"  # drop target outside the board


@dataclass(slots=True, frozen=True)
class Tap:
    square: Square


@dataclass(slots=True, frozen=True)
class DragStart:
    source: Square  # or SPARE
    piece: PieceCode


@dataclass(slots=True, frozen=True)
class Drop:
    source: Square  # or SPARE
    target: Square  # or OFFBOARD
    piece: PieceCode


@dataclass(slots=True, frozen=True)
class HoverEnter:
    square: Square


@dataclass(slots=True, frozen=True)
class HoverLeave:
    square: Square


InputEvent: TypeAlias = Tap | DragStart | Drop | HoverEnter | HoverLeave
