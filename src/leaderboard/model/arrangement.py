"""
Arrangement State
=================
Screen positions of the cards. Semantically inert: only used to keep the
grid visually stable across drags, swaps and rebuilds.

Each card sits in a grid *slot* (its place in the layout) and carries an
*offset* from that slot, which is what a swap changes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from leaderboard import config

logger = logging.getLogger(__name__)

CardKey = tuple[str, str]
"""(feature, project) identity of a card."""


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Position) -> Position:
        return Position(self.x - other.x, self.y - other.y)


ORIGIN = Position()


class ArrangementState:
    """Slot origins and offsets of the displayed cards."""

    def __init__(self) -> None:
        self._slots: dict[CardKey, Position] = {}
        self._offsets: dict[CardKey, Position] = {}

    def layout(self, keys: Iterable[CardKey], columns: int = config.GRID_COLUMNS) -> None:
        """Assign grid slots in display order. Offsets of kept cards survive."""
        keys = list(keys)
        pitch_x = config.CARD_WIDTH + config.CARD_GUTTER
        pitch_y = config.CARD_HEIGHT + config.CARD_GUTTER
        self._slots = {
            key: Position(float((i % columns) * pitch_x), float((i // columns) * pitch_y))
            for i, key in enumerate(keys)
        }
        self._offsets = {key: self._offsets.get(key, ORIGIN) for key in keys}

    def slot(self, key: CardKey) -> Position:
        return self._slots.get(key, ORIGIN)

    def offset(self, key: CardKey) -> Position:
        return self._offsets.get(key, ORIGIN)

    def set_offset(self, key: CardKey, position: Position) -> None:
        self._offsets[key] = position

    def rename(self, old: CardKey, new: CardKey) -> None:
        """Carry the offset of a card over to a new identity."""
        if old in self._offsets:
            self._offsets[new] = self._offsets.pop(old)

    def reset_offsets(self) -> None:
        self._offsets = {key: ORIGIN for key in self._offsets}

    def clear(self) -> None:
        self._slots.clear()
        self._offsets.clear()

    def swap(self, dragged: CardKey, target: CardKey) -> None:
        """
        Exchange the screen positions of two cards.

        Each card moves to where the other one is drawn, so its new offset is
        the other's offset shifted by the distance between the two slots.
        Swapping the same pair twice restores the original offsets.
        """
        drag_slot, drop_slot = self.slot(dragged), self.slot(target)
        drag_offset, drop_offset = self.offset(dragged), self.offset(target)
        self._offsets[target] = drag_offset + (drag_slot - drop_slot)
        self._offsets[dragged] = drop_offset + (drop_slot - drag_slot)
        logger.debug(f"Swapped {dragged} and {target}.")

    def card_at(self, x: float, y: float, exclude: Optional[CardKey] = None) -> Optional[CardKey]:
        """Return the first card whose drawn rectangle contains the point."""
        for key, slot in self._slots.items():
            if key == exclude:
                continue
            drawn = slot + self.offset(key)
            left, top = drawn.x, drawn.y
            if left <= x <= left + config.CARD_WIDTH and top <= y <= top + config.CARD_HEIGHT:
                return key
        return None

    def keys(self) -> list[CardKey]:
        return list(self._slots)
