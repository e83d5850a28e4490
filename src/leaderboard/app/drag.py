"""
Drag and Drop Coordinator
=========================
Two-state machine (IDLE / DRAGGING) over card gestures.

Dropping a card onto another card either changes which feature normalizes
which, or swaps the two cards on screen. The decision itself is the pure
function ``resolve_drop``; the coordinator applies it to the session and
announces the outcome through Qt signals.

Signals:
    drag_feedback(object): DragFeedback while the pointer moves.
    normalization_changed(str, object): (feature, divisor or None) after a drop.
    cards_swapped(object, object): the two card keys after a positional swap.
    card_returned(object): key of a card animated back to its origin.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Optional

from PySide6.QtCore import QObject, Signal

from leaderboard.model.arrangement import CardKey, Position
from leaderboard.model.normalization import NormalizationRelation
from leaderboard.model.state import SessionState

logger = logging.getLogger(__name__)


class DragState(IntEnum):
    IDLE = 0
    DRAGGING = 1


class DropAction(StrEnum):
    RETURN = "return"
    NORMALIZE = "normalize"
    SWAP = "swap"


@dataclass(frozen=True)
class NormalizationChange:
    feature: str
    divisor: Optional[str]


@dataclass(frozen=True)
class DropDecision:
    action: DropAction
    change: Optional[NormalizationChange] = None


@dataclass(frozen=True)
class DragFeedback:
    key: CardKey
    offset: Position
    candidate: Optional[CardKey]
    over_droppable: bool


def normalize_decision(normalization: NormalizationRelation, drag_feature: str,
                       target_feature: str) -> Optional[NormalizationChange]:
    """Normalization change caused by dropping `drag_feature` onto `target_feature`, if any."""
    if drag_feature == target_feature:
        # Same feature of another project
        return None
    if normalization.get(drag_feature) == target_feature:
        # Would make the two features normalize each other
        return None
    current = normalization.get(target_feature)
    if current is None:
        return NormalizationChange(target_feature, drag_feature)
    if current == drag_feature:
        return NormalizationChange(target_feature, None)
    return None


def resolve_drop(normalization: NormalizationRelation, dragged: CardKey,
                 target: Optional[CardKey]) -> DropDecision:
    if target is None or target == dragged:
        return DropDecision(DropAction.RETURN)
    change = normalize_decision(normalization, dragged[0], target[0])
    if change is not None:
        return DropDecision(DropAction.NORMALIZE, change)
    return DropDecision(DropAction.SWAP)


@dataclass
class _Gesture:
    key: CardKey
    origin: Position
    pointer: Position
    offset: Position
    candidate: Optional[CardKey] = None


class DragCoordinator(QObject):
    drag_feedback = Signal(object)
    normalization_changed = Signal(str, object)
    cards_swapped = Signal(object, object)
    card_returned = Signal(object)

    def __init__(self, session: SessionState) -> None:
        super().__init__()
        self.session = session
        self._gesture: Optional[_Gesture] = None

    @property
    def state(self) -> DragState:
        return DragState.IDLE if self._gesture is None else DragState.DRAGGING

    @property
    def dragged(self) -> Optional[CardKey]:
        return self._gesture.key if self._gesture else None

    def start(self, key: CardKey, pointer: tuple[float, float] = (0.0, 0.0)) -> bool:
        """Begin dragging a card. Refused while another gesture is active."""
        if self._gesture is not None:
            logger.debug(f"Ignoring drag start on {key}: {self._gesture.key} is being dragged.")
            return False
        if key not in self.session.arrangement.keys():
            logger.debug(f"Ignoring drag start on unknown card {key}.")
            return False
        origin = self.session.arrangement.offset(key)
        self._gesture = _Gesture(key=key, origin=origin, pointer=Position(*pointer), offset=origin)
        return True

    def move(self, dx: float, dy: float) -> Optional[DragFeedback]:
        """Track pointer movement and re-evaluate the candidate target."""
        gesture = self._gesture
        if gesture is None:
            return None
        delta = Position(dx, dy)
        gesture.pointer = gesture.pointer + delta
        gesture.offset = gesture.offset + delta
        gesture.candidate = self.session.arrangement.card_at(
            gesture.pointer.x, gesture.pointer.y, exclude=gesture.key
        )
        over_droppable = False
        if gesture.candidate is not None:
            over_droppable = normalize_decision(
                self.session.normalization, gesture.key[0], gesture.candidate[0]
            ) is not None
        feedback = DragFeedback(gesture.key, gesture.offset, gesture.candidate, over_droppable)
        self.drag_feedback.emit(feedback)
        return feedback

    def drop(self) -> DropDecision:
        """End the gesture over the current candidate target."""
        gesture = self._gesture
        if gesture is None:
            return DropDecision(DropAction.RETURN)
        self._gesture = None

        decision = resolve_drop(self.session.normalization, gesture.key, gesture.candidate)
        arrangement = self.session.arrangement
        if decision.action is DropAction.SWAP:
            arrangement.swap(gesture.key, gesture.candidate)
            logger.info(f"Swapped cards {gesture.key} and {gesture.candidate}.")
            self.cards_swapped.emit(gesture.key, gesture.candidate)
            return decision

        # The dragged card goes back where it started in both other cases
        arrangement.set_offset(gesture.key, gesture.origin)
        if decision.action is DropAction.NORMALIZE:
            change = decision.change
            if change.divisor is None:
                self.session.normalization.clear(change.feature)
                logger.info(f"Removed normalization of '{change.feature}'.")
            else:
                self.session.normalization.set(change.feature, change.divisor)
                logger.info(f"Normalizing '{change.feature}' by '{change.divisor}'.")
            self.normalization_changed.emit(change.feature, change.divisor)
        else:
            self.card_returned.emit(gesture.key)
        return decision

    def cancel(self) -> DropDecision:
        """Abort the gesture as if dropped over no card."""
        if self._gesture is not None:
            self._gesture.candidate = None
        return self.drop()

    def on_drop(self, dragged: CardKey, target: Optional[CardKey]) -> DropDecision:
        """Complete a gesture in one call, with the target already hit-tested."""
        if self._gesture is None:
            if not self.start(dragged):
                return DropDecision(DropAction.RETURN)
        elif self._gesture.key != dragged:
            logger.debug(f"Ignoring drop of {dragged}: {self._gesture.key} is being dragged.")
            return DropDecision(DropAction.RETURN)
        if target not in self.session.arrangement.keys():
            target = None
        self._gesture.candidate = target
        return self.drop()
