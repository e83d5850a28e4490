"""
Session State (Data Model)
==========================
This module defines the state of one leaderboard session.

Why is this file needed?
------------------------
1. State Management: It holds the loaded tables, the mutable normalization
   relation, the card arrangement and the current view scope in one place.
2. Isolation: Each session is its own object, so several leaderboards (or
   tests) can run side by side without sharing anything.
3. Decoupling: The score engine and the drag coordinator receive this object;
   neither keeps state of its own between calls.

Classes:
    SortOrder: Orderings of the displayed cards.
    SessionState: The main container class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Optional

from leaderboard.analysis.scoring import ScoreMode
from leaderboard.model.arrangement import ArrangementState
from leaderboard.model.cards import Card, CardLocale
from leaderboard.model.io import LeaderboardData
from leaderboard.model.matrix import ValueMatrix
from leaderboard.model.normalization import NormalizationRelation

logger = logging.getLogger(__name__)


class SortOrder(StrEnum):
    PROJECT = "project"
    FEATURE = "feature"
    GROUP = "group"
    SCORE = "score"
    DEFAULT = "default"


@dataclass
class SessionState:
    """
    Everything one leaderboard session knows. Pass this instance to the
    controller, which hands it to the engine and the drag coordinator.
    """
    matrix: ValueMatrix
    normalization: NormalizationRelation
    locale: CardLocale
    links: dict[str, dict[str, Any]] = field(default_factory=dict)
    groups: dict[str, list[str]] = field(default_factory=dict)

    mode: ScoreMode = ScoreMode.LEAD
    sort_order: SortOrder = SortOrder.DEFAULT

    # Mutually exclusive view scope; both None means every card
    current_project: Optional[str] = None
    current_feature: Optional[str] = None

    arrangement: ArrangementState = field(default_factory=ArrangementState)
    cards: list[Card] = field(default_factory=list)

    @classmethod
    def from_data(cls, data: LeaderboardData, language: Optional[str] = None) -> SessionState:
        return cls(
            matrix=data.matrix,
            normalization=data.normalization,
            locale=data.locale(language),
            links=data.links,
            groups=data.groups,
        )

    @property
    def projects(self) -> list[str]:
        """Projects in natural order."""
        return self.matrix.sorted_projects()

    def card(self, feature: str, project: str) -> Card:
        return Card(feature=feature, project=project, value=self.matrix.raw(project, feature))

