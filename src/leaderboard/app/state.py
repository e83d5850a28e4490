from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Union

from natsort import natsort_keygen
from PySide6.QtCore import QObject, Signal

from leaderboard.analysis.distribution import Distribution
from leaderboard.analysis.scoring import (
    Score, ScoreClass, ScoreEngine, ScoreMode, compute_scores, score_class, score_text,
)
from leaderboard.app.drag import DragCoordinator, DragState, DropDecision
from leaderboard.model.arrangement import CardKey, Position
from leaderboard.model.cards import Card, SourceLink, source_link
from leaderboard.model.state import SessionState, SortOrder

logger = logging.getLogger(__name__)


class Rebuild(StrEnum):
    """How the next card set derives from the current one."""
    NEW = "new"
    PROJECT = "project"
    FEATURE = "feature"
    ALL = "all"
    SAME = "same"


@dataclass(frozen=True)
class CardView:
    """Everything a renderer needs to draw one card."""
    key: CardKey
    title: str
    value: float
    score: Score
    score_text: str
    score_class: ScoreClass
    lead_value: float
    lead_project: Optional[str]
    mean_value: float
    distribution: Distribution
    position: Position
    source: Optional[SourceLink] = None


@dataclass(frozen=True)
class TotalScore:
    score: Score
    text: str
    score_class: ScoreClass


class LeaderboardStore(QObject):
    """Session controller with signals for renderer sync."""
    cards_changed = Signal(object)
    scores_changed = Signal(object)
    total_changed = Signal(object)
    positions_changed = Signal(object)
    selection_changed = Signal(object, object)

    def __init__(self, session: SessionState) -> None:
        super().__init__()
        self.session = session
        self.engine: ScoreEngine = compute_scores(session.matrix, session.normalization, session.mode)
        self.drag = DragCoordinator(session)
        self.drag.normalization_changed.connect(self._on_normalization_changed)
        self.drag.cards_swapped.connect(self._on_cards_swapped)
        self.drag.card_returned.connect(lambda key: self.positions_changed.emit([key]))

    # --- Scope ---

    def start(self) -> None:
        """Show the initial view: the first project in natural order."""
        self.session.current_project = None
        self.session.current_feature = None
        self._build(Rebuild.NEW)

    def select_project(self, project: str) -> bool:
        """Show all features of a project. Unknown names are tried as features."""
        if not self.session.matrix.has_project(project):
            self.select_feature(project)
            return False

        rebuild = Rebuild.PROJECT if self.session.current_project is not None else Rebuild.NEW
        self.session.current_project = project
        self.session.current_feature = None
        logger.info(f"Selected project '{project}'.")
        self._build(rebuild)
        return True

    def select_feature(self, feature: str) -> bool:
        """Show one feature across all projects."""
        if not self.session.matrix.has_feature(feature):
            logger.debug(f"Ignoring selection of unknown feature '{feature}'.")
            return False

        self.session.current_project = None
        self.session.current_feature = feature
        logger.info(f"Selected feature '{feature}'.")
        self._build(Rebuild.FEATURE)
        return True

    def select_all(self) -> None:
        """Show every feature of every project."""
        self.session.current_project = None
        self.session.current_feature = None
        logger.info("Selected all projects and features.")
        self._build(Rebuild.ALL)

    # --- Display options ---

    def set_scoring_mode(self, mode: Union[ScoreMode, str]) -> None:
        self.session.mode = ScoreMode(mode)
        self._recompute()
        views = self.card_views()
        self.scores_changed.emit(views)
        self.total_changed.emit(self.total_score())

    def set_sort_order(self, order: Union[SortOrder, str]) -> None:
        order = SortOrder(order)
        session = self.session
        session.sort_order = order
        session.arrangement.reset_offsets()
        session.cards = sorted(session.cards, key=self._sort_key(order))
        session.arrangement.layout(card.key for card in session.cards)
        logger.debug(f"Cards sorted by {order}.")
        self.cards_changed.emit(self.card_views())

    def _sort_key(self, order: SortOrder):
        session = self.session
        if order is SortOrder.PROJECT:
            natural = natsort_keygen()
            return lambda card: natural(card.project)
        if order is SortOrder.FEATURE:
            return lambda card: session.locale.feature_name(card.feature)
        if order is SortOrder.GROUP:
            def group_key(card: Card) -> tuple:
                group = session.groups.get(card.feature, [])
                return (len(group), tuple(group))
            return group_key
        if order is SortOrder.SCORE:
            return lambda card: self.engine.feature_score(card.feature, card.project)

        projects = {project: i for i, project in enumerate(session.projects)}

        def default_key(card: Card) -> tuple[int, int]:
            features = session.matrix.project_features(card.project)
            index = features.index(card.feature) if card.feature in features else len(features)
            return (projects[card.project], index)
        return default_key

    # --- Gestures ---

    def on_drop(self, dragged: CardKey, target: Optional[CardKey]) -> DropDecision:
        return self.drag.on_drop(dragged, target)

    def _on_normalization_changed(self, feature: str, divisor: Optional[str]) -> None:
        self._build(Rebuild.SAME)

    def _on_cards_swapped(self, dragged: CardKey, target: CardKey) -> None:
        self.positions_changed.emit([dragged, target])

    # --- Derived values ---

    def card_view(self, card: Card) -> CardView:
        session, engine = self.session, self.engine
        score = engine.feature_score(card.feature, card.project)
        feature_title = session.locale.feature_title(card.feature, session.normalization)
        if session.current_project is not None:
            title = feature_title
        elif session.current_feature is not None:
            title = card.project
        else:
            title = f"{card.project}: {feature_title}"
        arrangement = session.arrangement
        return CardView(
            key=card.key,
            title=title,
            value=engine.feature_value(card.feature, card.project),
            score=score,
            score_text=score_text(score, session.mode),
            score_class=score_class(score, session.mode),
            lead_value=engine.lead_value(card.feature),
            lead_project=engine.lead_project(card.feature),
            mean_value=engine.mean_value(card.feature),
            distribution=engine.distribution(card.feature),
            position=arrangement.slot(card.key) + arrangement.offset(card.key),
            source=source_link(session.links, card),
        )

    def card_views(self) -> list[CardView]:
        return [self.card_view(card) for card in self.session.cards]

    def total_score(self) -> TotalScore:
        mode = self.session.mode
        score = self.engine.total_score(self.session.cards)
        return TotalScore(score, score_text(score, mode), score_class(score, mode))

    def display_name(self) -> str:
        session = self.session
        if session.current_project is not None:
            return session.current_project
        if not session.cards:
            return ""
        return session.locale.feature_title(session.cards[0].feature, session.normalization)

    # --- Rebuilding ---

    def _recompute(self) -> None:
        session = self.session
        self.engine = compute_scores(session.matrix, session.normalization, session.mode)

    def _items(self, rebuild: Rebuild) -> list[CardKey]:
        session = self.session
        matrix = session.matrix
        if rebuild is Rebuild.SAME:
            return [card.key for card in session.cards]
        if rebuild is Rebuild.PROJECT:
            # Keep order and positions, substituting the newly selected project
            items = []
            for old in [card.key for card in session.cards]:
                new = (old[0], session.current_project)
                session.arrangement.rename(old, new)
                items.append(new)
            return items

        session.sort_order = SortOrder.DEFAULT
        session.arrangement.clear()
        if rebuild is Rebuild.FEATURE:
            return [(session.current_feature, project) for project in session.projects]
        if rebuild is Rebuild.ALL:
            return [(feature, project) for project in session.projects
                    for feature in matrix.project_features(project)]

        if session.current_project is None:
            if not session.projects:
                return []
            session.current_project = session.projects[0]
        return [(feature, session.current_project)
                for feature in matrix.project_features(session.current_project)]

    def _build(self, rebuild: Rebuild) -> None:
        session = self.session
        if rebuild is not Rebuild.SAME and self.drag.state is DragState.DRAGGING:
            # The dragged card may not survive the new scope
            self.drag.cancel()
        items = [(feature, project) for feature, project in self._items(rebuild)
                 if session.matrix.has_feature(feature)]
        session.cards = [session.card(feature, project) for feature, project in items]
        session.arrangement.layout(items)
        self._recompute()
        logger.debug(f"Built {len(session.cards)} cards ({rebuild}).")

        if rebuild is not Rebuild.SAME:
            self.selection_changed.emit(session.current_project, session.current_feature)
        self.cards_changed.emit(self.card_views())
        self.total_changed.emit(self.total_score())
