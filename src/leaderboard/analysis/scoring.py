"""
Score Engine
============
Derives comparative figures from the value matrix and the normalization
relation.

For every feature the engine computes the normalized value of each project
(optionally rescaled as a percentage of a divisor feature), the lead value
and the project holding it, and the mean value. Scores relate a project's
value to the lead, to the mean, or give its rank.

The engine is a full synchronous pass over the matrix. It is rebuilt rather
than updated whenever the relation, the mode or the selection changes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable, Optional, Union, TYPE_CHECKING

import numpy as np

from leaderboard import config
from leaderboard.analysis.distribution import Distribution, distribution
from leaderboard.model.matrix import ValueMatrix
from leaderboard.model.normalization import NormalizationRelation
from leaderboard.utils import format_number, round_half_up

if TYPE_CHECKING:
    import numpy.typing as npt
    from leaderboard.model.cards import Card

logger = logging.getLogger(__name__)

Score = Union[int, float]


class ScoreMode(StrEnum):
    LEAD = "lead"
    MEAN = "mean"
    RANK = "rank"


class ScoreClass(StrEnum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


@dataclass(frozen=True)
class FeatureSummary:
    lead_value: float
    lead_project: Optional[str]
    mean_value: float


def normalized_values(matrix: ValueMatrix, normalization: NormalizationRelation) -> npt.NDArray:
    """
    Value of every (project, feature), rescaled by the feature's divisor.

    A normalized feature becomes its raw value as a percentage of the divisor's
    raw value in the same project. A zero or absent divisor gives 0.
    """
    raw = matrix.values
    values = raw.copy()
    for j, feature in enumerate(matrix.features):
        divisor = normalization.get(feature)
        if divisor is None:
            continue
        if not matrix.has_feature(divisor):
            logger.warning(f"Divisor '{divisor}' of '{feature}' is not a known feature.")
            values[:, j] = 0.0
            continue
        denominator = matrix.column(divisor)
        with np.errstate(divide="ignore", invalid="ignore"):
            ratio = np.where(denominator != 0, raw[:, j] / denominator * 100.0, 0.0)
        values[:, j] = round_half_up(ratio, config.VALUE_DECIMALS)
    return values


class ScoreEngine:
    def __init__(self, matrix: ValueMatrix, normalization: NormalizationRelation,
                 mode: ScoreMode = ScoreMode.LEAD) -> None:
        self.matrix = matrix
        self.mode = ScoreMode(mode)
        self._projects = matrix.projects
        self._values = normalized_values(matrix, normalization)
        self._summaries = self._summarize()
        logger.debug(f"Scores computed for {len(self._summaries)} features ({self.mode}).")

    def _summarize(self) -> dict[str, FeatureSummary]:
        summaries: dict[str, FeatureSummary] = {}
        n = len(self._projects)
        for j, feature in enumerate(self.matrix.features):
            if n == 0:
                summaries[feature] = FeatureSummary(0.0, None, 0.0)
                continue
            column = self._values[:, j]
            # argmax picks the first project attaining the maximum
            lead_index = int(np.argmax(column))
            summaries[feature] = FeatureSummary(
                lead_value=float(column[lead_index]),
                lead_project=self._projects[lead_index],
                mean_value=float(round_half_up(float(column.sum()) / n, config.VALUE_DECIMALS)),
            )
        return summaries

    def lead_value(self, feature: str) -> float:
        return self._summaries[feature].lead_value

    def lead_project(self, feature: str) -> Optional[str]:
        return self._summaries[feature].lead_project

    def mean_value(self, feature: str) -> float:
        return self._summaries[feature].mean_value

    def feature_value(self, feature: str, project: str) -> float:
        return float(self._values[self.matrix.project_index(project), self.matrix.feature_index(feature)])

    def feature_values(self, feature: str) -> list[float]:
        """All projects' values of a feature, ascending."""
        return sorted(float(v) for v in self._values[:, self.matrix.feature_index(feature)])

    def feature_ranks(self, feature: str) -> list[str]:
        """Projects by descending value; ties keep input order."""
        column = self._values[:, self.matrix.feature_index(feature)]
        order = np.argsort(-column, kind="stable")
        return [self._projects[i] for i in order]

    def feature_score(self, feature: str, project: str, mode: Optional[ScoreMode] = None) -> Score:
        mode = self.mode if mode is None else ScoreMode(mode)
        if mode is ScoreMode.RANK:
            return self.feature_ranks(feature).index(project) + 1

        value = self.feature_value(feature, project)
        if mode is ScoreMode.MEAN:
            reference = self.mean_value(feature)
        else:
            reference = self.lead_value(feature)
        if reference == 0:
            return 0.0
        return round_half_up(value / reference * 100.0, config.SCORE_DECIMALS)

    def total_score(self, cards: Iterable[Card], mode: Optional[ScoreMode] = None) -> Score:
        """Average score of the displayed cards; a rank average is rounded to an integer."""
        mode = self.mode if mode is None else ScoreMode(mode)
        scores = [self.feature_score(card.feature, card.project, mode) for card in cards]
        if not scores:
            return 0 if mode is ScoreMode.RANK else 0.0
        value = round_half_up(sum(scores) / len(scores), config.VALUE_DECIMALS)
        if mode is ScoreMode.RANK:
            return int(round_half_up(value, 0))
        return value

    def distribution(self, feature: str) -> Distribution:
        return distribution(self.feature_values(feature))


def compute_scores(matrix: ValueMatrix, normalization: NormalizationRelation,
                   mode: ScoreMode = ScoreMode.LEAD) -> ScoreEngine:
    return ScoreEngine(matrix, normalization, mode)


def score_class(score: Score, mode: ScoreMode) -> ScoreClass:
    """Qualitative class of a score; range bounds are inclusive."""
    if ScoreMode(mode) is ScoreMode.RANK:
        low, high = config.RANK_YELLOW_RANGE
        if score < low:
            return ScoreClass.GREEN
    else:
        low, high = config.PERCENT_YELLOW_RANGE
        if score > high:
            return ScoreClass.GREEN
    if low <= score <= high:
        return ScoreClass.YELLOW
    return ScoreClass.RED


def score_text(score: Score, mode: ScoreMode) -> str:
    if ScoreMode(mode) is ScoreMode.RANK:
        return f"#{format_number(score)}"
    return f"{format_number(score)}%"
