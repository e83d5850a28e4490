"""
Distribution Statistics
=======================
Box-plot statistics of one feature's values across projects: interpolated
quartiles, Tukey whiskers (k x IQR) and the outliers beyond them.

Whiskers and outliers are expressed as *indices* into the sorted sample.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, TYPE_CHECKING

import numpy as np

from leaderboard import config

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Distribution:
    values: npt.NDArray
    quartiles: tuple[float, float, float]
    whiskers: tuple[int, int]
    outliers: list[int] = field(default_factory=list)

    @property
    def median(self) -> float:
        return self.quartiles[1]

    @property
    def whisker_values(self) -> tuple[float, float]:
        lo, hi = self.whiskers
        if hi < lo:
            return (0.0, 0.0)
        return (float(self.values[lo]), float(self.values[hi]))

    @property
    def domain(self) -> tuple[float, float]:
        if len(self.values) == 0:
            return (0.0, 0.0)
        return (float(self.values[0]), float(self.values[-1]))


def whisker_indices(values: npt.NDArray, q1: float, q3: float, k: float = config.WHISKER_FACTOR) -> tuple[int, int]:
    """Walk inward from both ends while values lie beyond q1 - k*IQR / q3 + k*IQR."""
    iqr = (q3 - q1) * k
    i, j = 0, len(values) - 1
    while i < j and values[i] < q1 - iqr:
        i += 1
    while j > i and values[j] > q3 + iqr:
        j -= 1
    return i, j


def distribution(samples: Iterable[float], k: float = config.WHISKER_FACTOR) -> Distribution:
    """Compute quartiles, whisker bounds and outlier indices of a sample."""
    values = np.sort(np.asarray(list(samples), dtype=float))
    n = len(values)
    if n == 0:
        return Distribution(values=values, quartiles=(0.0, 0.0, 0.0), whiskers=(0, -1))

    q1, q2, q3 = (float(q) for q in np.quantile(values, [0.25, 0.5, 0.75], method="linear"))
    lo, hi = whisker_indices(values, q1, q3, k)
    outliers = list(range(0, lo)) + list(range(hi + 1, n))
    return Distribution(values=values, quartiles=(q1, q2, q3), whiskers=(lo, hi), outliers=outliers)
