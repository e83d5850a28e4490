"""
Normalization Relation
======================
Mutable mapping from a feature to the feature whose raw value divides it.

Normalisation is applied one level deep only, so no cycle detection is done:
a divisor is always used with its raw value.
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


class NormalizationRelation:
    def __init__(self, baseline: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._divisors: dict[str, Optional[str]] = {}
        for feature, divisor in (baseline or {}).items():
            if divisor == feature:
                logger.warning(f"Ignoring baseline normalization of '{feature}' by itself.")
                divisor = None
            self._divisors[feature] = divisor or None

    def get(self, feature: str) -> Optional[str]:
        """Return the divisor of `feature`, or None when it is not normalized."""
        return self._divisors.get(feature)

    def set(self, feature: str, divisor: str) -> None:
        if feature == divisor:
            raise ValueError(f"Feature '{feature}' cannot be normalized by itself.")
        self._divisors[feature] = divisor

    def clear(self, feature: str) -> None:
        self._divisors[feature] = None

    def snapshot(self) -> dict[str, Optional[str]]:
        return dict(self._divisors)

    def __repr__(self) -> str:
        active = {k: v for k, v in self._divisors.items() if v is not None}
        return f"NormalizationRelation({active})"
