"""
Value Matrix
============
Immutable table of raw per-project, per-feature values.

The values are held in a dense ``projects x features`` numpy array so the
score engine can normalise and reduce whole columns at once. Project order is
the order of the input mapping (used for tie breaking); ``sorted_projects``
gives the natural display order.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, TYPE_CHECKING

import numpy as np
from natsort import natsorted

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class ValueMatrix:
    """Raw values keyed by project and feature."""

    def __init__(self, data: Mapping[str, Mapping[str, Optional[float]]]) -> None:
        rows: dict[str, Mapping[str, Any]] = {}
        for project, row in data.items():
            if not isinstance(row, Mapping):
                logger.warning(f"Project '{project}' has no feature table; treating it as empty.")
                row = {}
            rows[project] = row

        self._projects: list[str] = list(rows.keys())
        self._project_features: dict[str, tuple[str, ...]] = {
            project: tuple(row.keys()) for project, row in rows.items()
        }

        # Features are the union of all sub-tables in first-seen order
        features: list[str] = []
        seen: set[str] = set()
        for keys in self._project_features.values():
            for feature in keys:
                if feature not in seen:
                    seen.add(feature)
                    features.append(feature)
        self._features = features
        self._project_index = {project: i for i, project in enumerate(self._projects)}
        self._feature_index = {feature: j for j, feature in enumerate(self._features)}

        values = np.zeros((len(self._projects), len(self._features)), dtype=float)
        for i, project in enumerate(self._projects):
            row = rows[project]
            missing = seen.difference(row.keys())
            if missing:
                logger.warning(
                    f"Project '{project}' lacks features {sorted(missing)}; treating them as 0."
                )
            for feature, value in row.items():
                if value is None:
                    continue
                try:
                    values[i, self._feature_index[feature]] = float(value)
                except (TypeError, ValueError):
                    logger.warning(
                        f"Value {value!r} of '{feature}' in '{project}' is not a number; treating it as 0."
                    )

        values.setflags(write=False)
        self._values = values
        logger.debug(f"Value matrix built: {len(self._projects)} projects x {len(self._features)} features.")

    @property
    def projects(self) -> list[str]:
        """Projects in input order."""
        return list(self._projects)

    @property
    def features(self) -> list[str]:
        return list(self._features)

    @property
    def values(self) -> npt.NDArray:
        """Read-only ``projects x features`` array of raw values."""
        return self._values

    def sorted_projects(self) -> list[str]:
        return natsorted(self._projects)

    def has_project(self, project: str) -> bool:
        return project in self._project_index

    def has_feature(self, feature: str) -> bool:
        return feature in self._feature_index

    def project_index(self, project: str) -> int:
        return self._project_index[project]

    def feature_index(self, feature: str) -> int:
        return self._feature_index[feature]

    def project_features(self, project: str) -> list[str]:
        """Features of one project in the order of its sub-table."""
        return list(self._project_features[project])

    def raw(self, project: str, feature: str) -> float:
        return float(self._values[self._project_index[project], self._feature_index[feature]])

    def column(self, feature: str) -> npt.NDArray:
        return self._values[:, self._feature_index[feature]]

    def __len__(self) -> int:
        return len(self._projects)

    def __repr__(self) -> str:
        return f"ValueMatrix(projects={len(self._projects)}, features={len(self._features)})"
