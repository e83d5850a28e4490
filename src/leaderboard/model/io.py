"""
Input Manager (JSON)
Reads the leaderboard tables from a data directory.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from leaderboard import config
from leaderboard.model.cards import CardLocale
from leaderboard.model.matrix import ValueMatrix
from leaderboard.model.normalization import NormalizationRelation

logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """The leaderboard data could not be loaded."""


@dataclass
class LeaderboardData:
    matrix: ValueMatrix
    normalization: NormalizationRelation
    names: dict[str, Any] = field(default_factory=dict)
    links: dict[str, dict[str, Any]] = field(default_factory=dict)
    groups: dict[str, list[str]] = field(default_factory=dict)

    def locale(self, language: Optional[str] = None) -> CardLocale:
        return CardLocale(self.names, language)


class DataLoader:
    @staticmethod
    def load(path: str = config.DATA_PATH) -> LeaderboardData:
        logger.info(f"Loading leaderboard data from: {path}")
        if not os.path.isdir(path):
            msg = f"Data directory '{path}' does not exist."
            logger.error(msg)
            raise DataLoadError(msg)

        try:
            features = DataLoader._read(path, config.FEATURES_FILE)
            normalize = DataLoader._read(path, config.NORMALIZE_FILE)
            localization = DataLoader._read(path, config.LOCALIZATION_FILE, required=False)
            links = DataLoader._read(path, config.LINKS_FILE, required=False)
            groups = DataLoader._read(path, config.GROUPS_FILE, required=False)
        except (OSError, ValueError) as e:
            logger.exception(f"Failed to load leaderboard data: {e}")
            raise DataLoadError(str(e)) from e

        if not isinstance(features, dict) or not isinstance(normalize, dict):
            msg = "Feature and normalization tables must be JSON objects."
            logger.error(msg)
            raise DataLoadError(msg)

        data = LeaderboardData(
            matrix=ValueMatrix(features),
            normalization=NormalizationRelation(normalize),
            names=DataLoader._names(localization),
            links=links if isinstance(links, dict) else {},
            groups=DataLoader._groups(groups),
        )
        logger.info(f"Loaded {len(data.matrix)} projects with {len(data.matrix.features)} features.")
        return data

    @staticmethod
    def _read(path: str, filename: str, required: bool = True) -> Any:
        filepath = os.path.join(path, filename)
        if not os.path.exists(filepath):
            if required:
                raise FileNotFoundError(f"Missing data file '{filepath}'.")
            logger.info(f"Optional data file '{filename}' not found, skipping.")
            return {}
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)

    @staticmethod
    def _names(localization: Any) -> dict[str, Any]:
        if not isinstance(localization, dict):
            return {}
        descriptions = localization.get("descriptions")
        if isinstance(descriptions, dict):
            return descriptions
        return localization

    @staticmethod
    def _groups(groups: Any) -> dict[str, list[str]]:
        if not isinstance(groups, dict):
            return {}
        result: dict[str, list[str]] = {}
        for feature, group in groups.items():
            if isinstance(group, str):
                result[feature] = [group]
            elif isinstance(group, list):
                result[feature] = [str(g) for g in group]
        return result
