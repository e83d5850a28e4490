"""
Cards
=====
Ephemeral view models of the grid and the feature label lookup.

Cards are recreated on every rebuild; only their position survives, through
the arrangement state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from leaderboard.model.arrangement import CardKey
from leaderboard.model.normalization import NormalizationRelation


@dataclass
class Card:
    feature: str
    project: str
    value: float

    @property
    def key(self) -> CardKey:
        return (self.feature, self.project)


@dataclass(frozen=True)
class SourceLink:
    url: str
    type: Optional[str] = None


class CardLocale:
    """Feature display names, opaque to scoring."""

    def __init__(self, names: Mapping[str, Any], language: Optional[str] = None) -> None:
        self._names = names
        self.language = language

    def feature_name(self, feature: str) -> str:
        name = self._names.get(feature)
        if isinstance(name, Mapping):
            # Per-language descriptions
            if self.language in name:
                name = name[self.language]
            else:
                name = next(iter(name.values()), None)
        return str(name) if name else feature

    def feature_title(self, feature: str, normalization: NormalizationRelation) -> str:
        """Name of a feature, followed by its divisor's name when normalized."""
        name = self.feature_name(feature)
        divisor = normalization.get(feature)
        if divisor is None:
            return name
        return f"{name} / {self.feature_name(divisor)}"


def source_link(links: Mapping[str, Mapping[str, Any]], card: Card) -> Optional[SourceLink]:
    """The source link of a card, or None when absent or blank."""
    entry = links.get(card.project, {}).get(card.feature)
    if not isinstance(entry, Mapping):
        return None
    url = entry.get("source")
    if url is None or not str(url).strip():
        return None
    return SourceLink(url=str(url), type=entry.get("type"))
