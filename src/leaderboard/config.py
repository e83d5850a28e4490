"""
Configuration & Path Management
===============================
Central registry for data file locations and global constants of the
leaderboard.

Exports:
    DATA_PATH (str): Default directory holding the leaderboard JSON tables.
    *_FILE (str): File names of the individual tables inside that directory.
    GRID_*, CARD_* (int): Geometry of the card grid used for hit testing.
    WHISKER_FACTOR, SCORE_* : Scoring constants.
"""
import os
import sys
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/leaderboard/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Data tables
DATA_PATH: str = get_resource_path("data")
FEATURES_FILE: str = "project_features.json"
NORMALIZE_FILE: str = "project_features_normalize.json"
LOCALIZATION_FILE: str = "project_features_localization.json"
LINKS_FILE: str = "project_features_links.json"
GROUPS_FILE: str = "project_features_groups.json"

# Card grid (four cards per row)
GRID_COLUMNS: int = 4
CARD_WIDTH: int = 280
CARD_HEIGHT: int = 180
CARD_GUTTER: int = 24

# Scoring
WHISKER_FACTOR: float = 1.5
VALUE_DECIMALS: int = 2
SCORE_DECIMALS: int = 1
PERCENT_YELLOW_RANGE: tuple[float, float] = (40.0, 75.0)
RANK_YELLOW_RANGE: tuple[int, int] = (4, 10)
