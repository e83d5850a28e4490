import pytest
from PySide6.QtCore import QCoreApplication

from leaderboard.app.state import LeaderboardStore
from leaderboard.model.cards import CardLocale
from leaderboard.model.matrix import ValueMatrix
from leaderboard.model.normalization import NormalizationRelation
from leaderboard.model.state import SessionState


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """Signals need a core application; no display is involved."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def small_data():
    return {"A": {"x": 10, "y": 5}, "B": {"x": 20, "y": 4}}


@pytest.fixture
def board_data():
    return {
        "p2": {"tests": 120, "lines": 4000, "commits": 310, "issues": 12},
        "p10": {"tests": 340, "lines": 9100, "commits": 720, "issues": 41},
        "p1": {"tests": 75, "lines": 2500, "commits": 150, "issues": 0},
        "p3": {"tests": 410, "lines": 15000, "commits": 980, "issues": 66},
    }


def make_session(data, normalize=None, names=None, groups=None, links=None) -> SessionState:
    return SessionState(
        matrix=ValueMatrix(data),
        normalization=NormalizationRelation(normalize or {}),
        locale=CardLocale(names or {}),
        links=links or {},
        groups=groups or {},
    )


@pytest.fixture
def store(board_data):
    session = make_session(
        board_data,
        normalize={"tests": None, "lines": None, "commits": None, "issues": None},
        names={"tests": "Tests", "lines": "Lines", "commits": "Commits", "issues": "Issues"},
        groups={"tests": ["tests"], "lines": ["lines", "commits"],
                "commits": ["lines", "commits"], "issues": ["issues"]},
    )
    store = LeaderboardStore(session)
    store.start()
    return store
