import pytest

from leaderboard import config
from leaderboard.analysis.scoring import ScoreClass, ScoreMode
from leaderboard.app.drag import DragState, DropAction
from leaderboard.app.state import LeaderboardStore
from leaderboard.model.arrangement import Position
from leaderboard.model.state import SortOrder

from conftest import make_session


def keys(store):
    return [card.key for card in store.session.cards]


class TestSelection:
    def test_start_shows_first_project(self, store):
        assert store.session.current_project == "p1"
        assert keys(store) == [("tests", "p1"), ("lines", "p1"), ("commits", "p1"), ("issues", "p1")]
        assert store.display_name() == "p1"

    def test_select_feature_shows_all_projects(self, store):
        assert store.select_feature("lines")
        assert store.session.current_project is None
        assert keys(store) == [("lines", "p1"), ("lines", "p2"), ("lines", "p3"), ("lines", "p10")]
        assert [view.title for view in store.card_views()] == ["p1", "p2", "p3", "p10"]
        assert store.display_name() == "Lines"

    def test_select_project_clears_feature(self, store):
        store.select_feature("lines")
        assert store.select_project("p3")
        assert store.session.current_feature is None
        assert {card.project for card in store.session.cards} == {"p3"}

    def test_project_switch_keeps_order_and_positions(self, store):
        store.set_sort_order(SortOrder.FEATURE)
        order = [feature for feature, _ in keys(store)]
        store.on_drop(("tests", "p1"), ("lines", "p1"))  # normalizes lines by tests
        store.session.arrangement.set_offset(("commits", "p1"), Position(4, 2))

        store.select_project("p2")
        assert [feature for feature, _ in keys(store)] == order
        assert store.session.arrangement.offset(("commits", "p2")) == Position(4, 2)

    def test_unknown_project_tried_as_feature(self, store):
        assert not store.select_project("commits")
        assert store.session.current_feature == "commits"

    def test_unknown_feature_ignored(self, store):
        before = keys(store)
        assert not store.select_feature("nope")
        assert keys(store) == before

    def test_select_all(self, store):
        store.select_all()
        assert len(store.session.cards) == 16
        assert store.card_views()[0].title == "p1: Tests"

    def test_selection_signal(self, store):
        seen = []
        store.selection_changed.connect(lambda p, f: seen.append((p, f)))
        store.select_feature("tests")
        store.select_project("p10")
        assert seen == [(None, "tests"), ("p10", None)]


class TestScoring:
    def test_card_view(self, store):
        view = store.card_views()[0]
        assert view.key == ("tests", "p1")
        assert view.value == 75
        assert view.lead_value == 410
        assert view.lead_project == "p3"
        assert view.mean_value == 236.25
        assert view.score == 18.3
        assert view.score_text == "18.3%"
        assert view.score_class is ScoreClass.RED
        assert view.distribution.domain == (75, 410)

    def test_set_scoring_mode(self, store):
        totals = []
        store.total_changed.connect(lambda total: totals.append(total))
        store.set_scoring_mode("rank")
        assert store.session.mode is ScoreMode.RANK
        assert [view.score for view in store.card_views()] == [4, 4, 4, 4]
        assert totals[-1].text == "#4"
        assert totals[-1].score_class is ScoreClass.YELLOW

    def test_mode_change_keeps_normalization(self, store):
        store.on_drop(("commits", "p1"), ("issues", "p1"))
        store.set_scoring_mode(ScoreMode.MEAN)
        assert store.session.normalization.get("issues") == "commits"

    def test_invalid_mode(self, store):
        with pytest.raises(ValueError):
            store.set_scoring_mode("median")

    def test_total_score_lead(self):
        session = make_session({"A": {"x": 10, "y": 5}, "B": {"x": 20, "y": 4}})
        store = LeaderboardStore(session)
        store.start()
        total = store.total_score()
        assert total.score == 75
        assert total.text == "75%"
        assert total.score_class is ScoreClass.YELLOW


class TestDrop:
    def test_normalization_rebuilds_cards(self, store):
        rebuilt = []
        store.cards_changed.connect(lambda views: rebuilt.append(views))
        decision = store.on_drop(("commits", "p1"), ("issues", "p1"))
        assert decision.action is DropAction.NORMALIZE
        assert len(rebuilt) == 1

        issues = next(view for view in rebuilt[0] if view.key == ("issues", "p1"))
        assert issues.title == "Issues / Commits"
        assert issues.value == 0
        assert store.engine.feature_value("issues", "p3") == 6.73
        assert store.engine.lead_project("issues") == "p3"

    def test_normalization_keeps_positions(self, store):
        store.session.arrangement.set_offset(("lines", "p1"), Position(8, 0))
        store.on_drop(("commits", "p1"), ("issues", "p1"))
        assert store.session.arrangement.offset(("lines", "p1")) == Position(8, 0)

    def test_swap_emits_positions(self, store):
        moved = []
        store.positions_changed.connect(lambda changed: moved.append(changed))
        store.select_feature("tests")
        decision = store.on_drop(("tests", "p1"), ("tests", "p3"))
        assert decision.action is DropAction.SWAP
        assert moved == [[("tests", "p1"), ("tests", "p3")]]

    def test_selection_change_cancels_gesture(self, store):
        returned = []
        store.drag.card_returned.connect(lambda key: returned.append(key))
        assert store.drag.start(("tests", "p1"), pointer=(10, 10))
        feedback = store.drag.move(config.CARD_WIDTH + config.CARD_GUTTER, 0)
        assert feedback.candidate == ("lines", "p1")

        store.select_feature("lines")
        assert store.drag.state is DragState.IDLE
        assert returned == [("tests", "p1")]
        assert store.drag.drop().action is DropAction.RETURN
        assert store.session.normalization.get("lines") is None
        assert keys(store) == [("lines", "p1"), ("lines", "p2"), ("lines", "p3"), ("lines", "p10")]


class TestSortOrder:
    def test_project_order(self, store):
        store.select_feature("tests")
        store.set_sort_order("project")
        assert [p for _, p in keys(store)] == ["p1", "p2", "p3", "p10"]

    def test_feature_order(self, store):
        store.set_sort_order(SortOrder.FEATURE)
        assert [f for f, _ in keys(store)] == ["commits", "issues", "lines", "tests"]

    def test_group_order(self, store):
        store.set_sort_order(SortOrder.GROUP)
        assert [f for f, _ in keys(store)] == ["issues", "tests", "lines", "commits"]

    def test_score_order(self, store):
        store.select_feature("tests")
        store.set_sort_order(SortOrder.SCORE)
        assert [p for _, p in keys(store)] == ["p1", "p2", "p10", "p3"]

    def test_default_order_restores(self, store):
        store.set_sort_order(SortOrder.FEATURE)
        store.set_sort_order(SortOrder.DEFAULT)
        assert [f for f, _ in keys(store)] == ["tests", "lines", "commits", "issues"]

    def test_sorting_resets_offsets(self, store):
        store.session.arrangement.set_offset(("tests", "p1"), Position(5, 5))
        store.set_sort_order(SortOrder.FEATURE)
        assert store.session.arrangement.offset(("tests", "p1")) == Position(0, 0)

    def test_new_scope_resets_sort_order(self, store):
        store.set_sort_order(SortOrder.FEATURE)
        store.select_feature("tests")
        assert store.session.sort_order is SortOrder.DEFAULT

    def test_invalid_order(self, store):
        with pytest.raises(ValueError):
            store.set_sort_order("size")
