"""
Application Initialization
==========================
Wires the session together and prints a text rendition of the card grid.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Sets up logging.
2. Loads the data tables into a SessionState.
3. Creates the LeaderboardStore controller for that session.
4. Applies the requested scope, scoring mode and sort order.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication

from leaderboard import config
from leaderboard.analysis.scoring import ScoreMode
from leaderboard.app.state import LeaderboardStore
from leaderboard.logging_config import setup_logging
from leaderboard.model.io import DataLoader, DataLoadError
from leaderboard.model.state import SessionState, SortOrder

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="leaderboard", description="Comparative feature leaderboard.")
    parser.add_argument("data", nargs="?", default=config.DATA_PATH, help="Directory with the JSON tables.")
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument("--project", help="Show all features of one project.")
    scope.add_argument("--feature", help="Show one feature across all projects.")
    scope.add_argument("--all", action="store_true", help="Show every project and feature.")
    parser.add_argument("--mode", choices=[m.value for m in ScoreMode], default=ScoreMode.LEAD.value)
    parser.add_argument("--order", choices=[o.value for o in SortOrder], default=SortOrder.DEFAULT.value)
    parser.add_argument("--language", help="Language of the feature names.")
    parser.add_argument("--debug", action="store_true", help="Verbose logging.")
    return parser


def render(store: LeaderboardStore) -> str:
    lines = [store.display_name()]
    for view in store.card_views():
        lead = f"{view.lead_value:g} ({view.lead_project})"
        lines.append(
            f"  {view.title:<40} {view.score_text:>8}  value {view.value:g}  "
            f"lead {lead}  mean {view.mean_value:g}"
        )
    total = store.total_score()
    lines.append(f"Total: {total.text} [{total.score_class}]")
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.debug else logging.WARNING)

    app = QCoreApplication.instance() or QCoreApplication([])
    app.setApplicationName("leaderboard")

    try:
        data = DataLoader.load(args.data)
    except DataLoadError as e:
        print(f"Could not load the leaderboard data: {e}", file=sys.stderr)
        return 1

    store = LeaderboardStore(SessionState.from_data(data, args.language))
    store.set_scoring_mode(args.mode)
    if args.project:
        store.start()
        store.select_project(args.project)
    elif args.feature:
        if not store.select_feature(args.feature):
            print(f"Unknown feature '{args.feature}'.", file=sys.stderr)
            return 1
    elif args.all:
        store.select_all()
    else:
        store.start()
    store.set_sort_order(args.order)

    print(render(store))
    return 0


if __name__ == "__main__":
    sys.exit(main())
