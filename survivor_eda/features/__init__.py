"""Feature derivation transforms, in pipeline order."""

from .enrichment import ENRICHED_COLUMNS, build_enriched_picks
from .reshape import elo_to_team_rows, games_to_team_results
from .summaries import summarize_by_rank
from .survival import SURVIVAL_COLUMNS, build_survival_table
from .temporal import assign_pick_weeks, assign_weeks

__all__ = [
    "ENRICHED_COLUMNS",
    "SURVIVAL_COLUMNS",
    "assign_pick_weeks",
    "assign_weeks",
    "build_enriched_picks",
    "build_survival_table",
    "elo_to_team_rows",
    "games_to_team_results",
    "summarize_by_rank",
]
