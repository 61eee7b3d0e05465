"""Column schemas for the four source tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

JOIN_KEYS: List[str] = ["season", "week", "team"]

RESULT_WIN = "W"
RESULT_LOSS = "L"
RESULT_TIE = "T"


@dataclass(frozen=True)
class TableSchema:
    """Required columns and their expected kinds for one input table."""

    name: str
    required_columns: Tuple[str, ...]
    numeric_columns: Tuple[str, ...] = ()
    date_columns: Tuple[str, ...] = ()
    team_columns: Tuple[str, ...] = ()
    # Alternate header -> required column name
    aliases: Dict[str, str] = field(default_factory=dict)

    @property
    def has_season(self) -> bool:
        return "season" in self.required_columns


ELO = TableSchema(
    name="elo",
    required_columns=(
        "season",
        "date",
        "team1",
        "team2",
        "elo_team1",
        "elo_team2",
        "prob_team1",
        "prob_team2",
    ),
    numeric_columns=("season", "elo_team1", "elo_team2", "prob_team1", "prob_team2"),
    date_columns=("date",),
    team_columns=("team1", "team2"),
    aliases={
        "elo1_pre": "elo_team1",
        "elo2_pre": "elo_team2",
        "elo_prob1": "prob_team1",
        "elo_prob2": "prob_team2",
    },
)

PICKS = TableSchema(
    name="picks",
    required_columns=("season", "week_or_date", "team", "pick_pct"),
    numeric_columns=("season", "pick_pct"),
    team_columns=("team",),
    aliases={"week_raw": "week_or_date", "week": "week_or_date"},
)

GAMES = TableSchema(
    name="games",
    required_columns=("season", "date", "team1", "team2", "points_team1", "points_team2"),
    numeric_columns=("season", "points_team1", "points_team2"),
    date_columns=("date",),
    team_columns=("team1", "team2"),
    aliases={"score1": "points_team1", "score2": "points_team2"},
)

LOOKUP = TableSchema(
    name="team_lookup",
    required_columns=("team_short", "team_full", "team_master_short"),
)
