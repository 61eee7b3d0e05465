"""Matchup-shaped to team-shaped table transforms.

Both the Elo feed and the score table carry one row per game with paired
``*_team1`` / ``*_team2`` columns.  The joins downstream are keyed by
``(season, week, team)``, so each game is split into one row per side.
"""

from __future__ import annotations

from typing import Dict, List

import pandas as pd

from ..models.schema import RESULT_LOSS, RESULT_TIE, RESULT_WIN

SHARED_COLUMNS = ["season", "week"]


def split_sides(
    df: pd.DataFrame,
    side_columns: Dict[str, List[str]],
    shared: List[str] = SHARED_COLUMNS,
) -> pd.DataFrame:
    """
    Stack the two sides of a matchup table.

    Args:
        df: Matchup-shaped table (N rows)
        side_columns: Output column -> ``[team1 column, team2 column]``
        shared: Columns copied onto both sides unchanged

    Returns:
        Team-shaped table with 2N rows; the team1 side of every game comes
        first, followed by the team2 side, in the input order.
    """
    frames = []
    for side in (0, 1):
        block = df[shared].copy()
        for out_col, pair in side_columns.items():
            block[out_col] = df[pair[side]].to_numpy()
        frames.append(block)
    return pd.concat(frames, ignore_index=True)


def elo_to_team_rows(elo: pd.DataFrame) -> pd.DataFrame:
    """Reshape week-numbered Elo records to ``season, week, team, elo_rating, win_prob``."""
    return split_sides(
        elo,
        {
            "team": ["team1", "team2"],
            "elo_rating": ["elo_team1", "elo_team2"],
            "win_prob": ["prob_team1", "prob_team2"],
        },
    )


def _side_result(own: pd.Series, opp: pd.Series) -> pd.Series:
    # NaN compares False both ways, so unscored games keep a null result.
    result = pd.Series(None, index=own.index, dtype=object)
    result.loc[own > opp] = RESULT_WIN
    result.loc[own < opp] = RESULT_LOSS
    result.loc[own == opp] = RESULT_TIE
    return result


def games_to_team_results(games: pd.DataFrame) -> pd.DataFrame:
    """
    Reshape week-numbered game scores to ``season, week, team, result``.

    ``result`` is ``W``/``L``/``T`` from the side's perspective, or null
    when either score is missing (game not played or not recorded).
    """
    scored = games.copy()
    scored["result_team1"] = _side_result(scored["points_team1"], scored["points_team2"])
    scored["result_team2"] = _side_result(scored["points_team2"], scored["points_team1"])
    return split_sides(
        scored,
        {
            "team": ["team1", "team2"],
            "result": ["result_team1", "result_team2"],
        },
    )
