"""Join Elo and results onto the pick distribution and compute rank features."""

from __future__ import annotations

import logging
from typing import List

import pandas as pd

from ..data.validators import check_unique_keys
from ..models.schema import JOIN_KEYS

logger = logging.getLogger(__name__)

ENRICHED_COLUMNS = [
    "season",
    "week",
    "team",
    "pick_pct",
    "elo_rating",
    "win_prob",
    "result",
    "rank_week",
    "rank_season",
]


def _left_join(
    left: pd.DataFrame, right: pd.DataFrame, value_columns: List[str], table: str
) -> pd.DataFrame:
    """Many-to-one left join on ``JOIN_KEYS``; right-side keys must be unique."""
    right = right.dropna(subset=JOIN_KEYS)[JOIN_KEYS + value_columns]
    check_unique_keys(right, JOIN_KEYS, table)
    merged = left.merge(right, on=JOIN_KEYS, how="left", validate="many_to_one")
    unmatched = int(merged[value_columns].isna().all(axis=1).sum())
    if unmatched:
        logger.warning(
            "%d/%d pick rows have no %s match on (season, week, team).",
            unmatched, len(merged), table,
        )
    return merged


def join_pick_features(
    picks: pd.DataFrame, elo_rows: pd.DataFrame, result_rows: pd.DataFrame
) -> pd.DataFrame:
    """
    Left-join team-shaped Elo and results onto the pick table.

    Args:
        picks: ``season, week, team, pick_pct`` with canonical team codes
        elo_rows: Output of ``elo_to_team_rows``
        result_rows: Output of ``games_to_team_results``

    Returns:
        One row per pick row (never more, never fewer), with null
        ``elo_rating``/``win_prob``/``result`` where nothing matched.
    """
    check_unique_keys(picks, JOIN_KEYS, "picks")
    enriched = picks[JOIN_KEYS + ["pick_pct"]].copy()
    enriched = _left_join(enriched, elo_rows, ["elo_rating", "win_prob"], "elo")
    enriched = _left_join(enriched, result_rows, ["result"], "games")
    return enriched


def add_week_rank(enriched: pd.DataFrame) -> pd.DataFrame:
    """Add ``rank_week``: 1 = highest ``win_prob`` within (season, week).

    Equal probabilities are ordered by team code so ranks are 1..K with
    no repeats.  Rows without a probability get a null rank.
    """
    out = enriched.reset_index(drop=True)
    valid = out[out["win_prob"].notna() & out["week"].notna() & out["team"].notna()]
    ordered = valid.sort_values(
        ["season", "week", "win_prob", "team"],
        ascending=[True, True, False, True],
        kind="mergesort",
    )
    ranks = ordered.groupby(["season", "week"]).cumcount() + 1
    out["rank_week"] = ranks.reindex(out.index).astype("Int64")
    return out


def season_strength(enriched: pd.DataFrame) -> pd.DataFrame:
    """Per (season, team) mean ``win_prob`` over non-null weeks and its rank.

    Teams with no probability observations in a season are left out.
    """
    means = (
        enriched.dropna(subset=["team"])
        .groupby(["season", "team"], as_index=False)["win_prob"]
        .mean()
        .rename(columns={"win_prob": "mean_win_prob"})
        .dropna(subset=["mean_win_prob"])
    )
    means = means.sort_values(
        ["season", "mean_win_prob", "team"],
        ascending=[True, False, True],
        kind="mergesort",
    )
    means["rank_season"] = (means.groupby("season").cumcount() + 1).astype("Int64")
    return means.reset_index(drop=True)


def add_season_rank(enriched: pd.DataFrame) -> pd.DataFrame:
    """Add ``rank_season``: 1 = strongest mean ``win_prob`` across the season."""
    strength = season_strength(enriched)[["season", "team", "rank_season"]]
    return enriched.merge(strength, on=["season", "team"], how="left", validate="many_to_one")


def build_enriched_picks(
    picks: pd.DataFrame, elo_rows: pd.DataFrame, result_rows: pd.DataFrame
) -> pd.DataFrame:
    """Join, rank and order the pick table (``ENRICHED_COLUMNS``)."""
    enriched = join_pick_features(picks, elo_rows, result_rows)
    enriched = add_week_rank(enriched)
    enriched = add_season_rank(enriched)
    enriched = enriched.sort_values(["season", "week", "team"], kind="mergesort", na_position="last")
    return enriched[ENRICHED_COLUMNS].reset_index(drop=True)
