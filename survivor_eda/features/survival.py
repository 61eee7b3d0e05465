"""Weekly and cumulative survival of survivor-pool pick mass."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ..models.schema import RESULT_WIN

logger = logging.getLogger(__name__)

SURVIVAL_COLUMNS = ["season", "week", "survive_pct", "remaining_pct"]


def weekly_survival(enriched: pd.DataFrame) -> pd.DataFrame:
    """
    Sum of ``pick_pct`` on winning teams per (season, week).

    Losses and ties contribute zero.  A week where no pick row carries a
    result at all has no observable outcome, so its ``survive_pct`` is
    null rather than 0.0.
    """
    rows = enriched.dropna(subset=["week"])
    won = rows["result"] == RESULT_WIN
    frame = pd.DataFrame({
        "season": rows["season"],
        "week": rows["week"],
        "won_pct": rows["pick_pct"].where(won, 0.0),
        "has_result": rows["result"].notna(),
    })
    weekly = frame.groupby(["season", "week"], as_index=False).agg(
        survive_pct=("won_pct", "sum"),
        has_result=("has_result", "any"),
    )
    weekly["survive_pct"] = weekly["survive_pct"].where(weekly["has_result"], np.nan)
    return weekly.drop(columns=["has_result"])


def _running_product(values: pd.Series) -> pd.Series:
    # A missing week poisons every later week of the season.
    seen_null = values.isna().cumsum() > 0
    return values.fillna(1.0).cumprod().mask(seen_null)


def season_anchors(enriched: pd.DataFrame) -> pd.DataFrame:
    """One ``week=0`` row per season with the full pool remaining."""
    seasons = sorted(enriched["season"].dropna().unique())
    return pd.DataFrame({
        "season": pd.Series(seasons, dtype=enriched["season"].dtype),
        "week": pd.Series([0] * len(seasons), dtype="Int64"),
        "survive_pct": np.nan,
        "remaining_pct": 1.0,
    })


def build_survival_table(enriched: pd.DataFrame) -> pd.DataFrame:
    """
    Build ``season, week, survive_pct, remaining_pct``.

    Args:
        enriched: Output of ``build_enriched_picks``

    Returns:
        Table sorted by (season, week) with a leading ``week=0`` anchor
        per season; ``remaining_pct`` is the running product of weekly
        ``survive_pct`` within the season.
    """
    weekly = weekly_survival(enriched)
    weekly = weekly.sort_values(["season", "week"], kind="mergesort").reset_index(drop=True)
    weekly["remaining_pct"] = weekly.groupby("season")["survive_pct"].transform(_running_product)
    weekly["week"] = weekly["week"].astype("Int64")

    survival = pd.concat([season_anchors(enriched), weekly[SURVIVAL_COLUMNS]], ignore_index=True)
    survival = survival.sort_values(["season", "week"], kind="mergesort").reset_index(drop=True)

    undefined = int(survival["remaining_pct"].isna().sum())
    if undefined:
        logger.warning("%d season-weeks have undefined remaining_pct (missing results).", undefined)
    return survival[SURVIVAL_COLUMNS]
