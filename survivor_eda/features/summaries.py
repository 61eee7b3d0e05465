"""Descriptive aggregates over enriched picks."""

from __future__ import annotations

import numpy as np
import pandas as pd

from ..models.schema import RESULT_WIN


def summarize_by_rank(enriched: pd.DataFrame) -> pd.DataFrame:
    """Pick mass and outcomes by within-week favorite rank.

    Returns one row per ``rank_week`` with ``picks`` (row count),
    ``mean_pick_pct`` and ``win_rate`` (share of ``W`` among rows that have
    a result; null when none do).
    """
    rows = enriched.dropna(subset=["rank_week"])
    has_result = rows["result"].notna()
    frame = pd.DataFrame({
        "rank_week": rows["rank_week"].astype(int),
        "pick_pct": rows["pick_pct"],
        "won": (rows["result"] == RESULT_WIN).astype(float).where(has_result, np.nan),
    })
    summary = frame.groupby("rank_week", as_index=False).agg(
        picks=("pick_pct", "size"),
        mean_pick_pct=("pick_pct", "mean"),
        win_rate=("won", "mean"),
    )
    return summary.sort_values("rank_week").reset_index(drop=True)
