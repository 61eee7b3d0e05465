"""Season-relative week numbering from game dates."""

from __future__ import annotations

import logging

import pandas as pd
from pandas.api.types import is_datetime64_any_dtype

from ..data.validators import MalformedInputError

logger = logging.getLogger(__name__)

ROUNDING_MODES = ("nearest", "floor")


def week_anchor(dates: pd.Series, week_start: int = 6, rounding: str = "nearest") -> pd.Series:
    """Snap each date to a week-start boundary.

    ``week_start`` uses pandas weekday numbering (Monday=0 ... Sunday=6).
    With ``rounding="nearest"`` and a Sunday start, a Thursday through
    Monday NFL slate lands on the same Sunday: Thursday/Saturday round
    forward, Monday rounds back.  ``"floor"`` always rounds back.
    """
    if rounding not in ROUNDING_MODES:
        raise ValueError(f"Unknown week rounding {rounding!r} (expected one of {ROUNDING_MODES})")
    if not 0 <= week_start <= 6:
        raise ValueError(f"week_start must be a weekday number 0-6, got {week_start}")

    days = pd.to_datetime(dates).dt.normalize()
    offset = (days.dt.dayofweek - week_start) % 7
    if rounding == "floor":
        shift = -offset
    else:
        shift = (-offset).where(offset <= 3, 7 - offset)
    return days + pd.to_timedelta(shift, unit="D")


def _open_on_following_week(
    dates: pd.Series, seasons: pd.Series, anchors: pd.Series, week_start: int
) -> pd.Series:
    """Move a season opener played mid-week forward onto the next week start.

    A Wednesday kickoff (e.g. 2012-09-05) is as far from the previous Sunday
    as from the next one and would otherwise open a week of its own.  Only
    the earliest date of each season is moved; later mid-week games keep
    their usual anchor.
    """
    days = pd.to_datetime(dates).dt.normalize()
    opener = days == days.groupby(seasons).transform("min")
    midweek = (days.dt.dayofweek - week_start) % 7 == 3
    return anchors.mask(opener & midweek, anchors + pd.Timedelta(days=7))


def assign_weeks(
    df: pd.DataFrame,
    date_column: str = "date",
    week_start: int = 6,
    rounding: str = "nearest",
) -> pd.DataFrame:
    """
    Replace ``date_column`` with an integer ``week`` per season.

    Distinct week anchors are dense-ranked in ascending order within each
    season, so every team playing in the same calendar week shares a week
    number and weeks run 1..K without gaps.  With nearest rounding a
    mid-week season opener joins the slate that follows it.

    Args:
        df: Table with ``season`` and ``date_column``
        date_column: Column holding game dates
        week_start: Weekday that starts a week (pandas numbering)
        rounding: ``"nearest"`` or ``"floor"``

    Returns:
        Copy of ``df`` with ``week`` in place of ``date_column``
    """
    out = df.copy()
    anchors = week_anchor(out[date_column], week_start=week_start, rounding=rounding)
    if rounding == "nearest":
        anchors = _open_on_following_week(out[date_column], out["season"], anchors, week_start)
    day_index = (anchors - pd.Timestamp("1970-01-01")).dt.days
    weeks = day_index.groupby(out["season"]).rank(method="dense")
    position = list(out.columns).index(date_column)
    out = out.drop(columns=[date_column])
    out.insert(position, "week", weeks.astype("Int64"))
    return out


def assign_pick_weeks(
    picks: pd.DataFrame,
    column: str = "week_or_date",
    week_start: int = 6,
    rounding: str = "nearest",
) -> pd.DataFrame:
    """Derive ``week`` for the pick table.

    Integer-like values are taken as week numbers already; anything else is
    parsed as a date and numbered with ``assign_weeks``.

    Raises:
        MalformedInputError: if values are neither week numbers nor dates
    """
    raw = picks[column]
    if is_datetime64_any_dtype(raw):
        as_number = pd.Series(float("nan"), index=raw.index)
    else:
        as_number = pd.to_numeric(raw, errors="coerce")
    if raw.notna().any() and as_number[raw.notna()].notna().all():
        if ((as_number.dropna() % 1) != 0).any():
            raise MalformedInputError("picks", column, "week numbers must be whole numbers")
        out = picks.copy()
        position = list(out.columns).index(column)
        out = out.drop(columns=[column])
        out.insert(position, "week", as_number.astype("Int64"))
        return out

    dates = pd.to_datetime(raw, errors="coerce")
    bad = raw.notna() & dates.isna()
    if bad.any():
        raise MalformedInputError(
            "picks",
            column,
            f"{int(bad.sum())} values are neither week numbers nor dates "
            f"(e.g. {raw[bad].iloc[0]!r})",
        )
    out = picks.copy()
    out[column] = dates
    logger.info("picks: deriving week numbers from dates in '%s'.", column)
    return assign_weeks(out, date_column=column, week_start=week_start, rounding=rounding)
