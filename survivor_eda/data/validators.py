"""Schema validators and type coercion for the source tables."""

from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from ..models.schema import TableSchema
from .normalize import normalize_column_name

logger = logging.getLogger(__name__)


class MalformedInputError(ValueError):
    """Raised when a source table is structurally unusable."""

    def __init__(self, table: str, column: Optional[str], message: str):
        self.table = table
        self.column = column
        location = f"{table}.{column}" if column else table
        super().__init__(f"{location}: {message}")


def _examples(values: pd.Series, limit: int = 3) -> str:
    return ", ".join(repr(v) for v in values.drop_duplicates().head(limit).tolist())


def _bad_numeric(series: pd.Series) -> pd.Series:
    converted = pd.to_numeric(_strip_percent(series), errors="coerce")
    return series.notna() & converted.isna()


def _bad_dates(series: pd.Series) -> pd.Series:
    converted = pd.to_datetime(series, errors="coerce")
    return series.notna() & converted.isna()


def _strip_percent(series: pd.Series) -> pd.Series:
    if series.dtype != object:
        return series
    return series.map(lambda v: v.strip().rstrip("%") if isinstance(v, str) else v)


def canonicalize_columns(df: pd.DataFrame, schema: TableSchema) -> pd.DataFrame:
    """Normalize headers and apply the schema's known aliases."""
    out = df.copy()
    out.columns = [normalize_column_name(c) for c in out.columns]
    renames = {
        alias: target
        for alias, target in schema.aliases.items()
        if alias in out.columns and target not in out.columns
    }
    if renames:
        out = out.rename(columns=renames)
    return out


def validate_table(df: pd.DataFrame, schema: TableSchema) -> List[str]:
    """Return human-readable schema violations for ``df`` (empty when valid)."""
    errors: List[str] = []
    missing = [c for c in schema.required_columns if c not in df.columns]
    for column in missing:
        errors.append(f"{schema.name}.{column}: missing required column")

    for column in schema.numeric_columns:
        if column not in df.columns:
            continue
        bad = _bad_numeric(df[column])
        if bad.any():
            errors.append(
                f"{schema.name}.{column}: {int(bad.sum())} non-numeric values "
                f"(e.g. {_examples(df.loc[bad, column])})"
            )

    for column in schema.date_columns:
        if column not in df.columns:
            continue
        bad = _bad_dates(df[column])
        if bad.any():
            errors.append(
                f"{schema.name}.{column}: {int(bad.sum())} unparseable dates "
                f"(e.g. {_examples(df.loc[bad, column])})"
            )

    if schema.has_season and "season" in df.columns and df["season"].isna().any():
        errors.append(f"{schema.name}.season: {int(df['season'].isna().sum())} missing season values")
    return errors


def assert_valid(df: pd.DataFrame, schema: TableSchema) -> None:
    """Raise ``MalformedInputError`` for the first violation found in ``df``."""
    errors = validate_table(df, schema)
    if not errors:
        return
    location, _, message = errors[0].partition(": ")
    table, _, column = location.partition(".")
    if len(errors) > 1:
        message = f"{message} ({len(errors) - 1} further issue(s): {errors[1:4]})"
    raise MalformedInputError(table, column or None, message)


def coerce_table(df: pd.DataFrame, schema: TableSchema) -> pd.DataFrame:
    """Validate ``df`` against ``schema`` and return a typed copy.

    Numeric columns become floats (``season`` becomes int), date columns
    become ``datetime64``.  Percent strings such as ``"45.2%"`` are accepted
    for numeric columns and read as the bare number (45.2); the scale of
    ``pick_pct`` is settled later by ``scale_pick_pct``.

    Raises:
        MalformedInputError: on missing columns, non-numeric values,
            unparseable dates or missing seasons.
    """
    out = canonicalize_columns(df, schema)
    assert_valid(out, schema)

    for column in schema.numeric_columns:
        out[column] = pd.to_numeric(_strip_percent(out[column]), errors="coerce").astype(float)
    for column in schema.date_columns:
        out[column] = pd.to_datetime(out[column])
    if schema.has_season:
        out["season"] = out["season"].astype(int)
    return out


def check_unique_keys(df: pd.DataFrame, keys: List[str], table: str) -> None:
    """Fail when ``keys`` do not identify rows of ``df`` uniquely."""
    dupes = df.duplicated(subset=keys, keep=False) & df[keys].notna().all(axis=1)
    if dupes.any():
        sample = df.loc[dupes, keys].drop_duplicates().head(3).to_dict("records")
        raise MalformedInputError(
            table,
            ",".join(keys),
            f"{int(dupes.sum())} rows share a key that must be unique (e.g. {sample})",
        )


PICK_PCT_SCALES = {"fraction": 1.0, "percent": 100.0}


def scale_pick_pct(picks: pd.DataFrame, scale: str = "fraction") -> pd.DataFrame:
    """Convert ``pick_pct`` to fractions and check it lies within [0, 1].

    Args:
        picks: Coerced pick table
        scale: ``"fraction"`` (0-1) or ``"percent"`` (0-100)

    Raises:
        ValueError: on an unknown scale
        MalformedInputError: if a converted value falls outside [0, 1],
            which usually means the table mixes both scales
    """
    if scale not in PICK_PCT_SCALES:
        raise ValueError(f"Unknown pick_pct scale {scale!r} (expected one of {sorted(PICK_PCT_SCALES)})")
    out = picks.copy()
    if scale != "fraction":
        logger.info("picks.pick_pct read on a %s scale; dividing by %g.", scale, PICK_PCT_SCALES[scale])
    out["pick_pct"] = out["pick_pct"] / PICK_PCT_SCALES[scale]
    bad = out["pick_pct"].notna() & ~out["pick_pct"].between(0.0, 1.0)
    if bad.any():
        raise MalformedInputError(
            "picks",
            "pick_pct",
            f"{int(bad.sum())} values outside [0, 1] after reading them as {scale} "
            f"(e.g. {_examples(picks.loc[bad, 'pick_pct'])})",
        )
    return out
