"""
Canonical team code resolution across data sources.

The NFL has no single naming standard across the sources this pipeline
reads. The Elo feed, the pick-distribution tables and the score tables
disagree on abbreviations and on relocated franchises:

  Elo feed:        "WSH", "OAK", "LAR"
  Pick tables:     "Washington Redskins", "Las Vegas Raiders"
  Score tables:    "WAS", "LV", "LA"

A static lookup table maps every known variant (``team_short`` or
``team_full``) to one ``team_master_short`` code.  ``TeamNameResolver``
indexes that table once and replaces team columns with the canonical code.
Values with no lookup row resolve to null; callers keep the row so that the
gap surfaces as nulls downstream instead of aborting an exploratory run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

import pandas as pd

from ..models.schema import LOOKUP
from .normalize import normalize_team_key
from .validators import MalformedInputError, coerce_table

logger = logging.getLogger(__name__)

SCHEMES = ("team_short", "team_full")


@dataclass
class ResolutionReport:
    """Outcome of resolving one team column of one table."""

    table: str
    column: str
    rows: int
    unresolved_rows: int
    unresolved_names: List[str]

    @property
    def resolved_rows(self) -> int:
        return self.rows - self.unresolved_rows

    def to_dict(self) -> Dict:
        return {
            "table": self.table,
            "column": self.column,
            "rows": self.rows,
            "unresolved_rows": self.unresolved_rows,
            "unresolved_names": list(self.unresolved_names),
        }


class TeamNameResolver:
    """
    Resolves team name variants to canonical master codes.

    Resolution order for a single value:
    1. Normalized variant lookup in the requested scheme(s)
    2. Canonical master code (so resolving a resolved value is a no-op)

    Read-only after construction.
    """

    def __init__(self, lookup: pd.DataFrame, scheme: Optional[str] = None):
        """
        Build the variant index from a lookup table.

        Args:
            lookup: Table with ``team_short``, ``team_full``, ``team_master_short``
            scheme: Restrict matching to one variant column; ``None`` matches either

        Raises:
            MalformedInputError: if the lookup is missing columns or one
                variant maps to more than one master code
        """
        if scheme is not None and scheme not in SCHEMES:
            raise ValueError(f"Unknown lookup scheme: {scheme!r} (expected one of {SCHEMES})")
        self.scheme = scheme
        table = coerce_table(lookup, LOOKUP)
        table = table.dropna(subset=["team_master_short"])

        self._masters: Set[str] = {str(code).strip() for code in table["team_master_short"]}
        self._variant_to_master: Dict[str, str] = {}

        schemes = (scheme,) if scheme else SCHEMES
        for column in schemes:
            for variant, master in zip(table[column], table["team_master_short"]):
                key = normalize_team_key(variant)
                if not key:
                    continue
                self._index(key, str(master).strip(), column)

        # Canonical codes resolve to themselves unless a variant already claims the key.
        for master in self._masters:
            self._variant_to_master.setdefault(normalize_team_key(master), master)

        logger.info(
            "Team lookup indexed: %d variants -> %d canonical codes (scheme=%s).",
            len(self._variant_to_master), len(self._masters), scheme or "any",
        )

    def _index(self, key: str, master: str, column: str) -> None:
        existing = self._variant_to_master.get(key)
        if existing is not None and existing != master:
            raise MalformedInputError(
                LOOKUP.name,
                column,
                f"variant {key!r} maps to more than one master code ({existing!r}, {master!r})",
            )
        self._variant_to_master[key] = master

    def resolve(self, name) -> Optional[str]:
        """Return the canonical code for ``name``, or ``None`` if unknown."""
        key = normalize_team_key(name)
        if not key:
            return None
        return self._variant_to_master.get(key)

    def resolve_batch(self, names: Iterable) -> List[Optional[str]]:
        return [self.resolve(name) for name in names]

    def resolve_column(
        self, df: pd.DataFrame, column: str, table: str = "table"
    ) -> pd.DataFrame:
        """Return a copy of ``df`` with ``column`` replaced by canonical codes."""
        return self.resolve_columns(df, [column], table=table)[0]

    def resolve_columns(self, df: pd.DataFrame, columns: Iterable[str], table: str = "table"):
        """
        Resolve several team columns of one table.

        Args:
            df: Source table (not modified)
            columns: Team-valued columns to replace
            table: Table name used in log lines and reports

        Returns:
            Tuple of (resolved copy of ``df``, list of ResolutionReport)
        """
        out = df.copy()
        reports: List[ResolutionReport] = []
        for column in columns:
            if column not in out.columns:
                raise MalformedInputError(table, column, "missing required column")
            original = out[column]
            mapping = {value: self.resolve(value) for value in original.dropna().unique()}
            resolved = original.map(mapping)
            unresolved_mask = resolved.isna() & original.notna()
            unresolved_names = sorted({str(v) for v in original[unresolved_mask]})
            out[column] = resolved.astype(object).where(resolved.notna(), None)

            report = ResolutionReport(
                table=table,
                column=column,
                rows=len(out),
                unresolved_rows=int(unresolved_mask.sum()),
                unresolved_names=unresolved_names,
            )
            reports.append(report)
            if report.unresolved_rows:
                logger.warning(
                    "%s.%s: %d/%d rows unresolved against team lookup (%s).",
                    table, column, report.unresolved_rows, report.rows,
                    ", ".join(unresolved_names[:10]),
                )
        return out, reports

    @property
    def known_teams(self) -> Set[str]:
        """All canonical team codes."""
        return set(self._masters)
