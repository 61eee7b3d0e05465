"""Survivor pool feature materialization: inputs -> enriched picks + survival."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from ..data.loader import SnapshotLoader
from ..data.team_name_resolver import ResolutionReport, TeamNameResolver
from ..data.validators import coerce_table, scale_pick_pct
from ..features.enrichment import build_enriched_picks
from ..features.reshape import elo_to_team_rows, games_to_team_results
from ..features.summaries import summarize_by_rank
from ..features.survival import build_survival_table
from ..features.temporal import assign_pick_weeks, assign_weeks
from ..models.schema import ELO, GAMES, LOOKUP, PICKS

logger = logging.getLogger(__name__)


@dataclass
class MaterializationConfig:
    """Configuration for a survivor pool analysis run."""

    elo_path: str = "data/raw/nfl_elo.csv"
    picks_path: str = "data/raw/pick_distribution.csv"
    games_path: str = "data/raw/nfl_games.csv"
    lookup_path: str = "data/raw/team_lookup.csv"
    output_dir: str = "data/processed"
    cache_dir: Optional[str] = "data/raw/cache"
    min_season: int = 2010
    week_start: int = 6
    week_rounding: str = "nearest"
    pick_pct_scale: str = "fraction"
    lookup_scheme: Optional[str] = None
    write_outputs: bool = True


@dataclass
class FeatureTables:
    """Derived tables of one run plus diagnostics."""

    enriched_picks: pd.DataFrame
    survival: pd.DataFrame
    rank_summary: pd.DataFrame
    resolution: List[ResolutionReport] = field(default_factory=list)
    row_counts: Dict[str, int] = field(default_factory=dict)


def _filter_seasons(df: pd.DataFrame, min_season: Optional[int]) -> pd.DataFrame:
    if min_season is None:
        return df
    return df[df["season"] >= min_season].reset_index(drop=True)


def build_feature_tables(
    elo: pd.DataFrame,
    picks: pd.DataFrame,
    games: pd.DataFrame,
    lookup: pd.DataFrame,
    config: Optional[MaterializationConfig] = None,
) -> FeatureTables:
    """
    Run every derivation step in dependency order.

    Identity resolution -> week numbering -> reshaping -> joins and ranks
    -> survival aggregation.  Inputs are not modified.

    Args:
        elo: Win-probability table
        picks: Pick-distribution table
        games: Game-results table
        lookup: Team lookup table
        config: Season filter, week conventions and pick_pct scale (defaults when omitted)

    Returns:
        FeatureTables with the enriched pick table, survival table and
        rank summary

    Raises:
        MalformedInputError: on structural problems in any input
    """
    config = config or MaterializationConfig()
    elo = _filter_seasons(coerce_table(elo, ELO), config.min_season)
    picks = _filter_seasons(coerce_table(picks, PICKS), config.min_season)
    picks = scale_pick_pct(picks, config.pick_pct_scale)
    games = _filter_seasons(coerce_table(games, GAMES), config.min_season)
    row_counts = {"elo": len(elo), "picks": len(picks), "games": len(games)}

    resolver = TeamNameResolver(lookup, scheme=config.lookup_scheme)
    resolution: List[ResolutionReport] = []
    elo, reports = resolver.resolve_columns(elo, ELO.team_columns, table=ELO.name)
    resolution.extend(reports)
    picks, reports = resolver.resolve_columns(picks, PICKS.team_columns, table=PICKS.name)
    resolution.extend(reports)
    games, reports = resolver.resolve_columns(games, GAMES.team_columns, table=GAMES.name)
    resolution.extend(reports)

    week_kwargs = {"week_start": config.week_start, "rounding": config.week_rounding}
    elo = assign_weeks(elo, **week_kwargs)
    games = assign_weeks(games, **week_kwargs)
    picks = assign_pick_weeks(picks, **week_kwargs)

    elo_rows = elo_to_team_rows(elo)
    result_rows = games_to_team_results(games)
    row_counts["elo_team_rows"] = len(elo_rows)
    row_counts["result_team_rows"] = len(result_rows)

    enriched = build_enriched_picks(picks, elo_rows, result_rows)
    survival = build_survival_table(enriched)
    rank_summary = summarize_by_rank(enriched)
    row_counts["enriched_picks"] = len(enriched)
    row_counts["survival"] = len(survival)
    logger.info("Feature tables built: %s", row_counts)

    return FeatureTables(
        enriched_picks=enriched,
        survival=survival,
        rank_summary=rank_summary,
        resolution=resolution,
        row_counts=row_counts,
    )


class SurvivorFeatureMaterializer:
    """Load the four snapshots, build feature tables and write them with a manifest."""

    def __init__(self, config: Optional[MaterializationConfig] = None):
        self.config = config or MaterializationConfig()
        self.output_dir = Path(self.config.output_dir)
        self.loader = SnapshotLoader(cache_dir=self.config.cache_dir)

    def run(self) -> Dict:
        inputs = self._input_sources()
        # Typing and validation happen once, inside build_feature_tables.
        elo = self.loader.read(inputs["elo"], ELO)
        picks = self.loader.read(inputs["picks"], PICKS)
        games = self.loader.read(inputs["games"], GAMES)
        lookup = self.loader.read(inputs["team_lookup"], LOOKUP)

        tables = build_feature_tables(elo, picks, games, lookup, self.config)

        manifest = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "config": asdict(self.config),
            "input_sources": inputs,
            "row_counts": tables.row_counts,
            "team_resolution": [r.to_dict() for r in tables.resolution],
            "quality_report": self._quality_report(tables),
            "artifacts": {},
        }
        if not self.config.write_outputs:
            return manifest

        self.output_dir.mkdir(parents=True, exist_ok=True)
        stem_suffix = f"{self.config.min_season}"
        for name, df in (
            ("enriched_picks", tables.enriched_picks),
            ("survival", tables.survival),
            ("rank_summary", tables.rank_summary),
        ):
            path, fmt = self._write_table(df, f"{name}_{stem_suffix}")
            manifest["artifacts"][f"{name}_path"] = str(path)
            manifest["artifacts"][f"{name}_format"] = fmt

        manifest_path = self.output_dir / f"materialization_manifest_{stem_suffix}.json"
        with open(manifest_path, "w") as f:
            json.dump(manifest, f, indent=2, default=str)
        manifest["manifest_path"] = str(manifest_path)
        return manifest

    def _input_sources(self) -> Dict[str, str]:
        return {
            "elo": self.config.elo_path,
            "picks": self.config.picks_path,
            "games": self.config.games_path,
            "team_lookup": self.config.lookup_path,
        }

    def _quality_report(self, tables: FeatureTables) -> Dict:
        """Null counts per output column; soft failures only show up here."""
        report = {}
        for name, df in (("enriched_picks", tables.enriched_picks), ("survival", tables.survival)):
            report[name] = {
                "rows": int(len(df)),
                "null_counts": {col: int(df[col].isna().sum()) for col in df.columns},
            }
        enriched = tables.enriched_picks
        report["unmatched_elo_rows"] = int(enriched["win_prob"].isna().sum())
        report["unmatched_result_rows"] = int(enriched["result"].isna().sum())
        report["unresolved_team_rows"] = {
            f"{r.table}.{r.column}": r.unresolved_rows for r in tables.resolution
        }
        return report

    def _write_table(self, df: pd.DataFrame, stem: str) -> Tuple[Path, str]:
        parquet_path = self.output_dir / f"{stem}.parquet"
        try:
            df.to_parquet(parquet_path, index=False)
            return parquet_path, "parquet"
        except ImportError:
            logger.info("No parquet engine installed; writing %s as CSV.", stem)
            csv_path = self.output_dir / f"{stem}.csv"
            df.to_csv(csv_path, index=False)
            return csv_path, "csv"
