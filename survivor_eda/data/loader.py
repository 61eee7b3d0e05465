"""Snapshot loader for the source tables."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse

import pandas as pd
import requests

from ..models.schema import TableSchema
from .validators import MalformedInputError, coerce_table

logger = logging.getLogger(__name__)


def _is_url(location: str) -> bool:
    return urlparse(str(location)).scheme in ("http", "https")


class SnapshotLoader:
    """
    Loads flat tabular snapshots from local files or HTTP(S) URLs.

    Remote files are downloaded once into ``cache_dir`` and read from disk
    on later runs.  Supported formats are CSV and parquet, chosen by file
    suffix.
    """

    def __init__(self, cache_dir: Optional[str] = None, timeout: int = 30):
        """Initialize loader."""
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)"
        })
        self.timeout = timeout
        self.cache_dir = Path(cache_dir) if cache_dir else None

        if self.cache_dir:
            self.cache_dir.mkdir(parents=True, exist_ok=True)

    def load(
        self,
        location: str,
        schema: TableSchema,
        min_season: Optional[int] = None,
    ) -> pd.DataFrame:
        """
        Read, validate and season-filter one table.

        Args:
            location: Local path or HTTP(S) URL
            schema: Expected columns for the table
            min_season: Drop rows with ``season`` below this value

        Returns:
            Typed DataFrame (see ``coerce_table``)

        Raises:
            MalformedInputError: if the file is unreadable or fails validation
        """
        table = coerce_table(self.read(location, schema), schema)
        if min_season is not None and schema.has_season:
            before = len(table)
            table = table[table["season"] >= min_season].reset_index(drop=True)
            logger.info(
                "%s: kept %d/%d rows with season >= %d.",
                schema.name, len(table), before, min_season,
            )
        return table

    def read(self, location: str, schema: TableSchema) -> pd.DataFrame:
        """Return the table at ``location`` as stored, without validation or typing.

        Raises:
            MalformedInputError: if the file is missing or unreadable
        """
        path = self._fetch(location) if _is_url(location) else Path(location)
        return self._read(path, schema)

    def _read(self, path: Path, schema: TableSchema) -> pd.DataFrame:
        if not path.exists():
            raise MalformedInputError(schema.name, None, f"input file not found: {path}")
        try:
            if path.suffix.lower() in (".parquet", ".pq"):
                return pd.read_parquet(path)
            return pd.read_csv(path)
        except (ValueError, OSError) as exc:
            raise MalformedInputError(schema.name, None, f"could not read {path}: {exc}") from exc

    def _fetch(self, url: str) -> Path:
        """Download ``url`` into the cache (if not already there) and return the local path."""
        suffix = Path(urlparse(url).path).suffix or ".csv"
        digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:16]
        cache_root = self.cache_dir or Path(".cache")
        cache_root.mkdir(parents=True, exist_ok=True)
        cache_path = cache_root / f"{digest}{suffix}"
        if cache_path.exists():
            logger.info("Using cached snapshot %s for %s", cache_path, url)
            return cache_path

        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        with open(cache_path, "wb") as f:
            f.write(response.content)
        logger.info("Downloaded %s (%d bytes) to %s", url, len(response.content), cache_path)
        return cache_path


def create_sample_data(output_dir: str) -> Dict[str, str]:
    """
    Write a small, self-consistent set of input tables for trying the pipeline.

    Args:
        output_dir: Directory to write the four CSV files into

    Returns:
        Mapping of table name -> written path
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    tables = {
        "team_lookup": pd.DataFrame({
            "team_short": ["KC", "NE", "BUF", "NYJ", "OAK", "LV"],
            "team_full": [
                "Kansas City Chiefs",
                "New England Patriots",
                "Buffalo Bills",
                "New York Jets",
                "Oakland Raiders",
                "Las Vegas Raiders",
            ],
            "team_master_short": ["KC", "NE", "BUF", "NYJ", "LV", "LV"],
        }),
        # Week 1 runs Sunday/Monday, week 2 starts on a Thursday.
        "elo": pd.DataFrame({
            "season": [2019, 2019, 2019, 2019],
            "date": ["2019-09-08", "2019-09-09", "2019-09-12", "2019-09-15"],
            "team1": ["KC", "NE", "NYJ", "OAK"],
            "team2": ["OAK", "BUF", "KC", "NE"],
            "elo_team1": [1690.0, 1650.0, 1420.0, 1450.0],
            "elo_team2": [1450.0, 1500.0, 1700.0, 1660.0],
            "prob_team1": [0.82, 0.70, 0.15, 0.28],
            "prob_team2": [0.18, 0.30, 0.85, 0.72],
        }),
        "games": pd.DataFrame({
            "season": [2019, 2019, 2019, 2019],
            "date": ["2019-09-08", "2019-09-09", "2019-09-12", "2019-09-15"],
            "team1": [
                "Kansas City Chiefs",
                "New England Patriots",
                "New York Jets",
                "Oakland Raiders",
            ],
            "team2": [
                "Oakland Raiders",
                "Buffalo Bills",
                "Kansas City Chiefs",
                "New England Patriots",
            ],
            "points_team1": [28, 17, 21, 20],
            "points_team2": [10, 17, 24, 13],
        }),
        "picks": pd.DataFrame({
            "season": [2019, 2019, 2019, 2019, 2019, 2019],
            "week_or_date": [1, 1, 1, 2, 2, 2],
            "team": ["Kansas City Chiefs", "NE", "BUF", "KC", "Las Vegas Raiders", "NYJ"],
            "pick_pct": [0.55, 0.30, 0.05, 0.40, 0.35, 0.10],
        }),
    }

    paths = {}
    for name, df in tables.items():
        path = out / f"{name}.csv"
        df.to_csv(path, index=False)
        paths[name] = str(path)
    return paths
