"""Tests for snapshot loading and sample data."""

import pandas as pd
import pytest

from survivor_eda.data.loader import SnapshotLoader, create_sample_data
from survivor_eda.data.validators import MalformedInputError
from survivor_eda.models.schema import ELO, LOOKUP, PICKS


class _FakeResponse:
    def __init__(self, content: bytes):
        self.content = content

    def raise_for_status(self):
        return None


def _write_picks(path):
    pd.DataFrame({
        "season": [2009, 2010, 2011],
        "week_or_date": [1, 1, 1],
        "team": ["KC", "KC", "KC"],
        "pick_pct": [0.2, 0.3, 0.4],
    }).to_csv(path, index=False)


def test_load_csv_filters_seasons(tmp_path):
    path = tmp_path / "picks.csv"
    _write_picks(path)
    picks = SnapshotLoader().load(str(path), PICKS, min_season=2010)
    assert picks["season"].tolist() == [2010, 2011]
    assert picks["pick_pct"].tolist() == pytest.approx([0.3, 0.4])


def test_load_without_filter_keeps_all(tmp_path):
    path = tmp_path / "picks.csv"
    _write_picks(path)
    assert len(SnapshotLoader().load(str(path), PICKS)) == 3


def test_lookup_has_no_season_filter(tmp_path):
    paths = create_sample_data(str(tmp_path))
    lookup = SnapshotLoader().load(paths["team_lookup"], LOOKUP, min_season=2030)
    assert len(lookup) == 6


def test_missing_file_is_malformed_input(tmp_path):
    with pytest.raises(MalformedInputError) as excinfo:
        SnapshotLoader().load(str(tmp_path / "nope.csv"), ELO)
    assert excinfo.value.table == "elo"


def test_empty_file_is_malformed_input(tmp_path):
    path = tmp_path / "elo.csv"
    path.write_text("")
    with pytest.raises(MalformedInputError):
        SnapshotLoader().load(str(path), ELO)


def test_missing_column_reports_table_and_column(tmp_path):
    path = tmp_path / "picks.csv"
    pd.DataFrame({"season": [2019], "team": ["KC"], "pick_pct": [0.5]}).to_csv(path, index=False)
    with pytest.raises(MalformedInputError) as excinfo:
        SnapshotLoader().load(str(path), PICKS)
    assert excinfo.value.table == "picks"
    assert excinfo.value.column == "week_or_date"


def test_url_is_downloaded_once_and_cached(tmp_path, monkeypatch):
    csv_bytes = b"season,week_or_date,team,pick_pct\n2019,1,KC,0.5\n"
    calls = []

    loader = SnapshotLoader(cache_dir=str(tmp_path / "cache"))

    def fake_get(url, timeout=None):
        calls.append(url)
        return _FakeResponse(csv_bytes)

    monkeypatch.setattr(loader.session, "get", fake_get)

    url = "https://example.com/data/picks.csv"
    first = loader.load(url, PICKS)
    second = loader.load(url, PICKS)
    assert calls == [url]
    assert first["team"].tolist() == ["KC"]
    pd.testing.assert_frame_equal(first, second)
    assert len(list((tmp_path / "cache").glob("*.csv"))) == 1


def test_create_sample_data_writes_all_tables(tmp_path):
    paths = create_sample_data(str(tmp_path / "sample"))
    assert set(paths) == {"team_lookup", "elo", "games", "picks"}
    for path in paths.values():
        assert pd.read_csv(path).shape[0] > 0


def test_read_returns_table_as_stored(tmp_path):
    path = tmp_path / "picks.csv"
    pd.DataFrame({"Season": [2019], "Week": [1], "Team": ["KC"], "Pick Pct": ["55%"]}).to_csv(path, index=False)
    raw = SnapshotLoader().read(str(path), PICKS)
    assert list(raw.columns) == ["Season", "Week", "Team", "Pick Pct"]
    assert raw["Pick Pct"].tolist() == ["55%"]
