"""Tests for canonical team code resolution."""

import logging

import pandas as pd
import pytest

from survivor_eda.data.normalize import normalize_column_name, normalize_team_key
from survivor_eda.data.team_name_resolver import TeamNameResolver
from survivor_eda.data.validators import MalformedInputError


@pytest.fixture
def lookup():
    return pd.DataFrame({
        "team_short": ["KC", "OAK", "LV", "WSH", "WAS", "JAC"],
        "team_full": [
            "Kansas City Chiefs",
            "Oakland Raiders",
            "Las Vegas Raiders",
            "Washington Redskins",
            "Washington Football Team",
            "Jacksonville Jaguars",
        ],
        "team_master_short": ["KC", "LV", "LV", "WAS", "WAS", "JAX"],
    })


# ---------------------------------------------------------------------------
# Normalization helpers
# ---------------------------------------------------------------------------


class TestNormalizeTeamKey:
    """Tests for normalize_team_key()."""

    def test_uppercases(self):
        assert normalize_team_key("kc") == "KC"

    def test_collapses_whitespace(self):
        assert normalize_team_key("  Kansas   City Chiefs ") == "KANSAS CITY CHIEFS"

    def test_html_entity(self):
        assert normalize_team_key("Texas A&amp;M") == "TEXAS A&M"

    def test_strips_accents(self):
        assert normalize_team_key("Montréal") == "MONTREAL"

    def test_missing_values(self):
        assert normalize_team_key(None) == ""
        assert normalize_team_key(float("nan")) == ""


class TestNormalizeColumnName:
    """Tests for normalize_column_name()."""

    def test_spaces_and_case(self):
        assert normalize_column_name("Pick Pct") == "pick_pct"

    def test_symbols(self):
        assert normalize_column_name(" Team #1 ") == "team_1"


# ---------------------------------------------------------------------------
# TeamNameResolver
# ---------------------------------------------------------------------------


class TestTeamNameResolver:
    """Single-value resolution."""

    def test_short_code(self, lookup):
        assert TeamNameResolver(lookup).resolve("OAK") == "LV"

    def test_full_name_case_insensitive(self, lookup):
        assert TeamNameResolver(lookup).resolve(" kansas city chiefs ") == "KC"

    def test_unknown_is_none(self, lookup):
        assert TeamNameResolver(lookup).resolve("Houston Texans") is None

    def test_empty_and_missing(self, lookup):
        resolver = TeamNameResolver(lookup)
        assert resolver.resolve("") is None
        assert resolver.resolve(None) is None

    def test_canonical_codes_are_idempotent(self, lookup):
        resolver = TeamNameResolver(lookup)
        for code in resolver.known_teams:
            assert resolver.resolve(code) == code

    def test_master_missing_from_variants_still_resolves(self, lookup):
        # JAX only appears as a master code, never as a variant.
        assert TeamNameResolver(lookup).resolve("JAX") == "JAX"

    def test_resolve_batch(self, lookup):
        resolver = TeamNameResolver(lookup)
        assert resolver.resolve_batch(["WSH", "Washington Football Team", "???"]) == ["WAS", "WAS", None]

    def test_scheme_restricts_matching(self, lookup):
        resolver = TeamNameResolver(lookup, scheme="team_short")
        assert resolver.resolve("KC") == "KC"
        assert resolver.resolve("Kansas City Chiefs") is None

    def test_unknown_scheme_rejected(self, lookup):
        with pytest.raises(ValueError):
            TeamNameResolver(lookup, scheme="nickname")

    def test_ambiguous_variant_fails(self):
        lookup = pd.DataFrame({
            "team_short": ["LA", "LA"],
            "team_full": ["Los Angeles Rams", "Los Angeles Chargers"],
            "team_master_short": ["LAR", "LAC"],
        })
        with pytest.raises(MalformedInputError) as excinfo:
            TeamNameResolver(lookup)
        assert excinfo.value.table == "team_lookup"
        assert excinfo.value.column == "team_short"

    def test_lookup_missing_column_fails(self):
        lookup = pd.DataFrame({"team_short": ["KC"], "team_full": ["Kansas City Chiefs"]})
        with pytest.raises(MalformedInputError) as excinfo:
            TeamNameResolver(lookup)
        assert excinfo.value.column == "team_master_short"


class TestResolveColumns:
    """Column-level resolution on tables."""

    def test_replaces_both_columns_and_leaves_input_untouched(self, lookup):
        games = pd.DataFrame({
            "team1": ["Kansas City Chiefs", "OAK"],
            "team2": ["Oakland Raiders", "WSH"],
        })
        out, reports = TeamNameResolver(lookup).resolve_columns(games, ["team1", "team2"], table="games")
        assert out["team1"].tolist() == ["KC", "LV"]
        assert out["team2"].tolist() == ["LV", "WAS"]
        assert games["team1"].tolist() == ["Kansas City Chiefs", "OAK"]
        assert [r.unresolved_rows for r in reports] == [0, 0]

    def test_unresolved_become_null_and_are_logged(self, lookup, caplog):
        picks = pd.DataFrame({"team": ["KC", "Houston Texans", "Houston Texans"]})
        with caplog.at_level(logging.WARNING):
            out, reports = TeamNameResolver(lookup).resolve_columns(picks, ["team"], table="picks")
        assert out.loc[0, "team"] == "KC"
        assert out["team"].isna().tolist() == [False, True, True]
        assert len(out) == 3
        assert reports[0].unresolved_rows == 2
        assert reports[0].unresolved_names == ["Houston Texans"]
        assert reports[0].resolved_rows == 1
        assert "picks.team" in caplog.text

    def test_resolve_column_returns_frame(self, lookup):
        out = TeamNameResolver(lookup).resolve_column(pd.DataFrame({"team": ["LV"]}), "team")
        assert out["team"].tolist() == ["LV"]

    def test_resolving_twice_is_a_no_op(self, lookup):
        resolver = TeamNameResolver(lookup)
        once = resolver.resolve_column(pd.DataFrame({"team": ["OAK", "WSH", "KC"]}), "team")
        twice = resolver.resolve_column(once, "team")
        assert twice["team"].tolist() == once["team"].tolist()

    def test_missing_team_column(self, lookup):
        with pytest.raises(MalformedInputError):
            TeamNameResolver(lookup).resolve_columns(pd.DataFrame({"x": [1]}), ["team"], table="picks")
