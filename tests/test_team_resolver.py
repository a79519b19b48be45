"""Tests for ESPN display name -> pool team resolution."""

from __future__ import annotations

import pytest

from winpool.services.team_resolver import TeamNameResolver


@pytest.fixture
def resolver(pool_config):
    return TeamNameResolver(pool_config.team_names, pool_config.aliases)


@pytest.mark.unit
def test_exact_match_returned_as_is(resolver):
    assert resolver.resolve("Green Bay Packers") == "Green Bay Packers"


@pytest.mark.unit
def test_alias_table(resolver):
    assert resolver.resolve("Washington Football Team") == "Washington Commanders"
    assert resolver.resolve("Oakland Raiders") == "Las Vegas Raiders"


@pytest.mark.unit
def test_exact_beats_alias():
    """An alias entry for a canonical key never shadows the exact match."""
    r = TeamNameResolver(["Team A", "Team B"], {"Team A": "Team B"})
    assert r.resolve("Team A") == "Team A"


@pytest.mark.unit
def test_alias_beats_fuzzy():
    r = TeamNameResolver(["Springfield Bears", "Shelbyville Sharks"], {"Bears Club": "Shelbyville Sharks"})
    # fuzzy alone would hit "Springfield Bears" via the mascot
    assert r.fuzzy("Bears Club") == "Springfield Bears"
    assert r.resolve("Bears Club") == "Shelbyville Sharks"


@pytest.mark.unit
def test_fuzzy_substring_of_canonical(resolver):
    assert resolver.resolve("kansas city") == "Kansas City Chiefs"


@pytest.mark.unit
def test_fuzzy_mascot_in_api_name(resolver):
    assert resolver.resolve("The Mighty SEAHAWKS") == "Seattle Seahawks"


@pytest.mark.unit
def test_fuzzy_first_key_wins():
    r = TeamNameResolver(["New York Giants", "New York Jets"])
    assert r.resolve("New York") == "New York Giants"


@pytest.mark.unit
def test_no_match_returns_input(resolver):
    assert resolver.resolve("Toronto Argonauts") == "Toronto Argonauts"


@pytest.mark.unit
def test_empty_name_is_untracked(resolver):
    assert resolver.resolve("") == ""


@pytest.mark.unit
def test_strategy_order_is_explicit(resolver):
    assert resolver.strategies == (resolver.exact, resolver.alias, resolver.fuzzy)
