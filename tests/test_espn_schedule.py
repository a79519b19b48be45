"""Tests for the upcoming-games projector and scoreboard fetch."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from conftest import scoreboard_event
from winpool.services.espn_schedule import ScheduleFetchFailure, fetch_scoreboard_events, project
from winpool.services.team_resolver import TeamNameResolver


@pytest.fixture
def resolver(pool_config):
    return TeamNameResolver(pool_config.team_names, pool_config.aliases)


@pytest.mark.unit
def test_final_games_dropped(pool_config, resolver):
    events = [
        scoreboard_event("Dallas Cowboys", "Philadelphia Eagles", status="STATUS_FINAL"),
        scoreboard_event("Kansas City Chiefs", "Buffalo Bills"),
    ]
    games = project(events, pool_config.assignments, resolver)
    assert [(g["awayTeam"], g["homeTeam"]) for g in games] == [("Buffalo Bills", "Kansas City Chiefs")]


@pytest.mark.unit
def test_in_progress_dropped_postponed_kept(pool_config, resolver):
    events = [
        scoreboard_event("Detroit Lions", "Chicago Bears", status="STATUS_IN_PROGRESS"),
        scoreboard_event("Miami Dolphins", "New York Jets", status="STATUS_POSTPONED"),
    ]
    games = project(events, pool_config.assignments, resolver)
    assert [g["homeTeam"] for g in games] == ["Miami Dolphins"]


@pytest.mark.unit
def test_unowned_game_dropped_one_sided_kept(small_config):
    r = TeamNameResolver(small_config.team_names, small_config.aliases)
    events = [
        scoreboard_event("Toronto Argonauts", "Calgary Stampeders"),
        scoreboard_event("Toronto Argonauts", "NY Jets"),
    ]
    games = project(events, small_config.assignments, r)
    assert len(games) == 1
    g = games[0]
    assert g["awayTeam"] == "New York Jets"
    assert g["awayOwner"] == "Bob"
    assert g["homeTeam"] == "Toronto Argonauts"
    assert g["homeOwner"] is None
    assert g["owners"] == ["Jets (Bob)"]


@pytest.mark.unit
def test_sorted_by_date_and_parsed(pool_config, resolver, sample_events):
    games = project(sample_events, pool_config.assignments, resolver)
    assert [g["homeTeam"] for g in games] == ["Kansas City Chiefs", "Green Bay Packers"]
    assert games[0]["date"] == datetime(2026, 10, 25, 20, 25, tzinfo=timezone.utc)
    assert games[1]["owners"] == ["Bears (Big Dave)", "Packers (Jen)"]


@pytest.mark.unit
def test_equal_dates_keep_source_order(pool_config, resolver):
    events = [
        scoreboard_event("Denver Broncos", "Houston Texans", date="2026-10-25T17:00Z"),
        scoreboard_event("Atlanta Falcons", "Carolina Panthers", date="2026-10-25T17:00Z"),
    ]
    games = project(events, pool_config.assignments, resolver)
    assert [g["homeTeam"] for g in games] == ["Denver Broncos", "Atlanta Falcons"]


@pytest.mark.unit
def test_fallbacks_for_status_and_week(pool_config, resolver):
    events = [scoreboard_event("Denver Broncos", "Houston Texans", short_detail=None, week=None)]
    g = project(events, pool_config.assignments, resolver)[0]
    assert g["displayStatus"] == "TBD"
    assert g["week"] == "TBD"


@pytest.mark.unit
def test_missing_side_or_bad_date_skipped(pool_config, resolver):
    lonely = scoreboard_event("Denver Broncos", "Houston Texans")
    lonely["competitions"][0]["competitors"].pop()
    events = [lonely, scoreboard_event("Denver Broncos", "Houston Texans", date="someday")]
    assert project(events, pool_config.assignments, resolver) == []


@pytest.mark.unit
def test_fetch_scoreboard(make_client, sample_events):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/football/nfl/scoreboard")
        return httpx.Response(200, json={"events": sample_events})

    async def run():
        async with make_client(handler) as client:
            return await fetch_scoreboard_events(client=client)

    assert len(asyncio.run(run())) == 3


@pytest.mark.unit
def test_fetch_scoreboard_failure(make_client):
    async def run():
        async with make_client(lambda request: httpx.Response(500)) as client:
            return await fetch_scoreboard_events(client=client)

    with pytest.raises(ScheduleFetchFailure):
        asyncio.run(run())
