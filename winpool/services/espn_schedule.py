# winpool/services/espn_schedule.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

import httpx

from winpool.models.pool_types import Assignment, ScheduledGame
from winpool.services.espn_common import ESPN_NFL_BASE, _get_json, mascot
from winpool.services.team_resolver import TeamNameResolver

logger = logging.getLogger("winpool.schedule")

SCOREBOARD_URL = f"{ESPN_NFL_BASE}/scoreboard"
UPCOMING_STATUSES = frozenset({"STATUS_SCHEDULED", "STATUS_POSTPONED"})


class ScheduleFetchFailure(Exception):
    """Scoreboard could not be loaded or was not the expected shape."""


def _to_ts(dt_str: Optional[str]) -> Optional[datetime]:
    if not dt_str:
        return None
    # ESPN dates are ISO, usually minute precision with a trailing Z
    try:
        dt = datetime.fromisoformat(dt_str.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


async def fetch_scoreboard_events(client: Optional[httpx.AsyncClient] = None) -> List[Dict[str, Any]]:
    try:
        data = await _get_json(SCOREBOARD_URL, client=client)
    except (httpx.HTTPError, ValueError) as e:
        raise ScheduleFetchFailure(f"Failed to fetch schedule: {e}") from e
    if not isinstance(data, dict):
        raise ScheduleFetchFailure("scoreboard payload is not an object")
    events = data.get("events") or []
    logger.info("SCHEDULE scoreboard -> %d events", len(events))
    return events


def _competitor(competitors: List[Dict[str, Any]], side: str) -> Optional[Dict[str, Any]]:
    return next((c for c in competitors if c.get("homeAway") == side), None)


def _display_name(comp: Dict[str, Any]) -> str:
    return ((comp or {}).get("team") or {}).get("displayName") or ""


def project(
    raw_events: Iterable[Dict[str, Any]],
    assignments: Mapping[str, Assignment],
    resolver: TeamNameResolver,
) -> List[ScheduledGame]:
    """
    Upcoming games that involve at least one owned team, earliest first.

    Only scheduled/postponed events are kept; names go through the resolver
    before the owner lookup.
    """
    games: List[ScheduledGame] = []
    for ev in raw_events:
        status = (ev.get("status") or {}).get("type") or {}
        if status.get("name") not in UPCOMING_STATUSES:
            continue

        comp = (ev.get("competitions") or [{}])[0]
        competitors = comp.get("competitors") or []
        home = _competitor(competitors, "home")
        away = _competitor(competitors, "away")
        if not home or not away:
            continue

        home_team = resolver.resolve(_display_name(home))
        away_team = resolver.resolve(_display_name(away))
        home_owner = (assignments.get(home_team) or {}).get("owner")
        away_owner = (assignments.get(away_team) or {}).get("owner")
        if not home_owner and not away_owner:
            continue

        when = _to_ts(ev.get("date"))
        if when is None:
            logger.warning("SCHEDULE skipping %s @ %s: bad date %r", away_team, home_team, ev.get("date"))
            continue

        owners = []
        if away_owner:
            owners.append(f"{mascot(away_team)} ({away_owner})")
        if home_owner:
            owners.append(f"{mascot(home_team)} ({home_owner})")

        games.append({
            "date": when,
            "homeTeam": home_team,
            "awayTeam": away_team,
            "homeOwner": home_owner,
            "awayOwner": away_owner,
            "displayStatus": status.get("shortDetail") or "TBD",
            "week": (ev.get("week") or {}).get("number") or "TBD",
            "owners": owners,
        })

    games.sort(key=lambda g: g["date"])
    return games
