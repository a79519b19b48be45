# winpool/services/espn_records.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from winpool.models.pool_types import TeamRecord
from winpool.services.espn_common import ESPN_NFL_BASE, HEADERS, _get_json

logger = logging.getLogger("winpool.records")

# Live data is only trusted when MORE than this many teams came back.
LIVE_COVERAGE_THRESHOLD = 20


class InsufficientCoverage(Exception):
    """Too few teams resolved for the live records to be used."""

    def __init__(self, count: int, threshold: int = LIVE_COVERAGE_THRESHOLD):
        super().__init__(f"Only got data for {count} teams (need more than {threshold})")
        self.count = count
        self.threshold = threshold


def team_url(abbrev: str) -> str:
    return f"{ESPN_NFL_BASE}/teams/{abbrev.lower()}"


def _stat(stats: list, name: str) -> int:
    for s in stats:
        if isinstance(s, dict) and s.get("name") == name:
            val = s.get("value")
            return int(float(val)) if val not in (None, "") else 0
    return 0


def parse_team_record(payload: Dict[str, Any]) -> TeamRecord:
    """
    Pull {wins, losses, record} out of an ESPN /teams/{code} payload.

    Raises ValueError when the payload has no record items.
    """
    team = (payload or {}).get("team") or {}
    items = (team.get("record") or {}).get("items") or []
    if not items or not isinstance(items[0], dict):
        raise ValueError("payload has no team.record.items")

    item = items[0]
    stats = item.get("stats") or []
    wins = _stat(stats, "wins")
    losses = _stat(stats, "losses")
    return {
        "wins": wins,
        "losses": losses,
        "record": item.get("summary") or f"{wins}-{losses}",
    }


async def fetch_team_record(
    name: str,
    abbrev: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[TeamRecord]:
    """One team; failures are logged and reported as None."""
    try:
        payload = await _get_json(team_url(abbrev), max_tries=1, client=client)
        rec = parse_team_record(payload)
    except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
        logger.info("RECORDS failed to fetch %s (%s): %s", name, abbrev, e)
        return None
    logger.debug("RECORDS %s: %s", name, rec["record"])
    return rec


async def fetch_all(
    abbreviations: Mapping[str, str],
    client: Optional[httpx.AsyncClient] = None,
    threshold: int = LIVE_COVERAGE_THRESHOLD,
) -> Dict[str, TeamRecord]:
    """
    Fetch every configured team concurrently and wait for all of them.

    Returns {canonical name: TeamRecord} when more than `threshold` teams
    resolved, otherwise raises InsufficientCoverage (the partial map is
    dropped).
    """
    names = list(abbreviations)

    async def _run(c: httpx.AsyncClient):
        return await asyncio.gather(
            *(fetch_team_record(n, abbreviations[n], client=c) for n in names),
            return_exceptions=True,
        )

    if client is not None:
        results = await _run(client)
    else:
        async with httpx.AsyncClient(timeout=10.0, headers=HEADERS) as own:
            results = await _run(own)

    teams: Dict[str, TeamRecord] = {}
    for name, res in zip(names, results):
        if isinstance(res, BaseException):
            logger.warning("RECORDS unexpected error for %s: %r", name, res)
            continue
        if res is not None:
            teams[name] = res

    logger.info("RECORDS resolved %d/%d teams", len(teams), len(names))
    if len(teams) > threshold:
        return teams
    raise InsufficientCoverage(len(teams), threshold)
