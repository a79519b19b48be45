# winpool/services/espn_common.py

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger("winpool.espn_common")

ESPN_NFL_BASE = "https://site.api.espn.com/apis/site/v2/sports/football/nfl"
HEADERS = {"User-Agent": "Mozilla/5.0", "Accept": "application/json"}


# -----------------------------------------------------------
# Shared HTTP helper with retries
# -----------------------------------------------------------
async def _get_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    max_tries: int = 2,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """
    Small shared helper for ESPN JSON fetch with basic retry + logging.

    Used by:
      - espn_records (one call per team)
      - espn_schedule (scoreboard)

    Pass `client` to reuse a pooled client (the records fetcher does this so
    32 concurrent requests share one connection pool).
    """
    last: Optional[Exception] = None

    for attempt in range(1, max_tries + 1):
        try:
            if client is not None:
                r = await client.get(url, params=params)
                r.raise_for_status()
                return r.json()
            async with httpx.AsyncClient(timeout=10.0, headers=HEADERS) as own:
                r = await own.get(url, params=params)
                r.raise_for_status()
                return r.json()
        except (httpx.HTTPError, ValueError) as e:
            last = e
            logger.warning(
                "espn_common _get_json %s attempt %s failed: %s",
                url,
                attempt,
                repr(e),
            )

    # If we get here, all retries failed
    logger.error(
        "espn_common _get_json giving up on %s after %s attempts: %s",
        url,
        max_tries,
        repr(last),
    )
    raise last or RuntimeError("unknown http error")


def mascot(team_name: str) -> str:
    """Last whitespace-delimited word of a team name ("Green Bay Packers" -> "Packers")."""
    parts = (team_name or "").split()
    return parts[-1] if parts else ""
