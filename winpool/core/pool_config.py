# winpool/core/pool_config.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from winpool.models.pool_types import Assignment

logger = logging.getLogger("winpool.config")


class PoolConfigError(ValueError):
    """Raised when a pool configuration file is malformed."""


# Team -> owner + wager. This is the universe of teams the pool tracks.
TEAM_ASSIGNMENTS: Dict[str, Assignment] = {
    # Mike
    "Kansas City Chiefs": {"owner": "Mike", "bet": 30},
    "Buffalo Bills": {"owner": "Mike", "bet": 25},
    "Cincinnati Bengals": {"owner": "Mike", "bet": 15},
    "Jacksonville Jaguars": {"owner": "Mike", "bet": 10},
    "Seattle Seahawks": {"owner": "Mike", "bet": 10},
    "New Orleans Saints": {"owner": "Mike", "bet": 5},
    "Tennessee Titans": {"owner": "Mike", "bet": 3},
    "Carolina Panthers": {"owner": "Mike", "bet": 2},
    # Sarah
    "Philadelphia Eagles": {"owner": "Sarah", "bet": 30},
    "Baltimore Ravens": {"owner": "Sarah", "bet": 25},
    "Miami Dolphins": {"owner": "Sarah", "bet": 15},
    "Los Angeles Chargers": {"owner": "Sarah", "bet": 10},
    "Minnesota Vikings": {"owner": "Sarah", "bet": 10},
    "Atlanta Falcons": {"owner": "Sarah", "bet": 5},
    "Las Vegas Raiders": {"owner": "Sarah", "bet": 3},
    "Arizona Cardinals": {"owner": "Sarah", "bet": 2},
    # Big Dave
    "San Francisco 49ers": {"owner": "Big Dave", "bet": 30},
    "Detroit Lions": {"owner": "Big Dave", "bet": 25},
    "Dallas Cowboys": {"owner": "Big Dave", "bet": 15},
    "Houston Texans": {"owner": "Big Dave", "bet": 10},
    "Pittsburgh Steelers": {"owner": "Big Dave", "bet": 10},
    "Chicago Bears": {"owner": "Big Dave", "bet": 5},
    "New York Giants": {"owner": "Big Dave", "bet": 3},
    "Washington Commanders": {"owner": "Big Dave", "bet": 2},
    # Jen
    "Green Bay Packers": {"owner": "Jen", "bet": 30},
    "Los Angeles Rams": {"owner": "Jen", "bet": 25},
    "Cleveland Browns": {"owner": "Jen", "bet": 15},
    "Tampa Bay Buccaneers": {"owner": "Jen", "bet": 10},
    "Indianapolis Colts": {"owner": "Jen", "bet": 10},
    "Denver Broncos": {"owner": "Jen", "bet": 5},
    "New York Jets": {"owner": "Jen", "bet": 3},
    "New England Patriots": {"owner": "Jen", "bet": 2},
}

# Canonical name -> ESPN team code used by /teams/{code}
TEAM_ABBREVIATIONS: Dict[str, str] = {
    "Arizona Cardinals": "ARI",
    "Atlanta Falcons": "ATL",
    "Baltimore Ravens": "BAL",
    "Buffalo Bills": "BUF",
    "Carolina Panthers": "CAR",
    "Chicago Bears": "CHI",
    "Cincinnati Bengals": "CIN",
    "Cleveland Browns": "CLE",
    "Dallas Cowboys": "DAL",
    "Denver Broncos": "DEN",
    "Detroit Lions": "DET",
    "Green Bay Packers": "GB",
    "Houston Texans": "HOU",
    "Indianapolis Colts": "IND",
    "Jacksonville Jaguars": "JAX",
    "Kansas City Chiefs": "KC",
    "Las Vegas Raiders": "LV",
    "Los Angeles Chargers": "LAC",
    "Los Angeles Rams": "LAR",
    "Miami Dolphins": "MIA",
    "Minnesota Vikings": "MIN",
    "New England Patriots": "NE",
    "New Orleans Saints": "NO",
    "New York Giants": "NYG",
    "New York Jets": "NYJ",
    "Philadelphia Eagles": "PHI",
    "Pittsburgh Steelers": "PIT",
    "San Francisco 49ers": "SF",
    "Seattle Seahawks": "SEA",
    "Tampa Bay Buccaneers": "TB",
    "Tennessee Titans": "TEN",
    "Washington Commanders": "WSH",
}

# ESPN / legacy display names that don't match a canonical key verbatim
TEAM_NAME_ALIASES: Dict[str, str] = {
    "Washington": "Washington Commanders",
    "Washington Football Team": "Washington Commanders",
    "Washington Redskins": "Washington Commanders",
    "Oakland Raiders": "Las Vegas Raiders",
    "San Diego Chargers": "Los Angeles Chargers",
    "St. Louis Rams": "Los Angeles Rams",
    "LA Chargers": "Los Angeles Chargers",
    "LA Rams": "Los Angeles Rams",
    "NY Giants": "New York Giants",
    "NY Jets": "New York Jets",
    "SF 49ers": "San Francisco 49ers",
}


@dataclass(frozen=True)
class PoolConfig:
    assignments: Mapping[str, Assignment]
    abbreviations: Mapping[str, str]
    aliases: Mapping[str, str] = field(default_factory=dict)

    @property
    def team_names(self) -> tuple[str, ...]:
        return tuple(self.assignments)

    @property
    def owners(self) -> tuple[str, ...]:
        """Distinct owners in first-seen assignment order."""
        return tuple(dict.fromkeys(a["owner"] for a in self.assignments.values()))


def _validate_assignments(raw: Any) -> Dict[str, Assignment]:
    if not isinstance(raw, dict) or not raw:
        raise PoolConfigError("assignments must be a non-empty object")
    out: Dict[str, Assignment] = {}
    for team, entry in raw.items():
        if not isinstance(entry, dict):
            raise PoolConfigError(f"assignment for {team!r} must be an object")
        owner = entry.get("owner")
        bet = entry.get("bet", 0)
        if not isinstance(owner, str) or not owner.strip():
            raise PoolConfigError(f"assignment for {team!r} needs an owner")
        if isinstance(bet, bool) or not isinstance(bet, (int, float)) or bet < 0:
            raise PoolConfigError(f"bet for {team!r} must be a non-negative number")
        out[team] = {"owner": owner, "bet": bet}
    return out


def build_pool_config(
    assignments: Any,
    abbreviations: Any,
    aliases: Any = None,
) -> PoolConfig:
    """
    Validate raw tables and freeze them into a PoolConfig.

    Every abbreviation and every alias target must name an assigned team.
    """
    assigned = _validate_assignments(assignments)

    if not isinstance(abbreviations, dict):
        raise PoolConfigError("abbreviations must be an object")
    for team, code in abbreviations.items():
        if team not in assigned:
            raise PoolConfigError(f"abbreviation for unknown team {team!r}")
        if not isinstance(code, str) or not code:
            raise PoolConfigError(f"abbreviation for {team!r} must be a string")

    aliases = aliases or {}
    if not isinstance(aliases, dict):
        raise PoolConfigError("aliases must be an object")
    for api_name, canonical in aliases.items():
        if canonical not in assigned:
            raise PoolConfigError(f"alias {api_name!r} points at unknown team {canonical!r}")

    missing = [t for t in assigned if t not in abbreviations]
    if missing:
        logger.warning("CONFIG teams without an abbreviation (never fetched live): %s", missing)

    return PoolConfig(
        assignments=MappingProxyType(assigned),
        abbreviations=MappingProxyType(dict(abbreviations)),
        aliases=MappingProxyType(dict(aliases)),
    )


def default_pool_config() -> PoolConfig:
    return build_pool_config(TEAM_ASSIGNMENTS, TEAM_ABBREVIATIONS, TEAM_NAME_ALIASES)


def load_pool_config(path: Optional[str] = None) -> PoolConfig:
    """
    Load the pool tables from a JSON file, or the bundled defaults if no path.

    File shape:
      {"assignments": {...}, "abbreviations": {...}, "aliases": {...}}
    Missing "abbreviations"/"aliases" keys fall back to the bundled tables
    (filtered to the file's teams).
    """
    if not path:
        return default_pool_config()

    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        raise PoolConfigError(f"cannot read pool config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise PoolConfigError("pool config must be a JSON object")

    assignments = raw.get("assignments")
    abbreviations = raw.get("abbreviations")
    if abbreviations is None and isinstance(assignments, dict):
        abbreviations = {t: c for t, c in TEAM_ABBREVIATIONS.items() if t in assignments}
    aliases = raw.get("aliases")
    if aliases is None and isinstance(assignments, dict):
        aliases = {a: t for a, t in TEAM_NAME_ALIASES.items() if t in assignments}

    cfg = build_pool_config(assignments, abbreviations, aliases)
    logger.info("CONFIG loaded %s: %d teams, %d owners", path, len(cfg.assignments), len(cfg.owners))
    return cfg
