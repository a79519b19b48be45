# winpool/models/pool_model.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping, Tuple, Union

from winpool.models.pool_types import Assignment, OwnerSummary, TeamRecord, TeamRow
from winpool.services.espn_common import mascot

ZERO_RECORD: TeamRecord = {"wins": 0, "losses": 0, "record": "0-0"}


def _record_for(records: Mapping[str, TeamRecord], team: str) -> TeamRecord:
    return records.get(team) or ZERO_RECORD


def summarize_owners(
    records: Mapping[str, TeamRecord],
    assignments: Mapping[str, Assignment],
) -> Dict[str, OwnerSummary]:
    """
    Roll team records up per owner.

    Every assigned team is visited, missing records count as 0-0, so every
    owner in the table gets an entry. Each owner's teams end up sorted by
    wins descending; sorted() is stable so ties keep table order.
    """
    people: Dict[str, OwnerSummary] = {}
    for a in assignments.values():
        people.setdefault(a["owner"], {"totalWins": 0, "totalBets": 0, "teamCount": 0, "teams": []})

    for team, a in assignments.items():
        rec = _record_for(records, team)
        person = people[a["owner"]]
        person["totalWins"] += rec["wins"]
        person["totalBets"] += a["bet"]
        person["teams"].append({
            "name": team,
            "wins": rec["wins"],
            "losses": rec["losses"],
            "record": rec["record"],
            "bet": a["bet"],
        })
        person["teamCount"] += 1

    for person in people.values():
        person["teams"] = sorted(person["teams"], key=lambda t: t["wins"], reverse=True)
    return people


def rank_owners(summaries: Mapping[str, OwnerSummary]) -> List[Tuple[str, OwnerSummary]]:
    """Owners by total wins, highest first; ties keep mapping order."""
    return sorted(summaries.items(), key=lambda kv: kv[1]["totalWins"], reverse=True)


def average_wins(summary: OwnerSummary) -> float:
    """Mean wins per team to one decimal, exact halves rounded up (2.25 -> 2.3)."""
    if not summary["teamCount"]:
        return 0.0
    avg = Decimal(summary["totalWins"] / summary["teamCount"])
    return float(avg.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def best_teams(summary: OwnerSummary, n: int = 3) -> str:
    # teams are already sorted by wins
    return ", ".join(f"{mascot(t['name'])} ({t['wins']})" for t in summary["teams"][:n])


def wins_per_dollar(wins: int, bet: Union[int, float]) -> float:
    return wins / bet if bet > 0 else 0.0


def format_efficiency(wins: int, bet: Union[int, float]) -> str:
    return f"{wins_per_dollar(wins, bet):.3f}"


def all_teams(
    records: Mapping[str, TeamRecord],
    assignments: Mapping[str, Assignment],
) -> List[TeamRow]:
    """Flat per-team rows in assignment order."""
    rows: List[TeamRow] = []
    for team, a in assignments.items():
        rec = _record_for(records, team)
        rows.append({
            "name": team,
            "owner": a["owner"],
            "bet": a["bet"],
            "wins": rec["wins"],
            "losses": rec["losses"],
            "record": rec["record"],
            "winsPerDollar": format_efficiency(rec["wins"], a["bet"]),
        })
    return rows


def teams_alphabetical(rows: List[TeamRow]) -> List[TeamRow]:
    return sorted(rows, key=lambda r: (r["name"].casefold(), r["name"]))


def teams_by_wins(rows: List[TeamRow]) -> List[TeamRow]:
    return sorted(rows, key=lambda r: r["wins"], reverse=True)


def owner_cards(summaries: Mapping[str, OwnerSummary]) -> List[dict]:
    """Ranked owner rows with the derived card stats (avg wins, best teams)."""
    out = []
    for rank, (owner, s) in enumerate(rank_owners(summaries), start=1):
        out.append({
            "rank": rank,
            "owner": owner,
            "totalWins": s["totalWins"],
            "totalBets": s["totalBets"],
            "teamCount": s["teamCount"],
            "avgWins": average_wins(s),
            "bestTeams": best_teams(s),
            "teams": s["teams"],
        })
    return out
