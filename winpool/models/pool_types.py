# winpool/models/pool_types.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from typing_extensions import Literal, TypedDict


class TeamRecord(TypedDict):
    wins: int
    losses: int
    record: str


class Assignment(TypedDict):
    owner: str
    bet: Union[int, float]


class OwnerTeam(TypedDict):
    name: str
    wins: int
    losses: int
    record: str
    bet: Union[int, float]


class OwnerSummary(TypedDict):
    totalWins: int
    totalBets: Union[int, float]
    teamCount: int
    teams: List[OwnerTeam]


class TeamRow(TypedDict):
    name: str
    owner: str
    bet: Union[int, float]
    wins: int
    losses: int
    record: str
    winsPerDollar: str


class ScheduledGame(TypedDict):
    date: datetime
    homeTeam: str
    awayTeam: str
    homeOwner: Optional[str]
    awayOwner: Optional[str]
    displayStatus: str
    week: Union[int, Literal["TBD"]]
    owners: List[str]


SnapshotSource = Literal["live", "mock"]
