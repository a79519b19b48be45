# winpool/core/refresh.py
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional
from zoneinfo import ZoneInfo

from winpool.core.pool_config import PoolConfig
from winpool.models import pool_model
from winpool.models.pool_types import SnapshotSource, TeamRecord
from winpool.services import espn_records, espn_schedule, mock_records
from winpool.services.team_resolver import TeamNameResolver

logger = logging.getLogger("winpool.refresh")

NO_GAMES_MESSAGE = "No upcoming games found for this week."
SCHEDULE_ERROR_MESSAGE = "Unable to load schedule. Please try again later."

RecordsFetcher = Callable[[Mapping[str, str]], Awaitable[Dict[str, TeamRecord]]]
EventsFetcher = Callable[[], Awaitable[List[Dict[str, Any]]]]


@dataclass(frozen=True)
class Snapshot:
    records: Mapping[str, TeamRecord]
    updated_at: datetime
    source: SnapshotSource

    @classmethod
    def build(cls, records: Dict[str, TeamRecord], source: SnapshotSource) -> "Snapshot":
        return cls(
            records=MappingProxyType(dict(records)),
            updated_at=datetime.now(timezone.utc),
            source=source,
        )


class RefreshManager:
    """
    Owns the current snapshot and the refresh state machine
    (idle -> loading -> displaying).

    refresh() never raises: live records replace the snapshot when ESPN
    covers enough teams, otherwise synthetic records do. Concurrent
    refresh() calls share the one in flight.
    """

    def __init__(
        self,
        config: PoolConfig,
        fetch_records: RecordsFetcher = espn_records.fetch_all,
        fetch_events: EventsFetcher = espn_schedule.fetch_scoreboard_events,
        rng: Optional[random.Random] = None,
        display_tz: str = "America/New_York",
    ):
        self.config = config
        self.resolver = TeamNameResolver(config.team_names, config.aliases)
        self._fetch_records = fetch_records
        self._fetch_events = fetch_events
        self._rng = rng
        self._tz = ZoneInfo(display_tz)

        self.state = "idle"
        self.snapshot: Optional[Snapshot] = None
        self.schedule: Dict[str, Any] = {"games": [], "message": None, "loaded": False}

        self._inflight: Optional[asyncio.Task] = None
        self._schedule_task: Optional[asyncio.Task] = None
        self._schedule_seq = 0
        self._auto_task: Optional[asyncio.Task] = None
        self.auto_interval: Optional[float] = None

    # ---------------- records ----------------
    async def refresh(self) -> Snapshot:
        if self._inflight is not None and not self._inflight.done():
            logger.info("REFRESH already in flight; joining it")
            return await asyncio.shield(self._inflight)
        self.state = "loading"
        self._inflight = asyncio.create_task(self._refresh_once())
        return await asyncio.shield(self._inflight)

    async def _refresh_once(self) -> Snapshot:
        try:
            records = await self._fetch_records(self.config.abbreviations)
            snap = Snapshot.build(records, "live")
        except espn_records.InsufficientCoverage as e:
            logger.warning("REFRESH %s; using mock data", e)
            snap = self._mock_snapshot()
        except Exception:
            logger.exception("REFRESH record fetch crashed; using mock data")
            snap = self._mock_snapshot()

        self.snapshot = snap
        self.state = "displaying"
        logger.info("REFRESH snapshot replaced: source=%s teams=%d", snap.source, len(snap.records))

        self._schedule_task = asyncio.create_task(self.refresh_schedule())
        return snap

    def _mock_snapshot(self) -> Snapshot:
        records = mock_records.generate_all(self.config.team_names, rng=self._rng)
        return Snapshot.build(records, "mock")

    # ---------------- schedule ----------------
    async def refresh_schedule(self) -> Dict[str, Any]:
        """
        Fetch + project upcoming games; failures only touch this view.

        Runs can overlap (every refresh starts one, /schedule starts one).
        Only the most recently started run may replace self.schedule, so a
        slow older fetch never overwrites a newer view.
        """
        self._schedule_seq += 1
        seq = self._schedule_seq
        try:
            events = await self._fetch_events()
            games = espn_schedule.project(events, self.config.assignments, self.resolver)
        except espn_schedule.ScheduleFetchFailure as e:
            logger.error("SCHEDULE load failed: %s", e)
            view = {"games": [], "message": SCHEDULE_ERROR_MESSAGE, "loaded": True}
        except Exception:
            logger.exception("SCHEDULE load crashed")
            view = {"games": [], "message": SCHEDULE_ERROR_MESSAGE, "loaded": True}
        else:
            view = {"games": games, "message": None if games else NO_GAMES_MESSAGE, "loaded": True}

        if seq != self._schedule_seq:
            logger.info("SCHEDULE run %d superseded by run %d; result dropped", seq, self._schedule_seq)
            return self.schedule
        self.schedule = view
        return view

    async def wait_for_schedule(self) -> Dict[str, Any]:
        if self._schedule_task is not None:
            await asyncio.shield(self._schedule_task)
        return self.schedule

    # ---------------- timer ----------------
    async def _auto_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            await self.refresh()

    def start_auto_refresh(self, interval: float) -> None:
        self.stop_auto_refresh()
        self.auto_interval = interval
        self._auto_task = asyncio.create_task(self._auto_loop(interval))
        logger.info("AUTO refresh every %.0fs", interval)

    def stop_auto_refresh(self) -> None:
        if self._auto_task is not None:
            self._auto_task.cancel()
            self._auto_task = None
            logger.info("AUTO refresh stopped")
        self.auto_interval = None

    @property
    def auto_refresh(self) -> bool:
        return self._auto_task is not None and not self._auto_task.done()

    # ---------------- view model ----------------
    def last_updated(self) -> Optional[str]:
        if self.snapshot is None:
            return None
        return self.snapshot.updated_at.astimezone(self._tz).isoformat()

    def status(self) -> Dict[str, Any]:
        return {
            "state": self.state,
            "source": self.snapshot.source if self.snapshot else None,
            "lastUpdated": self.last_updated(),
            "autoRefresh": self.auto_refresh,
            "autoRefreshSeconds": self.auto_interval,
        }

    def schedule_view(self) -> Dict[str, Any]:
        games = [
            {**g, "date": g["date"].isoformat()}
            for g in self.schedule["games"]
        ]
        return {"games": games, "message": self.schedule["message"], "loaded": self.schedule["loaded"]}

    def view_model(self) -> Dict[str, Any]:
        snap = self.snapshot
        records: Mapping[str, TeamRecord] = snap.records if snap else {}
        assignments = self.config.assignments

        summaries = pool_model.summarize_owners(records, assignments)
        rows = pool_model.all_teams(records, assignments)
        return {
            "lastUpdated": self.last_updated(),
            "updateStatus": "ok" if snap else "never",
            "owners": pool_model.owner_cards(summaries),
            "teams": {
                "byName": pool_model.teams_alphabetical(rows),
                "byWins": pool_model.teams_by_wins(rows),
            },
            "schedule": self.schedule_view(),
        }
