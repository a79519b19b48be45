# winpool/routers/pool_routes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request

from winpool.core import settings
from winpool.core.refresh import RefreshManager
from winpool.models import pool_model

logger = logging.getLogger("winpool.pool")
router = APIRouter(tags=["pool"])


def get_manager(request: Request) -> RefreshManager:
    return request.app.state.manager


async def _ensure_snapshot(manager: RefreshManager) -> None:
    if manager.snapshot is None:
        await manager.refresh()


# ---------------- Full dashboard ----------------
@router.get("/dashboard")
async def pool_dashboard(manager: RefreshManager = Depends(get_manager)):
    """
    Everything the dashboard shows: ranked owners, teams (two orders),
    upcoming schedule and the last-updated stamp. Loads data on first call.
    """
    await _ensure_snapshot(manager)
    return manager.view_model()


@router.post("/refresh")
async def pool_refresh(manager: RefreshManager = Depends(get_manager)):
    """Manual refresh. Joins a refresh already in flight instead of starting another."""
    await manager.refresh()
    await manager.wait_for_schedule()
    logger.info("POOL manual refresh done: %s", manager.status())
    return manager.view_model()


@router.get("/owners")
async def pool_owners(manager: RefreshManager = Depends(get_manager)):
    await _ensure_snapshot(manager)
    summaries = pool_model.summarize_owners(manager.snapshot.records, manager.config.assignments)
    return {"lastUpdated": manager.last_updated(), "rows": pool_model.owner_cards(summaries)}


@router.get("/teams")
async def pool_teams(
    sort: str = Query("name", pattern="^(name|wins)$"),
    manager: RefreshManager = Depends(get_manager),
):
    await _ensure_snapshot(manager)
    rows = pool_model.all_teams(manager.snapshot.records, manager.config.assignments)
    ordered = pool_model.teams_alphabetical(rows) if sort == "name" else pool_model.teams_by_wins(rows)
    return {"lastUpdated": manager.last_updated(), "sort": sort, "rows": ordered}


@router.get("/schedule")
async def pool_schedule(manager: RefreshManager = Depends(get_manager)):
    """Upcoming games involving at least one owned team (reloaded on each call)."""
    await manager.refresh_schedule()
    return manager.schedule_view()


@router.get("/status")
async def pool_status(manager: RefreshManager = Depends(get_manager)):
    return manager.status()


@router.post("/auto_refresh")
async def pool_auto_refresh(
    enabled: bool,
    seconds: float = Query(settings.REFRESH_SECONDS, gt=0),
    manager: RefreshManager = Depends(get_manager),
):
    if enabled:
        manager.start_auto_refresh(seconds)
    else:
        manager.stop_auto_refresh()
    return manager.status()
