"""Pytest configuration and fixtures for win pool tests."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from winpool.core.pool_config import PoolConfig, build_pool_config, default_pool_config


@pytest.fixture
def pool_config() -> PoolConfig:
    """The bundled 32-team pool."""
    return default_pool_config()


@pytest.fixture
def small_config() -> PoolConfig:
    """Two owners, four teams."""
    return build_pool_config(
        {
            "Springfield Isotopes": {"owner": "Alice", "bet": 10},
            "Shelbyville Sharks": {"owner": "Bob", "bet": 20},
            "Green Bay Packers": {"owner": "Alice", "bet": 0},
            "New York Jets": {"owner": "Bob", "bet": 5},
        },
        {"Springfield Isotopes": "SPR", "Shelbyville Sharks": "SHE", "Green Bay Packers": "GB", "New York Jets": "NYJ"},
        {"NY Jets": "New York Jets"},
    )


def team_payload(wins: Any, losses: Any, summary: Optional[str] = None) -> Dict[str, Any]:
    """Minimal ESPN /teams/{code} body."""
    item: Dict[str, Any] = {
        "stats": [
            {"name": "ties", "value": 0.0},
            {"name": "wins", "value": wins},
            {"name": "losses", "value": losses},
        ]
    }
    if summary is not None:
        item["summary"] = summary
    return {"team": {"record": {"items": [item]}}}


def scoreboard_event(
    home: str,
    away: str,
    date: str = "2026-10-25T17:00Z",
    status: str = "STATUS_SCHEDULED",
    short_detail: Optional[str] = "10/25 - 1:00 PM EDT",
    week: Optional[int] = 8,
) -> Dict[str, Any]:
    """Minimal ESPN scoreboard event."""
    status_type: Dict[str, Any] = {"name": status}
    if short_detail is not None:
        status_type["shortDetail"] = short_detail
    ev: Dict[str, Any] = {
        "date": date,
        "status": {"type": status_type},
        "competitions": [
            {
                "competitors": [
                    {"homeAway": "home", "team": {"displayName": home}},
                    {"homeAway": "away", "team": {"displayName": away}},
                ]
            }
        ],
    }
    if week is not None:
        ev["week"] = {"number": week}
    return ev


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    return mock_client


@pytest.fixture
def sample_events() -> List[Dict[str, Any]]:
    return [
        scoreboard_event("Green Bay Packers", "Chicago Bears", date="2026-10-26T00:20Z", week=8),
        scoreboard_event("Dallas Cowboys", "Philadelphia Eagles", date="2026-10-25T17:00Z", status="STATUS_FINAL"),
        scoreboard_event("Kansas City Chiefs", "Buffalo Bills", date="2026-10-25T20:25Z"),
    ]
