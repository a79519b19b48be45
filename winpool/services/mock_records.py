# winpool/services/mock_records.py
from __future__ import annotations

import random
from typing import Dict, Iterable, Optional

from winpool.models.pool_types import TeamRecord

MAX_MOCK_WINS = 10
MAX_MOCK_LOSSES = 5


def generate_all(team_names: Iterable[str], rng: Optional[random.Random] = None) -> Dict[str, TeamRecord]:
    """
    Synthetic records for every tracked team, used when ESPN is unusable.

    Note: the "record" string comes from its own pair of draws, so it will
    usually disagree with wins/losses. Kept as-is for parity with the
    dashboard this service replaces.
    """
    rnd = rng or random.Random()
    out: Dict[str, TeamRecord] = {}
    for name in team_names:
        wins = rnd.randint(0, MAX_MOCK_WINS)
        losses = rnd.randint(0, MAX_MOCK_LOSSES)
        out[name] = {
            "wins": wins,
            "losses": losses,
            "record": f"{rnd.randint(0, MAX_MOCK_WINS)}-{rnd.randint(0, MAX_MOCK_LOSSES)}",
        }
    return out
