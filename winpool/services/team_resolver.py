# winpool/services/team_resolver.py
from __future__ import annotations

from typing import Callable, Mapping, Optional, Sequence, Tuple

from winpool.services.espn_common import mascot

# A strategy returns the canonical name, or None to defer to the next one.
Strategy = Callable[[str], Optional[str]]


class TeamNameResolver:
    """
    Map an ESPN display name onto a canonical pool team name.

    Strategies run in order and the first hit wins:
      exact key -> alias table -> substring/mascot heuristic -> give up.
    Giving up returns the input unchanged; callers treat that as an
    untracked team (no owner lookup hit).

    An empty name never matches fuzzily. A plain substring test would
    accept it for every team and so return the first key.
    """

    def __init__(self, team_names: Sequence[str], aliases: Optional[Mapping[str, str]] = None):
        self._names: Tuple[str, ...] = tuple(team_names)
        self._known = frozenset(self._names)
        self._aliases = dict(aliases or {})
        self.strategies: Tuple[Strategy, ...] = (self.exact, self.alias, self.fuzzy)

    def exact(self, api_name: str) -> Optional[str]:
        return api_name if api_name in self._known else None

    def alias(self, api_name: str) -> Optional[str]:
        return self._aliases.get(api_name)

    def fuzzy(self, api_name: str) -> Optional[str]:
        needle = api_name.lower()
        if not needle:
            return None
        for name in self._names:
            last = mascot(name).lower()
            if needle in name.lower() or (last and last in needle):
                return name
        return None

    def resolve(self, api_name: str) -> str:
        for strategy in self.strategies:
            hit = strategy(api_name)
            if hit is not None:
                return hit
        return api_name
