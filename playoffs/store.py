"""In-memory storage of alliances and matches used by the playoff bracket."""

from __future__ import annotations

import dataclasses
import enum
import itertools
from dataclasses import dataclass, field
from datetime import datetime


class MatchStatus(enum.Enum):
    """Outcome of a single match."""

    NOT_PLAYED = ""
    RED_WON = "R"
    BLUE_WON = "B"
    TIE = "T"


@dataclass
class Alliance:
    """A playoff alliance and the three teams currently lined up to play."""

    id: int
    team_ids: list[int] = field(default_factory=list)
    lineup: tuple[int, int, int] = (0, 0, 0)

    def _copy(self) -> Alliance:
        return dataclasses.replace(self, team_ids=list(self.team_ids))


@dataclass
class Match:
    """A single scheduled match between a red and a blue set of teams."""

    id: int = 0
    match_type: str = ""
    display_name: str = ""
    time: datetime | None = None
    elim_round: int = 0
    elim_group: int = 0
    elim_instance: int = 0
    elim_red_alliance: int = 0
    elim_blue_alliance: int = 0
    red1: int = 0
    red2: int = 0
    red3: int = 0
    blue1: int = 0
    blue2: int = 0
    blue3: int = 0
    status: MatchStatus = MatchStatus.NOT_PLAYED

    def is_complete(self) -> bool:
        """Return True once the match has a result."""
        return self.status is not MatchStatus.NOT_PLAYED


def _match_order(match: Match) -> tuple[int, int, int, int]:
    return (match.elim_round, match.elim_instance, match.elim_group, match.id)


class MatchStore:
    """Keeps alliances and matches; every read hands back an independent copy."""

    def __init__(self) -> None:
        self._alliances: dict[int, Alliance] = {}
        self._matches: dict[int, Match] = {}
        self._ids = itertools.count(1)

    # Alliances

    def create_alliance(self, alliance: Alliance) -> None:
        """Store a new alliance; its id must not already be taken."""
        if alliance.id in self._alliances:
            raise ValueError(f"alliance {alliance.id} already exists")
        self._alliances[alliance.id] = alliance._copy()

    def get_alliance_by_id(self, alliance_id: int) -> Alliance | None:
        """Return the alliance with the given id, or None if there is none."""
        alliance = self._alliances.get(alliance_id)
        return alliance._copy() if alliance is not None else None

    def update_alliance_from_match(self, alliance_id: int, lineup) -> None:
        """Record the lineup an alliance played with, adding any new teams to it."""
        try:
            alliance = self._alliances[alliance_id]
        except KeyError:
            raise KeyError(f"alliance {alliance_id} does not exist") from None
        lineup = tuple(lineup)
        if len(lineup) != 3:
            raise ValueError("a lineup holds exactly three teams")
        alliance.lineup = lineup
        alliance.team_ids.extend(team for team in lineup if team not in alliance.team_ids)

    def truncate_alliances(self) -> None:
        """Remove every alliance."""
        self._alliances.clear()

    # Matches

    def create_match(self, match: Match) -> None:
        """Store a new match, assigning it a fresh id."""
        match.id = next(self._ids)
        self._matches[match.id] = dataclasses.replace(match)

    def update_match(self, match: Match) -> None:
        """Overwrite the stored match that has the same id."""
        if match.id not in self._matches:
            raise KeyError(f"match {match.id} does not exist")
        self._matches[match.id] = dataclasses.replace(match)

    def delete_match(self, match_id: int) -> None:
        """Remove the match with the given id."""
        try:
            del self._matches[match_id]
        except KeyError:
            raise KeyError(f"match {match_id} does not exist") from None

    def get_matches_by_type(self, match_type: str) -> list[Match]:
        """Return the matches of a type in order of round, instance and group."""
        found = (m for m in self._matches.values() if m.match_type == match_type)
        return [dataclasses.replace(m) for m in sorted(found, key=_match_order)]

    def get_matches_by_elim_round_group(self, elim_round: int, elim_group: int) -> list[Match]:
        """Return the elimination matches of one matchup in order of instance."""
        found = (
            m
            for m in self._matches.values()
            if m.match_type == "elimination" and m.elim_round == elim_round and m.elim_group == elim_group
        )
        return [dataclasses.replace(m) for m in sorted(found, key=_match_order)]

    def get_match_by_name(self, match_type: str, display_name: str) -> Match | None:
        """Return the match of a type with the given display name, or None."""
        for match in sorted(self._matches.values(), key=_match_order):
            if match.match_type == match_type and match.display_name == display_name:
                return dataclasses.replace(match)
        return None

    def truncate_matches(self) -> None:
        """Remove every match."""
        self._matches.clear()