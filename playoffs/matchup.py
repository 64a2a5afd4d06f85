"""Matchups: series of one or more matches between the same two alliances."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from playoffs.store import Alliance, Match, MatchStatus, MatchStore

_INTEGER = re.compile(r"[+-]?\d+")


class BracketError(Exception):
    """Raised when a bracket cannot be built or brought up to date."""


@dataclass(frozen=True, order=True)
class MatchupKey:
    """Identifies a matchup by round and 1-indexed group within the round."""

    round: int
    group: int

    def __str__(self) -> str:
        return f"{{Round:{self.round} Group:{self.group}}}"


@dataclass(frozen=True)
class AllianceSource:
    """Where an alliance comes from: alliance selection or a prior matchup."""

    alliance_id: int = 0
    matchup_key: MatchupKey | None = None
    use_winner: bool = False


def winner_source(round: int, group: int) -> AllianceSource:
    """Source pointing at the winner of another matchup."""
    return AllianceSource(matchup_key=MatchupKey(round, group), use_winner=True)


def loser_source(round: int, group: int) -> AllianceSource:
    """Source pointing at the loser of another matchup."""
    return AllianceSource(matchup_key=MatchupKey(round, group), use_winner=False)


@dataclass(frozen=True)
class MatchupTemplate:
    """The format of a matchup, independent of its current state."""

    key: MatchupKey
    display_name: str = ""
    num_wins_to_advance: int = 1
    red_source: AllianceSource = AllianceSource()
    blue_source: AllianceSource = AllianceSource()

    def match_display_name(self, instance: int) -> str:
        """Display name of one match within the series."""
        if self.num_wins_to_advance > 1 or instance > 1:
            return f"{self.display_name}-{instance}"
        return self.display_name


@dataclass(eq=False)
class Matchup:
    """Format and state of a series between two alliances."""

    template: MatchupTemplate
    red_alliance_id: int = 0
    blue_alliance_id: int = 0
    red_alliance_wins: int = 0
    blue_alliance_wins: int = 0
    red_source_matchup: Matchup | None = field(default=None, repr=False)
    blue_source_matchup: Matchup | None = field(default=None, repr=False)

    @property
    def key(self) -> MatchupKey:
        return self.template.key

    @property
    def round(self) -> int:
        return self.template.key.round

    @property
    def group(self) -> int:
        return self.template.key.group

    @property
    def display_name(self) -> str:
        return self.template.display_name

    @property
    def num_wins_to_advance(self) -> int:
        return self.template.num_wins_to_advance

    def match_display_name(self, instance: int) -> str:
        """Display name of one match within the series."""
        return self.template.match_display_name(instance)

    def long_display_name(self) -> str:
        """Display name of the whole matchup."""
        if self.is_final():
            return "Finals"
        if _INTEGER.fullmatch(self.display_name):
            return "Match " + self.display_name
        return self.display_name

    @staticmethod
    def _source_display_name(source: AllianceSource, matchup: Matchup | None) -> str:
        if matchup is None:
            return ""
        prefix = "W " if source.use_winner else "L "
        return prefix + matchup.display_name

    def red_alliance_source_display_name(self) -> str:
        """Name of the matchup that feeds the red alliance, or an empty string."""
        return self._source_display_name(self.template.red_source, self.red_source_matchup)

    def blue_alliance_source_display_name(self) -> str:
        """Name of the matchup that feeds the blue alliance, or an empty string."""
        return self._source_display_name(self.template.blue_source, self.blue_source_matchup)

    def status_text(self) -> tuple[str, str]:
        """Return the leading alliance colour and a readable series status."""
        red, blue = self.red_alliance_wins, self.blue_alliance_wins
        win_text = "Wins" if self.is_final() else "Advances"
        if red >= self.num_wins_to_advance:
            return "red", f"Red {win_text} {red}-{blue}"
        if blue >= self.num_wins_to_advance:
            return "blue", f"Blue {win_text} {blue}-{red}"
        if red > blue:
            return "red", f"Red Leads {red}-{blue}"
        if blue > red:
            return "blue", f"Blue Leads {blue}-{red}"
        if red > 0:
            return "", f"Series Tied {red}-{blue}"
        return "", ""

    def winner(self) -> int:
        """Winning alliance id, or 0 if not yet known."""
        if self.red_alliance_wins >= self.num_wins_to_advance:
            return self.red_alliance_id
        if self.blue_alliance_wins >= self.num_wins_to_advance:
            return self.blue_alliance_id
        return 0

    def loser(self) -> int:
        """Losing alliance id, or 0 if not yet known."""
        if self.red_alliance_wins >= self.num_wins_to_advance:
            return self.blue_alliance_id
        if self.blue_alliance_wins >= self.num_wins_to_advance:
            return self.red_alliance_id
        return 0

    def is_complete(self) -> bool:
        """True once the matchup has been won."""
        return self.winner() > 0

    def is_final(self) -> bool:
        """True if this is the final matchup of the bracket."""
        return self.display_name == "F"

    def update(self, store: MatchStore) -> None:
        """Bring this matchup and those feeding it up to date with match results.

        Counts wins and creates or deletes matches as required.
        """
        sources = (
            (self.template.red_source, self.red_source_matchup),
            (self.template.blue_source, self.blue_source_matchup),
        )
        # Only follow winner links so that no matchup is visited twice.
        for source, child in sources:
            if child is not None and source.use_winner:
                child.update(store)

        red_source, red_child = sources[0]
        if red_child is not None:
            self.red_alliance_id = red_child.winner() if red_source.use_winner else red_child.loser()
        blue_source, blue_child = sources[1]
        if blue_child is not None:
            self.blue_alliance_id = blue_child.winner() if blue_source.use_winner else blue_child.loser()

        matches = store.get_matches_by_elim_round_group(self.round, self.group)

        if self.red_alliance_id == 0 or self.blue_alliance_id == 0:
            # Results may have been edited; reset and drop any matches made earlier.
            self.red_alliance_wins = 0
            self.blue_alliance_wins = 0
            for match in matches:
                store.delete_match(match.id)
            return

        red_alliance = self._require_alliance(store, self.red_alliance_id)
        blue_alliance = self._require_alliance(store, self.blue_alliance_id)

        self.red_alliance_wins = 0
        self.blue_alliance_wins = 0
        unplayed: list[Match] = []
        for match in matches:
            if not match.is_complete():
                changed = False
                if (match.red1, match.red2, match.red3) != red_alliance.lineup:
                    match.red1, match.red2, match.red3 = red_alliance.lineup
                    match.elim_red_alliance = red_alliance.id
                    changed = True
                if (match.blue1, match.blue2, match.blue3) != blue_alliance.lineup:
                    match.blue1, match.blue2, match.blue3 = blue_alliance.lineup
                    match.elim_blue_alliance = blue_alliance.id
                    changed = True
                if changed:
                    store.update_match(match)
                unplayed.append(match)
            elif match.status is MatchStatus.RED_WON:
                self.red_alliance_wins += 1
            elif match.status is MatchStatus.BLUE_WON:
                self.blue_alliance_wins += 1

        needed = self.num_wins_to_advance - max(self.red_alliance_wins, self.blue_alliance_wins)
        if len(unplayed) > needed:
            for match in reversed(unplayed[max(needed, 0):]):
                store.delete_match(match.id)
        else:
            for offset in range(needed - len(unplayed)):
                instance = len(matches) + offset + 1
                match = Match(
                    match_type="elimination",
                    display_name=self.match_display_name(instance),
                    elim_round=self.round,
                    elim_group=self.group,
                    elim_instance=instance,
                    elim_red_alliance=red_alliance.id,
                    elim_blue_alliance=blue_alliance.id,
                )
                match.red1, match.red2, match.red3 = red_alliance.lineup
                match.blue1, match.blue2, match.blue3 = blue_alliance.lineup
                store.create_match(match)

    @staticmethod
    def _require_alliance(store: MatchStore, alliance_id: int) -> Alliance:
        alliance = store.get_alliance_by_id(alliance_id)
        if alliance is None:
            raise BracketError(f"alliance {alliance_id} does not exist in the database")
        return alliance