from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import pytest

from playoffs.formats import new_double_elimination_bracket, new_single_elimination_bracket
from playoffs.matchup import BracketError
from playoffs.store import Alliance, MatchStatus, MatchStore

START = datetime.fromtimestamp(0, tz=timezone.utc)
RED = MatchStatus.RED_WON
BLUE = MatchStatus.BLUE_WON
TIE = MatchStatus.TIE
NOT_PLAYED = MatchStatus.NOT_PLAYED


def lineup(alliance_id):
    return (100 * alliance_id + 2, 100 * alliance_id + 1, 100 * alliance_id + 3)


def expected_match(name, red, blue):
    return (name, red, blue, lineup(red), lineup(blue))


def describe(match):
    return (
        match.display_name,
        match.elim_red_alliance,
        match.elim_blue_alliance,
        (match.red1, match.red2, match.red3),
        (match.blue1, match.blue2, match.blue3),
    )


def make_store(num_alliances):
    store = MatchStore()
    for i in range(1, num_alliances + 1):
        store.create_alliance(
            Alliance(id=i, team_ids=[100 * i + 1, 100 * i + 2, 100 * i + 3], lineup=lineup(i))
        )
    return store


@dataclass
class Step:
    """Results to record, then what the schedule should look like after an update."""

    results: tuple
    count: Optional[int] = None
    tail: dict = field(default_factory=dict)
    complete: Optional[bool] = None
    standing: Optional[tuple] = None


def step(count, *results, tail=None, complete=None, standing=None):
    return Step(results, count, tail or {}, complete, standing)


def record(store, display_name, status):
    match = store.get_match_by_name("elimination", display_name)
    match.status = status
    store.update_match(match)
    store.update_alliance_from_match(match.elim_red_alliance, (match.red1, match.red2, match.red3))
    store.update_alliance_from_match(match.elim_blue_alliance, (match.blue1, match.blue2, match.blue3))


def run_steps(store, bracket, steps):
    for current in steps:
        for display_name, status in current.results:
            record(store, display_name, status)
        bracket.update(store, START)
        matches = store.get_matches_by_type("elimination")
        if current.count is not None:
            assert len(matches) == current.count, current.results
        for index, (name, red, blue) in current.tail.items():
            assert describe(matches[index]) == expected_match(name, red, blue)
        if current.complete is not None:
            assert bracket.is_complete() == current.complete, current.results
        if current.standing is not None:
            assert (bracket.winner(), bracket.finalist()) == current.standing


OPEN = {"complete": False, "standing": (0, 0)}

SCENARIOS = {
    "double_initial": (new_double_elimination_bracket, 8, [
        step(4, tail={0: ("1", 1, 8), 1: ("2", 4, 5), 2: ("3", 2, 7), 3: ("4", 3, 6)}),
    ]),
    "double_progression": (new_double_elimination_bracket, 8, [
        step(4),
        step(4, ("1", BLUE)),
        step(6, ("2", RED), tail={4: ("5", 1, 5), 5: ("7", 8, 4)}),
        step(6, ("3", BLUE)),
        step(8, ("4", RED), tail={4: ("5", 1, 5), 5: ("6", 2, 6), 6: ("7", 8, 4), 7: ("8", 7, 3)}),
        step(8, ("5", BLUE)),
        step(8, ("6", RED)),
        step(9, ("7", BLUE), tail={8: ("9", 8, 2)}),
        step(11, ("8", BLUE), tail={9: ("10", 7, 5), 10: ("11", 4, 3)}),
        step(11, ("9", RED)),
        step(12, ("10", RED), tail={10: ("11", 4, 3), 11: ("12", 7, 8)}),
        step(12, ("11", RED)),
        step(13, ("12", RED), tail={12: ("13", 3, 7)}),
        step(15, ("13", BLUE), tail={13: ("F-1", 4, 7), 14: ("F-2", 4, 7)}, **OPEN),
        step(15, ("F-1", BLUE), **OPEN),
        step(16, ("F-2", RED), tail={15: ("F-3", 4, 7)}, **OPEN),
        step(17, ("F-3", TIE), tail={16: ("F-4", 4, 7)}, **OPEN),
        step(18, ("F-4", TIE), tail={17: ("F-5", 4, 7)}, **OPEN),
        step(18, ("F-5", BLUE), complete=True, standing=(7, 4)),
    ]),
    "double_tie": (new_double_elimination_bracket, 8, [
        step(4),
        step(5, ("1", TIE), tail={4: ("1-2", 1, 8)}),
        step(6, ("1-2", TIE), tail={5: ("1-3", 1, 8)}),
        step(6, ("1-3", RED)),
    ]),
    "double_change_result": (new_double_elimination_bracket, 8, [
        step(4),
        step(4, ("1", BLUE)),
        step(6, ("2", RED), tail={4: ("5", 1, 5), 5: ("7", 8, 4)}),
        step(4, ("2", NOT_PLAYED)),
        step(6, ("2", BLUE), tail={4: ("5", 1, 4), 5: ("7", 8, 5)}),
    ]),
    "single_final_populated_after_semifinal": (new_single_elimination_bracket, 3, [
        step(2),
        step(4, ("SF2-1", BLUE), ("SF2-2", BLUE), tail={2: ("F-1", 1, 3), 3: ("F-2", 1, 3)}),
    ]),
    "single_final_generated_when_both_semifinals_conclude": (new_single_elimination_bracket, 4, [
        step(4),
        step(4, ("SF2-1", RED), ("SF2-2", RED)),
        step(6, ("SF1-1", RED), ("SF1-2", RED), tail={4: ("F-1", 1, 2), 5: ("F-2", 1, 2)}),
    ]),
    "single_create_next_round": (new_single_elimination_bracket, 4, [
        step(4),
        step(4, ("SF1-1", BLUE)),
        step(4, ("SF2-1", BLUE)),
        step(4, ("SF1-2", BLUE)),
        step(6, ("SF2-2", BLUE), tail={4: ("F-1", 4, 3), 5: ("F-2", 4, 3)}),
    ]),
    "single_tie_and_sweep": (new_single_elimination_bracket, 2, [
        step(2),
        step(3, ("F-1", TIE), **OPEN),
        step(3, ("F-2", BLUE), complete=False),
        step(3, ("F-3", BLUE), complete=True, standing=(2, 1)),
    ]),
    "single_tie_and_split": (new_single_elimination_bracket, 2, [
        step(2),
        step(2, ("F-1", RED), complete=False),
        step(3, ("F-2", TIE), complete=False),
        step(4, ("F-3", BLUE), tail={3: ("F-4", 1, 2)}, complete=False),
        step(None, ("F-4", TIE), complete=False),
        step(None, ("F-5", RED), complete=True, standing=(1, 2)),
    ]),
    "single_two_ties": (new_single_elimination_bracket, 2, [
        step(2),
        step(3, ("F-1", TIE), complete=False),
        step(3, ("F-2", BLUE), complete=False),
        step(4, ("F-3", TIE), tail={3: ("F-4", 1, 2)}, complete=False),
        step(None, ("F-4", BLUE), complete=True),
    ]),
    "single_repeated_ties": (new_single_elimination_bracket, 2, [
        step(2, complete=False),
        *(step(n + 2, (f"F-{n}", TIE), complete=False) for n in range(1, 7)),
        step(8, ("F-7", RED), complete=False),
        step(9, ("F-8", BLUE), complete=False),
        step(9, ("F-9", RED), complete=True),
    ]),
    "single_remove_unneeded_matches": (new_single_elimination_bracket, 2, [
        step(2),
        step(3, ("F-1", RED), ("F-2", TIE)),
        step(2, ("F-2", RED), complete=True),
        step(3, ("F-2", BLUE), tail={2: ("F-3", 1, 2)}, complete=False),
    ]),
    "single_change_previous_round_result": (new_single_elimination_bracket, 4, [
        step(4),
        step(None, ("SF2-1", RED), ("SF2-2", BLUE)),
        step(None, ("SF2-3", RED)),
        step(5, ("SF2-3", BLUE)),
        step(None, ("SF1-1", RED), ("SF1-2", RED)),
        step(None, ("SF1-2", BLUE)),
        step(8, ("SF1-3", BLUE), tail={6: ("F-1", 4, 3), 7: ("F-2", 4, 3)}),
        step(6, ("SF2-3", NOT_PLAYED)),
    ]),
}


@pytest.mark.parametrize("scenario", sorted(SCENARIOS))
def test_scenario(scenario):
    factory, num_alliances, steps = SCENARIOS[scenario]
    run_steps(make_store(num_alliances), factory(num_alliances), steps)


def _seed_pairs(round_name, groups, pairs):
    """Both games of each listed group, first games before second games."""
    return [(f"{round_name}{g}-{game}", red, blue) for game in (1, 2) for g, (red, blue) in zip(groups, pairs)]


QF = {1: (1, 8), 2: (4, 5), 3: (2, 7), 4: (3, 6)}
EF = {1: (1, 16), 2: (8, 9), 3: (4, 13), 4: (5, 12), 5: (2, 15), 6: (7, 10), 7: (3, 14), 8: (6, 11)}


def _quarters(*groups):
    return _seed_pairs("QF", groups, [QF[g] for g in groups])


def _eighths(*groups):
    return _seed_pairs("EF", groups, [EF[g] for g in groups])


SINGLE_INITIAL_CASES = {
    2: [("F-1", 1, 2), ("F-2", 1, 2)],
    3: [("SF2-1", 2, 3), ("SF2-2", 2, 3)],
    4: _seed_pairs("SF", (1, 2), [(1, 4), (2, 3)]),
    5: _quarters(2) + [("SF2-1", 2, 3), ("SF2-2", 2, 3)],
    6: _quarters(2, 4),
    7: _quarters(2, 3, 4),
    8: _quarters(1, 2, 3, 4),
    9: _eighths(2) + _quarters(2, 3, 4),
    10: _eighths(2, 6) + _quarters(2, 4),
    11: _eighths(2, 6, 8) + _quarters(2),
    12: _eighths(2, 4, 6, 8),
    13: _eighths(2, 3, 4, 6, 8),
    14: _eighths(2, 3, 4, 6, 7, 8),
    15: _eighths(2, 3, 4, 5, 6, 7, 8),
    16: _eighths(1, 2, 3, 4, 5, 6, 7, 8),
}


def test_single_elimination_ten_alliances_first_matches():
    store = make_store(10)
    new_single_elimination_bracket(10).update(store, START)
    actual = [describe(m) for m in store.get_matches_by_type("elimination")[:4]]
    assert actual == [
        expected_match("EF2-1", 8, 9),
        expected_match("EF6-1", 7, 10),
        expected_match("EF2-2", 8, 9),
        expected_match("EF6-2", 7, 10),
    ]


@pytest.mark.parametrize("num_alliances", sorted(SINGLE_INITIAL_CASES))
def test_single_elimination_initial(num_alliances):
    store = make_store(num_alliances)
    new_single_elimination_bracket(num_alliances).update(store, START)
    actual = [describe(m) for m in store.get_matches_by_type("elimination")]
    assert actual == [expected_match(*entry) for entry in SINGLE_INITIAL_CASES[num_alliances]]


@pytest.mark.parametrize(
    "factory, num_alliances, message",
    [
        (new_double_elimination_bracket, 7, "Must have exactly 8 alliances"),
        (new_double_elimination_bracket, 9, "Must have exactly 8 alliances"),
        (new_single_elimination_bracket, 1, "Must have at least 2 alliances"),
        (new_single_elimination_bracket, 17, "Must have at most 16 alliances"),
    ],
)
def test_alliance_count_errors(factory, num_alliances, message):
    with pytest.raises(BracketError) as excinfo:
        factory(num_alliances)
    assert str(excinfo.value) == message