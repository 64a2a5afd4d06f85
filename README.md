# playoffs

Model and logic for playoff elimination brackets. A bracket is a graph of
matchups between alliances; updating it against a match store counts wins,
advances alliances, and creates or deletes matches as results come in.

Two formats are provided:

- **Single elimination** (2–16 alliances), every round best of three.
  Matchups that a smaller tournament does not need are pruned, and top seeds
  get byes.
- **Double elimination** (exactly 8 alliances), single-match rounds ending in
  a best-of-three final.

Tied matches do not count as wins, so further matches are created until one
alliance has enough wins to advance. If a result is edited, matches that are
no longer needed are deleted and later rounds are emptied again.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from datetime import datetime

from playoffs.formats import new_single_elimination_bracket
from playoffs.store import Alliance, MatchStatus, MatchStore

store = MatchStore()
for alliance_id in range(1, 5):
    base = 100 * alliance_id
    store.create_alliance(
        Alliance(id=alliance_id, team_ids=[base + 1, base + 2, base + 3],
                 lineup=(base + 2, base + 1, base + 3))
    )

bracket = new_single_elimination_bracket(4)
bracket.update(store, datetime(2024, 4, 20, 13, 0))

for match in store.get_matches_by_type("elimination"):
    print(match.display_name, match.time, match.elim_red_alliance, match.elim_blue_alliance)

# Record a result and let the bracket react.
match = store.get_match_by_name("elimination", "SF1-1")
match.status = MatchStatus.RED_WON
store.update_match(match)
bracket.update(store, None)

leader, status = bracket.get_matchup(3, 1).status_text()
print(leader, status)          # red Red Leads 1-0
print(bracket.is_complete())   # False
```

An alliance's `lineup` is a tuple of three team numbers; those teams are
placed into the red or blue slots of every match the alliance plays.

When a start time is given to `Bracket.update`, every match that has not been
played yet is rescheduled from it, each one `ELIM_MATCH_SPACING_SEC` (600
seconds) after the one before. Passing `None` leaves match times alone.

### Modules

- `playoffs.store`: `MatchStore`, an in-memory store of alliances and
  matches, with `Alliance`, `Match` and `MatchStatus`. Reads return copies;
  change a match and pass it to `update_match` to store the change.
- `playoffs.matchup`: `Matchup`, `MatchupTemplate`, `MatchupKey`,
  `AllianceSource`, the `winner_source` / `loser_source` helpers, and
  `BracketError`.
- `playoffs.bracket`: `Bracket`, `ELIM_MATCH_SPACING_SEC`, and `new_bracket`
  for building a bracket from your own matchup templates.
- `playoffs.formats`: `new_single_elimination_bracket`,
  `new_double_elimination_bracket`, and the template tuples
  `SINGLE_ELIMINATION_TEMPLATES` and `DOUBLE_ELIMINATION_TEMPLATES`.

Invalid formats, unsupported alliance counts, unknown matchups and alliances
missing from the store raise `BracketError`. `MatchStore` raises `KeyError`
for unknown match or alliance ids and `ValueError` for a duplicate alliance or
a lineup that is not three teams.

## What it does not do

This is a library only. It has no command-line program, no web or display
interface, and no scoring of matches: results are set by assigning a
`MatchStatus` to a match. `MatchStore` keeps everything in memory, so nothing
is saved between runs.