"""Roster slot configuration for supported sports."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import AbstractSet, Dict, Iterable, List, Mapping, Optional, Set, Tuple


@dataclass(frozen=True)
class DraftRules:
    sport: str
    roster_order: Tuple[str, ...]
    slot_positions: Mapping[str, Set[str]]
    max_skips: int

    @property
    def roster_size(self) -> int:
        return len(self.roster_order)

    def open_slots(self, position: str, filled: AbstractSet[str]) -> List[str]:
        """Open slots ``position`` may fill, position-specific slots before shared ones.

        ``roster_order`` lists every dedicated slot ahead of FLEX, so walking it
        in order yields the tie-break the draft relies on.
        """

        position = position.upper()
        return [
            slot
            for slot in self.roster_order
            if slot not in filled and position in self.slot_positions.get(slot, ())
        ]

    def assign_slot(self, position: str, filled: AbstractSet[str]) -> Optional[str]:
        slots = self.open_slots(position, filled)
        return slots[0] if slots else None

    def with_max_skips(self, max_skips: int) -> "DraftRules":
        if max_skips < 0:
            raise ValueError("max_skips must be >= 0")
        return replace(self, max_skips=max_skips)


_DRAFT_RULES: Dict[str, DraftRules] = {
    "NFL": DraftRules(
        sport="NFL",
        roster_order=("QB", "RB1", "RB2", "WR1", "WR2", "TE", "FLEX", "K", "DEF"),
        slot_positions={
            "QB": {"QB"},
            "RB1": {"RB"},
            "RB2": {"RB"},
            "WR1": {"WR"},
            "WR2": {"WR"},
            "TE": {"TE"},
            "FLEX": {"RB", "WR", "TE"},
            "K": {"K"},
            "DEF": {"DEF"},
        },
        max_skips=1,
    ),
}


def iter_rules() -> Iterable[DraftRules]:
    """Return an iterator of all configured rule sets."""

    return _DRAFT_RULES.values()


def get_rules(sport: str = "NFL") -> DraftRules:
    """Fetch rules for a sport, raising KeyError if missing."""

    key = sport.upper()
    if key not in _DRAFT_RULES:
        raise KeyError(f"No draft rules configured for sport={sport!r}")
    return _DRAFT_RULES[key]
