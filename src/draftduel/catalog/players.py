"""Static team -> player reference data loaded from CSV."""

from __future__ import annotations

import csv
import logging
import random
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from draftduel.models import DraftedPlayer, Position, canonical_team


logger = logging.getLogger(__name__)

DEFAULT_CATALOG_MAPPING = {
    "name": "name",
    "team": "team",
    "position": "position",
}


class PlayerCatalog:
    """Players grouped by canonical team code."""

    def __init__(self, players: Iterable[DraftedPlayer]):
        self._by_team: Dict[str, List[DraftedPlayer]] = defaultdict(list)
        self._keys: set[str] = set()
        self._entries: set[tuple[str, Position]] = set()
        for player in players:
            if player.key in self._keys:
                continue
            self._keys.add(player.key)
            self._entries.add((player.key, player.position))
            self._by_team[player.team].append(player)

    def __len__(self) -> int:
        return len(self._keys)

    def teams(self) -> List[str]:
        return sorted(self._by_team)

    def players_for(self, team: str) -> List[DraftedPlayer]:
        return list(self._by_team.get(canonical_team(team), []))

    def contains(self, player: DraftedPlayer) -> bool:
        return (player.key, player.position) in self._entries

    def random_team(self, rng: Optional[random.Random] = None) -> str:
        teams = self.teams()
        if not teams:
            raise LookupError("Player catalog is empty")
        return (rng or random).choice(teams)


def load_catalog_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> PlayerCatalog:
    mapping = mapping or DEFAULT_CATALOG_MAPPING
    players: List[DraftedPlayer] = []
    skipped = 0
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                players.append(
                    DraftedPlayer(
                        name=(row.get(mapping["name"]) or "").strip(),
                        team=(row.get(mapping["team"]) or "").strip(),
                        position=(row.get(mapping["position"]) or "").strip(),
                    )
                )
            except ValidationError:
                skipped += 1
    if skipped:
        logger.warning("Skipped %d unusable rows in player catalog %s", skipped, path)
    catalog = PlayerCatalog(players)
    logger.info("Loaded %d players across %d teams from %s", len(catalog), len(catalog.teams()), path)
    return catalog
