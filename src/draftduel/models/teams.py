"""NFL team aliases used to canonicalise the team half of a player identity."""

from __future__ import annotations

import re


NFL_TEAMS: dict[str, tuple[str, str]] = {
    "ARI": ("Arizona", "Cardinals"),
    "ATL": ("Atlanta", "Falcons"),
    "BAL": ("Baltimore", "Ravens"),
    "BUF": ("Buffalo", "Bills"),
    "CAR": ("Carolina", "Panthers"),
    "CHI": ("Chicago", "Bears"),
    "CIN": ("Cincinnati", "Bengals"),
    "CLE": ("Cleveland", "Browns"),
    "DAL": ("Dallas", "Cowboys"),
    "DEN": ("Denver", "Broncos"),
    "DET": ("Detroit", "Lions"),
    "GB": ("Green Bay", "Packers"),
    "HOU": ("Houston", "Texans"),
    "IND": ("Indianapolis", "Colts"),
    "JAX": ("Jacksonville", "Jaguars"),
    "KC": ("Kansas City", "Chiefs"),
    "LAC": ("Los Angeles", "Chargers"),
    "LAR": ("Los Angeles", "Rams"),
    "LV": ("Las Vegas", "Raiders"),
    "MIA": ("Miami", "Dolphins"),
    "MIN": ("Minnesota", "Vikings"),
    "NE": ("New England", "Patriots"),
    "NO": ("New Orleans", "Saints"),
    "NYG": ("New York", "Giants"),
    "NYJ": ("New York", "Jets"),
    "PHI": ("Philadelphia", "Eagles"),
    "PIT": ("Pittsburgh", "Steelers"),
    "SEA": ("Seattle", "Seahawks"),
    "SF": ("San Francisco", "49ers"),
    "TB": ("Tampa Bay", "Buccaneers"),
    "TEN": ("Tennessee", "Titans"),
    "WAS": ("Washington", "Commanders"),
}

# Abbreviations seen in other data sources.
_EXTRA_ALIASES: dict[str, tuple[str, ...]] = {
    "GB": ("GNB",),
    "JAX": ("JAC",),
    "KC": ("KAN",),
    "LAC": ("LA Chargers",),
    "LAR": ("LA Rams", "LA"),
    "LV": ("LVR", "Oakland Raiders"),
    "NE": ("NWE",),
    "NO": ("NOR",),
    "SF": ("SFO",),
    "TB": ("TAM", "Bucs"),
    "WAS": ("WSH", "Washington Football Team"),
}

# Cities shared by two franchises cannot identify a team on their own.
_AMBIGUOUS_CITIES = {"Los Angeles", "New York"}


def _team_token(value: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", value.upper())


def _build_alias_lookup() -> dict[str, str]:
    lookup: dict[str, str] = {}
    for abbr, (city, nickname) in NFL_TEAMS.items():
        variants = [abbr, nickname, f"{city} {nickname}", *_EXTRA_ALIASES.get(abbr, ())]
        if city not in _AMBIGUOUS_CITIES:
            variants.append(city)
        for variant in variants:
            key = _team_token(variant)
            if key:
                lookup.setdefault(key, abbr)
    return lookup


TEAM_ALIAS_LOOKUP = _build_alias_lookup()


def canonical_team(team: str) -> str:
    """Map any known spelling of an NFL team to its abbreviation.

    Unknown values are returned stripped and upper-cased so identities built
    from them stay stable.
    """

    token = _team_token(team)
    if not token:
        return team.strip().upper()
    return TEAM_ALIAS_LOOKUP.get(token, team.strip().upper())


def team_display_name(abbr: str) -> str:
    city, nickname = NFL_TEAMS.get(abbr.upper(), ("", abbr))
    return f"{city} {nickname}".strip()
