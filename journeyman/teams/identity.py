"""Canonical franchise codes and the relocation table.

Every team code the NHL API has ever used for a franchise maps to exactly one
of the 32 current codes. Current codes map to themselves.
"""

from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from loguru import logger

CURRENT_TEAM_CODES: Tuple[str, ...] = (
    "ANA", "BOS", "BUF", "CGY", "CAR", "CHI", "COL", "CBJ", "DAL", "DET",
    "EDM", "FLA", "LAK", "MIN", "MTL", "NSH", "NJD", "NYI", "NYR", "OTT",
    "PHI", "PIT", "SJS", "SEA", "STL", "TBL", "TOR", "UTA", "VAN", "VGK",
    "WSH", "WPG",
)  # fmt: skip

# historical code -> current code
RELOCATIONS: Mapping[str, str] = MappingProxyType(
    {
        "ATL": "WPG",  # Atlanta Thrashers (2011)
        "HFD": "CAR",  # Hartford Whalers (1997)
        "QUE": "COL",  # Quebec Nordiques (1995)
        "MNS": "DAL",  # Minnesota North Stars (1993)
        "CLR": "NJD",  # Colorado Rockies (1982)
        "KCS": "NJD",  # Kansas City Scouts, via Colorado (1976)
        "ATF": "CGY",  # Atlanta Flames (1980)
        "WPG1": "UTA",  # original Winnipeg Jets, via Phoenix/Arizona (1996)
        "PHX": "UTA",  # Phoenix Coyotes
        "ARI": "UTA",  # Arizona Coyotes (2024)
        "MIG": "ANA",  # Mighty Ducks of Anaheim (2006 rename)
    }
)

HISTORICAL_TEAM_CODES: Tuple[str, ...] = tuple(RELOCATIONS)


def all_team_codes() -> List[str]:
    """Current codes first, then historical ones, in table order."""
    return list(CURRENT_TEAM_CODES) + list(HISTORICAL_TEAM_CODES)


class TeamIdentityResolver:
    """Maps any known team code to its current franchise code."""

    def __init__(
        self,
        current_codes: Iterable[str] = CURRENT_TEAM_CODES,
        relocations: Mapping[str, str] = RELOCATIONS,
    ):
        self.current_codes: Tuple[str, ...] = tuple(current_codes)
        current = set(self.current_codes)

        mapping = {}
        for historical, target in relocations.items():
            if target not in current:
                raise ValueError(
                    f"Relocation {historical} -> {target} points outside the current teams"
                )
            if historical in current:
                raise ValueError(f"{historical} is both current and historical")
            mapping[historical] = target
        for code in self.current_codes:
            mapping[code] = code

        self._mapping: Mapping[str, str] = MappingProxyType(mapping)
        self.historical_codes: Tuple[str, ...] = tuple(relocations)
        logger.debug(
            f"Team identity map built: {len(self.current_codes)} current, "
            f"{len(self.historical_codes)} historical codes."
        )

    def canonicalize(self, code: str) -> Optional[str]:
        """Returns the current franchise code for ``code``, or None if unknown."""
        return self._mapping.get(code)

    def is_current(self, code: str) -> bool:
        return self._mapping.get(code) == code

    def known_codes(self) -> List[str]:
        return list(self.current_codes) + list(self.historical_codes)

    def __contains__(self, code: object) -> bool:
        return code in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)
