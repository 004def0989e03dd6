"""Team display names as the player landing endpoint reports them.

Kept apart from the relocation table on purpose: this maps display name to
the code the franchise used under that name, and the relocation table takes
it from there.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional

CURRENT_TEAM_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "Anaheim Ducks": "ANA",
        "Boston Bruins": "BOS",
        "Buffalo Sabres": "BUF",
        "Calgary Flames": "CGY",
        "Carolina Hurricanes": "CAR",
        "Chicago Blackhawks": "CHI",
        "Colorado Avalanche": "COL",
        "Columbus Blue Jackets": "CBJ",
        "Dallas Stars": "DAL",
        "Detroit Red Wings": "DET",
        "Edmonton Oilers": "EDM",
        "Florida Panthers": "FLA",
        "Los Angeles Kings": "LAK",
        "Minnesota Wild": "MIN",
        "Montreal Canadiens": "MTL",
        "Nashville Predators": "NSH",
        "New Jersey Devils": "NJD",
        "New York Islanders": "NYI",
        "New York Rangers": "NYR",
        "Ottawa Senators": "OTT",
        "Philadelphia Flyers": "PHI",
        "Pittsburgh Penguins": "PIT",
        "San Jose Sharks": "SJS",
        "Seattle Kraken": "SEA",
        "St. Louis Blues": "STL",
        "Tampa Bay Lightning": "TBL",
        "Toronto Maple Leafs": "TOR",
        "Utah Hockey Club": "UTA",
        "Vancouver Canucks": "VAN",
        "Vegas Golden Knights": "VGK",
        "Washington Capitals": "WSH",
        "Winnipeg Jets": "WPG",
    }
)

# Alternate spellings and former names, mapped to the code used at the time.
_FORMER_AND_ALTERNATE_NAMES: Dict[str, str] = {
    "Montréal Canadiens": "MTL",
    "St Louis Blues": "STL",
    "Utah Mammoth": "UTA",
    "Arizona Coyotes": "ARI",
    "Phoenix Coyotes": "PHX",
    "Atlanta Thrashers": "ATL",
    "Atlanta Flames": "ATF",
    "Hartford Whalers": "HFD",
    "Quebec Nordiques": "QUE",
    "Québec Nordiques": "QUE",
    "Minnesota North Stars": "MNS",
    "Colorado Rockies": "CLR",
    "Kansas City Scouts": "KCS",
    "Mighty Ducks of Anaheim": "MIG",
    "Anaheim Mighty Ducks": "MIG",
}

TEAM_NAME_TO_CODE: Mapping[str, str] = MappingProxyType(
    {**CURRENT_TEAM_NAMES, **_FORMER_AND_ALTERNATE_NAMES}
)

_CODE_TO_CURRENT_NAME: Mapping[str, str] = MappingProxyType(
    {code: name for name, code in CURRENT_TEAM_NAMES.items()}
)


def team_code_from_name(name: Optional[str]) -> Optional[str]:
    """Looks up a display name; None when it is missing or not an NHL club."""
    if not name:
        return None
    return TEAM_NAME_TO_CODE.get(name.strip())


def team_name_for_code(code: str) -> Optional[str]:
    return _CODE_TO_CURRENT_NAME.get(code)
