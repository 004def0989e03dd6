"""Trivia queries over a generated player document.

These functions only see the serialized document (``{"teams": {...}}``),
never pipeline internals, so they work on either output mode: entries may be
bare names or ``{id, name, ...}`` objects.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger

from journeyman.fetchers.base_fetcher import FetchError
from journeyman.fetchers.player_detail_fetcher import PlayerDetailFetcher
from journeyman.models.api import PlayerLanding
from journeyman.teams.names import CURRENT_TEAM_NAMES, team_name_for_code

Entry = Union[str, Dict[str, Any]]
Document = Dict[str, Any]

DAILY_TEAM_COUNT = 8


def _entry_id(entry: Entry) -> Optional[str]:
    if isinstance(entry, dict) and entry.get("id") is not None:
        return str(entry["id"])
    return None


def _entry_name(entry: Entry) -> Optional[str]:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        return entry.get("name")
    return None


def entry_matches(entry: Entry, player_id: Optional[str], player_name: Optional[str]) -> bool:
    """Id comparison when both sides have one, otherwise case-insensitive name."""
    entry_id = _entry_id(entry)
    if player_id is not None and entry_id is not None:
        return entry_id == player_id
    entry_name = _entry_name(entry)
    if entry_name is None or player_name is None:
        return False
    return entry_name.casefold() == player_name.casefold()


def _teams(document: Document) -> Dict[str, List[Entry]]:
    teams = document.get("teams")
    return teams if isinstance(teams, dict) else {}


def teams_played_for(document: Document, player_id: str) -> List[str]:
    """Team codes whose list holds an entry with this id."""
    return [
        code
        for code, entries in _teams(document).items()
        if any(_entry_id(entry) == player_id for entry in entries)
    ]


def calculate_overlap_score(
    document: Document, players: Sequence[Entry], game_teams: Sequence[str]
) -> Dict[str, Any]:
    """Scores how specialised each submitted player is to the game's teams.

    ``game_teams`` holds full team names. A player's score is
    ``in_game * in_game / total`` where ``total`` counts every franchise the
    player appears under.
    """
    wanted = set(game_teams)
    total_overlap = 0.0
    player_scores = []

    for player in players:
        name = _entry_name(player)
        if name is None:
            continue
        player_id = _entry_id(player)

        total_teams = 0
        in_game = 0
        info: Optional[Entry] = None
        for code, entries in _teams(document).items():
            match = next(
                (entry for entry in entries if entry_matches(entry, player_id, name)),
                None,
            )
            if match is None:
                continue
            total_teams += 1
            if info is None and isinstance(match, dict):
                info = match
            if team_name_for_code(code) in wanted:
                in_game += 1

        ratio = in_game / total_teams if total_teams else 0.0
        score = in_game * ratio
        total_overlap += score

        result: Dict[str, Any] = {
            "name": name,
            "id": player_id,
            "total_teams_played": total_teams,
            "teams_in_current_game": in_game,
            "specialization_ratio": ratio,
            "overlap_score": score,
        }
        if info is not None:
            result["player_info"] = info
        player_scores.append(result)

    return {
        "total_overlap_score": total_overlap,
        "player_count": len(players),
        "average_overlap": total_overlap / len(players) if players else 0.0,
        "players": player_scores,
    }


def daily_teams(day_number: int, count: int = DAILY_TEAM_COUNT) -> List[str]:
    """Deterministic pick of ``count`` franchise names for a given day."""
    available = list(CURRENT_TEAM_NAMES)
    count = min(count, len(available))
    seed = day_number
    selected = []
    for _ in range(count):
        selected.append(available.pop(seed % len(available)))
        seed = (seed * 1103515245 + 12345) % (1 << 31)
    return selected


def daily_teams_payload(now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    day_number = int(now.timestamp()) // (24 * 60 * 60)
    return {
        "teams": daily_teams(day_number),
        "date": str(day_number),
        "generated_at": now.isoformat(),
    }


def best_hint_candidate(
    document: Document, team_names: Sequence[str], used_players: Sequence[str]
) -> Tuple[Optional[Entry], int]:
    """The unused player who fits the most of the requested teams.

    Ties go to the player encountered first, walking the requested teams in
    order and each team's list in document order.
    """
    teams = _teams(document)
    used = set(used_players)
    coverage: Dict[str, List[str]] = {}
    encountered: List[Tuple[str, Entry]] = []

    code_by_name = dict(CURRENT_TEAM_NAMES)
    for team_name in team_names:
        code = code_by_name.get(team_name)
        if code is None:
            continue
        for entry in teams.get(code, []):
            key = _entry_id(entry) or _entry_name(entry) or ""
            if key in used:
                continue
            covered = coverage.setdefault(key, [])
            if team_name not in covered:
                covered.append(team_name)
            encountered.append((key, entry))

    best: Optional[Entry] = None
    best_count = 0
    for key, entry in encountered:
        count = len(coverage[key])
        if count > best_count:
            best, best_count = entry, count
    return best, best_count


def build_hints(
    document: Document,
    candidate: Optional[Entry],
    covered: int,
    team_count: int,
    landing: Optional[PlayerLanding] = None,
) -> List[str]:
    if candidate is None:
        return []

    hints = []
    if covered < team_count:
        hints.append(f"This player fits {covered} out of {team_count} teams.")

    player_id = _entry_id(candidate)
    if player_id is not None:
        played_for = teams_played_for(document, player_id)
        if played_for:
            hints.append(f"Played for NHL teams: {', '.join(played_for)}")

    if landing is None:
        return hints

    nhl_seasons = [entry for entry in landing.season_totals or [] if entry.is_nhl]
    for entry in reversed(nhl_seasons):
        if entry.points is not None:
            hints.append(f"Had {entry.points} points in the most recent season.")
            break
        if entry.save_pctg is not None:
            hints.append(
                f"Had a save percentage of {entry.save_pctg:.3f} in the most recent season."
            )
            break

    if landing.birth_country:
        hints.append(f"Born in {landing.birth_country}")

    if landing.height_in_inches is not None and landing.weight_in_pounds is not None:
        hints.append(
            f"Height/Weight: {landing.height_in_inches} / {landing.weight_in_pounds} lbs"
        )

    draft = landing.draft_details
    if draft is not None:
        if None not in (draft.year, draft.round, draft.pick_in_round):
            hints.append(
                f"Drafted in {draft.year}: Round {draft.round}, Pick {draft.pick_in_round}"
            )
        if draft.team_abbrev:
            hints.append(f"Drafted by {draft.team_abbrev}")

    if nhl_seasons:
        hints.append(
            f"Played in NHL from {nhl_seasons[0].season} to {nhl_seasons[-1].season}"
        )
    return hints


async def generate_hint(
    document: Document,
    team_names: Sequence[str],
    used_players: Sequence[str],
    detail_fetcher: Optional[PlayerDetailFetcher] = None,
) -> Dict[str, Any]:
    """Hints for the best remaining player; landing details when reachable."""
    candidate, covered = best_hint_candidate(document, team_names, used_players)
    logger.info(f"The best player is {candidate!r} who fits {covered} teams")

    landing = None
    player_id = _entry_id(candidate) if candidate is not None else None
    if detail_fetcher is not None and player_id is not None:
        try:
            landing = await detail_fetcher.fetch(player_id)
        except FetchError as e:
            logger.warning(f"Could not fetch details for hint player {player_id}: {e}")

    return {"hints": build_hints(document, candidate, covered, len(team_names), landing)}
