import asyncio

import pytest

from conftest import API, landing_body
from journeyman.analysis.overlap import (
    best_hint_candidate,
    build_hints,
    calculate_overlap_score,
    daily_teams,
    daily_teams_payload,
    entry_matches,
    generate_hint,
    teams_played_for,
)
from journeyman.fetchers.player_detail_fetcher import PlayerDetailFetcher
from journeyman.models.api import PlayerLanding
from journeyman.teams.names import CURRENT_TEAM_NAMES

KELLER = {"id": "8479343", "name": "Clayton Keller", "position": "C"}
KESSEL = {"id": "8473548", "name": "Phil Kessel", "position": "R"}
MATTHEWS = {"id": "8479318", "name": "Auston Matthews", "position": "C"}

DOCUMENT = {
    "teams": {
        "UTA": [KELLER, KESSEL],
        "TOR": [MATTHEWS, KESSEL],
        "PIT": [KESSEL],
        "VGK": [KESSEL],
        "BOS": [],
    },
    "generated_at": "2025-01-01T00:00:00+00:00",
    "seasons_covered": ["20242025"],
}


def test_entry_matches():
    assert entry_matches(KELLER, "8479343", "someone else")
    assert not entry_matches(KELLER, "1", "Clayton Keller")
    assert entry_matches(KELLER, None, "clayton keller")
    assert entry_matches("Clayton Keller", "8479343", "CLAYTON KELLER")


def test_teams_played_for():
    assert teams_played_for(DOCUMENT, "8473548") == ["UTA", "TOR", "PIT", "VGK"]
    assert teams_played_for(DOCUMENT, "0") == []


def test_overlap_score():
    result = calculate_overlap_score(
        DOCUMENT,
        [{"id": "8473548", "name": "Phil Kessel"}, "Clayton Keller", {"name": "Nobody"}],
        ["Utah Hockey Club", "Toronto Maple Leafs"],
    )
    kessel, keller, nobody = result["players"]
    assert kessel["total_teams_played"] == 4
    assert kessel["teams_in_current_game"] == 2
    assert kessel["specialization_ratio"] == pytest.approx(0.5)
    assert kessel["overlap_score"] == pytest.approx(1.0)
    assert kessel["player_info"] == KESSEL

    assert keller["id"] is None
    assert keller["overlap_score"] == pytest.approx(1.0)
    assert nobody["overlap_score"] == 0.0
    assert "player_info" not in nobody

    assert result["player_count"] == 3
    assert result["total_overlap_score"] == pytest.approx(2.0)
    assert result["average_overlap"] == pytest.approx(2.0 / 3)


def test_overlap_score_works_on_legacy_documents():
    document = {"teams": {"WPG": ["John Doe"], "CAR": ["john doe"]}}
    result = calculate_overlap_score(document, ["John Doe"], ["Winnipeg Jets"])
    assert result["players"][0]["total_teams_played"] == 2
    assert result["players"][0]["teams_in_current_game"] == 1


def test_daily_teams_are_deterministic_and_distinct():
    first = daily_teams(20000)
    assert first == daily_teams(20000)
    assert len(first) == 8
    assert len(set(first)) == 8
    assert set(first) <= set(CURRENT_TEAM_NAMES)
    # first pick is seed % 32
    assert first[0] == list(CURRENT_TEAM_NAMES)[20000 % 32]


def test_daily_teams_payload():
    from datetime import datetime, timezone

    payload = daily_teams_payload(datetime(2024, 10, 8, 12, tzinfo=timezone.utc))
    assert payload["date"] == "20004"
    assert payload["teams"] == daily_teams(20004)


def test_best_hint_candidate_prefers_coverage_then_first_seen():
    candidate, covered = best_hint_candidate(
        DOCUMENT, ["Utah Hockey Club", "Toronto Maple Leafs", "Boston Bruins"], []
    )
    assert candidate == KESSEL
    assert covered == 2

    candidate, covered = best_hint_candidate(
        DOCUMENT, ["Utah Hockey Club", "Toronto Maple Leafs"], ["8473548"]
    )
    # Keller and Matthews tie on one team; Keller is seen first
    assert candidate == KELLER
    assert covered == 1

    assert best_hint_candidate(DOCUMENT, ["Boston Bruins"], []) == (None, 0)


def test_build_hints():
    landing = PlayerLanding.model_validate(
        landing_body(
            8473548, "Phil", "Kessel",
            [
                {"season": 20062007, "leagueAbbrev": "NHL", "teamName": "Boston Bruins", "points": 29},
                {"season": 20232024, "leagueAbbrev": "NHL", "teamName": "Vegas Golden Knights", "points": 36},
                {"season": 20242025, "leagueAbbrev": "AHL", "teamName": "Abbotsford Canucks", "points": 5},
            ],
            birthCountry="USA",
            heightInInches=72,
            weightInPounds=202,
            draftDetails={"year": 2006, "teamAbbrev": "BOS", "round": 1, "pickInRound": 5},
        )
    )
    hints = build_hints(DOCUMENT, KESSEL, 2, 3, landing)
    assert hints == [
        "This player fits 2 out of 3 teams.",
        "Played for NHL teams: UTA, TOR, PIT, VGK",
        "Had 36 points in the most recent season.",
        "Born in USA",
        "Height/Weight: 72 / 202 lbs",
        "Drafted in 2006: Round 1, Pick 5",
        "Drafted by BOS",
        "Played in NHL from 20062007 to 20232024",
    ]
    assert build_hints(DOCUMENT, None, 0, 3) == []


def test_generate_hint_survives_missing_details(api, scheduler):
    async def run():
        async with api.client() as client:
            fetcher = PlayerDetailFetcher(client, scheduler, base_url=API)
            return await generate_hint(
                DOCUMENT, ["Utah Hockey Club", "Toronto Maple Leafs"], [], fetcher
            )

    result = asyncio.run(run())
    assert result == {"hints": ["Played for NHL teams: UTA, TOR, PIT, VGK"]}
    assert api.urls == [f"{API}/player/8473548/landing"]
