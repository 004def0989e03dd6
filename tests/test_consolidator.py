from datetime import datetime, timezone

from journeyman.consolidation.consolidator import Consolidator, consolidate
from journeyman.models.database import RawTeamBucket
from journeyman.models.enums import StrategyKind
from journeyman.models.player import PlayerRecord
from journeyman.teams.identity import CURRENT_TEAM_CODES


def _bucket(code, *records):
    bucket = RawTeamBucket(code)
    for record in records:
        bucket.add(record)
    return bucket


def test_every_franchise_present_even_without_data():
    database = consolidate([], ["20152016"], StrategyKind.LEGACY)
    assert list(database.teams) == list(CURRENT_TEAM_CODES)
    assert all(players == [] for players in database.teams.values())
    assert database.seasons_covered == ["20152016"]


def test_historical_bucket_folds_into_current_franchise():
    database = consolidate(
        [
            _bucket("ATL", PlayerRecord(name="John Doe"), PlayerRecord(name="Ilya Kovalchuk")),
            _bucket("WPG", PlayerRecord(name="JOHN DOE"), PlayerRecord(name="Blake Wheeler")),
        ],
        ["20102011", "20112012"],
        StrategyKind.LEGACY,
    )
    assert "ATL" not in database.teams
    assert [p.name for p in database.teams["WPG"]] == [
        "Blake Wheeler",
        "Ilya Kovalchuk",
        "John Doe",
    ]


def test_unknown_bucket_is_discarded():
    consolidator = Consolidator()
    assert consolidator.fold(_bucket("XYZ", PlayerRecord(name="Nobody"))) is None
    assert consolidator.fold(_bucket("PHX", PlayerRecord(name="Shane Doan"))) == "UTA"
    database = consolidator.build(["20102011"], StrategyKind.LEGACY)
    assert consolidator.discarded == ["XYZ"]
    assert "XYZ" not in database.teams
    assert database.total_players == 1


def test_directory_ids_dedupe_across_buckets():
    keller = PlayerRecord(id="8479343", name="Clayton Keller", position="C")
    database = consolidate(
        [
            _bucket("ARI", keller, PlayerRecord(id="1", name="Sebastian Aho")),
            _bucket("UTA", keller, PlayerRecord(id="2", name="Sebastian Aho")),
        ],
        ["20232024", "20242025"],
        StrategyKind.DIRECTORY,
    )
    uta = database.teams["UTA"]
    assert [p.id for p in uta] == ["8479343", "1", "2"]
    assert [p.name for p in uta] == ["Clayton Keller", "Sebastian Aho", "Sebastian Aho"]


def test_document_shapes():
    stamp = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    legacy = consolidate(
        [_bucket("ATL", PlayerRecord(name="John Doe"))],
        ["20102011"],
        StrategyKind.LEGACY,
        generated_at=stamp,
    ).to_document()
    assert legacy["teams"]["WPG"] == ["John Doe"]
    assert legacy["generated_at"] == "2025-01-02T03:04:05+00:00"
    assert legacy["seasons_covered"] == ["20102011"]

    directory = consolidate(
        [_bucket("UTA", PlayerRecord(id="8479343", name="Clayton Keller", birth_place="Chesterfield, USA"))],
        ["20242025"],
        StrategyKind.DIRECTORY,
    ).to_document()
    assert directory["teams"]["UTA"] == [
        {"id": "8479343", "name": "Clayton Keller", "birth_place": "Chesterfield, USA"}
    ]
    assert len(directory["teams"]) == 32
