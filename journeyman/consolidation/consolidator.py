from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from journeyman.models.database import ConsolidatedDatabase, RawTeamBucket
from journeyman.models.enums import StrategyKind
from journeyman.models.player import PlayerSet
from journeyman.teams.identity import TeamIdentityResolver


class Consolidator:
    """Folds raw team buckets into one deduplicated list per current franchise."""

    def __init__(self, resolver: Optional[TeamIdentityResolver] = None):
        self.resolver = resolver or TeamIdentityResolver()
        self._franchises: Dict[str, PlayerSet] = {
            code: PlayerSet() for code in self.resolver.current_codes
        }
        self.discarded: List[str] = []

    def fold(self, bucket: RawTeamBucket) -> Optional[str]:
        """Merges one bucket. Returns the franchise it went to, or None."""
        current = self.resolver.canonicalize(bucket.team_code)
        if current is None:
            logger.warning(
                f"No mapping found for team code: {bucket.team_code} "
                f"({len(bucket)} players discarded)"
            )
            self.discarded.append(bucket.team_code)
            return None

        added = self._franchises[current].update(bucket.players)
        if current != bucket.team_code:
            logger.debug(
                f"{bucket.team_code}: {len(bucket)} players consolidated into {current} "
                f"({added} new)"
            )
        return current

    def build(
        self,
        seasons: Sequence[str],
        strategy: StrategyKind,
        generated_at: Optional[datetime] = None,
    ) -> ConsolidatedDatabase:
        teams = {code: players.sorted() for code, players in self._franchises.items()}
        extra = {"generated_at": generated_at} if generated_at else {}
        return ConsolidatedDatabase(
            teams=teams, seasons_covered=list(seasons), strategy=strategy, **extra
        )


def consolidate(
    buckets: Iterable[RawTeamBucket],
    seasons: Sequence[str],
    strategy: StrategyKind,
    resolver: Optional[TeamIdentityResolver] = None,
    generated_at: Optional[datetime] = None,
) -> ConsolidatedDatabase:
    consolidator = Consolidator(resolver)
    for bucket in buckets:
        consolidator.fold(bucket)
    return consolidator.build(seasons, strategy, generated_at)
