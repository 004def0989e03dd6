from typing import List, Protocol, runtime_checkable

from journeyman.models.database import RawTeamBucket
from journeyman.models.enums import StrategyKind


@runtime_checkable
class AggregationStrategy(Protocol):
    """Produces per-raw-team player buckets for one run.

    Implementations own their buckets and counters; nothing is shared
    between strategies.
    """

    kind: StrategyKind
    errors: int

    async def collect(self) -> List[RawTeamBucket]: ...
