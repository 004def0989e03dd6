from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator


def compose_birth_place(
    city: Optional[str], country: Optional[str]
) -> Optional[str]:
    """"City, Country", or the country alone. A city without a country is dropped."""
    if not country:
        return None
    if city:
        return f"{city}, {country}"
    return country


class PlayerRecord(BaseModel):
    """A player as it appears in the output document.

    Legacy-mode records only carry ``name``; directory-mode records carry the
    NHL player id and the optional biographical fields.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str
    birth_date: Optional[str] = None
    birth_place: Optional[str] = None
    position: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = " ".join(value.split())
        if not value:
            raise ValueError("player name must not be blank")
        return value

    @property
    def name_key(self) -> str:
        return self.name.casefold()

    def same_player(self, other: "PlayerRecord") -> bool:
        """Identity: ids when both have one, otherwise case-insensitive names."""
        if self.id is not None and other.id is not None:
            return self.id == other.id
        return self.name_key == other.name_key

    def sort_key(self) -> Tuple[str, str]:
        return (self.name, self.id or "")

    def to_entry(self, with_details: bool) -> Union[str, Dict[str, Any]]:
        """Output form: bare name (legacy) or an object without empty fields."""
        if not with_details:
            return self.name
        return self.model_dump(
            include={"id", "name", "birth_date", "birth_place", "position"},
            exclude_none=True,
        )


class PlayerSet:
    """Insertion-ordered set of PlayerRecord using ``same_player`` identity.

    The first record seen for a player is the one that is kept.
    """

    def __init__(self, records: Optional[Iterable[PlayerRecord]] = None):
        self._records: List[PlayerRecord] = []
        self._by_id: Dict[str, PlayerRecord] = {}
        self._anonymous_names: Dict[str, PlayerRecord] = {}
        self._identified_names: Dict[str, List[PlayerRecord]] = {}
        if records:
            self.update(records)

    def find(self, record: PlayerRecord) -> Optional[PlayerRecord]:
        key = record.name_key
        if record.id is not None:
            if record.id in self._by_id:
                return self._by_id[record.id]
            return self._anonymous_names.get(key)
        if key in self._anonymous_names:
            return self._anonymous_names[key]
        matches = self._identified_names.get(key)
        return matches[0] if matches else None

    def add(self, record: PlayerRecord) -> bool:
        """Adds ``record`` unless an equal player is present. True if added."""
        if self.find(record) is not None:
            return False
        self._records.append(record)
        if record.id is not None:
            self._by_id[record.id] = record
            self._identified_names.setdefault(record.name_key, []).append(record)
        else:
            self._anonymous_names[record.name_key] = record
        return True

    def update(self, records: Iterable[PlayerRecord]) -> int:
        return sum(1 for record in records if self.add(record))

    def sorted(self) -> List[PlayerRecord]:
        return sorted(self._records, key=PlayerRecord.sort_key)

    def __contains__(self, record: object) -> bool:
        return isinstance(record, PlayerRecord) and self.find(record) is not None

    def __iter__(self) -> Iterator[PlayerRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
