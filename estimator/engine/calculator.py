"""Hours per screen line item, looked up from the complexity x screen type matrix.

Pure and synchronous: the matrix is handed in as a provider snapshot, the calculator
itself never touches the database.
"""
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from estimator.config import get_settings
from estimator.errors import MappingMissingError, ValidationError

logger = logging.getLogger(__name__)


class MissingMappingPolicy(str, Enum):
    ZERO = "zero"
    REJECT = "reject"


class HourMappingProvider(Protocol):
    def lookup_hours(self, complexity_name: str, screen_type_name: str) -> int | None:
        ...


class HourMappingTable:
    """Immutable in-memory snapshot of the hour matrix."""

    def __init__(self, entries: Mapping[tuple[str, str], int] | None = None) -> None:
        self._entries: dict[tuple[str, str], int] = {
            (c.strip(), s.strip()): int(h) for (c, s), h in (entries or {}).items()
        }

    @classmethod
    def from_rows(cls, rows: Iterable[Any]) -> "HourMappingTable":
        """Build from HourMapping rows (anything with complexity_name, screen_type_name, hours)."""
        return cls({(r.complexity_name, r.screen_type_name): r.hours for r in rows})

    def lookup_hours(self, complexity_name: str, screen_type_name: str) -> int | None:
        return self._entries.get((complexity_name.strip(), screen_type_name.strip()))

    def __contains__(self, pair: tuple[str, str]) -> bool:
        complexity_name, screen_type_name = pair
        return (complexity_name.strip(), screen_type_name.strip()) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._entries)


@dataclass(frozen=True)
class LineEstimate:
    complexity_name: str
    screen_type_name: str
    hours: int
    mapped: bool


def _require_name(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


class EstimationCalculator:
    """hours = matrix[complexity][screen_type]; unmapped pairs follow the missing mapping policy."""

    def __init__(
        self,
        mappings: HourMappingProvider,
        policy: MissingMappingPolicy | str | None = None,
    ) -> None:
        self.mappings = mappings
        self.policy = MissingMappingPolicy(policy or get_settings().missing_mapping_policy)

    def calculate_line(self, complexity_name: str, screen_type_name: str) -> LineEstimate:
        complexity_name = _require_name(complexity_name, "Complexity name")
        screen_type_name = _require_name(screen_type_name, "Screen type name")
        hours = self.mappings.lookup_hours(complexity_name, screen_type_name)
        if hours is not None:
            return LineEstimate(complexity_name, screen_type_name, int(hours), True)
        if self.policy == MissingMappingPolicy.REJECT:
            raise MappingMissingError(complexity_name, screen_type_name)
        logger.warning(
            "No hour mapping for complexity=%r screen_type=%r, counting 0h",
            complexity_name,
            screen_type_name,
        )
        return LineEstimate(complexity_name, screen_type_name, 0, False)

    def calculate(self, complexity_name: str, screen_type_name: str) -> int:
        """Calculated hours for one screen line item."""
        return self.calculate_line(complexity_name, screen_type_name).hours

    def calculate_lines(self, pairs: Iterable[tuple[str, str]]) -> list[LineEstimate]:
        return [self.calculate_line(c, s) for c, s in pairs]
