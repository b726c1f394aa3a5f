"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Geofence:
    """Check-in perimeter around the event location."""

    latitude: float
    longitude: float
    radius_meters: int

    def __post_init__(self) -> None:
        if not -90 <= self.latitude <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        if not -180 <= self.longitude <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        if self.radius_meters <= 0:
            raise ValueError("Geofence radius must be positive")


def clamp_count(value: int) -> int:
    """Staff counts are never negative; negative input is clamped to 0."""
    return max(0, int(value))


def new_shift_id() -> str:
    return f"shift_{uuid4().hex[:12]}"


def new_entity_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"
