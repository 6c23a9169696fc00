"""
Domain Building Blocks

- ValueObject: immutable, compared by value (TimeWindow, GeoPoint)
- DomainEvent: a fact about a booking, published after the transaction
  that produced it commits
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """Marker base; subclasses are frozen dataclasses."""


def _plain(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Subclasses add their payload as dataclass fields with defaults.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)

    @property
    def event_name(self) -> str:
        return type(self).__name__

    def payload(self) -> dict:
        """Subclass fields only, as JSON-friendly values"""
        base = {f.name for f in fields(DomainEvent)}
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self) if f.name not in base}

    def to_dict(self) -> dict:
        return {
            'event_id': str(self.event_id),
            'event_type': self.event_name,
            'occurred_at': self.occurred_at.isoformat(),
            'payload': self.payload(),
        }
