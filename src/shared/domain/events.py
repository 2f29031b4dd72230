"""Domain event primitives shared by every bounded context.

Events are immutable facts recorded on an aggregate while a use case
runs and published only after the surrounding transaction commits, so
subscribers never observe an order that was rolled back.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List
from uuid import UUID

import uuid6


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event.

    Subclasses add their own fields; ``event_name`` is derived from the
    class name so log lines and subscribers share one vocabulary.
    """

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid6.uuid7)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)

    def payload(self) -> Dict[str, Any]:
        """JSON-friendly view of the event (UUIDs and dates as strings)."""
        return {key: _plain(value) for key, value in asdict(self).items()}


def _plain(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class DomainEventMixin:
    """Collects pending events on an aggregate root until they are published."""

    _domain_events: List[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def pull_domain_events(self) -> List[DomainEvent]:
        """Return pending events and forget them."""
        events = list(getattr(self, "_domain_events", []))
        self._domain_events = []
        return events

    @property
    def domain_events(self) -> List[DomainEvent]:
        return list(getattr(self, "_domain_events", []))
