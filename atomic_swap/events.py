"""Events and event sinks.

Systems describe what happened in a transaction by appending :class:`Event`
values to ``State.events``; the ledger hands them to an :class:`EventSink`
once the transaction commits. Sinks are fire-and-forget: they return
nothing and are not needed for correctness, so an aborted transaction never
reaches a sink and a failing sink never aborts a committed one.

Available sinks:

* :class:`NullEventSink` drops everything.
* :class:`MemoryEventSink` keeps events in a list (tests, in-process observers).
* :class:`LoggingEventSink` writes one ``INFO`` record per event.
* :class:`JsonlEventSink` appends one JSON object per line to a file.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Protocol, Union

from pyrsistent import pmap, thaw
from pyrsistent.typing import PMap

from atomic_swap.types import EntityID, EventKind

logger = logging.getLogger(__name__)


def _empty_data() -> PMap[str, Any]:
    return pmap()


@dataclass(frozen=True)
class Event:
    """Structured record of one protocol step.

    Attributes:
        kind: What happened.
        entity_id: Record (escrow, custodian record) the event is about.
        data: Event specific fields (addresses, ids, amounts).
    """

    kind: EventKind
    entity_id: EntityID
    data: PMap[str, Any] = field(default_factory=_empty_data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain JSON-friendly dictionary."""
        return {
            "kind": self.kind.value,
            "entity_id": self.entity_id,
            "data": thaw(self.data),
        }


def make_event(kind: EventKind, entity_id: EntityID, **data: Any) -> Event:
    """Build an :class:`Event` from keyword fields."""
    return Event(kind=kind, entity_id=entity_id, data=pmap(data))


class EventSink(Protocol):
    """Append-only consumer of committed events."""

    def emit(self, event: Event) -> None: ...


class NullEventSink:
    """Sink that discards every event."""

    def emit(self, event: Event) -> None:
        return None


class MemoryEventSink:
    """Sink that keeps events in order of emission."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def kinds(self) -> List[EventKind]:
        """Return the kinds of all received events, in order."""
        return [event.kind for event in self.events]


class LoggingEventSink:
    """Sink that logs each event on the ``atomic_swap.events`` logger."""

    def __init__(self, level: int = logging.INFO) -> None:
        self.level = level

    def emit(self, event: Event) -> None:
        logger.log(
            self.level,
            "%s entity=%s %s",
            event.kind.value,
            event.entity_id,
            json.dumps(thaw(event.data), sort_keys=True),
        )


class JsonlEventSink:
    """Sink that appends events to a JSON lines file.

    The file is opened per event so the sink holds no handle between
    transactions.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def emit(self, event: Event) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event.to_dict(), sort_keys=True) + "\n")

    def read(self) -> List[Dict[str, Any]]:
        """Return all events recorded so far as dictionaries."""
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]
