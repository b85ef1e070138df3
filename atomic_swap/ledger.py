"""Transaction runner.

The :class:`Ledger` owns the committed :class:`atomic_swap.state.State` and
executes system functions against it as serially ordered transactions:

1. The transaction starts from the committed snapshot with an empty
   ``events`` vector.
2. The system runs. Systems are pure; if one raises, the committed snapshot
   is untouched and the error propagates to the caller unchanged.
3. Optionally the candidate state is audited for single custody.
4. The candidate becomes the committed snapshot.
5. Its events are sent to the event sink.

Steps 1 to 4 run under one commit lock, so independent callers may share one
``Ledger``; two transactions racing for the same record are ordered and the
loser observes the record already consumed. Step 5 runs after the lock is
released, so a slow sink never delays other transactions and a sink may
itself submit transactions to the same ledger.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Optional, Tuple

from pyrsistent import pvector

from atomic_swap.config import LedgerConfig, make_event_sink
from atomic_swap.errors import SwapError
from atomic_swap.events import Event, EventSink, NullEventSink
from atomic_swap.state import State
from atomic_swap.utils.custody import check_custody

logger = logging.getLogger(__name__)

System = Callable[..., Any]


def split_outcome(outcome: Any) -> Tuple[State, Any]:
    """Separate a system's return value into the new state and its result.

    Systems return either a bare ``State`` or a tuple whose first item is the
    new ``State``. A single trailing value is returned as-is, several are
    returned as a tuple.
    """
    if isinstance(outcome, State):
        return outcome, None
    state, *rest = outcome
    if len(rest) == 1:
        return state, rest[0]
    return state, tuple(rest)


class Ledger:
    """Committed ledger state plus the transaction boundary around it."""

    def __init__(
        self,
        state: Optional[State] = None,
        sink: Optional[EventSink] = None,
        audit_custody: bool = False,
    ) -> None:
        self._state = state if state is not None else State()
        self._sink: EventSink = sink if sink is not None else NullEventSink()
        self._audit_custody = audit_custody
        self._commit_lock = threading.Lock()
        self._height = 0

    @classmethod
    def from_config(
        cls, config: LedgerConfig, state: Optional[State] = None
    ) -> "Ledger":
        return cls(
            state=state,
            sink=make_event_sink(config),
            audit_custody=config.audit_custody,
        )

    @property
    def state(self) -> State:
        """Latest committed snapshot."""
        return self._state

    @property
    def height(self) -> int:
        """Number of committed transactions."""
        return self._height

    def execute(self, system: System, caller: str, *args: Any, **kwargs: Any) -> Any:
        """Run ``system`` as one transaction on behalf of ``caller``.

        Args:
            system: Pure system function taking ``(state, caller, *args)``.
            caller: Address invoking the transaction.

        Returns:
            The system's result without the state (``None`` if it only
            returned a ``State``).

        Raises:
            SwapError: Any protocol error raised by ``system``; nothing is
                committed.
            ValueError: Invalid arguments; nothing is committed.
        """
        name = getattr(system, "__qualname__", repr(system))
        with self._commit_lock:
            base = replace(self._state, events=pvector())
            try:
                candidate, result = split_outcome(system(base, caller, *args, **kwargs))
            except (SwapError, ValueError) as e:
                logger.info("Transaction %s by %s aborted: %s", name, caller, e)
                raise
            if self._audit_custody:
                check_custody(candidate)
            events = candidate.events
            self._state = replace(candidate, events=pvector())
            self._height += 1
            logger.debug(
                "Committed %s by %s at height %d (%d events)",
                name,
                caller,
                self._height,
                len(events),
            )
        for event in events:
            self._emit(event)
        return result

    def _emit(self, event: Event) -> None:
        try:
            self._sink.emit(event)
        except Exception:
            logger.exception("Event sink failed for %s", event.kind.value)
