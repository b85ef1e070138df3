"""Ledger configuration.

``LedgerConfig`` is a plain frozen dataclass; build it directly in code or
from environment variables with :meth:`LedgerConfig.from_env`:

* ``ATOMIC_SWAP_EVENT_LOG``: path of a JSON lines event log. When unset,
  events go to the ``atomic_swap.events`` logger instead.
* ``ATOMIC_SWAP_LOG_LEVEL``: logging level name (default ``WARNING``).
* ``ATOMIC_SWAP_AUDIT_CUSTODY``: ``1``/``true``/``yes`` to audit custody on
  every commit.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from atomic_swap.events import EventSink, JsonlEventSink, LoggingEventSink

ENV_EVENT_LOG = "ATOMIC_SWAP_EVENT_LOG"
ENV_LOG_LEVEL = "ATOMIC_SWAP_LOG_LEVEL"
ENV_AUDIT_CUSTODY = "ATOMIC_SWAP_AUDIT_CUSTODY"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LedgerConfig:
    """Settings for a :class:`atomic_swap.ledger.Ledger`.

    Attributes:
        event_log_path: JSON lines file receiving committed events, if any.
        log_level: Level name applied by :func:`configure_logging`.
        audit_custody: Verify single custody of every value before commit.
    """

    event_log_path: Optional[Path] = None
    log_level: str = "WARNING"
    audit_custody: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LedgerConfig":
        env = os.environ if environ is None else environ
        path = env.get(ENV_EVENT_LOG)
        level = env.get(ENV_LOG_LEVEL, "WARNING").upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {level}")
        return cls(
            event_log_path=Path(path) if path else None,
            log_level=level,
            audit_custody=env.get(ENV_AUDIT_CUSTODY, "").strip().lower() in _TRUTHY,
        )


def make_event_sink(config: LedgerConfig) -> EventSink:
    """Return the event sink selected by ``config``."""
    if config.event_log_path is not None:
        return JsonlEventSink(config.event_log_path)
    return LoggingEventSink()


def configure_logging(config: LedgerConfig) -> None:
    """Install a basic stderr handler at the configured level."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
