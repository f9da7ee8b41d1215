# File: site_drift/events.py
"""site_drift.events: telemetry sinks the crawl and diff engines report progress to.

Engines never print; they call ``sink.emit(name, **fields)``. The default
:class:`LoggingSink` forwards events to the project logger, while
:class:`RecordingSink` keeps them in memory so tests can assert on them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol

from site_drift.logger import logger as project_logger

__all__ = ["Event", "EventSink", "LoggingSink", "RecordingSink"]


@dataclass(slots=True, frozen=True)
class Event:
    name: str
    fields: Dict[str, Any] = field(default_factory=dict)


class EventSink(Protocol):
    def emit(self, name: str, **fields: Any) -> None:
        ...


# Levels for events that are not routine progress
_LEVELS: Mapping[str, int] = {
    "page_failed": logging.WARNING,
    "link_malformed": logging.WARNING,
    "page_missing": logging.WARNING,
    "page_retitled": logging.WARNING,
    "page_fetched": logging.DEBUG,
    "page_checked": logging.DEBUG,
    "page_skipped": logging.DEBUG,
}


class LoggingSink:
    """Writes every event as one ``name key=value ...`` log line."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or project_logger

    def emit(self, name: str, **fields: Any) -> None:
        level = _LEVELS.get(name, logging.INFO)
        if not self.logger.isEnabledFor(level):
            return
        details = " ".join(f"{key}={value!r}" for key, value in fields.items())
        self.logger.log(level, "%s %s", name, details)


class RecordingSink:
    """Collects events in order of emission."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def emit(self, name: str, **fields: Any) -> None:
        self.events.append(Event(name, dict(fields)))

    def names(self) -> List[str]:
        return [event.name for event in self.events]

    def of(self, name: str) -> List[Event]:
        return [event for event in self.events if event.name == name]
