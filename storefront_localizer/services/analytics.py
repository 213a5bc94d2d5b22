"""Translation events emitted by the pipeline, and an in-process recorder."""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class TranslationEvent:
    """One pipeline event for an analytics sink."""
    event_type: str
    language: str
    duration_ms: Optional[int] = None
    confidence: Optional[float] = None
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


EventListener = Callable[[TranslationEvent], None]


class EventRecorder:
    """
    Listener that aggregates events per type.

    Keeps the most recent processing times to report an average.
    """

    def __init__(self, max_samples: int = 100):
        self.max_samples = max_samples
        self.counts: Dict[str, int] = {}
        self.durations: List[int] = []

    def __call__(self, event: TranslationEvent) -> None:
        self.counts[event.event_type] = self.counts.get(event.event_type, 0) + 1
        if event.duration_ms is not None:
            self.durations.append(event.duration_ms)
            if len(self.durations) > self.max_samples:
                self.durations.pop(0)

    @property
    def average_processing_time(self) -> float:
        if not self.durations:
            return 0.0
        return sum(self.durations) / len(self.durations)

    def reset(self) -> None:
        self.counts.clear()
        self.durations.clear()


def emit(listeners: List[EventListener], event: TranslationEvent) -> None:
    """Deliver an event to every listener; a failing listener is only logged."""
    for listener in listeners:
        try:
            listener(event)
        except Exception as e:
            logger.warning("Event listener failed for %s: %s", event.event_type, e)
