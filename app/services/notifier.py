"""
Notifier - publishes domain events (e.g. a new issue) to interested listeners.

The notifier is passed explicitly to the services that emit events; there is
no module-level broadcast handle to swap at runtime.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple
import logging

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """
    Abstract event publisher.

    Contract:
    - publish() is fire-and-forget from the caller's perspective
    - Implementations may raise; callers decide whether that is fatal
    """

    @abstractmethod
    def publish(self, event: str, payload: Dict) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Default notifier: records events in the application log."""

    def publish(self, event: str, payload: Dict) -> None:
        logger.info(f"📣 {event}: {payload}")


class RecordingNotifier(Notifier):
    """Keeps published events in memory (useful for tests and local demos)."""

    def __init__(self):
        self.events: List[Tuple[str, Dict]] = []

    def publish(self, event: str, payload: Dict) -> None:
        self.events.append((event, payload))
