from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional


@dataclass
class PoseCheckEvent:
    timestamp: float
    skeleton_found: bool
    angles: Optional[List[float]]
    deviations: Optional[List[bool]]
    message: str


@dataclass
class ReferenceChangedEvent:
    has_reference: bool
    angles: Optional[List[float]]


class EventBus:
    def __init__(self):
        self._subs: Dict[str, List[Callable]] = {}

    def subscribe(self, event_name: str, callback: Callable) -> None:
        self._subs.setdefault(event_name, []).append(callback)

    def unsubscribe(self, event_name: str, callback: Callable) -> None:
        subs = self._subs.get(event_name, [])
        if callback in subs:
            subs.remove(callback)

    def publish(self, event_name: str, payload) -> None:
        for callback in list(self._subs.get(event_name, [])):
            callback(payload)
