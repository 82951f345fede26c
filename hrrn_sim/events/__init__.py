"""Event exports."""

from .bus import EventBus, EventHandler
from .types import EventType, SimEvent

__all__ = ["EventBus", "EventHandler", "EventType", "SimEvent"]
