"""In-process event bus for one dispatch run."""

from __future__ import annotations

import random
import uuid
from typing import Callable

from .types import EventType, SimEvent


EventHandler = Callable[[SimEvent], None]
EventIdFactory = Callable[[int], str]


def _event_id_factory(mode: str, seed: int | None) -> EventIdFactory:
    if mode == "deterministic":
        return lambda seq: f"evt-{seq:08d}"
    if mode == "random":
        return lambda _seq: str(uuid.uuid4())
    if mode == "seeded_random":
        rng = random.Random(seed)
        return lambda _seq: f"{rng.getrandbits(128):032x}"
    raise ValueError(
        f"invalid event_id_mode '{mode}', expected one of deterministic, random, seeded_random"
    )


class EventBus:
    """Stamps each event with the next sequence number and fans it out to handlers in subscribe order.

    ``event_id_mode`` only changes ``event_id``; ``seq`` is always 0, 1, 2, ...
    """

    def __init__(self, *, event_id_mode: str = "deterministic", event_id_seed: int | None = None) -> None:
        self._next_id = _event_id_factory(event_id_mode.strip().lower(), event_id_seed)
        self._handlers: list[EventHandler] = []
        self._published = 0

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def publish(
        self,
        *,
        event_type: EventType,
        time: int,
        correlation_id: str,
        job_id: int | None = None,
        payload: dict | None = None,
    ) -> SimEvent:
        seq = self._published
        event = SimEvent(
            event_id=self._next_id(seq),
            seq=seq,
            correlation_id=correlation_id,
            time=time,
            type=event_type,
            job_id=job_id,
            payload=dict(payload or {}),
        )
        self._published = seq + 1
        for handler in tuple(self._handlers):
            handler(event)
        return event
