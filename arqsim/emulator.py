"""Discrete-event emulation of an unreliable network between two entities."""

from __future__ import annotations

import bisect
import dataclasses
import random as _random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Protocol

from .packet import PAYLOAD_SIZE, Entity, Message, Packet

_SANITY_SAMPLES = 1000


class EventType(IntEnum):
    """Kinds of event held in the event list."""

    TIMER_INTERRUPT = 0
    FROM_LAYER5 = 1
    FROM_LAYER3 = 2


class Direction(IntEnum):
    """Which direction of the link suffers loss and corruption."""

    A_TO_B = 0
    B_TO_A = 1
    BOTH = 2


@dataclass
class Event:
    """A scheduled occurrence at one entity."""

    time: float
    type: EventType
    entity: Entity
    packet: Optional[Packet] = None


@dataclass
class SimulationConfig:
    """Parameters of a simulation run."""

    messages: int
    loss_prob: float = 0.0
    corrupt_prob: float = 0.0
    mean_interarrival: float = 10.0
    direction: Direction = Direction.A_TO_B
    trace: int = 0


@dataclass
class Statistics:
    """Counters kept by the emulator and by the protocol entities."""

    window_full: int = 0
    total_acks_received: int = 0
    packets_resent: int = 0
    new_acks: int = 0
    packets_received: int = 0
    messages_delivered: int = 0
    messages_attempted: int = 0
    to_layer3: int = 0
    lost: int = 0
    corrupted: int = 0


class _Endpoint(Protocol):
    def output(self, message: Message) -> None: ...

    def input(self, packet: Packet) -> None: ...

    def timer_interrupt(self) -> None: ...


class Emulator:
    """Event-driven model of layer 3 and below, plus the layer-5 message source."""

    def __init__(self, config: SimulationConfig, seed: int = 9999) -> None:
        self.config = config
        self._rng = _random.Random(seed)
        average = sum(self.random() for _ in range(_SANITY_SAMPLES)) / _SANITY_SAMPLES
        if not 0.25 <= average <= 0.75:
            raise RuntimeError("random number generator is not uniform on [0, 1]")
        self.stats = Statistics()
        self.time = 0.0
        self.delivered: list[tuple[Entity, str]] = []
        self._events: list[Event] = []
        self._generate_next_arrival()

    def _trace(self, level: int, text: str) -> None:
        if self.config.trace >= level:
            print(text)

    def random(self) -> float:
        """A uniform random number in [0, 1)."""
        value = self._rng.random()
        self._trace(4, f"RANDOM NUMBER GENERATION CALLED: {value:.6f}")
        return value

    def _insert(self, event: Event) -> None:
        self._trace(3, f"            INSERTEVENT: time is {self.time:.6f}")
        self._trace(3, f"            INSERTEVENT: future time will be {event.time:.6f}")
        position = bisect.bisect_left(self._events, event.time, key=lambda e: e.time)
        self._events.insert(position, event)

    def _generate_next_arrival(self) -> None:
        self._trace(3, "          GENERATE NEXT ARRIVAL: creating new arrival")
        delay = self.config.mean_interarrival * self.random() * 2
        self._insert(Event(self.time + delay, EventType.FROM_LAYER5, Entity.A))

    def _find_timer(self, entity: Entity) -> Optional[Event]:
        return next(
            (
                e
                for e in self._events
                if e.type is EventType.TIMER_INTERRUPT and e.entity == entity
            ),
            None,
        )

    def start_timer(self, entity: Entity, increment: float) -> None:
        """Schedule a timer interrupt for the entity, unless one is running."""
        self._trace(2, f"          START TIMER: starting timer at {self.time:.6f}")
        if self._find_timer(entity) is not None:
            print("Warning: attempt to start a timer that is already started")
            return
        self._insert(
            Event(self.time + increment, EventType.TIMER_INTERRUPT, Entity(entity))
        )

    def stop_timer(self, entity: Entity) -> bool:
        """Cancel the entity's running timer; return whether one was running."""
        self._trace(2, f"          STOP TIMER: stopping timer at {self.time:.6f}")
        timer = self._find_timer(entity)
        if timer is None:
            print("Warning: unable to cancel your timer. It wasn't running.")
            return False
        self._events.remove(timer)
        return True

    def _affects(self, entity: Entity) -> bool:
        direction = self.config.direction
        return not (
            (entity == Entity.B and direction == Direction.A_TO_B)
            or (entity == Entity.A and direction == Direction.B_TO_A)
        )

    def to_layer3(self, entity: Entity, packet: Packet) -> None:
        """Send a packet from the entity into the network."""
        entity = Entity(entity)
        self.stats.to_layer3 += 1

        if self.random() < self.config.loss_prob and self._affects(entity):
            self.stats.lost += 1
            self._trace(1, "          TOLAYER3: packet being lost")
            return

        copy = dataclasses.replace(packet)
        self._trace(
            3,
            f"          TOLAYER3: seq: {copy.seqnum}, ack {copy.acknum}, "
            f"check: {copy.checksum} {copy.payload}",
        )

        destination = entity.other
        last_time = self.time
        for event in self._events:
            if event.type is EventType.FROM_LAYER3 and event.entity == destination:
                last_time = event.time
        arrival = Event(
            last_time + 1 + 9 * self.random(), EventType.FROM_LAYER3, destination, copy
        )

        if self.random() < self.config.corrupt_prob and self._affects(entity):
            self.stats.corrupted += 1
            choice = self.random()
            if choice < 0.75:
                copy.payload = "Z" + copy.payload[1:]
            elif choice < 0.875:
                copy.seqnum = 999999
            else:
                copy.acknum = 999999
            self._trace(1, "          TOLAYER3: packet being corrupted")

        self._trace(3, "          TOLAYER3: scheduling arrival on other side")
        self._insert(arrival)

    def to_layer5(self, entity: Entity, data: str) -> None:
        """Deliver data to the application at the entity."""
        entity = Entity(entity)
        self._trace(
            3, f"          TOLAYER5: data received by application at {entity.name}: {data}"
        )
        self.stats.messages_delivered += 1
        self.delivered.append((entity, data))

    def pending_events(self) -> list[Event]:
        """The scheduled events in the order they will occur."""
        return list(self._events)

    def _layer5_arrival(self, event: Event, sender: _Endpoint, receiver: _Endpoint) -> None:
        if self.stats.messages_attempted >= self.config.messages:
            self._trace(3, "          FROM_LAYER5: no more messages to send: ")
            return
        self._generate_next_arrival()
        letter = chr(ord("a") + self.stats.messages_attempted % 26)
        message = Message(letter * PAYLOAD_SIZE)
        self._trace(3, f"          MAINLOOP: data given to student: {message.data}")
        self.stats.messages_attempted += 1
        target = sender if event.entity == Entity.A else receiver
        target.output(message)

    def run(self, sender: _Endpoint, receiver: _Endpoint) -> Statistics:
        """Process events until none remain and return the statistics."""
        labels = {
            EventType.TIMER_INTERRUPT: "timerinterrupt  ",
            EventType.FROM_LAYER5: "fromlayer5 ",
            EventType.FROM_LAYER3: "fromlayer3 ",
        }
        while self._events:
            event = self._events.pop(0)
            self._trace(
                2,
                f"\nEVENT time: {event.time:.6f},  type: {int(event.type)}, "
                f"{labels[event.type]} entity: {int(event.entity)}",
            )
            self.time = event.time
            target = sender if event.entity == Entity.A else receiver
            if event.type is EventType.FROM_LAYER5:
                self._layer5_arrival(event, sender, receiver)
            elif event.type is EventType.FROM_LAYER3:
                target.input(dataclasses.replace(event.packet))
            else:
                target.timer_interrupt()
        return self.stats

    def summary(self) -> str:
        """The end-of-run report."""
        s = self.stats
        return (
            f" Simulator terminated at time {self.time:.6f}\n"
            f" after attempting to send {s.messages_attempted} msgs from layer5\n"
            f"number of messages dropped due to full window:  {s.window_full} \n"
            "number of valid (not corrupt or duplicate) acknowledgements received at A:  "
            f"{s.new_acks} \n"
            "(note: a single acknowledgement may have acknowledged more than one packet"
            " - if cumulative acknowledgements are used)\n"
            f"number of packet resends by A:  {s.packets_resent} \n"
            f"number of correct packets received at B:  {s.packets_received} \n"
            f"number of messages delivered to application:  {s.messages_delivered} \n"
        )