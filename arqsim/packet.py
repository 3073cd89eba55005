"""Messages, packets and the checksum shared by the transport protocols."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import IntEnum

PAYLOAD_SIZE = 20
NOT_IN_USE = -1


class Entity(IntEnum):
    """The two ends of the simulated link."""

    A = 0
    B = 1

    @property
    def other(self) -> "Entity":
        """The entity at the far end of the link."""
        return Entity((self.value + 1) % 2)


@dataclass(frozen=True)
class Message:
    """A unit of application data handed from layer 5 to layer 4."""

    data: str

    def __post_init__(self) -> None:
        if len(self.data) != PAYLOAD_SIZE:
            raise ValueError(
                f"message data must be {PAYLOAD_SIZE} characters, got {len(self.data)}"
            )


@dataclass
class Packet:
    """A unit of data handed from layer 4 to layer 3."""

    seqnum: int
    acknum: int = NOT_IN_USE
    checksum: int = 0
    payload: str = ""

    def with_checksum(self) -> "Packet":
        """Return a copy of this packet carrying its correct checksum."""
        return dataclasses.replace(self, checksum=compute_checksum(self))


def compute_checksum(packet: Packet) -> int:
    """Sum of the sequence number, acknowledgement number and payload characters."""
    return packet.seqnum + packet.acknum + sum(ord(ch) for ch in packet.payload)


def is_corrupted(packet: Packet) -> bool:
    """Whether the stored checksum disagrees with the packet's contents."""
    return packet.checksum != compute_checksum(packet)