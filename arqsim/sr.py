"""Selective Repeat sender and receiver entities."""

from __future__ import annotations

from typing import Optional

from .packet import NOT_IN_USE, PAYLOAD_SIZE, Entity, Message, Packet, is_corrupted

RTT = 16.0
WINDOW_SIZE = 6
SEQ_SPACE = 7


def _offset(seq: int, first: int) -> Optional[int]:
    """Position of seq in the window starting at first, or None if outside it."""
    last = (first + WINDOW_SIZE - 1) % SEQ_SPACE
    inside = first <= seq <= last if first <= last else (seq >= first or seq <= last)
    if not inside:
        return None
    return seq - first if seq >= first else WINDOW_SIZE - first + seq


class _Entity:
    def __init__(self, network) -> None:
        self.network = network

    def _trace(self, level: int, text: str) -> None:
        if self.network.config.trace >= level:
            print(text)


class SrSender(_Entity):
    """Entity A: sends within a window and keeps per-packet acknowledgements."""

    def __init__(self, network) -> None:
        super().__init__(network)
        self.base = 0
        self.next_seqnum = 0
        self.outstanding = 0
        self.buffer: list[Optional[Packet]] = [None] * WINDOW_SIZE

    def output(self, message: Message) -> None:
        """Send a message if its sequence number falls inside the window."""
        index = _offset(self.next_seqnum, self.base)
        if index is None:
            self._trace(1, "----A: New message arrives, send window is full")
            self.network.stats.window_full += 1
            return
        self._trace(
            2,
            "----A: New message arrives, send window is not full, send new messge to layer3!",
        )
        packet = Packet(self.next_seqnum, NOT_IN_USE, 0, message.data).with_checksum()
        self.buffer[index] = packet
        self.outstanding += 1
        self._trace(1, f"Sending packet {packet.seqnum} to layer 3")
        self.network.to_layer3(Entity.A, packet)
        if self.next_seqnum == self.base:
            self.network.start_timer(Entity.A, RTT)
        self.next_seqnum = (self.next_seqnum + 1) % SEQ_SPACE

    def input(self, packet: Packet) -> None:
        """Record an acknowledgement and slide the window past acknowledged packets."""
        stats = self.network.stats
        if is_corrupted(packet):
            self._trace(1, "----A: corrupted ACK is received, do nothing!")
            return
        self._trace(1, f"----A: uncorrupted ACK {packet.acknum} is received")
        stats.total_acks_received += 1
        index = _offset(packet.acknum, self.base)
        if index is None:
            return
        slot = self.buffer[index]
        if slot is None:
            return
        if slot.acknum == NOT_IN_USE:
            self._trace(1, f"----A: ACK {packet.acknum} is not a duplicate")
            stats.new_acks += 1
            self.outstanding -= 1
            slot.acknum = packet.acknum
        else:
            self._trace(1, "----A: duplicate ACK received, do nothing!")
        if packet.acknum != self.base:
            return
        count = 0
        for entry in self.buffer:
            if entry is None or entry.acknum == NOT_IN_USE:
                break
            count += 1
        self.base = (self.base + count) % SEQ_SPACE
        self.buffer = self.buffer[count:] + [None] * count
        self.network.stop_timer(Entity.A)
        if self.outstanding > 0:
            self.network.start_timer(Entity.A, RTT)

    def timer_interrupt(self) -> None:
        """Resend the oldest unacknowledged packet."""
        oldest = self.buffer[0]
        self._trace(1, "----A: time out,resend packets!")
        if oldest is None:
            return
        self._trace(1, f"---A: resending packet {oldest.seqnum}")
        self.network.to_layer3(Entity.A, oldest)
        self.network.stats.packets_resent += 1
        self.network.start_timer(Entity.A, RTT)


class SrReceiver(_Entity):
    """Entity B: acknowledges each packet and buffers those within its window."""

    def __init__(self, network) -> None:
        super().__init__(network)
        self.expected_seqnum = 0
        self.buffer: list[Optional[Packet]] = [None] * WINDOW_SIZE

    def input(self, packet: Packet) -> None:
        """Acknowledge an intact packet and deliver it if it is new."""
        if is_corrupted(packet):
            return
        self._trace(1, f"----B: packet {packet.seqnum} is correctly received, send ACK!")
        self.network.stats.packets_received += 1
        ack = Packet(NOT_IN_USE, packet.seqnum, 0, "0" * PAYLOAD_SIZE).with_checksum()
        self.network.to_layer3(Entity.B, ack)

        index = _offset(packet.seqnum, self.expected_seqnum)
        if index is None:
            return
        slot = self.buffer[index]
        if slot is not None and slot.payload == packet.payload:
            return
        self.buffer[index] = Packet(packet.seqnum, packet.seqnum, packet.checksum, packet.payload)
        if packet.seqnum == self.expected_seqnum:
            count = 0
            for entry in self.buffer:
                if entry is None:
                    break
                count += 1
            self.expected_seqnum = (self.expected_seqnum + count) % SEQ_SPACE
            self.buffer = self.buffer[count:] + [None] * count
        self.network.to_layer5(Entity.B, packet.payload)

    def output(self, message: Message) -> None:
        """B sends no data in a one-way transfer."""

    def timer_interrupt(self) -> None:
        """B runs no timer."""