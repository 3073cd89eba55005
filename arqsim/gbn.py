"""Go-Back-N sender and receiver entities."""

from __future__ import annotations

from collections import deque

from .packet import NOT_IN_USE, PAYLOAD_SIZE, Entity, Message, Packet, is_corrupted

RTT = 16.0
WINDOW_SIZE = 6
SEQ_SPACE = 7


def _in_window(seq: int, first: int, last: int) -> bool:
    if first <= last:
        return first <= seq <= last
    return seq >= first or seq <= last


class _Entity:
    def __init__(self, network) -> None:
        self.network = network

    def _trace(self, level: int, text: str) -> None:
        if self.network.config.trace >= level:
            print(text)


class GbnSender(_Entity):
    """Entity A: sends messages, keeping up to a window of unacknowledged packets."""

    def __init__(self, network) -> None:
        super().__init__(network)
        self.window: deque[Packet] = deque()
        self.next_seqnum = 0

    def output(self, message: Message) -> None:
        """Send a message from the application, or drop it if the window is full."""
        stats = self.network.stats
        if len(self.window) >= WINDOW_SIZE:
            self._trace(1, "----A: New message arrives, send window is full")
            stats.window_full += 1
            return
        self._trace(
            2,
            "----A: New message arrives, send window is not full, send new messge to layer3!",
        )
        packet = Packet(self.next_seqnum, NOT_IN_USE, 0, message.data).with_checksum()
        self.window.append(packet)
        self._trace(1, f"Sending packet {packet.seqnum} to layer 3")
        self.network.to_layer3(Entity.A, packet)
        if len(self.window) == 1:
            self.network.start_timer(Entity.A, RTT)
        self.next_seqnum = (self.next_seqnum + 1) % SEQ_SPACE

    def input(self, packet: Packet) -> None:
        """Handle a cumulative acknowledgement from the receiver."""
        stats = self.network.stats
        if is_corrupted(packet):
            self._trace(1, "----A: corrupted ACK is received, do nothing!")
            return
        self._trace(1, f"----A: uncorrupted ACK {packet.acknum} is received")
        stats.total_acks_received += 1
        if not self.window:
            self._trace(1, "----A: duplicate ACK received, do nothing!")
            return
        first = self.window[0].seqnum
        last = self.window[-1].seqnum
        if not _in_window(packet.acknum, first, last):
            return
        self._trace(1, f"----A: ACK {packet.acknum} is not a duplicate")
        stats.new_acks += 1
        if packet.acknum >= first:
            count = packet.acknum + 1 - first
        else:
            count = SEQ_SPACE - first + packet.acknum
        for _ in range(count):
            self.window.popleft()
        self.network.stop_timer(Entity.A)
        if self.window:
            self.network.start_timer(Entity.A, RTT)

    def timer_interrupt(self) -> None:
        """Resend every packet in the window."""
        self._trace(1, "----A: time out,resend packets!")
        for position, packet in enumerate(self.window):
            self._trace(1, f"---A: resending packet {packet.seqnum}")
            self.network.to_layer3(Entity.A, packet)
            self.network.stats.packets_resent += 1
            if position == 0:
                self.network.start_timer(Entity.A, RTT)


class GbnReceiver(_Entity):
    """Entity B: delivers in-order packets and acknowledges cumulatively."""

    def __init__(self, network) -> None:
        super().__init__(network)
        self.expected_seqnum = 0
        self.next_seqnum = 1

    def input(self, packet: Packet) -> None:
        """Accept an in-order packet, or re-acknowledge the last one delivered."""
        if not is_corrupted(packet) and packet.seqnum == self.expected_seqnum:
            self._trace(1, f"----B: packet {packet.seqnum} is correctly received, send ACK!")
            self.network.stats.packets_received += 1
            self.network.to_layer5(Entity.B, packet.payload)
            acknum = self.expected_seqnum
            self.expected_seqnum = (self.expected_seqnum + 1) % SEQ_SPACE
        else:
            self._trace(
                1, "----B: packet corrupted or not expected sequence number, resend ACK!"
            )
            acknum = (self.expected_seqnum - 1) % SEQ_SPACE
        ack = Packet(self.next_seqnum, acknum, 0, "0" * PAYLOAD_SIZE).with_checksum()
        self.next_seqnum = (self.next_seqnum + 1) % 2
        self.network.to_layer3(Entity.B, ack)

    def output(self, message: Message) -> None:
        """B sends no data in a one-way transfer."""

    def timer_interrupt(self) -> None:
        """B runs no timer."""