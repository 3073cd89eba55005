import pytest

from arqsim.emulator import (
    Direction,
    Emulator,
    EventType,
    SimulationConfig,
    Statistics,
)
from arqsim.packet import NOT_IN_USE, PAYLOAD_SIZE, Entity, Packet, is_corrupted


def _config(**kwargs):
    values = dict(messages=0, loss_prob=0.0, corrupt_prob=0.0, mean_interarrival=10.0)
    values.update(kwargs)
    return SimulationConfig(**values)


def _packet(letter="a"):
    return Packet(seqnum=0, acknum=NOT_IN_USE, payload=letter * PAYLOAD_SIZE).with_checksum()


class _EchoSender:
    def __init__(self, network):
        self.network = network
        self.timeouts = 0

    def output(self, message):
        pkt = Packet(seqnum=0, acknum=NOT_IN_USE, payload=message.data).with_checksum()
        self.network.to_layer3(Entity.A, pkt)

    def input(self, packet):
        pass

    def timer_interrupt(self):
        self.timeouts += 1


class _TimedSender(_EchoSender):
    def output(self, message):
        super().output(message)
        self.network.start_timer(Entity.A, 16.0)


class _Receiver:
    def __init__(self, network):
        self.network = network

    def output(self, message):
        pass

    def input(self, packet):
        if not is_corrupted(packet):
            self.network.to_layer5(Entity.B, packet.payload)

    def timer_interrupt(self):
        pass


def _timers(emulator):
    return [e for e in emulator.pending_events() if e.type is EventType.TIMER_INTERRUPT]


def test_random_is_uniform_range_and_seeded():
    first = Emulator(_config(), seed=5)
    second = Emulator(_config(), seed=5)
    draws = [first.random() for _ in range(200)]
    assert all(0.0 <= x < 1.0 for x in draws)
    assert draws == [second.random() for _ in range(200)]


def test_initial_arrival_is_scheduled():
    emulator = Emulator(_config(mean_interarrival=10.0))
    events = emulator.pending_events()
    assert len(events) == 1
    assert events[0].type is EventType.FROM_LAYER5
    assert events[0].entity is Entity.A
    assert 0.0 <= events[0].time <= 20.0


def test_start_timer_twice_warns_and_keeps_one(capsys):
    emulator = Emulator(_config())
    emulator.start_timer(Entity.A, 16.0)
    emulator.start_timer(Entity.A, 30.0)
    timers = _timers(emulator)
    assert len(timers) == 1
    assert timers[0].time == 16.0
    assert "attempt to start a timer that is already started" in capsys.readouterr().out


def test_stop_timer_removes_only_that_entity():
    emulator = Emulator(_config())
    emulator.start_timer(Entity.A, 5.0)
    emulator.start_timer(Entity.B, 7.0)
    assert emulator.stop_timer(Entity.A) is True
    assert [e.entity for e in _timers(emulator)] == [Entity.B]


def test_stop_timer_without_timer_warns(capsys):
    emulator = Emulator(_config())
    assert emulator.stop_timer(Entity.A) is False
    assert "Warning: unable to cancel your timer. It wasn't running." in capsys.readouterr().out


def test_equal_times_place_new_event_first():
    emulator = Emulator(_config())
    emulator.start_timer(Entity.A, 5.0)
    emulator.start_timer(Entity.B, 5.0)
    assert [e.entity for e in _timers(emulator)] == [Entity.B, Entity.A]


def test_events_are_kept_in_time_order():
    emulator = Emulator(_config())
    emulator.start_timer(Entity.A, 9.0)
    emulator.start_timer(Entity.B, 2.0)
    for _ in range(4):
        emulator.to_layer3(Entity.A, _packet())
    times = [e.time for e in emulator.pending_events()]
    assert times == sorted(times)


def test_to_layer3_schedules_arrival_at_other_side():
    emulator = Emulator(_config())
    emulator.to_layer3(Entity.A, _packet())
    arrivals = [e for e in emulator.pending_events() if e.type is EventType.FROM_LAYER3]
    assert len(arrivals) == 1
    assert arrivals[0].entity is Entity.B
    assert 1.0 <= arrivals[0].time <= 10.0
    assert arrivals[0].packet == _packet()
    assert emulator.stats.to_layer3 == 1


def test_to_layer3_copies_packet():
    emulator = Emulator(_config())
    pkt = _packet()
    emulator.to_layer3(Entity.A, pkt)
    pkt.seqnum = 5
    arrival = next(e for e in emulator.pending_events() if e.type is EventType.FROM_LAYER3)
    assert arrival.packet.seqnum == 0


def test_arrivals_never_reorder():
    emulator = Emulator(_config())
    for letter in "abcdef":
        emulator.to_layer3(Entity.A, _packet(letter))
    arrivals = [e for e in emulator.pending_events() if e.type is EventType.FROM_LAYER3]
    assert [e.packet.payload[0] for e in arrivals] == list("abcdef")


def test_loss_respects_direction():
    emulator = Emulator(_config(loss_prob=1.0, direction=Direction.A_TO_B))
    emulator.to_layer3(Entity.A, _packet())
    emulator.to_layer3(Entity.B, _packet())
    arrivals = [e for e in emulator.pending_events() if e.type is EventType.FROM_LAYER3]
    assert emulator.stats.lost == 1
    assert [e.entity for e in arrivals] == [Entity.A]


def test_loss_in_both_directions():
    emulator = Emulator(_config(loss_prob=1.0, direction=Direction.BOTH))
    emulator.to_layer3(Entity.A, _packet())
    emulator.to_layer3(Entity.B, _packet())
    assert emulator.stats.lost == 2
    assert emulator.stats.to_layer3 == 2


def test_corruption_is_detectable():
    emulator = Emulator(_config(corrupt_prob=1.0, direction=Direction.BOTH))
    for _ in range(10):
        emulator.to_layer3(Entity.A, _packet())
    arrivals = [e for e in emulator.pending_events() if e.type is EventType.FROM_LAYER3]
    assert emulator.stats.corrupted == 10
    assert all(is_corrupted(e.packet) for e in arrivals)


def test_to_layer5_counts_and_records():
    emulator = Emulator(_config())
    emulator.to_layer5(Entity.B, "k" * PAYLOAD_SIZE)
    assert emulator.stats.messages_delivered == 1
    assert emulator.delivered == [(Entity.B, "k" * PAYLOAD_SIZE)]


def test_run_delivers_every_message_in_order():
    emulator = Emulator(_config(messages=5))
    stats = emulator.run(_EchoSender(emulator), _Receiver(emulator))
    assert stats.messages_attempted == 5
    assert stats.messages_delivered == 5
    assert [data for _, data in emulator.delivered] == [c * PAYLOAD_SIZE for c in "abcde"]
    assert emulator.pending_events() == []
    assert emulator.time > 0.0


def test_run_letters_wrap_after_z():
    emulator = Emulator(_config(messages=27))
    emulator.run(_EchoSender(emulator), _Receiver(emulator))
    assert emulator.delivered[26][1] == "a" * PAYLOAD_SIZE
    assert emulator.delivered[25][1] == "z" * PAYLOAD_SIZE


def test_run_fires_timer_interrupts():
    emulator = Emulator(_config(messages=1))
    sender = _TimedSender(emulator)
    emulator.run(sender, _Receiver(emulator))
    assert sender.timeouts == 1


def test_run_with_no_messages():
    emulator = Emulator(_config(messages=0))
    stats = emulator.run(_EchoSender(emulator), _Receiver(emulator))
    assert stats == Statistics()


def test_summary_reports_counts():
    emulator = Emulator(_config(messages=3))
    emulator.run(_EchoSender(emulator), _Receiver(emulator))
    text = emulator.summary()
    assert "after attempting to send 3 msgs from layer5" in text
    assert "number of messages delivered to application:  3 " in text


@pytest.mark.parametrize("level", [2, 3, 4])
def test_trace_prints_event_lines(capsys, level):
    emulator = Emulator(_config(messages=1, trace=level))
    emulator.run(_EchoSender(emulator), _Receiver(emulator))
    assert "EVENT time:" in capsys.readouterr().out


def test_quiet_trace_prints_nothing(capsys):
    emulator = Emulator(_config(messages=2, trace=0))
    emulator.run(_EchoSender(emulator), _Receiver(emulator))
    assert capsys.readouterr().out == ""