# arqsim

A small discrete-event emulator of an unreliable network channel, with two
reliable transport protocols that run over it:

- **Go-Back-N** (`arqsim.gbn`, classes `GbnSender` and `GbnReceiver`): a
  send window of 6 packets over a sequence space of 7, cumulative
  acknowledgements, and resending of every packet in the window when the
  timer (16 time units) expires.
- **Selective Repeat** (`arqsim.sr`, classes `SrSender` and `SrReceiver`):
  a window of 6 over a sequence space of 7, an acknowledgement for every
  intact packet, a receiver that buffers packets arriving inside its window,
  and resending of only the oldest unacknowledged packet on timeout.

The emulator carries messages from a sender (entity A) to a receiver
(entity B). Each message is 20 copies of one letter, `a` for the first,
`b` for the second and so on, wrapping after `z`. Each new message arrives
a uniformly random time after the previous one, between 0 and twice the
interval you configure. In the network a packet may be lost or corrupted
with the probabilities you give. A corrupted packet has its first payload
character replaced by `Z`, or its sequence or acknowledgement number set to
999999. Packets are never reordered. Each arrives between 1 and 10 time
units after the latest packet already in flight towards the same entity.
The run ends when no events remain.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Command line

```
arqsim MESSAGES [--protocol {gbn,sr}] [--loss P] [--corrupt P]
                [--direction {0,1,2}] [--interval T] [--trace N] [--seed S]
```

| Option        | Default | Meaning                                                        |
|---------------|---------|----------------------------------------------------------------|
| `MESSAGES`    |         | number of messages to send from A                              |
| `--protocol`  | `gbn`   | `gbn` for Go-Back-N, `sr` for Selective Repeat                 |
| `--loss`      | `0.0`   | probability that a packet is lost                              |
| `--corrupt`   | `0.0`   | probability that a packet is corrupted                         |
| `--direction` | `0`     | where loss and corruption apply: 0 A->B, 1 A<-B, 2 both ways   |
| `--interval`  | `10.0`  | average time between messages; must be greater than 0          |
| `--trace`     | `0`     | how much detail to print while running (0 to 4)                |
| `--seed`      | `9999`  | seed of the random number generator                            |

For example:

```
arqsim 100 --protocol sr --loss 0.1 --corrupt 0.1 --direction 2 --trace 1
```

At the end of the run the command prints a summary. It gives the finishing
time, the number of messages attempted, the messages dropped because the
window was full, the new acknowledgements received at A, the packets resent
by A, the correct packets received at B, and the messages delivered to the
application.

Trace levels add output cumulatively. Level 1 shows protocol actions, losses
and corruptions. Level 2 adds each event and timer start and stop. Level 3
adds event scheduling and the packets passed to layers 3 and 5. Level 4 adds
every random number drawn. Warnings about starting a timer that is already
running, or stopping one that is not, are printed at every level.

## Library use

```python
from arqsim.emulator import Direction, Emulator, SimulationConfig
from arqsim.gbn import GbnReceiver, GbnSender

config = SimulationConfig(
    messages=50,
    loss_prob=0.1,
    corrupt_prob=0.1,
    mean_interarrival=10.0,
    direction=Direction.BOTH,
    trace=0,
)
emulator = Emulator(config, seed=9999)
stats = emulator.run(GbnSender(emulator), GbnReceiver(emulator))
print(stats.messages_delivered, stats.packets_resent)
print(emulator.summary())
```

- `Emulator.run(sender, receiver)` processes events until none remain and
  returns a `Statistics` object. Its counters are `window_full`,
  `total_acks_received`, `packets_resent`, `new_acks`, `packets_received`,
  `messages_delivered`, `messages_attempted`, `to_layer3`, `lost` and
  `corrupted`.
- `Emulator.delivered` lists each `(Entity, data)` pair handed to the
  application. `Emulator.pending_events()` returns the scheduled `Event`s in
  time order.
- Protocol entities talk to the network through `Emulator.to_layer3`,
  `Emulator.to_layer5`, `Emulator.start_timer` and `Emulator.stop_timer`.
  Any object with `output(message)`, `input(packet)` and
  `timer_interrupt()` methods can be passed to `run`.
- `Emulator` raises `RuntimeError` if its random numbers do not average
  between 0.25 and 0.75 over 1000 draws.

`arqsim.packet` defines `Entity` (`A` and `B`) and `Message`, whose data
must be exactly 20 characters or `ValueError` is raised. It also defines
`Packet`, with `seqnum`, `acknum`, `checksum` and `payload`. The
`compute_checksum` function returns the sum of the sequence number, the
acknowledgement number and the payload character codes. `is_corrupted`
compares the stored checksum with that sum, and `Packet.with_checksum()`
returns a copy carrying the correct checksum.

## Limitations

Transfer is one-way only. Messages always originate at A, and the receivers'
`output` and `timer_interrupt` methods do nothing. The simulator takes its
settings from command-line options or a `SimulationConfig` and does not
prompt for them. It keeps no record of a run beyond the printed summary and
the returned statistics.