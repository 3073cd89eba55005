"""Command-line entry point for running a simulation."""

from __future__ import annotations

import argparse

from .emulator import Direction, Emulator, SimulationConfig
from .gbn import GbnReceiver, GbnSender
from .sr import SrReceiver, SrSender

_PROTOCOLS = {"gbn": (GbnSender, GbnReceiver), "sr": (SrSender, SrReceiver)}


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the simulator."""
    parser = argparse.ArgumentParser(description="Simulate a reliable transport protocol.")
    parser.add_argument("messages", type=int, help="number of messages to simulate")
    parser.add_argument("--protocol", choices=sorted(_PROTOCOLS), default="gbn")
    parser.add_argument("--loss", type=float, default=0.0, help="packet loss probability")
    parser.add_argument("--corrupt", type=float, default=0.0, help="corruption probability")
    parser.add_argument(
        "--direction",
        type=int,
        choices=[d.value for d in Direction],
        default=Direction.A_TO_B.value,
        help="0 A->B, 1 A<-B, 2 both directions",
    )
    parser.add_argument(
        "--interval", type=float, default=10.0, help="average time between messages"
    )
    parser.add_argument("--trace", type=int, default=0)
    parser.add_argument("--seed", type=int, default=9999)
    return parser


def main(argv=None) -> int:
    """Run a simulation and print its report."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.interval <= 0:
        parser.error("--interval must be greater than 0")
    config = SimulationConfig(
        messages=args.messages,
        loss_prob=args.loss,
        corrupt_prob=args.corrupt,
        mean_interarrival=args.interval,
        direction=Direction(args.direction),
        trace=args.trace,
    )
    emulator = Emulator(config, args.seed)
    sender_cls, receiver_cls = _PROTOCOLS[args.protocol]
    emulator.run(sender_cls(emulator), receiver_cls(emulator))
    print(emulator.summary(), end="")
    return 0