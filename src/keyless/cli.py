"""Console entry point: provision a car and key fob and run one handshake."""

import argparse
import logging
import sys
from datetime import timedelta
from typing import Optional, Sequence

from .config import HandshakeConfig
from .freshness import system_clock, window_nanos
from .simulation import provision, run_handshake
from .types import KeylessError


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Command-line options. Unset options fall back to KEYLESS_* environment
    variables, then to the built-in defaults.
    """
    p = argparse.ArgumentParser(
        prog="keyless-demo",
        description="Simulate a keyless-entry handshake between a car and a key fob.",
    )
    p.add_argument("--key-size", type=int, help="RSA modulus size in bits")
    p.add_argument("--window-ms", type=int, help="freshness window in milliseconds")
    p.add_argument(
        "--delay-ms",
        type=int,
        default=0,
        help="simulated latency: the car's clock runs this far ahead of the key fob's",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="log rejection reasons and key material")
    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> HandshakeConfig:
    """Merge command-line options over the environment configuration."""
    config = HandshakeConfig.from_env()
    if args.key_size is not None:
        config.key_size = args.key_size
    if args.window_ms is not None:
        config.freshness_window = timedelta(milliseconds=args.window_ms)
    return config.validate()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
        delay_ns = window_nanos(timedelta(milliseconds=args.delay_ms))
        verifier, prover = provision(
            config,
            clock=system_clock,
            verifier_clock=lambda: system_clock() + delay_ns,
        )
        result = run_handshake(verifier, prover)
    except KeylessError as e:
        logger.error("%s", e)
        return 2

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
