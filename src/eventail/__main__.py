"""Developer entrypoint: loads config and runs a registry self-check benchmark."""

from __future__ import annotations

import argparse
import random
import sys
import time
from pathlib import Path

from loguru import logger

from eventail import __version__
from eventail.config import Config, cfg, load_config_with_env
from eventail.core.errors import EventailConfigurationError
from eventail.registry import ListenerRegistry


def setup_logging(verbose: bool = False, level: str = "INFO") -> None:
    """Configure loguru and enable the library's own log records."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else level,
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan> | {message}"
        ),
    )
    logger.enable("eventail")


def reload_config(config_path: Path) -> Config:
    """Load config from path and update global cfg."""
    data = load_config_with_env(config_path)
    cfg.reload(data)
    return cfg


def run_benchmark(num_listeners: int, num_emissions: int, *, seed: int | None = None) -> dict[str, float]:
    """Exercise registration, emission, once-churn and removal; return seconds per phase."""
    rng = random.Random(seed)
    registry = ListenerRegistry()
    timings: dict[str, float] = {}
    calls = 0

    def on_event(ctx: object, *args: object) -> None:
        nonlocal calls
        calls += 1

    # Distinct contexts keep each (callback, context) pair unique.
    contexts = [object() for _ in range(num_listeners)]

    start = time.perf_counter()
    for ctx in contexts:
        registry.register("bench", on_event, ctx, rng.randint(0, 1000))
    timings["register"] = time.perf_counter() - start

    priorities = [listener.priority for listener in registry.listeners("bench")]
    if priorities != sorted(priorities):
        raise AssertionError("listeners out of priority order after registration")

    start = time.perf_counter()
    for _ in range(num_emissions):
        registry.emit("bench", "payload")
    timings["emit"] = time.perf_counter() - start
    if calls != num_listeners * num_emissions:
        raise AssertionError(f"expected {num_listeners * num_emissions} calls, got {calls}")

    start = time.perf_counter()
    for ctx in contexts[: num_listeners // 2]:
        registry.register("bench.once", on_event, ctx, rng.randint(0, 1000), once=True)
    registry.emit("bench.once")
    timings["once"] = time.perf_counter() - start
    if "bench.once" in registry:
        raise AssertionError("once listeners survived their emission")

    rng.shuffle(contexts)
    start = time.perf_counter()
    for ctx in contexts:
        registry.remove("bench", on_event, ctx)
    timings["remove"] = time.perf_counter() - start
    if len(registry):
        raise AssertionError("channels left after removing every listener")

    return timings


def main() -> None:
    """Main entrypoint."""
    parser = argparse.ArgumentParser(description="Eventail listener registry self-check")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("eventail.yaml"),
        help="Path to config file (default: eventail.yaml)",
    )
    parser.add_argument("--listeners", type=int, default=10000, help="Listeners to register")
    parser.add_argument("--emissions", type=int, default=10, help="Emissions to run")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for priorities")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        config = reload_config(args.config)
    except EventailConfigurationError as exc:
        logger.error("Invalid config {}: {} ({})", args.config, exc, exc.code)
        sys.exit(1)
    if not args.verbose:
        setup_logging(False, config.log_level)

    timings = run_benchmark(args.listeners, args.emissions, seed=args.seed)
    for phase, seconds in timings.items():
        logger.info("{:<8} {:>9.2f} ms", phase, seconds * 1000)
    logger.success("{} listeners x {} emissions OK", args.listeners, args.emissions)


if __name__ == "__main__":
    main()
