#!/usr/bin/env python3
"""One-shot demo — builds a writer chain and logs a few records through it."""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from logchain import manager as log
from logchain.config import load_config, load_yaml_config
from logchain.formatters import full, simple
from logchain.levels import LogLevel
from logchain.sinks import ConsoleWriter, FileWriter, SystemWriter
from logchain.writers import fan_out

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [system] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="logchain demo")
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML config file; without it a hand-built chain is used",
    )
    parser.add_argument(
        "--log-file", default="logs/demo.log",
        help="File sink path for the hand-built chain (default: logs/demo.log)",
    )
    return parser


def install_hand_built_chain(log_file: str) -> None:
    os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
    log.set_writer(fan_out(
        FileWriter(log_file).format(full).filter_level(LogLevel.WARNING),
        ConsoleWriter().format(simple),
        SystemWriter().filter_categories("CORE"),
    ))
    logger.info("Hand-built chain installed, file sink at %s", log_file)


def main():
    args = build_cli_parser().parse_args()

    if args.config:
        config = load_config(load_yaml_config(args.config))
        log.configure(config)
        logger.info("Configured from %s: %s", args.config, config)
    else:
        install_hand_built_chain(args.log_file)

    log.trace("tracing enabled")
    log.info("service started", category="CORE")
    log.warning("cache nearly full", category="NET")
    log.error("disk full")
    log.fatal("state corrupted, continuing anyway", category="CORE")

    total = log.time("summing", lambda: sum(range(100_000)), level=LogLevel.DEBUG)
    log.info(f"sum={total}")


if __name__ == "__main__":
    main()
