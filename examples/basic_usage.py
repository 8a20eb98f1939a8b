#!/usr/bin/env python3
"""Programmatic usage example.

This demonstrates embedding the agent with a custom trigger executor:

* load settings from `.env` / environment
* start the configuration and trigger loops
* perform "must-gather" triggers with our own code

Triggers are delivered at least once, so the executor below only acts on
trigger ids it has not seen yet in this process.
"""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import Sequence

from operator_agent.agent.config import AgentSettings
from operator_agent.agent.logging import configure_logging
from operator_agent.agent.remote.models import Trigger
from operator_agent.agent.supervisor import Supervisor

logger = logging.getLogger("basic_usage")


class MustGatherExecutor:
    def __init__(self) -> None:
        self._seen: set[int] = set()
        self._lock = threading.Lock()

    def __call__(self, trigger: Trigger) -> None:
        if trigger.type != "must-gather":
            logger.info("Ignoring trigger", extra=trigger.log_context())
            return
        with self._lock:
            if trigger.id in self._seen:
                logger.info("Trigger already performed", extra={"trigger_id": trigger.id})
                return
            self._seen.add(trigger.id)
        logger.info("Gathering data", extra=trigger.log_context())


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the operator agent (programmatic example).")
    parser.add_argument(
        "--seconds",
        type=float,
        default=30.0,
        help="How long to run before stopping",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = AgentSettings()
    configure_logging(settings.log_level)

    supervisor = Supervisor.from_settings(settings, executor=MustGatherExecutor())
    signal.signal(signal.SIGINT, lambda *_: supervisor.stop())

    supervisor.start()
    try:
        supervisor.wait(args.seconds)
    finally:
        supervisor.stop()

    print(dict(supervisor.store.snapshot()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
