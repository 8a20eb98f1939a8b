"""CLI entrypoint for the operator agent."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from types import FrameType

import uvicorn
from pydantic import ValidationError

from operator_agent import __version__
from operator_agent.agent.config import AgentSettings
from operator_agent.agent.logging import configure_logging
from operator_agent.agent.supervisor import Supervisor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="operator-agent",
        description="Keep operator configuration in sync and perform remote triggers",
    )
    parser.add_argument("--version", action="version", version=f"operator-agent {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "run",
        help="Start the configuration and trigger loops and run until interrupted",
    )

    serve = subparsers.add_parser(
        "serve",
        help="Like 'run', and also serve the read-only status API",
    )
    serve.add_argument(
        "--host",
        default=None,
        help="Bind address (defaults to INSIGHTS_OPERATOR_STATUS_HOST)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port (defaults to INSIGHTS_OPERATOR_STATUS_PORT)",
    )

    subparsers.add_parser(
        "once",
        help="Run a single configuration tick and a single trigger tick, then exit",
    )

    return parser


def _install_signal_handlers(supervisor: Supervisor) -> None:
    def _handle(signum: int, _frame: FrameType | None) -> None:
        logger.info("Received signal", extra={"signal": signal.Signals(signum).name})
        supervisor.stop()

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = AgentSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)
    logger.info(
        "Starting operator agent",
        extra={
            "version": __version__,
            "command": args.command,
            "url": settings.service_url,
            "cluster": settings.cluster,
        },
    )

    supervisor = Supervisor.from_settings(settings)

    if args.command == "once":
        try:
            supervisor.run_once()
        finally:
            supervisor.stop()
        return 0

    if args.command == "run":
        _install_signal_handlers(supervisor)
        try:
            supervisor.run_forever()
        finally:
            supervisor.stop()
        return 0

    if args.command == "serve":
        from operator_agent.server.app import create_app

        host = args.host or settings.status_host
        port = args.port or settings.status_port

        # uvicorn owns SIGINT/SIGTERM here; the loops stop once it returns.
        supervisor.start()
        try:
            uvicorn.run(create_app(supervisor), host=host, port=port, log_config=None)
        finally:
            supervisor.stop()
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
