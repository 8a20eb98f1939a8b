"""JSON-lines logging for the agent.

Every record is one JSON object on stdout. The agent's own context keys
(``cluster``, ``operation``, ``trigger_id``, ``status_code``) are promoted to
top-level fields so log pipelines can filter on them directly; any other
``extra`` values are grouped under ``context``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Context keys the sync loops and clients attach to their records.
PROMOTED_KEYS: tuple[str, ...] = ("cluster", "operation", "trigger_id", "status_code")

# Attribute names every LogRecord carries, whatever `extra` was passed.
_STANDARD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class AgentJsonFormatter(logging.Formatter):
    """Render a record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }

        context: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            if key in PROMOTED_KEYS:
                if value is not None:
                    payload[key] = value
            else:
                context[key] = value
        if context:
            payload["context"] = context

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Configuration values are JSON-shaped, but extras from third-party
        # loggers may not be.
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Send all records to stdout as JSON lines at ``level``."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(AgentJsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    # Connection-pool chatter would otherwise flood every poll.
    logging.getLogger("urllib3").setLevel(max(root.level, logging.INFO))
