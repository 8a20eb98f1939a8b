"""Trigger execution hook.

The agent only retrieves and acknowledges triggers; what a trigger actually
does is up to the executor plugged into :class:`TriggerSyncLoop`. An executor
is any callable taking a :class:`Trigger`. It runs synchronously on the
trigger loop's thread; raising marks the execution as failed but the trigger
is acknowledged anyway.

Triggers are delivered at least once, so executors must be idempotent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from operator_agent.agent.remote.models import Trigger

logger = logging.getLogger(__name__)

TriggerExecutor = Callable[[Trigger], None]


def log_trigger(trigger: Trigger) -> None:
    """Default executor: record the operator context of the trigger."""

    logger.info("Performing trigger", extra=trigger.log_context())
