"""Periodic trigger retrieval, execution and acknowledgment.

Semantics:
    - triggers run in the order the service returned them
    - every trigger is acknowledged, whether or not its execution succeeded
    - a failed execution or acknowledgment is logged and the batch continues
    - nothing is remembered between ticks; a trigger the service still
      reports as active is executed again
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from operator_agent.agent.errors import AckError, RemoteFetchError
from operator_agent.agent.remote.client import RemoteTriggerClient
from operator_agent.agent.remote.models import Trigger
from operator_agent.agent.sync.executor import TriggerExecutor, log_trigger
from operator_agent.agent.sync.status import LoopStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TriggerBatchResult:
    """What happened to one batch of retrieved triggers."""

    executed: list[int] = field(default_factory=list)
    failed_executions: list[int] = field(default_factory=list)
    acknowledged: list[int] = field(default_factory=list)
    failed_acks: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_executions and not self.failed_acks


class TriggerSyncLoop:
    """Fetch/execute/acknowledge loop for remote triggers."""

    name = "trigger-sync"

    def __init__(
        self,
        *,
        client: RemoteTriggerClient,
        cluster: str,
        interval_seconds: int,
        executor: TriggerExecutor | None = None,
    ) -> None:
        if interval_seconds < 1:
            raise ValueError("interval_seconds must be >= 1")

        self._client = client
        self._cluster = cluster
        self._interval = interval_seconds
        self._executor = executor or log_trigger
        self.status = LoopStatus(name=self.name, interval_seconds=interval_seconds)

    def tick(self) -> TriggerBatchResult | None:
        """Run one fetch/execute/acknowledge cycle.

        Returns:
            The batch result, or None if the triggers could not be retrieved.
        """
        self.status.tick_started()
        logger.info(
            "Gathering triggers from service",
            extra={"cluster": self._cluster, "url": self._client.base_url},
        )

        try:
            triggers = self._client.fetch_triggers(self._cluster)
        except RemoteFetchError as e:
            logger.error(
                "Unable to retrieve triggers from the service",
                extra={
                    "cluster": self._cluster,
                    "operation": e.operation,
                    "status_code": e.status_code,
                    "error": e.reason,
                },
            )
            self.status.tick_finished("error", error=str(e))
            return None

        result = TriggerBatchResult()
        if not triggers:
            logger.info("Triggers for this operator: none", extra={"cluster": self._cluster})
            self.status.tick_finished("ok")
            return result

        for trigger in triggers:
            logger.info(
                "Trigger for this operator",
                extra={"cluster": self._cluster, **trigger.log_context()},
            )

        logger.info(
            "Performing triggers and acking them",
            extra={"cluster": self._cluster, "count": len(triggers)},
        )
        for trigger in triggers:
            self._perform(trigger, result)
            self._acknowledge(trigger, result)

        if result.ok:
            self.status.tick_finished("ok")
        else:
            self.status.tick_finished(
                "error",
                error=(
                    f"failed executions: {result.failed_executions}, "
                    f"failed acks: {result.failed_acks}"
                ),
            )
        return result

    def _perform(self, trigger: Trigger, result: TriggerBatchResult) -> None:
        try:
            self._executor(trigger)
        except Exception:
            logger.exception(
                "Trigger execution failed",
                extra={"cluster": self._cluster, "trigger_id": trigger.id},
            )
            result.failed_executions.append(trigger.id)
        else:
            result.executed.append(trigger.id)

    def _acknowledge(self, trigger: Trigger, result: TriggerBatchResult) -> None:
        logger.info("Acking trigger", extra={"cluster": self._cluster, "trigger_id": trigger.id})
        try:
            self._client.acknowledge(self._cluster, trigger.id)
        except AckError as e:
            logger.error(
                "Unable to ack trigger",
                extra={
                    "cluster": self._cluster,
                    "trigger_id": trigger.id,
                    "status_code": e.status_code,
                    "error": e.reason,
                },
            )
            result.failed_acks.append(trigger.id)
        else:
            logger.info(
                "Trigger has been acked",
                extra={"cluster": self._cluster, "trigger_id": trigger.id},
            )
            result.acknowledged.append(trigger.id)

    def run(self, stop: threading.Event) -> None:
        """Tick until ``stop`` is set, waiting the interval after each tick."""

        logger.info(
            "Gathering triggers periodically",
            extra={"cluster": self._cluster, "interval_seconds": self._interval},
        )

        while not stop.is_set():
            try:
                self.tick()
            except Exception as e:
                logger.exception(
                    "Trigger tick failed unexpectedly", extra={"cluster": self._cluster}
                )
                self.status.tick_finished("error", error=str(e))

            if stop.wait(self._interval):
                break

        logger.info("Trigger sync stopped", extra={"cluster": self._cluster})
