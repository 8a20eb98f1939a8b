"""Periodic configuration synchronisation.

Each tick fetches the configuration delta for the cluster and merges it into
the shared :class:`ConfigStore`. A failed fetch leaves the store untouched;
the loop simply tries again after its interval.
"""

from __future__ import annotations

import logging
import threading

from operator_agent.agent.errors import RemoteFetchError
from operator_agent.agent.remote.client import RemoteConfigClient
from operator_agent.agent.store import ConfigStore, format_configuration
from operator_agent.agent.sync.status import LoopStatus

logger = logging.getLogger(__name__)


class ConfigSyncLoop:
    """Fetch-and-merge loop for the operator configuration."""

    name = "config-sync"

    def __init__(
        self,
        *,
        client: RemoteConfigClient,
        store: ConfigStore,
        cluster: str,
        interval_seconds: int,
    ) -> None:
        if interval_seconds < 1:
            raise ValueError("interval_seconds must be >= 1")

        self._client = client
        self._store = store
        self._cluster = cluster
        self._interval = interval_seconds
        self.status = LoopStatus(name=self.name, interval_seconds=interval_seconds)

    def tick(self) -> bool:
        """Run one fetch/merge cycle.

        Returns:
            True if a delta was retrieved and merged.
        """
        self.status.tick_started()
        logger.info(
            "Gathering configuration from service",
            extra={"cluster": self._cluster, "url": self._client.base_url},
        )

        try:
            delta = self._client.fetch(self._cluster)
        except RemoteFetchError as e:
            logger.error(
                "Unable to retrieve configuration from the service",
                extra={
                    "cluster": self._cluster,
                    "operation": e.operation,
                    "status_code": e.status_code,
                    "error": e.reason,
                },
            )
            self.status.tick_finished("error", error=str(e))
            return False

        logger.info(
            "Retrieved configuration: %s",
            format_configuration(delta),
            extra={"cluster": self._cluster},
        )

        written = self._store.merge(delta)
        dropped = sorted(set(delta) - set(written))
        if dropped:
            logger.info(
                "Ignoring keys unknown to the local configuration",
                extra={"cluster": self._cluster, "keys": dropped},
            )

        revision, snapshot = self._store.view()
        logger.info(
            "Updated configuration: %s",
            format_configuration(snapshot),
            extra={"cluster": self._cluster, "revision": revision},
        )
        self.status.tick_finished("ok")
        return True

    def run(self, stop: threading.Event) -> None:
        """Tick until ``stop`` is set, waiting the interval after each tick."""

        logger.info(
            "Original configuration: %s",
            format_configuration(self._store.snapshot()),
            extra={"cluster": self._cluster},
        )
        logger.info(
            "Gathering configuration periodically",
            extra={"cluster": self._cluster, "interval_seconds": self._interval},
        )

        while not stop.is_set():
            try:
                self.tick()
            except Exception as e:
                logger.exception(
                    "Configuration tick failed unexpectedly", extra={"cluster": self._cluster}
                )
                self.status.tick_finished("error", error=str(e))

            if stop.wait(self._interval):
                break

        logger.info("Configuration sync stopped", extra={"cluster": self._cluster})
