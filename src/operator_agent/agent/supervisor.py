"""Lifecycle of the two sync loops.

The loops run on their own daemon threads and share nothing but the
configuration store and the process lifetime. The supervisor starts them,
keeps the process alive, and on request signals them to stop between ticks.
"""

from __future__ import annotations

import logging
import threading

from operator_agent.agent.config import AgentSettings
from operator_agent.agent.remote.client import RemoteConfigClient, RemoteTriggerClient
from operator_agent.agent.store import ConfigStore
from operator_agent.agent.sync.config_sync import ConfigSyncLoop
from operator_agent.agent.sync.executor import TriggerExecutor
from operator_agent.agent.sync.status import LoopStatusRecord
from operator_agent.agent.sync.trigger_sync import TriggerSyncLoop

logger = logging.getLogger(__name__)


class Supervisor:
    """Starts and stops the configuration and trigger loops."""

    def __init__(
        self,
        *,
        cluster: str,
        store: ConfigStore,
        config_loop: ConfigSyncLoop,
        trigger_loop: TriggerSyncLoop,
        config_client: RemoteConfigClient | None = None,
        trigger_client: RemoteTriggerClient | None = None,
    ) -> None:
        self.cluster = cluster
        self.store = store
        self.config_loop = config_loop
        self.trigger_loop = trigger_loop
        self._clients = [c for c in (config_client, trigger_client) if c is not None]

        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []

    @classmethod
    def from_settings(
        cls,
        settings: AgentSettings,
        *,
        executor: TriggerExecutor | None = None,
    ) -> Supervisor:
        """Wire the store, clients and loops described by ``settings``."""

        store = ConfigStore.from_file(settings.configfile)
        config_client = RemoteConfigClient(
            base_url=settings.service_url, timeout=settings.request_timeout
        )
        trigger_client = RemoteTriggerClient(
            base_url=settings.service_url, timeout=settings.request_timeout
        )
        return cls(
            cluster=settings.cluster,
            store=store,
            config_loop=ConfigSyncLoop(
                client=config_client,
                store=store,
                cluster=settings.cluster,
                interval_seconds=settings.config_interval,
            ),
            trigger_loop=TriggerSyncLoop(
                client=trigger_client,
                cluster=settings.cluster,
                interval_seconds=settings.trigger_interval,
                executor=executor,
            ),
            config_client=config_client,
            trigger_client=trigger_client,
        )

    @property
    def running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Supervisor already started")

        for loop in (self.config_loop, self.trigger_loop):
            thread = threading.Thread(
                target=loop.run,
                name=loop.name,
                daemon=True,
                kwargs={"stop": self._stop},
            )
            thread.start()
            self._threads.append(thread)

        logger.info(
            "Sync loops started",
            extra={"cluster": self.cluster, "threads": [t.name for t in self._threads]},
        )

    def wait(self, timeout: float | None = None) -> bool:
        """Block until :meth:`stop` is called. Returns True once stopped."""
        return self._stop.wait(timeout)

    def run_forever(self) -> None:
        self.start()
        self.wait()

    def stop(self, timeout: float = 5.0) -> None:
        """Ask both loops to stop after their current tick and wait for them."""

        if not self._stop.is_set():
            logger.info("Stopping sync loops", extra={"cluster": self.cluster})
        self._stop.set()

        for thread in self._threads:
            if thread is threading.current_thread():
                continue
            thread.join(timeout)
            if thread.is_alive():
                # Mid-request; the daemon thread ends with the process.
                logger.warning("Sync loop did not stop in time", extra={"loop": thread.name})

        for client in self._clients:
            client.close()

    def run_once(self) -> None:
        """Run a single tick of each loop on the calling thread."""

        self.config_loop.tick()
        self.trigger_loop.tick()

    def loop_statuses(self) -> list[LoopStatusRecord]:
        return [self.config_loop.status.get(), self.trigger_loop.status.get()]
