"""Polling loops that keep the agent in sync with the control service."""

from operator_agent.agent.sync.config_sync import ConfigSyncLoop
from operator_agent.agent.sync.executor import TriggerExecutor, log_trigger
from operator_agent.agent.sync.status import LoopStatus, LoopStatusRecord
from operator_agent.agent.sync.trigger_sync import TriggerBatchResult, TriggerSyncLoop

__all__ = [
    "ConfigSyncLoop",
    "LoopStatus",
    "LoopStatusRecord",
    "TriggerBatchResult",
    "TriggerExecutor",
    "TriggerSyncLoop",
    "log_trigger",
]
