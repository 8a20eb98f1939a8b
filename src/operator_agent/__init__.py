"""Operator agent.

Keeps a local operator configuration in sync with a remote control service
and performs the one-shot triggers the service issues for this cluster.
"""

__version__ = "0.1.0"

from operator_agent.agent.config import AgentSettings
from operator_agent.agent.store import ConfigStore
from operator_agent.agent.supervisor import Supervisor

__all__ = ["__version__", "AgentSettings", "ConfigStore", "Supervisor"]
