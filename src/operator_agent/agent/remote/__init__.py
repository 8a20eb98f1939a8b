"""Clients and wire models for the remote control service."""

from operator_agent.agent.remote.client import RemoteConfigClient, RemoteTriggerClient
from operator_agent.agent.remote.models import Trigger

__all__ = [
    "RemoteConfigClient",
    "RemoteTriggerClient",
    "Trigger",
]
