"""Error taxonomy for the agent.

None of these errors is fatal to the process. Bootstrap errors degrade to an
empty configuration store; remote errors are caught at the loop boundary and
the loop moves on to its next tick.
"""

from __future__ import annotations

from dataclasses import dataclass


class AgentError(Exception):
    """Base class for all agent errors."""


@dataclass(eq=False)
class BootstrapError(AgentError):
    """The bootstrap configuration file could not be used."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.reason}: {self.path}"


class BootstrapReadError(BootstrapError):
    """The bootstrap file is missing or unreadable."""


class BootstrapDecodeError(BootstrapError):
    """The bootstrap file does not hold a JSON object."""


@dataclass(eq=False)
class RemoteError(AgentError):
    """A call to the remote control service failed."""

    operation: str
    url: str
    reason: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.operation} failed ({self.status_code}): {self.reason}"
        return f"{self.operation} failed: {self.reason}"


class RemoteFetchError(RemoteError):
    """A GET request failed at the transport level or returned a non-200 status."""


class RemoteDecodeError(RemoteFetchError):
    """A GET request succeeded but its body could not be decoded."""


class AckError(RemoteError):
    """A trigger acknowledgment was not accepted by the service."""
