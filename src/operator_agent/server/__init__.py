"""FastAPI status server for operator-agent.

Design intent:
- Keep agent logic in `operator_agent.agent.*`
- Keep server-specific concerns (routing, response models) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from operator_agent.server.app import create_app
