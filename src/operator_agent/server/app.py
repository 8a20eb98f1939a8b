"""FastAPI app factory.

Read-only endpoints over a running :class:`Supervisor`. Nothing here mutates
agent state; the configuration can only change through the sync loop.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import FastAPI

from operator_agent import __version__
from operator_agent.agent.supervisor import Supervisor
from operator_agent.server.models import ConfigurationView, Health, LoopView

logger = logging.getLogger(__name__)


def create_app(supervisor: Supervisor) -> FastAPI:
    app = FastAPI(
        title="Operator Agent",
        version=__version__,
        description="Status API of the operator configuration/trigger sync agent.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url=None,
    )

    # Expose the supervisor for request handlers that want to read it.
    app.state.supervisor = supervisor

    @app.get("/api/health", response_model=Health)
    def health() -> Health:
        return Health(
            version=__version__,
            cluster=supervisor.cluster,
            running=supervisor.running,
        )

    @app.get("/api/v1/configuration", response_model=ConfigurationView)
    def configuration() -> ConfigurationView:
        revision, snapshot = supervisor.store.view()
        return ConfigurationView(revision=revision, configuration=dict(snapshot))

    @app.get("/api/v1/loops", response_model=list[LoopView])
    def loops() -> list[LoopView]:
        return [LoopView.model_validate(asdict(record)) for record in supervisor.loop_statuses()]

    logger.debug("Status API created", extra={"cluster": supervisor.cluster})
    return app
