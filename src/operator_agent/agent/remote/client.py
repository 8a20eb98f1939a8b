"""HTTP clients for the remote control service.

Both clients wrap a `requests.Session` so the loops never deal with transport
details, and so tests can inject a session double. Neither client retries: a
failed call surfaces as a :class:`~operator_agent.agent.errors.RemoteError`
and the calling loop decides what to do on its next tick.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from operator_agent.agent.errors import AckError, RemoteDecodeError, RemoteFetchError
from operator_agent.agent.remote.models import Trigger
from operator_agent.agent.store import ConfigurationDelta

logger = logging.getLogger(__name__)

ACK_SUCCESS_CODES: frozenset[int] = frozenset({200, 201, 202})


class _ServiceClient:
    """Shared transport for the operator API (``/api/v1/operator``)."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url.strip():
            raise ValueError("base_url is required")
        if timeout <= 0:
            raise ValueError("timeout must be > 0")

        self._base_url = base_url.strip().rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "operator-agent"})

    @property
    def base_url(self) -> str:
        return self._base_url

    def _operator_url(self, *segments: str | int) -> str:
        path = "/".join(quote(str(segment), safe="") for segment in segments)
        return f"{self._base_url}/api/v1/operator/{path}"

    def _read(self, *, operation: str, url: str) -> Any:
        """GET ``url`` and decode its JSON body.

        Returns None for an empty body.
        """
        logger.debug("Sending read request", extra={"operation": operation, "url": url})
        try:
            resp = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise RemoteFetchError(
                operation=operation,
                url=url,
                reason=f"communication error with the server: {e}",
            ) from e

        if resp.status_code != 200:
            raise RemoteFetchError(
                operation=operation,
                url=url,
                reason=f"expected HTTP status 200 OK, got {resp.status_code}",
                status_code=resp.status_code,
            )

        if not resp.content.strip():
            return None

        try:
            return resp.json()
        except ValueError as e:
            raise RemoteDecodeError(
                operation=operation,
                url=url,
                reason=f"response body is not valid JSON: {e}",
                status_code=resp.status_code,
            ) from e

    def close(self) -> None:
        self._session.close()


class RemoteConfigClient(_ServiceClient):
    """Reads configuration deltas for a cluster."""

    def fetch(self, cluster_id: str) -> ConfigurationDelta:
        """Fetch the configuration delta for ``cluster_id``.

        Raises:
            RemoteFetchError: Transport failure or non-200 status.
            RemoteDecodeError: The body is not a JSON object.
        """
        url = self._operator_url("configuration", cluster_id)
        raw = self._read(operation="fetch configuration", url=url)

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise RemoteDecodeError(
                operation="fetch configuration",
                url=url,
                reason=f"expected a JSON object, got {type(raw).__name__}",
                status_code=200,
            )
        return raw


class RemoteTriggerClient(_ServiceClient):
    """Reads pending triggers for a cluster and acknowledges them."""

    def fetch_triggers(self, cluster_id: str) -> list[Trigger]:
        """Fetch pending triggers in the order the service returns them.

        Raises:
            RemoteFetchError: Transport failure or non-200 status.
            RemoteDecodeError: The body is not a JSON array of triggers.
        """
        url = self._operator_url("triggers", cluster_id)
        raw = self._read(operation="fetch triggers", url=url)

        if raw is None:
            return []
        if not isinstance(raw, list):
            raise RemoteDecodeError(
                operation="fetch triggers",
                url=url,
                reason=f"expected a JSON array, got {type(raw).__name__}",
                status_code=200,
            )

        try:
            return [Trigger.model_validate(item) for item in raw]
        except ValidationError as e:
            raise RemoteDecodeError(
                operation="fetch triggers",
                url=url,
                reason=f"unexpected trigger record: {e.error_count()} validation error(s)",
                status_code=200,
            ) from e

    def acknowledge(self, cluster_id: str, trigger_id: int) -> None:
        """Acknowledge that ``trigger_id`` has been performed.

        Raises:
            AckError: Transport failure or a status other than 200/201/202.
        """
        url = self._operator_url("trigger", cluster_id, "ack", trigger_id)
        try:
            resp = self._session.put(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise AckError(
                operation="acknowledge trigger",
                url=url,
                reason=f"communication error with the server: {e}",
            ) from e

        if resp.status_code not in ACK_SUCCESS_CODES:
            raise AckError(
                operation="acknowledge trigger",
                url=url,
                reason=(
                    "expected HTTP status 200 OK, 201 Created or 202 Accepted, "
                    f"got {resp.status_code}"
                ),
                status_code=resp.status_code,
            )
