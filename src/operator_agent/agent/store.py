"""Thread-safe operator configuration store.

The store holds an unstructured configuration (string keys, JSON-shaped
values) shared between the configuration sync loop and any reader such as the
status API. Its mapping is never handed out directly; callers go through
:meth:`ConfigStore.merge`, :meth:`ConfigStore.snapshot` and
:meth:`ConfigStore.view`, each of which runs under a single acquisition of
the store's lock.

Merge semantics:
    - empty store: every key of the delta is inserted (bootstrap)
    - non-empty store: only keys the store already knows are overwritten;
      unknown keys are dropped

Because of the second rule, a new configuration key can only be introduced
through the bootstrap file and a restart, not through the remote service.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from operator_agent.agent.errors import BootstrapDecodeError, BootstrapReadError

logger = logging.getLogger(__name__)

ConfigurationDelta = dict[str, Any]


class ConfigStore:
    """Operator configuration guarded by an internal lock."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._lock = threading.Lock()
        self._data: dict[str, Any] = copy.deepcopy(dict(initial)) if initial else {}
        self._revision = 0

    @classmethod
    def from_file(cls, path: Path | None) -> ConfigStore:
        """Create a store seeded from a bootstrap JSON file.

        A missing path, an unreadable file or an undecodable document all yield
        an empty store; the first remote delta will then seed it.
        """
        if path is None:
            logger.info("No bootstrap configuration file configured")
            return cls()

        try:
            return cls(read_bootstrap_file(path))
        except BootstrapReadError as e:
            logger.error(
                "Can not open configuration file; starting with empty configuration",
                extra={"path": e.path, "error": e.reason},
            )
        except BootstrapDecodeError as e:
            logger.warning(
                "Can not decode original configuration; starting with empty configuration",
                extra={"path": e.path, "error": e.reason},
            )
        return cls()

    @property
    def revision(self) -> int:
        """Number of merges applied since the store was created."""
        with self._lock:
            return self._revision

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def merge(self, delta: Mapping[str, Any]) -> list[str]:
        """Merge a configuration delta and return the keys that were written."""
        incoming = copy.deepcopy(dict(delta))

        with self._lock:
            if not self._data:
                self._data.update(incoming)
                written = list(incoming)
            else:
                written = [key for key in incoming if key in self._data]
                for key in written:
                    self._data[key] = incoming[key]
            self._revision += 1

        return sorted(written)

    def snapshot(self) -> Mapping[str, Any]:
        """Return a read-only copy of the configuration, ordered by key."""
        return self.view()[1]

    def view(self) -> tuple[int, Mapping[str, Any]]:
        """Return the revision and the matching snapshot, read together."""
        with self._lock:
            revision = self._revision
            data = copy.deepcopy(self._data)
        return revision, MappingProxyType({key: data[key] for key in sorted(data)})


def read_bootstrap_file(path: Path) -> ConfigurationDelta:
    """Read a JSON object from ``path``.

    Raises:
        BootstrapReadError: The file is missing or unreadable.
        BootstrapDecodeError: The file is not valid JSON or not a JSON object.
    """
    try:
        payload = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BootstrapReadError(path=str(path), reason=str(e)) from e

    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as e:
        raise BootstrapDecodeError(path=str(path), reason=str(e)) from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise BootstrapDecodeError(
            path=str(path),
            reason=f"expected a JSON object, got {type(raw).__name__}",
        )
    return raw


def format_configuration(snapshot: Mapping[str, Any]) -> str:
    """Render a configuration snapshot as ``key => value`` pairs sorted by key."""
    if not snapshot:
        return "* empty *"
    return ", ".join(f"{key} => {snapshot[key]!r}" for key in sorted(snapshot))
