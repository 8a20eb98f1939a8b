"""Pydantic models for the status API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Health(BaseModel):
    status: Literal["ok"] = "ok"
    version: str
    cluster: str
    running: bool


class ConfigurationView(BaseModel):
    revision: int
    configuration: dict[str, Any] = Field(default_factory=dict)


class LoopView(BaseModel):
    name: str
    interval_seconds: int
    ticks: int
    failed_ticks: int

    last_outcome: Literal["ok", "error"] | None = None
    last_error: str | None = None
    last_started_at: str | None = None
    last_finished_at: str | None = None
