"""Wire models exchanged with the remote control service."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class Trigger(BaseModel):
    """A remotely-issued one-shot action for this cluster.

    Triggers are read-only on the agent side. The service keeps them active
    until it processes the acknowledgment, so the same id can show up in more
    than one poll.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    type: str = Field(default="")
    cluster: str = Field(default="")
    reason: str = Field(default="")
    link: str = Field(default="")
    triggered_at: str = Field(default="")
    triggered_by: str = Field(default="")
    parameters: str = Field(default="")
    active: int = Field(default=0)

    @field_validator(
        "type",
        "cluster",
        "reason",
        "link",
        "triggered_at",
        "triggered_by",
        "parameters",
        "active",
        mode="before",
    )
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # The service sends null for unset columns; treat it like a missing field.
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    def log_context(self) -> dict[str, object]:
        """Operator-facing fields, keyed for use as logging ``extra``."""

        return {
            "trigger_id": self.id,
            "type": self.type,
            "reason": self.reason,
            "link": self.link,
            "triggered_at": self.triggered_at,
            "triggered_by": self.triggered_by,
            "parameters": self.parameters,
        }
