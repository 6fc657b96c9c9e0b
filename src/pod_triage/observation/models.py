"""Structured models for observed pod state."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class PodPhase(str, Enum):
    """Coarse pod lifecycle phase as reported by the control plane."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> PodPhase:
        """Map an API phase string to PodPhase; missing or unrecognized values are UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class PodRecord(BaseModel):
    """Read-only snapshot of one pod at sweep time."""

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    phase: PodPhase
    container: str | None = None  # container whose log is fetched

    @property
    def is_running(self) -> bool:
        return self.phase is PodPhase.RUNNING
