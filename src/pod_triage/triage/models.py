"""Per-pod outcomes and the result of one sweep."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from pod_triage.observation.models import PodRecord


class NoActionNeeded(BaseModel):
    """Pod is Running; nothing was fetched."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["no_action_needed"] = "no_action_needed"


class LogsCaptured(BaseModel):
    """Pod log was written to the sink."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["logs_captured"] = "logs_captured"
    path: Path


class LogsCaptureFailed(BaseModel):
    """Pod log could not be fetched or written; no artifact exists for this sweep."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["logs_capture_failed"] = "logs_capture_failed"
    reason: str


Outcome = Annotated[
    Union[NoActionNeeded, LogsCaptured, LogsCaptureFailed],
    Field(discriminator="kind"),
]


class SweepEntry(BaseModel):
    """One pod and what the sweep did about it."""

    model_config = ConfigDict(frozen=True)

    pod: PodRecord
    outcome: Outcome


class SweepResult(BaseModel):
    """Ordered entries of one sweep, in the order the API listed the pods."""

    namespace: str
    entries: list[SweepEntry] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    def pairs(self) -> list[tuple[PodRecord, NoActionNeeded | LogsCaptured | LogsCaptureFailed]]:
        """The sweep as an ordered sequence of (PodRecord, outcome) pairs."""
        return [(e.pod, e.outcome) for e in self.entries]

    @property
    def abnormal(self) -> list[SweepEntry]:
        """Entries for pods not in the Running phase."""
        return [e for e in self.entries if not e.pod.is_running]

    @property
    def captured(self) -> list[SweepEntry]:
        return [e for e in self.entries if isinstance(e.outcome, LogsCaptured)]

    @property
    def failed(self) -> list[SweepEntry]:
        return [e for e in self.entries if isinstance(e.outcome, LogsCaptureFailed)]

    @property
    def artifact_paths(self) -> list[Path]:
        return [e.outcome.path for e in self.captured]

    @property
    def exit_code(self) -> int:
        """0 when every abnormal pod was captured, 1 when any capture failed."""
        return 1 if self.failed else 0
