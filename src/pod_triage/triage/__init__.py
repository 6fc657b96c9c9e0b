"""Triage: classify pods and capture logs of those that are not Running."""

from pod_triage.triage.models import (
    LogsCaptured,
    LogsCaptureFailed,
    NoActionNeeded,
    SweepEntry,
    SweepResult,
)
from pod_triage.triage.report import print_entry, print_result
from pod_triage.triage.sink import FileLogSink
from pod_triage.triage.sweep import PodTriageSweep, run_sweep

__all__ = [
    "FileLogSink",
    "LogsCaptured",
    "LogsCaptureFailed",
    "NoActionNeeded",
    "PodTriageSweep",
    "SweepEntry",
    "SweepResult",
    "print_entry",
    "print_result",
    "run_sweep",
]
