"""Observation layer: enumerate pods and read their logs from a Kubernetes cluster."""

from pod_triage.observation.collector import PodSource, validate_namespace
from pod_triage.observation.models import PodPhase, PodRecord

__all__ = [
    "PodPhase",
    "PodRecord",
    "PodSource",
    "validate_namespace",
]
