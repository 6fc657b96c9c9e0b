"""Error taxonomy for the sweep.

``SweepError`` and its subclasses are hard failures: the namespace could not be
enumerated and no result exists. ``LogFetchError`` is a soft failure for a
single pod; the sweep records it and moves on.
"""

from __future__ import annotations


class PodTriageError(Exception):
    """Base class for all pod triage errors."""


class SweepError(PodTriageError):
    """The namespace could not be enumerated."""

    def __init__(self, namespace: str, reason: str) -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"Sweep of namespace '{namespace}' failed: {reason}")


class InvalidNamespaceError(SweepError):
    """Namespace is not a valid RFC 1123 label."""


class NamespaceNotFoundError(SweepError):
    """Namespace does not exist in the cluster."""


class AccessDeniedError(SweepError):
    """Credentials were rejected (401) or lack permission (403)."""


class ClusterUnreachableError(SweepError):
    """Transport failure, timeout, or cluster configuration could not be loaded."""


class LogFetchError(PodTriageError):
    """Log retrieval for one pod failed."""

    def __init__(self, pod_name: str, reason: str) -> None:
        self.pod_name = pod_name
        self.reason = reason
        super().__init__(f"Failed to get logs for pod '{pod_name}': {reason}")
