"""Pod triage: sweep a Kubernetes namespace and capture logs of pods that are not running."""

__version__ = "0.1.0"
