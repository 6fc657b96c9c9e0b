"""Factories for objects shaped like kubernetes client responses."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock


def make_pod(name, phase, namespace="default", containers=("app",), annotations=None):
    """Return an object shaped like kubernetes.client.V1Pod."""
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, namespace=namespace, annotations=annotations),
        status=SimpleNamespace(phase=phase),
        spec=SimpleNamespace(containers=[SimpleNamespace(name=c) for c in containers]),
    )


def make_pod_list(pods, continue_token=None):
    """Return an object shaped like kubernetes.client.V1PodList."""
    return SimpleNamespace(items=list(pods), metadata=SimpleNamespace(_continue=continue_token))


def log_response(data):
    """Return an object shaped like the urllib3 response of a non-preloaded log read."""
    response = MagicMock()
    response.data = data
    return response


def serve(core_api, pods, logs=None):
    """
    Configure core_api to list pods and serve logs by pod name.
    A log value that is an exception is raised instead of returned.
    """
    logs = logs or {}
    core_api.list_namespaced_pod.return_value = make_pod_list(pods)

    def read_log(name, namespace, **kwargs):
        value = logs[name]
        if isinstance(value, Exception):
            raise value
        return log_response(value)

    core_api.read_namespaced_pod_log.side_effect = read_log
