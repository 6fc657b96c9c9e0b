"""Read pods and their logs from a Kubernetes cluster."""

from __future__ import annotations

import logging
import re
from typing import Any

import urllib3
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from pod_triage.config import DEFAULT_PAGE_SIZE, DEFAULT_REQUEST_TIMEOUT_SECONDS
from pod_triage.errors import (
    AccessDeniedError,
    ClusterUnreachableError,
    InvalidNamespaceError,
    LogFetchError,
    NamespaceNotFoundError,
    SweepError,
)
from pod_triage.observation.models import PodPhase, PodRecord

logger = logging.getLogger(__name__)


# Annotation kubectl consults to pick the container for `kubectl logs <pod>`
DEFAULT_CONTAINER_ANNOTATION = "kubectl.kubernetes.io/default-container"

_NAMESPACE_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
_NAMESPACE_MAX_LEN = 63


def validate_namespace(namespace: str) -> str:
    """Return namespace unchanged if it is a valid RFC 1123 label, else raise InvalidNamespaceError."""
    if not namespace:
        raise InvalidNamespaceError(namespace, "namespace must not be empty")
    if len(namespace) > _NAMESPACE_MAX_LEN:
        raise InvalidNamespaceError(namespace, f"namespace must be at most {_NAMESPACE_MAX_LEN} characters")
    if not _NAMESPACE_RE.match(namespace):
        raise InvalidNamespaceError(
            namespace,
            "namespace must consist of lowercase alphanumerics or '-', "
            "and start and end with an alphanumeric",
        )
    return namespace


def _load_kube_config(kubeconfig_path: str | None, context: str | None) -> client.Configuration:
    """Load in-cluster or kubeconfig-based configuration."""
    try:
        config.load_incluster_config()
        return client.Configuration.get_default_copy()
    except config.ConfigException:
        pass
    kwargs: dict[str, Any] = {}
    if kubeconfig_path:
        kwargs["config_file"] = str(kubeconfig_path)
    if context:
        kwargs["context"] = context
    config.load_kube_config(**kwargs)
    return client.Configuration.get_default_copy()


def _api_reason(e: ApiException) -> str:
    if e.status:
        return f"HTTP {e.status} {e.reason or ''}".strip()
    return str(e.reason or e)


def _default_container(pod: Any) -> str | None:
    """Pick the container `kubectl logs` would read: annotated default, else the first one."""
    annotations = getattr(pod.metadata, "annotations", None) or {}
    annotated = annotations.get(DEFAULT_CONTAINER_ANNOTATION)
    if annotated:
        return annotated
    containers = (getattr(pod.spec, "containers", None) or []) if pod.spec else []
    if containers:
        return containers[0].name
    return None


def _build_pod_record(pod: Any, namespace: str) -> PodRecord:
    """Build PodRecord from V1Pod."""
    phase = getattr(pod.status, "phase", None) if pod.status else None
    return PodRecord(
        name=pod.metadata.name,
        namespace=pod.metadata.namespace or namespace,
        phase=PodPhase.parse(phase),
        container=_default_container(pod),
    )


class PodSource:
    """Lists pods in a namespace and reads their container logs through CoreV1Api."""

    def __init__(
        self,
        core_api: client.CoreV1Api | None = None,
        kubeconfig: str | None = None,
        context: str | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.request_timeout = request_timeout
        self.page_size = page_size
        if core_api is None:
            cfg = _load_kube_config(kubeconfig, context)
            core_api = client.CoreV1Api(client.ApiClient(cfg))
        self._core = core_api

    def list_pods(self, namespace: str) -> list[PodRecord]:
        """Return a PodRecord per pod in namespace, in the order the API returns them.

        Raises a SweepError subclass if the namespace cannot be enumerated.
        """
        validate_namespace(namespace)
        self._check_namespace(namespace)

        records: list[PodRecord] = []
        token: str | None = None
        try:
            while True:
                kwargs: dict[str, Any] = {
                    "namespace": namespace,
                    "limit": self.page_size,
                    "_request_timeout": self.request_timeout,
                }
                if token:
                    kwargs["_continue"] = token
                pod_list = self._core.list_namespaced_pod(**kwargs)
                for pod in pod_list.items or []:
                    records.append(_build_pod_record(pod, namespace))
                token = getattr(pod_list.metadata, "_continue", None) if pod_list.metadata else None
                if not token:
                    break
        except ApiException as e:
            logger.warning("Failed to list pods in %s: %s", namespace, e.reason)
            raise self._sweep_error(namespace, e) from e
        except urllib3.exceptions.HTTPError as e:
            logger.warning("Failed to list pods in %s: %s", namespace, e)
            raise ClusterUnreachableError(namespace, f"cluster unreachable: {e}") from e

        logger.debug("Listed %d pods in %s", len(records), namespace)
        return records

    def read_log(self, record: PodRecord, tail_lines: int | None = None) -> bytes:
        """Return the raw log bytes for the pod's container.

        Raises LogFetchError on any API or transport failure.
        """
        kwargs: dict[str, Any] = {
            "name": record.name,
            "namespace": record.namespace,
            "timestamps": False,
            "_preload_content": False,
            "_request_timeout": self.request_timeout,
        }
        if record.container:
            kwargs["container"] = record.container
        if tail_lines:
            kwargs["tail_lines"] = tail_lines
        try:
            response = self._core.read_namespaced_pod_log(**kwargs)
            try:
                data = response.data
            finally:
                response.release_conn()
        except ApiException as e:
            raise LogFetchError(record.name, _api_reason(e)) from e
        except urllib3.exceptions.HTTPError as e:
            raise LogFetchError(record.name, f"transport error: {e}") from e
        if isinstance(data, str):
            data = data.encode("utf-8")
        return data or b""

    def _check_namespace(self, namespace: str) -> None:
        """Fail fast on a missing namespace; listing pods there would just return nothing."""
        try:
            self._core.read_namespace(name=namespace, _request_timeout=self.request_timeout)
        except ApiException as e:
            if e.status == 403:
                logger.debug("Cannot read namespace %s (forbidden); continuing with pod list", namespace)
                return
            raise self._sweep_error(namespace, e) from e
        except urllib3.exceptions.HTTPError as e:
            raise ClusterUnreachableError(namespace, f"cluster unreachable: {e}") from e

    @staticmethod
    def _sweep_error(namespace: str, e: ApiException) -> SweepError:
        reason = _api_reason(e)
        if e.status == 404:
            return NamespaceNotFoundError(namespace, f"namespace not found ({reason})")
        if e.status in (401, 403):
            return AccessDeniedError(namespace, f"access denied ({reason})")
        return SweepError(namespace, reason)
