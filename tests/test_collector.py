"""Tests for PodSource: enumeration, error translation, and log reads."""

from unittest.mock import MagicMock, PropertyMock

import pytest
import urllib3
from kubernetes.client.rest import ApiException

from pod_triage.errors import (
    AccessDeniedError,
    ClusterUnreachableError,
    InvalidNamespaceError,
    LogFetchError,
    NamespaceNotFoundError,
    SweepError,
)
from pod_triage.observation import PodPhase, PodRecord, validate_namespace
from tests.helpers import log_response, make_pod, make_pod_list, serve


# ---- Namespace validation ----

@pytest.mark.parametrize("namespace", ["default", "kube-system", "a", "team-42", "x" * 63])
def test_validate_namespace_accepts_rfc1123_labels(namespace):
    assert validate_namespace(namespace) == namespace


@pytest.mark.parametrize("namespace", ["", "Default", "-leading", "trailing-", "has_underscore", "dot.ted", "x" * 64])
def test_validate_namespace_rejects_invalid_names(namespace):
    with pytest.raises(InvalidNamespaceError):
        validate_namespace(namespace)


def test_invalid_namespace_fails_before_any_api_call(source, core_api):
    with pytest.raises(InvalidNamespaceError):
        source.list_pods("Not_Valid")
    core_api.read_namespace.assert_not_called()
    core_api.list_namespaced_pod.assert_not_called()


# ---- Enumeration ----

def test_list_pods_preserves_api_order_and_classifies_phase(source, core_api):
    serve(core_api, [
        make_pod("zeta", "Running"),
        make_pod("alpha", "Failed"),
        make_pod("mid", "Pending"),
    ])

    records = source.list_pods("default")

    assert [r.name for r in records] == ["zeta", "alpha", "mid"]
    assert [r.phase for r in records] == [PodPhase.RUNNING, PodPhase.FAILED, PodPhase.PENDING]
    assert all(r.namespace == "default" for r in records)


@pytest.mark.parametrize("raw_phase", [None, "", "Evicted"])
def test_missing_or_unrecognized_phase_is_unknown(source, core_api, raw_phase):
    serve(core_api, [make_pod("odd", raw_phase)])

    (record,) = source.list_pods("default")

    assert record.phase is PodPhase.UNKNOWN


def test_list_pods_follows_continue_token(source, core_api):
    core_api.list_namespaced_pod.side_effect = [
        make_pod_list([make_pod("a", "Running"), make_pod("b", "Running")], continue_token="page-2"),
        make_pod_list([make_pod("c", "Failed")]),
    ]

    records = source.list_pods("default")

    assert [r.name for r in records] == ["a", "b", "c"]
    first, second = core_api.list_namespaced_pod.call_args_list
    assert "_continue" not in first.kwargs
    assert second.kwargs["_continue"] == "page-2"


def test_list_pods_applies_request_timeout(source, core_api):
    serve(core_api, [])

    source.list_pods("default")

    assert core_api.read_namespace.call_args.kwargs["_request_timeout"] == 5.0
    assert core_api.list_namespaced_pod.call_args.kwargs["_request_timeout"] == 5.0


def test_missing_namespace_is_hard_failure(source, core_api):
    core_api.read_namespace.side_effect = ApiException(status=404, reason="Not Found")

    with pytest.raises(NamespaceNotFoundError) as exc_info:
        source.list_pods("missing-ns")

    assert exc_info.value.namespace == "missing-ns"
    assert "missing-ns" in str(exc_info.value)
    core_api.list_namespaced_pod.assert_not_called()


def test_forbidden_namespace_lookup_still_lists_pods(source, core_api):
    core_api.read_namespace.side_effect = ApiException(status=403, reason="Forbidden")
    serve(core_api, [make_pod("web-1", "Running")])

    records = source.list_pods("team-a")

    assert [r.name for r in records] == ["web-1"]


@pytest.mark.parametrize("status", [401, 403])
def test_rejected_credentials_on_list_are_access_denied(source, core_api, status):
    core_api.list_namespaced_pod.side_effect = ApiException(status=status, reason="Denied")

    with pytest.raises(AccessDeniedError):
        source.list_pods("default")


def test_other_api_errors_on_list_are_sweep_errors(source, core_api):
    core_api.list_namespaced_pod.side_effect = ApiException(status=500, reason="Internal Server Error")

    with pytest.raises(SweepError) as exc_info:
        source.list_pods("default")

    assert "HTTP 500" in exc_info.value.reason


def test_transport_error_on_list_is_cluster_unreachable(source, core_api):
    core_api.list_namespaced_pod.side_effect = urllib3.exceptions.ProtocolError("Connection aborted.")

    with pytest.raises(ClusterUnreachableError):
        source.list_pods("default")


def test_transport_error_on_namespace_lookup_is_cluster_unreachable(source, core_api):
    core_api.read_namespace.side_effect = urllib3.exceptions.ReadTimeoutError(None, "/api", "Read timed out.")

    with pytest.raises(ClusterUnreachableError):
        source.list_pods("default")


# ---- Container selection ----

def test_container_defaults_to_first_in_spec(source, core_api):
    serve(core_api, [make_pod("multi", "Failed", containers=("main", "sidecar"))])

    (record,) = source.list_pods("default")

    assert record.container == "main"


def test_container_honours_default_container_annotation(source, core_api):
    pod = make_pod(
        "multi",
        "Failed",
        containers=("istio-proxy", "app"),
        annotations={"kubectl.kubernetes.io/default-container": "app"},
    )
    serve(core_api, [pod])

    (record,) = source.list_pods("default")

    assert record.container == "app"


def test_pod_without_containers_has_no_container(source, core_api):
    serve(core_api, [make_pod("bare", "Pending", containers=())])

    (record,) = source.list_pods("default")

    assert record.container is None


# ---- Log reads ----

def _record(**overrides):
    fields = {"name": "web-2", "namespace": "default", "phase": PodPhase.FAILED, "container": "app"}
    fields.update(overrides)
    return PodRecord(**fields)


def test_read_log_returns_exact_bytes_and_releases_connection(source, core_api):
    response = log_response(b"line 1\n\xff\xfe binary\n")
    core_api.read_namespaced_pod_log.return_value = response

    data = source.read_log(_record())

    assert data == b"line 1\n\xff\xfe binary\n"
    response.release_conn.assert_called_once()
    kwargs = core_api.read_namespaced_pod_log.call_args.kwargs
    assert kwargs["name"] == "web-2"
    assert kwargs["namespace"] == "default"
    assert kwargs["container"] == "app"
    assert kwargs["_preload_content"] is False
    assert kwargs["_request_timeout"] == 5.0
    assert "tail_lines" not in kwargs


def test_read_log_forwards_tail_lines(source, core_api):
    core_api.read_namespaced_pod_log.return_value = log_response(b"x")

    source.read_log(_record(), tail_lines=50)

    assert core_api.read_namespaced_pod_log.call_args.kwargs["tail_lines"] == 50


def test_read_log_omits_container_when_unknown(source, core_api):
    core_api.read_namespaced_pod_log.return_value = log_response(b"x")

    source.read_log(_record(container=None))

    assert "container" not in core_api.read_namespaced_pod_log.call_args.kwargs


def test_read_log_encodes_text_payload(source, core_api):
    core_api.read_namespaced_pod_log.return_value = log_response("héllo\n")

    assert source.read_log(_record()) == "héllo\n".encode("utf-8")


def test_read_log_api_error_is_log_fetch_error(source, core_api):
    core_api.read_namespaced_pod_log.side_effect = ApiException(status=400, reason="Bad Request")

    with pytest.raises(LogFetchError) as exc_info:
        source.read_log(_record(name="job-7"))

    assert exc_info.value.pod_name == "job-7"
    assert exc_info.value.reason == "HTTP 400 Bad Request"


def test_read_log_timeout_is_log_fetch_error(source, core_api):
    core_api.read_namespaced_pod_log.side_effect = urllib3.exceptions.ReadTimeoutError(
        None, "/api/v1/namespaces/default/pods/web-2/log", "Read timed out."
    )

    with pytest.raises(LogFetchError) as exc_info:
        source.read_log(_record())

    assert exc_info.value.reason.startswith("transport error")


def test_read_log_releases_connection_even_if_body_read_fails(source, core_api):
    response = MagicMock()
    type(response).data = PropertyMock(side_effect=urllib3.exceptions.ProtocolError("reset"))
    core_api.read_namespaced_pod_log.return_value = response

    with pytest.raises(LogFetchError):
        source.read_log(_record())

    response.release_conn.assert_called_once()
