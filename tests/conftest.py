"""Shared fixtures: a mocked CoreV1Api, a PodSource over it, and a file sink."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from pod_triage.observation import PodSource
from pod_triage.triage import FileLogSink


@pytest.fixture
def core_api():
    """A CoreV1Api stand-in; read_namespace succeeds unless a test overrides it."""
    api = MagicMock()
    api.read_namespace.return_value = SimpleNamespace(metadata=SimpleNamespace(name="default"))
    return api


@pytest.fixture
def source(core_api):
    return PodSource(core_api=core_api, request_timeout=5.0)


@pytest.fixture
def log_dir(tmp_path):
    return tmp_path / "pod-logs"


@pytest.fixture
def sink(log_dir):
    return FileLogSink(log_dir)
