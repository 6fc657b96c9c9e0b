"""Sweep: enumerate pods → classify phase → capture logs of pods that are not Running."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from pathlib import Path

from kubernetes import config

from pod_triage.config import Settings, get_settings
from pod_triage.errors import ClusterUnreachableError, LogFetchError
from pod_triage.observation import PodRecord, PodSource, validate_namespace
from pod_triage.triage.models import (
    LogsCaptured,
    LogsCaptureFailed,
    NoActionNeeded,
    SweepEntry,
    SweepResult,
)
from pod_triage.triage.sink import FileLogSink

logger = logging.getLogger(__name__)

EntryCallback = Callable[[SweepEntry], None]


class PodTriageSweep:
    """One enumerate-and-classify pass over a namespace, capturing logs of abnormal pods."""

    def __init__(
        self,
        source: PodSource,
        sink: FileLogSink,
        tail_lines: int | None = None,
        max_workers: int = 1,
    ) -> None:
        self.source = source
        self.sink = sink
        self.tail_lines = tail_lines
        self.max_workers = max(1, max_workers)

    def sweep(self, namespace: str = "default", on_entry: EntryCallback | None = None) -> SweepResult:
        """
        List pods in namespace and decide an outcome for each, in API order.

        Enumeration failures raise SweepError and nothing is written. Log-capture
        failures are recorded per pod as LogsCaptureFailed and never stop the sweep.
        """
        started_at = datetime.now(timezone.utc)
        records = self.source.list_pods(namespace)
        logger.info("Sweeping %d pods in namespace %s", len(records), namespace)

        if self.max_workers > 1:
            entries = self._triage_concurrently(records, on_entry)
        else:
            entries = []
            for record in records:
                entry = self._triage(record)
                if on_entry:
                    on_entry(entry)
                entries.append(entry)

        return SweepResult(
            namespace=namespace,
            entries=entries,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )

    def _triage_concurrently(
        self, records: list[PodRecord], on_entry: EntryCallback | None
    ) -> list[SweepEntry]:
        """Fan log captures out over a thread pool; the returned list keeps API order."""
        entries: list[SweepEntry | None] = [None] * len(records)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {}
            for i, record in enumerate(records):
                if record.is_running:
                    entries[i] = SweepEntry(pod=record, outcome=NoActionNeeded())
                    if on_entry:
                        on_entry(entries[i])
                else:
                    futures[executor.submit(self._triage, record)] = i
            for future in as_completed(futures):
                entry = future.result()
                entries[futures[future]] = entry
                if on_entry:
                    on_entry(entry)
        return [e for e in entries if e is not None]

    def _triage(self, record: PodRecord) -> SweepEntry:
        if record.is_running:
            return SweepEntry(pod=record, outcome=NoActionNeeded())
        return SweepEntry(pod=record, outcome=self._capture(record))

    def _capture(self, record: PodRecord) -> LogsCaptured | LogsCaptureFailed:
        """Single log-fetch attempt for a pod that is not Running; never raises."""
        try:
            return self._fetch_and_write(record)
        except Exception as e:
            logger.warning("Pod %s (%s): unexpected error capturing logs", record.name, record.phase.value, exc_info=True)
            return LogsCaptureFailed(reason=f"unexpected error: {e}")

    def _fetch_and_write(self, record: PodRecord) -> LogsCaptured | LogsCaptureFailed:
        try:
            data = self.source.read_log(record, tail_lines=self.tail_lines)
        except LogFetchError as e:
            logger.warning("Pod %s (%s): %s", record.name, record.phase.value, e.reason)
            return LogsCaptureFailed(reason=e.reason)
        if not data:
            logger.warning("Pod %s (%s): log stream is empty", record.name, record.phase.value)
            return LogsCaptureFailed(reason="log stream is empty")
        try:
            path = self.sink.write(record.name, data)
        except OSError as e:
            logger.warning("Pod %s (%s): could not write logs: %s", record.name, record.phase.value, e)
            return LogsCaptureFailed(reason=f"could not write log artifact: {e}")
        logger.info("Pod %s (%s): captured %d bytes to %s", record.name, record.phase.value, len(data), path)
        return LogsCaptured(path=path)


def run_sweep(
    namespace: str | None = None,
    kubeconfig: str | None = None,
    context: str | None = None,
    log_dir: str | Path | None = None,
    settings: Settings | None = None,
    on_entry: EntryCallback | None = None,
) -> SweepResult:
    """
    Build a cluster source and file sink from settings and run one sweep.
    Explicit arguments take precedence over settings.
    """
    opts = settings or get_settings()
    ns = validate_namespace(namespace or opts.namespace)
    kubeconfig_str = kubeconfig or (str(opts.kubeconfig) if opts.kubeconfig else None)

    try:
        source = PodSource(
            kubeconfig=kubeconfig_str,
            context=context or opts.context,
            request_timeout=opts.request_timeout_seconds,
            page_size=opts.page_size,
        )
    except (config.ConfigException, OSError) as e:
        raise ClusterUnreachableError(ns, f"could not load cluster configuration: {e}") from e

    sweeper = PodTriageSweep(
        source=source,
        sink=FileLogSink(log_dir or opts.log_dir),
        tail_lines=opts.log_tail_lines,
        max_workers=opts.max_workers,
    )
    return sweeper.sweep(ns, on_entry=on_entry)
