"""Filesystem sink for captured pod logs."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX = "-logs.txt"


class FileLogSink:
    """Writes each pod's log to '<directory>/<pod>-logs.txt', replacing any earlier copy.

    Writes go through a temporary file in the same directory and are moved into
    place with os.replace, so a failed write never leaves a truncated artifact
    and writers for distinct pods need no coordination.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, pod_name: str) -> Path:
        return self.directory / f"{pod_name}{ARTIFACT_SUFFIX}"

    def write(self, pod_name: str, data: bytes) -> Path:
        """Create or overwrite the artifact for pod_name and return its path."""
        target = self.path_for(pod_name)
        self.directory.mkdir(parents=True, exist_ok=True)
        # Fixed short prefix: a temp name must fit wherever the artifact name fits
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d bytes to %s", len(data), target)
        return target
