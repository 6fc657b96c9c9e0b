"""CLI entrypoint for the pod triage sweep."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from pod_triage import __version__
from pod_triage.config import get_settings
from pod_triage.errors import SweepError
from pod_triage.triage import print_entry, print_result, run_sweep


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pod-triage",
        description="Sweep a Kubernetes namespace and save logs of every pod that is not Running.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--namespace",
        "-n",
        default=None,
        help="Kubernetes namespace to sweep (default: from env or 'default')",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for '<pod>-logs.txt' files (default: from env or ./pod-logs)",
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="Path to kubeconfig (default: KUBECONFIG env or ~/.kube/config)",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubernetes context to use",
    )
    parser.add_argument(
        "--tail-lines",
        type=int,
        default=None,
        help="Only capture the last N lines of each log",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of concurrent log fetches",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for pod-triage CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logger = logging.getLogger("pod_triage")
    if not args.verbose:
        logger.setLevel(logging.WARNING)

    console = Console()
    try:
        settings = get_settings()
        if args.kubeconfig:
            settings.kubeconfig = args.kubeconfig
        if args.log_dir:
            settings.log_dir = args.log_dir
        if args.tail_lines is not None:
            settings.log_tail_lines = args.tail_lines
        if args.timeout is not None:
            settings.request_timeout_seconds = args.timeout
        if args.workers is not None:
            settings.max_workers = args.workers

        result = run_sweep(
            namespace=args.namespace,
            context=args.context,
            settings=settings,
            on_entry=lambda entry: print_entry(entry, console),
        )
        print_result(result, console)
        return result.exit_code
    except SweepError as e:
        logger.debug("Sweep failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        logging.exception("Sweep failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
