"""Run a payroll calculation from the command line.

SIGINT/SIGTERM cancel the run; nothing is written once cancellation is seen.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import signal
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "payroll_console"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from dotenv import load_dotenv

from config import get_settings_module

from payroll_console.common.cancellation import CancellationToken
from payroll_console.container import build_container
from payroll_console.core.exceptions import DomainError, OperationCancelled


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Calculate the open payroll batch.")
    parser.add_argument("--period", default=None, help="label for a new batch (default: today's date)")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format="%(levelname)s [%(name)s] %(message)s")

    container = build_container(
        db_config=settings.DB_CONFIG,
        policy_config=getattr(settings, "PAYROLL_POLICY", None),
        retry_attempts=int(getattr(settings, "READ_RETRY_ATTEMPTS", 3)),
        retry_backoff=float(getattr(settings, "READ_RETRY_BACKOFF", 0.2)),
    )

    token = CancellationToken()
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, lambda signum, _frame: token.cancel(f"signal {signum}"))

    try:
        report = container.payroll_service.run_calculation(period_label=args.period, cancel=token)
    except OperationCancelled as e:
        print(f"CANCELLED: {e}; no payroll lines were saved", file=sys.stderr)
        return 130
    except DomainError as e:
        print(f"FAILED: {e}", file=sys.stderr)
        return 1

    print(
        f"OK: batch {report.batch.batch_id} ({report.batch.name}) "
        f"lines={report.batch.employee_count} total={report.batch.total_amount} "
        f"flagged={len(report.flagged)} skipped={len(report.skipped)}"
    )
    for s in report.skipped:
        print(f"  skipped {s.employee_id} {s.full_name}: {s.reason}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
