"""Run the automatic absence service until interrupted.

Usage:
    APP_ENV=production python scripts/run_worker.py
    python scripts/run_worker.py --once     # single pass, then exit
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.absence_reconciler.absence_reconciler.main import container_from_settings, load_settings, run_worker


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--once", action="store_true", help="run a single pass and exit")
    args = parser.parse_args()

    container = container_from_settings(load_settings())

    if args.once:
        report = asyncio.run(container.scheduler.run_once())
        print(report.to_dict())
        return

    try:
        asyncio.run(run_worker(container))
    except KeyboardInterrupt:
        print("Stopped.")


if __name__ == "__main__":
    main()
