"""Example: drive the service layer directly (no Flask, in-memory store).

Seeds the demo documents, runs one pass and prints what was recorded.
"""

import asyncio
import json
from datetime import datetime
from pathlib import Path

from src.absence_reconciler.absence_reconciler.container import ReconcilerOptions, build_container
from src.absence_reconciler.absence_reconciler.database.memory_store import InMemoryDocumentStore


def main():
    seed = json.loads((Path(__file__).resolve().parents[1] / "database" / "seed.json").read_text(encoding="utf-8"))
    store = InMemoryDocumentStore(seed)

    # Monday 2026-10-19, 16:30: both Monday classes are over.
    container = build_container(
        store=store,
        options=ReconcilerOptions(student_delay=0, slot_delay=0),
        clock=lambda: datetime(2026, 10, 19, 16, 30),
    )
    report = asyncio.run(container.scheduler.run_once())
    print(report.to_dict())
    print(sorted(store.dump("sessions")))


if __name__ == "__main__":
    main()
