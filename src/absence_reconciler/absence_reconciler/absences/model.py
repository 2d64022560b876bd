from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import StudentOutcome


@dataclass
class PassReport:
    """Summary of one reconciliation pass."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    classes: int = 0
    slots_due: int = 0
    sessions_created: int = 0
    failed_classes: int = 0
    failed_slots: int = 0
    outcomes: dict[str, int] = field(default_factory=lambda: {o.value: 0 for o in StudentOutcome})

    def record(self, outcome: StudentOutcome) -> None:
        self.outcomes[outcome.value] = self.outcomes.get(outcome.value, 0) + 1

    def count(self, outcome: StudentOutcome) -> int:
        return self.outcomes.get(outcome.value, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "classes": self.classes,
            "slots_due": self.slots_due,
            "sessions_created": self.sessions_created,
            "failed_classes": self.failed_classes,
            "failed_slots": self.failed_slots,
            "outcomes": dict(self.outcomes),
        }
