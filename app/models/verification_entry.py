"""
app/models/verification_entry.py

Purpose: Verification attempt record

- One immutable record per dispatched attempt
- Carrier, phone number, completion time and terminal step
- Owned by the verification repository once recorded
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.flow.steps import VerificationStep
from utils.time_utils import utc_now


@dataclass(frozen=True)
class VerificationEntry:
    carrier: str
    number: str
    step: VerificationStep
    time: datetime = field(default_factory=utc_now)

    @property
    def is_success(self) -> bool:
        return self.step.is_success
