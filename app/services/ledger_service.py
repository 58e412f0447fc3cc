"""
app/services/ledger_service.py

Purpose: Verification attempt repository

- Append-only log of verification entries
- Carrier ranking by mean step weight
- In-memory implementation (lives for the process lifetime)

Entries store the step, not the weight; ranking always applies the
repository's weight table at query time.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from app.core.logging import get_logger
from app.flow.steps import StepWeightTable, VerificationStep
from app.models.provider_rank import ProviderRankEntry
from app.models.verification_entry import VerificationEntry

logger = get_logger(__name__)


class VerificationRepo(ABC):

    @abstractmethod
    def record_attempt(self, entry: VerificationEntry) -> None:
        """
        Stores a verification entry.

        Raises:
            PersistenceError: the backing store could not record the entry
        """

    @abstractmethod
    def rank_providers(self) -> List[ProviderRankEntry]:
        """Carriers ordered by mean step weight, best (lowest) first."""


class VerificationKeeper(VerificationRepo):
    """
    In-memory repository. A single lock guards both appends and the full
    scan done by ranking.
    """

    def __init__(self, step_weights):
        if not isinstance(step_weights, StepWeightTable):
            step_weights = StepWeightTable(step_weights)
        self.step_weights = step_weights
        self._entries: List[VerificationEntry] = []
        self._lock = threading.Lock()

    def record_attempt(self, entry: VerificationEntry) -> None:
        with self._lock:
            self._entries.append(entry)
        logger.debug(f"Recorded {entry.step.value} for {entry.carrier}")

    def _weighted_avg(self, steps: List[VerificationStep]) -> float:
        weighted_sum = sum(self.step_weights[s] for s in steps)
        return weighted_sum / len(steps)

    def rank_providers(self) -> List[ProviderRankEntry]:
        by_carrier: Dict[str, List[VerificationStep]] = {}
        with self._lock:
            for entry in self._entries:
                by_carrier.setdefault(entry.carrier, []).append(entry.step)

        rank = [
            ProviderRankEntry(carrier, float(self._weighted_avg(steps)))
            for carrier, steps in by_carrier.items()
        ]
        # stable: ties keep first-recorded order
        rank.sort(key=lambda r: r.score)
        return rank

    def entries(self) -> Tuple[VerificationEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
