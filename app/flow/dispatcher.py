"""
app/flow/dispatcher.py

Purpose: Central verification dispatcher

- Receives validated verification requests from the API
- Picks a carrier through the balancer
- Runs the carrier's verification cascade
- Records every attempt and maps it to a caller-facing outcome
- Serves the carrier ranking read path
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from app.core.exceptions import PersistenceError, ProviderError
from app.core.logging import get_logger
from app.flow.steps import VerificationStep
from app.models.provider_rank import ProviderRankEntry
from app.models.verification_entry import VerificationEntry
from app.schemas.verification import VerificationAttemptRequest
from app.services.balancer_service import BalancerType, build_balancer
from app.services.ledger_service import VerificationRepo
from app.services.provider_service import TelecomProvider
from utils.constants import (
    CARRIER_UNAVAILABLE,
    NO_CARRIERS_FOUND,
    PERSISTENCE_FAILED,
    VERIFICATION_UNSUCCESSFUL,
)
from utils.token_utils import generate_token

logger = get_logger(__name__)


class OutcomeStatus(str, Enum):
    SUCCESS = "SUCCESS"
    UNSUCCESSFUL = "UNSUCCESSFUL"
    NO_PROVIDERS = "NO_PROVIDERS"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    PROVIDER_FAILURE = "PROVIDER_FAILURE"


@dataclass(frozen=True)
class VerificationOutcome:
    """
    Result of one dispatched attempt. A token is present only on success.
    """
    status: OutcomeStatus
    token: Optional[str] = None
    error: Optional[str] = None
    entry: Optional[VerificationEntry] = None
    carrier: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS


class VerificationDispatcher:
    """
    The only component that sees the balancer, the carrier pool and the
    repository together.

    Raises on construction:
        ConfigurationError: unknown balancer strategy
        UnsupportedStrategyError: balancer strategy not implemented
    """

    def __init__(
        self,
        balancer_type,
        carriers: Sequence[TelecomProvider],
        repo: VerificationRepo,
        token_prefix: str = "Bearer ey",
    ):
        self.balancer_type = BalancerType.parse(balancer_type)
        self.carriers: List[TelecomProvider] = list(carriers)
        self.repo = repo
        self.token_prefix = token_prefix
        self.balancer = build_balancer(self.balancer_type, repo.rank_providers)

    @property
    def pool_size(self) -> int:
        return len(self.carriers)

    def handle_attempt(self, request: VerificationAttemptRequest) -> VerificationOutcome:
        """
        Dispatches one verification attempt.

        Args:
            request: Validated verification request

        Returns:
            VerificationOutcome. Carrier timeouts and failures, and
            repository failures, come back as outcomes; anything else
            raised by a carrier propagates.
        """
        if not self.carriers:
            logger.warning("No carriers configured, rejecting verification attempt")
            return VerificationOutcome(status=OutcomeStatus.NO_PROVIDERS, error=NO_CARRIERS_FOUND)

        carrier = self.carriers[self.balancer.next_index(self.pool_size)]
        logger.info(
            f"Request handled by: {carrier.name}",
            extra={"carrier": carrier.name, "number": request.number}
        )

        try:
            entry = carrier.verify(request.number)
        except (ProviderError, TimeoutError) as e:
            logger.error(
                f"Carrier {carrier.name} failed: {e}",
                extra={"carrier": carrier.name, "number": request.number}
            )
            return VerificationOutcome(
                status=OutcomeStatus.PROVIDER_FAILURE,
                error=CARRIER_UNAVAILABLE,
                carrier=carrier.name,
            )

        try:
            self.repo.record_attempt(entry)
        except PersistenceError as e:
            logger.error(
                f"Failed to record attempt: {e.message}",
                extra={"carrier": entry.carrier, "step": entry.step.value},
                exc_info=True
            )
            return VerificationOutcome(
                status=OutcomeStatus.PERSISTENCE_FAILURE,
                error=PERSISTENCE_FAILED,
                entry=entry,
                carrier=entry.carrier,
            )

        if entry.step is VerificationStep.UNREACHABLE:
            logger.info(
                f"Verification unsuccessful via {entry.carrier}",
                extra={"carrier": entry.carrier, "step": entry.step.value}
            )
            return VerificationOutcome(
                status=OutcomeStatus.UNSUCCESSFUL,
                error=VERIFICATION_UNSUCCESSFUL,
                entry=entry,
            )

        return VerificationOutcome(
            status=OutcomeStatus.SUCCESS,
            token=generate_token(request.number, prefix=self.token_prefix),
            entry=entry,
        )

    def query_provider_ranking(self) -> List[ProviderRankEntry]:
        """Returns carriers ordered by mean step weight, best first."""
        return self.repo.rank_providers()
