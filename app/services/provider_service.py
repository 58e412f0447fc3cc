"""
app/services/provider_service.py

Purpose: Telecom carrier verification flow

- TelecomProvider interface a carrier integration implements
- MockTelecomProvider simulates a carrier with fixed SMS/voice success chances
- Builds the carrier pool from settings

A real carrier replaces send_sms/send_voice with outbound calls; each trial
then becomes a point where verify() may block or time out.
"""

import random
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Protocol

from app.core.exceptions import ConfigurationError
from app.core.logging import get_logger
from app.flow.steps import STEP_METADATA, VerificationStep
from app.models.verification_entry import VerificationEntry
from utils.constants import TRIAL_RANGE
from utils.time_utils import utc_now

logger = get_logger(__name__)


class TrialSource(Protocol):
    """Anything with random.Random's randrange; tests inject scripted draws."""

    def randrange(self, stop: int) -> int: ...


class TelecomProvider(ABC):
    """
    Encapsulates the verification flow of one telecom carrier.

    The carrier handles the SMS/voice challenge and the user's submission of
    the code it delivered; this interface only exposes whether each challenge
    was completed.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def send_sms(self, number: str) -> bool:
        ...

    @abstractmethod
    def send_voice(self, number: str) -> bool:
        ...

    def verify(self, number: str) -> VerificationEntry:
        """
        Runs the SMS, SMS, voice, voice cascade and stops at the first
        challenge the user completes.

        Args:
            number: Phone number being verified (opaque)

        Returns:
            VerificationEntry with the terminal step reached
        """
        step = VerificationStep.UNREACHABLE
        for candidate, meta in STEP_METADATA.items():
            if not candidate.is_success:
                continue
            challenge = self.send_sms if meta.channel == "sms" else self.send_voice
            logger.debug(f"{self.name}: {meta.channel} attempt {meta.attempt} for {number}")
            if challenge(number):
                step = candidate
                break

        logger.debug(f"{self.name} resolved {number}: {STEP_METADATA[step].display_name}")
        return VerificationEntry(
            carrier=self.name,
            number=number,
            step=step,
            time=utc_now(),
        )


class MockTelecomProvider(TelecomProvider):
    """
    Simulated carrier: every challenge is an independent Bernoulli trial with
    the configured percentage chance of success.
    """

    def __init__(self, name: str, chance_sms: int, chance_voice: int, rng: Optional[TrialSource] = None):
        for label, chance in (("chance_sms", chance_sms), ("chance_voice", chance_voice)):
            if isinstance(chance, bool) or not isinstance(chance, int) or not 0 <= chance <= 100:
                raise ConfigurationError(
                    "probability must be a number between 0 and 100",
                    details={"carrier": name, label: chance}
                )

        self._name = name
        self.chance_sms = chance_sms
        self.chance_voice = chance_voice
        self._rng = rng if rng is not None else random.Random()

    @property
    def name(self) -> str:
        return self._name

    def _trial(self, chance: int) -> bool:
        return self._rng.randrange(TRIAL_RANGE) < chance

    def send_sms(self, number: str) -> bool:
        return self._trial(self.chance_sms)

    def send_voice(self, number: str) -> bool:
        return self._trial(self.chance_voice)

    def __repr__(self) -> str:
        return f"MockTelecomProvider({self._name!r}, sms={self.chance_sms}, voice={self.chance_voice})"


def build_providers(configs: Iterable, rng: Optional[TrialSource] = None) -> List[TelecomProvider]:
    """
    Builds the carrier pool from CarrierConfig entries, preserving order.
    """
    providers: List[TelecomProvider] = [
        MockTelecomProvider(c.name, c.chance_sms, c.chance_voice, rng=rng)
        for c in configs
    ]
    logger.info(f"Carrier pool ready: {[p.name for p in providers]}")
    return providers
