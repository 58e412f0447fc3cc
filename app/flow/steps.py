"""
app/flow/steps.py

Purpose: Defines the verification cascade steps

- Enum for each terminal step of a verification attempt
  (FirstSMS, SecondSMS, FirstVoiceCall, SecondVoiceCall, Unreachable)
- Single source of truth for step order
- Step weight table used for carrier ranking
"""

import math
from enum import Enum
from typing import Dict, Iterable, List
from dataclasses import dataclass

from app.core.exceptions import ConfigurationError


class VerificationStep(str, Enum):
    """
    Terminal step reached by a verification attempt.
    Declaration order is the cost order: cheapest success first,
    total failure last.
    """

    FIRST_SMS = "FirstSMS"
    SECOND_SMS = "SecondSMS"
    FIRST_VOICE_CALL = "FirstVoiceCall"
    SECOND_VOICE_CALL = "SecondVoiceCall"
    UNREACHABLE = "Unreachable"

    @classmethod
    def ordered(cls) -> List["VerificationStep"]:
        return list(cls)

    @property
    def order(self) -> int:
        return STEP_METADATA[self].order

    @property
    def is_success(self) -> bool:
        return self is not VerificationStep.UNREACHABLE


@dataclass(frozen=True)
class StepMetadata:
    """
    Metadata associated with each verification step.
    """
    name: VerificationStep
    display_name: str
    order: int
    channel: str = ""  # "sms", "voice" or "" for the failure step
    attempt: int = 0


STEP_METADATA: Dict[VerificationStep, StepMetadata] = {
    VerificationStep.FIRST_SMS: StepMetadata(
        name=VerificationStep.FIRST_SMS,
        display_name="First SMS",
        order=0,
        channel="sms",
        attempt=1,
    ),
    VerificationStep.SECOND_SMS: StepMetadata(
        name=VerificationStep.SECOND_SMS,
        display_name="Second SMS",
        order=1,
        channel="sms",
        attempt=2,
    ),
    VerificationStep.FIRST_VOICE_CALL: StepMetadata(
        name=VerificationStep.FIRST_VOICE_CALL,
        display_name="First voice call",
        order=2,
        channel="voice",
        attempt=1,
    ),
    VerificationStep.SECOND_VOICE_CALL: StepMetadata(
        name=VerificationStep.SECOND_VOICE_CALL,
        display_name="Second voice call",
        order=3,
        channel="voice",
        attempt=2,
    ),
    VerificationStep.UNREACHABLE: StepMetadata(
        name=VerificationStep.UNREACHABLE,
        display_name="Unreachable",
        order=4,
    ),
}


class StepWeightTable:
    """
    Maps each VerificationStep to a non-negative weight.

    Weights are given in step order and must be non-decreasing, so a cheaper
    success never weighs more than a costlier one.

    Raises:
        ConfigurationError: wrong number of weights, a negative weight,
            or weights out of ascending order
    """

    def __init__(self, weights: Iterable[float]):
        values = list(weights)
        steps = VerificationStep.ordered()

        if len(values) != len(steps):
            raise ConfigurationError(
                f"step weights must contain exactly {len(steps)} values, got {len(values)}",
                details={"weights": values}
            )
        if not all(isinstance(v, (int, float)) and math.isfinite(v) for v in values):
            raise ConfigurationError(
                "step weights must be finite numbers",
                details={"weights": [str(v) for v in values]}
            )
        if any(v < 0 for v in values):
            raise ConfigurationError(
                "step weights must be non-negative",
                details={"weights": values}
            )
        if any(b < a for a, b in zip(values, values[1:])):
            raise ConfigurationError(
                "step weights must be provided in ascending sequence",
                details={"weights": values}
            )

        self._weights: Dict[VerificationStep, float] = dict(zip(steps, values))

    def weight(self, step: VerificationStep) -> float:
        return self._weights[step]

    __getitem__ = weight

    def as_list(self) -> List[float]:
        return [self._weights[s] for s in VerificationStep.ordered()]

    def __repr__(self) -> str:
        return f"StepWeightTable({self.as_list()})"
