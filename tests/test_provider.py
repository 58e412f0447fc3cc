import pytest

from app.core.config import CarrierConfig
from app.core.exceptions import ConfigurationError
from app.flow.steps import VerificationStep
from app.services.provider_service import MockTelecomProvider, build_providers


class ScriptedDraws:
    """Returns pre-set draws in order and counts how many were taken."""

    def __init__(self, draws):
        self.draws = list(draws)
        self.calls = 0

    def randrange(self, stop):
        self.calls += 1
        return self.draws.pop(0)


def test_certain_sms_always_first_sms():
    provider = MockTelecomProvider("carrier_1", 100, 0)
    for _ in range(200):
        assert provider.verify("0177").step is VerificationStep.FIRST_SMS


def test_zero_chances_always_unreachable():
    provider = MockTelecomProvider("carrier_1", 0, 0)
    for _ in range(200):
        assert provider.verify("0177").step is VerificationStep.UNREACHABLE


def test_zero_sms_certain_voice_is_first_voice_call():
    provider = MockTelecomProvider("carrier_1", 0, 100)
    for _ in range(50):
        assert provider.verify("0177").step is VerificationStep.FIRST_VOICE_CALL


@pytest.mark.parametrize("draws, expected, taken", [
    ([10], VerificationStep.FIRST_SMS, 1),
    ([90, 10], VerificationStep.SECOND_SMS, 2),
    ([90, 90, 10], VerificationStep.FIRST_VOICE_CALL, 3),
    ([90, 90, 90, 10], VerificationStep.SECOND_VOICE_CALL, 4),
    ([90, 90, 90, 90], VerificationStep.UNREACHABLE, 4),
])
def test_cascade_stops_at_first_success(draws, expected, taken):
    rng = ScriptedDraws(draws)
    provider = MockTelecomProvider("carrier_1", 50, 50, rng=rng)
    assert provider.verify("0177").step is expected
    assert rng.calls == taken


def test_draw_equal_to_chance_fails():
    provider = MockTelecomProvider("carrier_1", 50, 50, rng=ScriptedDraws([50, 49]))
    assert provider.verify("0177").step is VerificationStep.SECOND_SMS


def test_sms_and_voice_use_their_own_chances():
    provider = MockTelecomProvider("carrier_1", 20, 80, rng=ScriptedDraws([30, 30, 30]))
    assert provider.verify("0177").step is VerificationStep.FIRST_VOICE_CALL


def test_entry_carries_provider_and_number():
    provider = MockTelecomProvider("carrier_9", 100, 100)
    entry = provider.verify("+15555550177")
    assert entry.carrier == "carrier_9"
    assert entry.number == "+15555550177"
    assert entry.time.tzinfo is not None
    assert entry.is_success


@pytest.mark.parametrize("sms, voice", [(101, 0), (0, 101), (-1, 50), (50, -1), (True, 50), (50.5, 50)])
def test_invalid_probability_rejected(sms, voice):
    with pytest.raises(ConfigurationError):
        MockTelecomProvider("carrier_1", sms, voice)


def test_build_providers_preserves_order():
    providers = build_providers([
        CarrierConfig(name="a", chance_sms=10, chance_voice=20),
        CarrierConfig(name="b", chance_sms=30, chance_voice=40),
    ])
    assert [p.name for p in providers] == ["a", "b"]
    assert providers[1].chance_voice == 40


def test_injected_source_used_even_if_falsy():
    class EmptyLookingDraws(ScriptedDraws):
        def __len__(self):
            return 0

    rng = EmptyLookingDraws([99, 99, 99, 0])
    provider = MockTelecomProvider("carrier_1", 50, 50, rng=rng)
    assert provider.verify("0177").step is VerificationStep.SECOND_VOICE_CALL
    assert rng.calls == 4
