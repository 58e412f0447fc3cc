"""
app/services/balancer_service.py

Purpose: Carrier selection strategies

- Balancer interface: pick the pool index that serves the next attempt
- Round-robin implementation (strict cyclic fairness, thread-safe)
- Strategy parsing and the closed-tag factory used at startup
"""

import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List

from app.core.exceptions import ConfigurationError, UnsupportedStrategyError
from app.core.logging import get_logger
from app.models.provider_rank import ProviderRankEntry
from utils.constants import BALANCER_ALIASES

logger = get_logger(__name__)

RankingSource = Callable[[], List[ProviderRankEntry]]


class BalancerType(str, Enum):
    ROUND_ROBIN = "round-robin"
    BEST = "best"

    @classmethod
    def parse(cls, value: str) -> "BalancerType":
        """
        Parses a strategy name or alias ("rr", "round-robin", "b", "best").

        Raises:
            ConfigurationError: unknown strategy name
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key not in BALANCER_ALIASES:
            raise ConfigurationError(f"Invalid balancer: {value}")
        return cls(BALANCER_ALIASES[key])


class Balancer(ABC):
    """Chooses which pool index handles the next verification attempt."""

    @abstractmethod
    def next_index(self, pool_size: int) -> int:
        """
        Returns an index in [0, pool_size). Must be safe to call from
        concurrent request threads. pool_size must be positive.
        """


class RoundRobinBalancer(Balancer):
    """
    Cycles through the pool in ascending order. Every window of pool_size
    consecutive calls returns each index exactly once.
    """

    def __init__(self):
        self._current = 0
        self._lock = threading.Lock()

    def next_index(self, pool_size: int) -> int:
        if pool_size <= 0:
            raise ValueError("pool_size must be positive")
        with self._lock:
            # the pool may have shrunk since the last call
            idx = self._current % pool_size
            self._current = (idx + 1) % pool_size
        return idx


def build_balancer(balancer_type, ranking_source: RankingSource) -> Balancer:
    """
    Builds the balancer for a strategy.

    Args:
        balancer_type: BalancerType or strategy name
        ranking_source: Callable returning the current carrier ranking.
            Round-robin ignores it; a ranking-driven strategy reads it.

    Raises:
        ConfigurationError: unknown strategy
        UnsupportedStrategyError: strategy is recognised but not implemented
    """
    balancer_type = BalancerType.parse(balancer_type)

    if balancer_type is BalancerType.ROUND_ROBIN:
        logger.info("Using round-robin balancer")
        return RoundRobinBalancer()

    # TODO: BestBalancer selecting the lowest-scoring carrier from ranking_source
    raise UnsupportedStrategyError(
        f"{balancer_type.value} balancer is not supported yet",
        details={"balancer": balancer_type.value}
    )
