"""
app/models/provider_rank.py

Purpose: Carrier ranking row

- Carrier identifier paired with its mean step weight
- Derived on every ranking query, never stored
"""

from typing import NamedTuple


class ProviderRankEntry(NamedTuple):
    """Serializes to a JSON [carrier, score] pair."""
    carrier: str
    score: float
