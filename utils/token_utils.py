"""
utils/token_utils.py

Purpose: Verification token generation

Tokens are opaque strings handed back to callers after a successful
verification. They carry no security contract.
"""

import secrets
from datetime import datetime
from typing import Optional

from utils.time_utils import utc_now


def generate_token(number: str, prefix: str = "Bearer ey", issued_at: Optional[datetime] = None) -> str:
    """
    Generates a fresh verification token bound to a phone number.

    Args:
        number: Verified phone number
        prefix: Token prefix
        issued_at: Issue time (defaults to now)

    Returns:
        Non-empty token string, e.g. "Bearer ey3fa9c1d2e4b5a6f70177170000000"
    """
    issued_at = issued_at or utc_now()
    nonce = secrets.token_hex(8)
    return f"{prefix}{nonce}{number}{int(issued_at.timestamp())}"
