"""
utils/constants.py

Purpose: Centralized static content

- Caller-facing error messages returned by the verification API
- Balancer strategy names and aliases
- Default service metadata

(Prevents hardcoding across the codebase)
"""

# ============================================================
# SERVICE
# ============================================================

SERVICE_NAME = "telecom-verification"
SERVICE_VERSION = "1.0.0"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5000

# ============================================================
# CALLER-FACING ERRORS
# ============================================================

VERIFICATION_UNSUCCESSFUL = "verification unsuccessful"
NO_CARRIERS_FOUND = "no carriers found"
PERSISTENCE_FAILED = "verification could not be recorded"
CARRIER_UNAVAILABLE = "carrier unavailable"
INVALID_REQUEST_PREFIX = "invalid verification request"

# ============================================================
# BALANCER STRATEGIES
# ============================================================

ROUND_ROBIN = "round-robin"
BEST = "best"

# Accepted spellings for each strategy (CLI and BALANCER env var)
BALANCER_ALIASES = {
    "rr": ROUND_ROBIN,
    "round-robin": ROUND_ROBIN,
    "b": BEST,
    "best": BEST,
}

# ============================================================
# VERIFICATION CASCADE
# ============================================================

# Bernoulli trials draw from [0, TRIAL_RANGE)
TRIAL_RANGE = 100