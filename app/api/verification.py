"""
app/api/verification.py

Purpose: Verification HTTP endpoints

- POST / dispatches a verification attempt and returns a token or error
- GET /rank returns the carrier ranking
- Malformed bodies get a plain-text diagnostic, not JSON
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import PersistenceError, ProviderError
from app.core.logging import get_logger
from app.flow.dispatcher import OutcomeStatus, VerificationDispatcher
from app.schemas.response import VerificationResponse
from app.schemas.verification import VerificationAttemptRequest
from utils.constants import INVALID_REQUEST_PREFIX

logger = get_logger(__name__)
router = APIRouter()


def get_dispatcher(request: Request) -> VerificationDispatcher:
    return request.app.state.dispatcher


@router.post("/")
async def verify_number(request: Request):
    """
    Verification endpoint

    Body: {"number": "<phone>", "time": <ms since epoch>}

    Returns {"token": ...} on success, {"error": ...} when the number could
    not be verified or no carrier is configured. Carrier and repository
    failures return an ErrorResponse (502 / 503).
    """
    body = await request.body()

    try:
        attempt = VerificationAttemptRequest.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Rejected malformed verification request: {e.error_count()} error(s)")
        return PlainTextResponse(
            f"{INVALID_REQUEST_PREFIX} - {e}:\n\t{body.decode('utf-8', errors='replace')}",
            status_code=400
        )

    # Carrier trials may block once they hit real networks
    outcome = await run_in_threadpool(get_dispatcher(request).handle_attempt, attempt)

    # Operational failures are rendered by the TelecomError handler
    if outcome.status is OutcomeStatus.PERSISTENCE_FAILURE:
        raise PersistenceError(outcome.error, details={"carrier": outcome.carrier})
    if outcome.status is OutcomeStatus.PROVIDER_FAILURE:
        raise ProviderError(outcome.error, details={"carrier": outcome.carrier})

    response = VerificationResponse(token=outcome.token, error=outcome.error)
    return response.model_dump(exclude_none=True)


@router.get("/rank")
async def provider_rank(request: Request):
    """
    Carrier ranking: [[carrier, score], ...] ascending by score.
    """
    rank = await run_in_threadpool(get_dispatcher(request).query_provider_ranking)
    return [[r.carrier, r.score] for r in rank]
