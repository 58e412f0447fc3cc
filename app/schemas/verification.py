"""
app/schemas/verification.py

Purpose: Verification request schema

- Validates the POST / payload
- Converts the millisecond epoch "time" field to an aware UTC datetime
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from utils.time_utils import from_epoch_millis, to_epoch_millis


class VerificationAttemptRequest(BaseModel):
    """
    Inbound verification attempt. The number is opaque and not validated.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "number": "+15555550177",
                "time": 1700000000000
            }
        }
    )

    number: str = Field(..., description="Phone number to verify")
    time: datetime = Field(..., description="Submission time, milliseconds since epoch on the wire")

    @field_validator("time", mode="before")
    @classmethod
    def parse_epoch_millis(cls, v):
        if isinstance(v, bool):
            raise ValueError("time must be integer milliseconds since epoch")
        if isinstance(v, int):
            return from_epoch_millis(v)
        if isinstance(v, datetime):
            return v
        raise ValueError("time must be integer milliseconds since epoch")

    @field_serializer("time")
    def serialize_time(self, v: datetime) -> int:
        return to_epoch_millis(v)
