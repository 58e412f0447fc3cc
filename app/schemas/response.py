from pydantic import BaseModel, ConfigDict
from typing import Optional, Any

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class VerificationResponse(BaseModel):
    """
    Caller-facing result of POST /.
    Exactly one of token/error is set; unset fields are omitted on the wire.
    """
    model_config = ConfigDict(json_schema_extra={
        "examples": [{"token": "Bearer ey3fa9c1d2e4b5a6f7017717000000"}, {"error": "verification unsuccessful"}]
    })

    token: Optional[str] = None
    error: Optional[str] = None
