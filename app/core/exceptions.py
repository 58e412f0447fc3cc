from typing import Optional, Any

class TelecomError(Exception):
    """
    Base exception for the telecom verification service.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ConfigurationError(TelecomError):
    """
    Raised when a carrier probability or the step weight table is invalid.
    Fatal to startup.
    """
    def __init__(self, message: str = "Invalid configuration", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500, details=details)

class UnsupportedStrategyError(TelecomError):
    """
    Raised when a recognised but unimplemented balancer strategy is requested.
    """
    def __init__(self, message: str = "Balancer strategy is not supported yet", details: Optional[Any] = None):
        super().__init__(message, code="UNSUPPORTED_STRATEGY", status_code=501, details=details)

class PersistenceError(TelecomError):
    """
    Raised when a verification entry could not be recorded.
    """
    def __init__(self, message: str = "Verification attempt could not be recorded", details: Optional[Any] = None):
        super().__init__(message, code="PERSISTENCE_FAILURE", status_code=503, details=details)

class ProviderError(TelecomError):
    """
    Raised by a carrier integration that could not complete its challenges
    (timeout, gateway failure).
    """
    def __init__(self, message: str = "Carrier could not complete verification", details: Optional[Any] = None):
        super().__init__(message, code="PROVIDER_FAILURE", status_code=502, details=details)
