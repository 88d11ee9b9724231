"""
NutriVeda Error Codes

Boundary failures that cannot be recovered inside the scoring path. Rule
evaluation itself never raises: missing data yields neutral results.
"""

from enum import Enum


class NutrivedaError(Enum):
    INPUT_UNAVAILABLE = "INPUT_UNAVAILABLE"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class NutrivedaException(Exception):
    """Base exception carrying an error code and the HTTP status to surface."""

    def __init__(self, error_code: NutrivedaError, message: str, http_code: int = 503):
        self.error_code = error_code
        self.message = message
        self.http_code = http_code
        super().__init__(f"{error_code.value}: {message}")

    def to_dict(self) -> dict:
        return {"error_code": self.error_code.value, "message": self.message}


class InputUnavailableError(NutrivedaException):
    """Profile or candidate set could not be read from the store."""

    def __init__(self, message: str = "cannot score: input unavailable"):
        super().__init__(NutrivedaError.INPUT_UNAVAILABLE, message, http_code=503)


class NotFoundError(NutrivedaException):
    def __init__(self, error_code: NutrivedaError, message: str):
        super().__init__(error_code, message, http_code=404)


class ConfigUpdateError(NutrivedaException):
    """A configuration patch failed validation."""

    def __init__(self, message: str):
        super().__init__(NutrivedaError.CONFIG_INVALID, message, http_code=422)


class StoreUnavailableError(NutrivedaException):
    """A write could not be persisted."""

    def __init__(self, message: str = "store unavailable"):
        super().__init__(NutrivedaError.STORE_UNAVAILABLE, message, http_code=503)
