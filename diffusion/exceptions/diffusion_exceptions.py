"""Custom exceptions for the diffusion.to API"""
from typing import Any, Optional, Sequence


class DiffusionError(Exception):
    """Base exception for diffusion.to API errors"""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidParameterError(DiffusionError):
    """Exception for request parameters outside their allowed values"""
    def __init__(self, parameter: str, value: Any, allowed: Optional[Sequence[Any]] = None):
        self.parameter = parameter
        self.value = value
        self.allowed = list(allowed) if allowed is not None else None
        message = f"invalid {parameter}: {value!r}"
        if self.allowed:
            message += f" (expected one of: {', '.join(str(a) for a in self.allowed)})"
        super().__init__(message)


class NetworkError(DiffusionError):
    """Exception for transport failures talking to the API"""
    pass


class ApiError(DiffusionError):
    """Exception for non-success HTTP responses"""
    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}", status_code=status_code)
        self.body_message = message


class DiffusionTimeoutError(DiffusionError, TimeoutError):
    """Exception raised when an image is not finished before the deadline"""
    pass


class DecodeError(DiffusionError):
    """Exception for malformed response bodies or image payloads"""
    pass


class GenerationFailedError(DiffusionError):
    """Exception raised when the API reports that a job failed"""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"image generation failed: {reason}")
