"""
Error handling utilities for the diffusion.to command line tool.
"""

import logging
import re
from enum import Enum
from typing import Optional

from diffusion.exceptions.diffusion_exceptions import (
    ApiError,
    DecodeError,
    DiffusionError,
    DiffusionTimeoutError,
    GenerationFailedError,
    InvalidParameterError,
    NetworkError,
)
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Error categories, each with the exit code the CLI reports for it."""
    USER_INPUT = 2
    NETWORK = 3
    API = 4
    TIMEOUT = 5
    DECODE = 6
    GENERATION = 7
    FILESYSTEM = 8
    UNKNOWN = 1

    @property
    def exit_code(self) -> int:
        return self.value


# Most specific first: DiffusionTimeoutError is also an OSError
_CATEGORIES = [
    (InvalidParameterError, ErrorCategory.USER_INPUT),
    (NetworkError, ErrorCategory.NETWORK),
    (ApiError, ErrorCategory.API),
    (DiffusionTimeoutError, ErrorCategory.TIMEOUT),
    (DecodeError, ErrorCategory.DECODE),
    (GenerationFailedError, ErrorCategory.GENERATION),
    (DiffusionError, ErrorCategory.UNKNOWN),
    (OSError, ErrorCategory.FILESYSTEM),
]

_HINTS = {
    ErrorCategory.USER_INPUT: "Check the command line arguments.",
    ErrorCategory.NETWORK: "Could not reach diffusion.to, check your connection.",
    ErrorCategory.API: "diffusion.to rejected the request.",
    ErrorCategory.TIMEOUT: "The image was not finished in time; try a longer --timeout.",
    ErrorCategory.DECODE: "diffusion.to sent a response that could not be read.",
    ErrorCategory.GENERATION: "diffusion.to could not generate the image.",
    ErrorCategory.FILESYSTEM: "Could not write the image file.",
    ErrorCategory.UNKNOWN: "An unexpected error occurred.",
}


class SanitizedError:
    """Sanitized error representation."""

    def __init__(
        self,
        user_message: str,
        category: ErrorCategory,
        original_error: Optional[Exception] = None
    ):
        self.user_message = user_message
        self.category = category
        self.original_error = original_error

    @property
    def exit_code(self) -> int:
        return self.category.exit_code


def sanitize_error_message(error_message: str, secret: Optional[str] = None) -> str:
    """
    Remove credentials and bulky payloads from error messages.

    Args:
        error_message: Raw error message
        secret: A known secret (the API key) to mask verbatim

    Returns:
        Sanitized error message
    """
    if not error_message:
        return "An error occurred"

    sanitized = error_message
    if secret:
        sanitized = sanitized.replace(secret, "[KEY]")

    # Bearer credentials
    sanitized = re.sub(r'(?i)bearer\s+\S+', 'Bearer [KEY]', sanitized)

    # Inline base64 image data
    sanitized = re.sub(r'data:[\w/+.-]+;base64,[A-Za-z0-9+/=]+', '[IMAGE DATA]', sanitized)
    sanitized = re.sub(r'[A-Za-z0-9+/]{120,}={0,2}', '[IMAGE DATA]', sanitized)

    # Remove stack traces
    sanitized = re.sub(r'Traceback \(most recent call last\):.*?$', '', sanitized, flags=re.MULTILINE | re.DOTALL)

    # Clean up and limit length
    sanitized = re.sub(r'\s+', ' ', sanitized).strip()

    if len(sanitized) > 300:
        sanitized = sanitized[:297] + "..."

    return sanitized or "Sanitized error message"


def categorize_error(error: Exception) -> ErrorCategory:
    for error_type, category in _CATEGORIES:
        if isinstance(error, error_type):
            return category
    return ErrorCategory.UNKNOWN


def handle_error(error: Exception, secret: Optional[str] = None) -> SanitizedError:
    """
    Turn an exception into a message fit for stderr and an exit code.

    Args:
        error: The exception to handle
        secret: API key to keep out of the message

    Returns:
        SanitizedError instance
    """
    category = categorize_error(error)
    detail = sanitize_error_message(str(error), secret=secret)
    sanitized_error = SanitizedError(
        user_message=f"{_HINTS[category]} ({detail})",
        category=category,
        original_error=error
    )

    log_level = logging.ERROR if category is ErrorCategory.UNKNOWN else logging.DEBUG
    logger.log(
        log_level,
        f"{type(error).__name__} mapped to exit code {sanitized_error.exit_code}: {detail}"
    )

    return sanitized_error
