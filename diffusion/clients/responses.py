"""Mapping of diffusion.to HTTP responses to tokens, statuses and errors,
plus the argument checks and polling schedule shared by both clients.

Both the async (httpx) and blocking (requests) clients hand their response
objects to these helpers; only ``status_code``, ``text`` and ``json()`` are
used, which the two libraries share.
"""
import base64
import binascii
import time
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from diffusion.exceptions.diffusion_exceptions import (
    ApiError,
    DecodeError,
    DiffusionTimeoutError,
    InvalidParameterError,
)
from diffusion.models.image_models import DiffusionImage, ImageStatus, ImageToken

PENDING_STATUS_CODES = (202, 204)
PENDING_STATES = {"pending", "queued", "processing", "in_progress", "in_queue", "running"}
FAILED_STATES = {"failed", "failure", "error", "cancelled", "canceled"}


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _error_message(response) -> str:
    """Best human-readable message carried by an error response"""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]

    text = (response.text or "").strip()
    return text or "no response body"


def raise_for_api_error(response) -> None:
    if not _is_success(response.status_code):
        raise ApiError(response.status_code, _error_message(response))


def _json_object(response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError as e:
        raise DecodeError(f"response body is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise DecodeError(f"expected a JSON object, got {type(body).__name__}")
    return body


def parse_token_response(response) -> ImageToken:
    raise_for_api_error(response)
    body = _json_object(response)
    token = body.get("token")
    if not isinstance(token, str) or not token:
        raise DecodeError("response did not contain an image token")
    return ImageToken(token=token)


def parse_status_response(response) -> ImageStatus:
    """Translate one status check into pending, ready or failed"""
    if response.status_code in PENDING_STATUS_CODES:
        return ImageStatus.pending()
    raise_for_api_error(response)

    body = _json_object(response)
    data = body.get("data")
    if isinstance(data, dict) and "raw" in data:
        try:
            return ImageStatus.ready(DiffusionImage.model_validate(data))
        except ValidationError as e:
            raise DecodeError(f"malformed image data: {e}") from e

    state = str(body.get("status") or "").strip().lower()
    if state in FAILED_STATES or body.get("error"):
        reason = body.get("message") or body.get("error") or body.get("detail") or "unknown error"
        return ImageStatus.failed(str(reason))
    if state in PENDING_STATES:
        return ImageStatus.pending()

    raise DecodeError("status response contained neither image data nor a job state")


def decode_raw_image(raw: str) -> bytes:
    """Decode a base64 image payload, with or without a ``data:`` URL prefix"""
    contents = "".join(raw.split(",")[-1].split())
    if not contents:
        raise DecodeError("image payload is empty")
    try:
        return base64.b64decode(contents, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 image data: {e}") from e


def token_body(token: Union[ImageToken, str]) -> Dict[str, str]:
    if isinstance(token, ImageToken):
        return token.model_dump()
    if isinstance(token, str) and token:
        return {"token": token}
    raise InvalidParameterError("token", token)


def validate_poll_interval(poll_interval: float) -> float:
    # must be positive, or check_and_wait polls with no delay
    if isinstance(poll_interval, bool) or not poll_interval > 0:
        raise InvalidParameterError("poll_interval", poll_interval)
    return poll_interval


def validate_wait_timeout(timeout: Optional[float]) -> Optional[float]:
    if timeout is not None and (isinstance(timeout, bool) or not timeout >= 0):
        raise InvalidParameterError("timeout", timeout)
    return timeout


class PollSchedule:
    """Deadline and sleep lengths for one ``check_and_wait`` call.

    The deadline is fixed when the schedule is created, so every wait gets at
    least one status check and a timeout of zero gets exactly one.
    """

    def __init__(self, poll_interval: float, timeout: Optional[float] = None):
        self.poll_interval = poll_interval
        self.timeout = validate_wait_timeout(timeout)
        self.deadline = None if timeout is None else time.monotonic() + timeout
        self.checks = 0

    def next_delay(self) -> float:
        """Seconds to sleep after a pending check; raises once the deadline has passed"""
        if self.deadline is None:
            return self.poll_interval

        remaining = self.deadline - time.monotonic()
        if remaining <= 0:
            raise DiffusionTimeoutError(
                f"time expired without image finishing ({self.checks} status checks in {self.timeout}s)"
            )
        return min(self.poll_interval, remaining)
