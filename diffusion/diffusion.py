"""Blocking diffusion.to API client for callers without an event loop"""
import time
from typing import Optional, Union

import requests

from config import (
    DIFFUSION_API_URL,
    DIFFUSION_POLL_INTERVAL,
    DIFFUSION_REQUEST_TIMEOUT,
    DIFFUSION_STATUS_URL,
)
from diffusion.clients.async_client import build_auth_headers
from diffusion.clients.responses import (
    PollSchedule,
    decode_raw_image,
    parse_status_response,
    parse_token_response,
    raise_for_api_error,
    token_body,
    validate_poll_interval,
)
from diffusion.exceptions.diffusion_exceptions import GenerationFailedError, NetworkError
from diffusion.models.image_models import DiffusionImage, ImageRequest, ImageStatus, ImageToken
from utils.logging_config import get_logger

logger = get_logger(__name__)


class DiffusionAPI:
    def __init__(
        self,
        api_key: str,
        api_url: str = DIFFUSION_API_URL,
        status_url: str = DIFFUSION_STATUS_URL,
        poll_interval: float = DIFFUSION_POLL_INTERVAL,
        timeout: float = DIFFUSION_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        headers = build_auth_headers(api_key)
        self.api_url = api_url
        self.status_url = status_url
        self.poll_interval = validate_poll_interval(poll_interval)
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update(headers)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.session.close()

    def _post(self, url: str, payload: dict) -> requests.Response:
        try:
            return self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise NetworkError(f"request to {url} failed: {e}") from e

    def request_image(self, request: ImageRequest) -> ImageToken:
        """Submit an image request and return the token identifying the job"""
        if not isinstance(request, ImageRequest):
            raise TypeError(f"expected ImageRequest, got {type(request).__name__}")

        logger.info(f"Requesting image with model {request.model.value}")
        response = self._post(self.api_url, request.to_payload())
        return parse_token_response(response)

    def check(self, token: Union[ImageToken, str]) -> ImageStatus:
        """Check the status of an image once"""
        return parse_status_response(self._post(self.status_url, token_body(token)))

    def check_and_wait(
        self, token: Union[ImageToken, str], timeout: Optional[float] = None
    ) -> DiffusionImage:
        """
        Block until the image is complete, polling every poll_interval seconds.
        Raises DiffusionTimeoutError once ``timeout`` seconds have passed.
        """
        schedule = PollSchedule(self.poll_interval, timeout)
        token_body(token)

        while True:
            schedule.checks += 1
            status = self.check(token)
            if status.is_ready:
                return status.image
            if status.is_failed:
                logger.warning(f"Image generation failed: {status.reason}")
                raise GenerationFailedError(status.reason)

            delay = schedule.next_delay()
            logger.info(f"Image status: pending, waiting {delay:.1f}s...")
            time.sleep(delay)

    def fetch_image_bytes(self, image: DiffusionImage) -> bytes:
        if not image.is_url:
            return decode_raw_image(image.raw)

        try:
            # plain requests.get so the API key is not sent to the image host
            response = requests.get(image.raw, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"download of {image.raw} failed: {e}") from e
        raise_for_api_error(response)
        return response.content
