"""Async client for the diffusion.to API with Pydantic models"""
import asyncio
from typing import Dict, Optional, Union

import httpx

from config import (
    DIFFUSION_API_URL,
    DIFFUSION_POLL_INTERVAL,
    DIFFUSION_REQUEST_TIMEOUT,
    DIFFUSION_STATUS_URL,
)
from diffusion.clients.responses import (
    PollSchedule,
    decode_raw_image,
    parse_status_response,
    parse_token_response,
    raise_for_api_error,
    token_body,
    validate_poll_interval,
)
from diffusion.exceptions.diffusion_exceptions import (
    GenerationFailedError,
    InvalidParameterError,
    NetworkError,
)
from diffusion.models.image_models import DiffusionImage, ImageRequest, ImageStatus, ImageToken

# Configure logging
from utils.logging_config import get_logger
logger = get_logger(__name__)


def build_auth_headers(api_key: str) -> Dict[str, str]:
    """Default headers for every API call; rejects keys that cannot be sent as a header"""
    if (
        not isinstance(api_key, str)
        or not api_key
        or any(not (0x21 <= ord(c) <= 0x7E) for c in api_key)
    ):
        raise InvalidParameterError("api_key", "<redacted>")
    return {
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
    }

class DiffusionClient:
    """The client used to interact with the diffusion.to API.

    Each instance owns one ``httpx.AsyncClient``; several jobs may be polled
    concurrently through the same instance.
    """

    def __init__(
        self,
        api_key: str,
        *,
        api_url: str = DIFFUSION_API_URL,
        status_url: str = DIFFUSION_STATUS_URL,
        poll_interval: float = DIFFUSION_POLL_INTERVAL,
        timeout: float = DIFFUSION_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = build_auth_headers(api_key)
        self.api_url = api_url
        self.status_url = status_url
        self.poll_interval = validate_poll_interval(poll_interval)

        # HTTP client
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _send(self, request: httpx.Request, follow_redirects: bool = False) -> httpx.Response:
        try:
            return await self._client.send(request, follow_redirects=follow_redirects)
        except httpx.RequestError as e:
            logger.error(f"Request to {request.url} failed: {e!r}")
            raise NetworkError(f"request to {request.url} failed: {e}") from e

    async def _post(self, url: str, payload: dict) -> httpx.Response:
        return await self._send(self._client.build_request("POST", url, json=payload))

    async def request_image(self, request: ImageRequest) -> ImageToken:
        """
        Request an image be created with the given parameters. Returns a token
        for checking the status of the image and receiving it when complete.
        """
        if not isinstance(request, ImageRequest):
            raise TypeError(f"expected ImageRequest, got {type(request).__name__}")

        logger.info(
            f"Requesting image: model={request.model.value} steps={request.steps.value} "
            f"size={request.size.value} orientation={request.orientation.value}"
        )
        response = await self._post(self.api_url, request.to_payload())
        token = parse_token_response(response)
        logger.debug(f"Image accepted with token {token}")
        return token

    async def check(self, token: Union[ImageToken, str]) -> ImageStatus:
        """Check the status of an image once, using a token from request_image()"""
        response = await self._post(self.status_url, token_body(token))
        status = parse_status_response(response)
        logger.debug(f"Status for {token}: {status.state.value}")
        return status

    async def check_and_wait(
        self,
        token: Union[ImageToken, str],
        timeout: Optional[float] = None,
    ) -> DiffusionImage:
        """
        Poll every ``poll_interval`` seconds until the image is complete.

        With ``timeout=None`` this waits indefinitely. Otherwise the deadline is
        fixed on entry and checked before every further attempt, so a timeout of
        zero allows exactly one status check. Cancelling the awaiting task
        abandons the job.

        Raises:
            GenerationFailedError: the API reported that the job failed
            DiffusionTimeoutError: the deadline passed while still pending
        """
        schedule = PollSchedule(self.poll_interval, timeout)
        token_body(token)

        while True:
            schedule.checks += 1
            status = await self.check(token)
            if status.is_ready:
                logger.info(f"Image ready after {schedule.checks} status check(s)")
                return status.image
            if status.is_failed:
                logger.warning(f"Image generation failed: {status.reason}")
                raise GenerationFailedError(status.reason)

            delay = schedule.next_delay()
            logger.info(f"Image not ready yet, checking again in {delay:.1f}s")
            await asyncio.sleep(delay)

    async def fetch_image_bytes(self, image: DiffusionImage) -> bytes:
        """Binary contents of a finished image, downloading it when ``raw`` is a URL"""
        if not image.is_url:
            return decode_raw_image(image.raw)

        request = self._client.build_request("GET", image.raw)
        # image hosts never need the API key
        del request.headers["Authorization"]
        response = await self._send(request, follow_redirects=True)
        raise_for_api_error(response)
        return response.content
