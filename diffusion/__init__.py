"""Client library for the diffusion.to image generation API.

    async with DiffusionClient(api_key) as client:
        request = ImageRequest("a lighthouse at dusk").update_steps(100)
        token = await client.request_image(request)
        # wait for up to five minutes
        image = await client.check_and_wait(token, timeout=300)
"""

__version__ = "0.2.0"

from diffusion.clients.async_client import DiffusionClient
from diffusion.diffusion import DiffusionAPI
from diffusion.exceptions.diffusion_exceptions import (
    ApiError,
    DecodeError,
    DiffusionError,
    DiffusionTimeoutError,
    GenerationFailedError,
    InvalidParameterError,
    NetworkError,
)
from diffusion.models.image_models import (
    DiffusionImage,
    ImageModel,
    ImageOrientation,
    ImageRequest,
    ImageSize,
    ImageStatus,
    ImageSteps,
    ImageToken,
    JobState,
)

__all__ = [
    "DiffusionClient",
    "DiffusionAPI",
    "DiffusionError",
    "InvalidParameterError",
    "NetworkError",
    "ApiError",
    "DiffusionTimeoutError",
    "DecodeError",
    "GenerationFailedError",
    "DiffusionImage",
    "ImageModel",
    "ImageOrientation",
    "ImageRequest",
    "ImageSize",
    "ImageStatus",
    "ImageSteps",
    "ImageToken",
    "JobState",
]
