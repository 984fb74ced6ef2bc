"""Pydantic models for image generation requests and responses"""
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from diffusion.exceptions.diffusion_exceptions import InvalidParameterError


class _ChoiceMixin:
    """Lookup helpers shared by the closed parameter enumerations"""

    @classmethod
    def parameter_name(cls) -> str:
        # ImageSteps -> "steps", ImageOrientation -> "orientation"
        return cls.__name__[len("Image"):].lower()

    @classmethod
    def choices(cls) -> List[str]:
        return [str(member.value) for member in cls]

    @classmethod
    def parse(cls, value: Any):
        """Coerce an enum member, its wire value or its name to a member"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            for member in cls:
                if key in (str(member.value), member.name.lower()):
                    return member
        elif isinstance(value, int) and not isinstance(value, bool):
            for member in cls:
                if member.value == value:
                    return member
        raise InvalidParameterError(cls.parameter_name(), value, cls.choices())


class ImageSteps(_ChoiceMixin, IntEnum):
    """The available step counts provided through the API"""

    FIFTY = 50
    ONE_HUNDRED = 100
    ONE_HUNDRED_FIFTY = 150
    TWO_HUNDRED = 200


class ImageModel(_ChoiceMixin, str, Enum):
    """The available image models provided through the API"""

    BEAUTY_REALISM = "beauty_realism"
    AESTHETIC_REALISM = "aesthetic_realism"
    ANIME_REALISM = "anime_realism"
    ANALOG_REALISM = "analog_realism"
    DREAM_REALITY = "dream_reality"
    STABLE_DIFFUSION = "stable_diffusion"
    TOON_ANIMATED = "toon_animated"
    FANTASY_ANIMATED = "fantasy_animated"


class ImageSize(_ChoiceMixin, str, Enum):
    """The available image sizes provided through the API"""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ImageOrientation(_ChoiceMixin, str, Enum):
    """The available image orientations provided through the API"""

    SQUARE = "square"
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


def _parse_prompt(value: Any, parameter: str = "prompt") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidParameterError(parameter, value)
    return value


_FIELD_PARSERS = {
    "negative": lambda value: None if value is None else _parse_prompt(value, "negative"),
    "steps": ImageSteps.parse,
    "model": ImageModel.parse,
    "size": ImageSize.parse,
    "orientation": ImageOrientation.parse,
}


class ImageRequest(BaseModel):
    """Parameters of an image to create.

    Instances are immutable: every ``update_*`` method validates its argument
    and returns a new request, so a rejected value never touches the original.

        request = (
            ImageRequest("a lighthouse at dusk")
            .update_steps(100)
            .update_model("anime_realism")
        )
    """
    model_config = ConfigDict(frozen=True)

    prompt: str
    negative: Optional[str] = None
    steps: ImageSteps = ImageSteps.FIFTY
    model: ImageModel = ImageModel.BEAUTY_REALISM
    size: ImageSize = ImageSize.SMALL
    orientation: ImageOrientation = ImageOrientation.SQUARE

    def __init__(self, prompt: str, **fields: Any):
        unknown = set(fields) - set(_FIELD_PARSERS)
        if unknown:
            raise TypeError(f"unexpected image request fields: {', '.join(sorted(unknown))}")
        prompt = _parse_prompt(prompt)
        parsed = {name: _FIELD_PARSERS[name](value) for name, value in fields.items()}
        super().__init__(prompt=prompt, **parsed)

    def _updated(self, name: str, value: Any) -> "ImageRequest":
        return self.model_copy(update={name: _FIELD_PARSERS[name](value)})

    def update_negative_prompt(self, prompt: Optional[str]) -> "ImageRequest":
        return self._updated("negative", prompt)

    def update_steps(self, steps: Any) -> "ImageRequest":
        return self._updated("steps", steps)

    def update_model(self, model: Any) -> "ImageRequest":
        return self._updated("model", model)

    def update_size(self, size: Any) -> "ImageRequest":
        return self._updated("size", size)

    def update_orientation(self, orientation: Any) -> "ImageRequest":
        return self._updated("orientation", orientation)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body expected by the image endpoint"""
        return self.model_dump(mode="json", exclude_none=True)


class ImageToken(BaseModel):
    """Opaque handle for an in-flight image, returned when a request is accepted"""
    model_config = ConfigDict(frozen=True)

    token: str

    def __str__(self) -> str:
        return self.token


class DiffusionImage(BaseModel):
    """The image returned from the API once generation is complete"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    raw: str
    id: Optional[Union[int, str]] = None
    steps: Optional[int] = None
    size: Optional[str] = None
    model: Optional[str] = None
    credits_used: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_url(self) -> bool:
        return self.raw.startswith(("http://", "https://"))


class JobState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class ImageStatus(BaseModel):
    """Result of a single status check"""
    model_config = ConfigDict(frozen=True)

    state: JobState
    image: Optional[DiffusionImage] = None
    reason: Optional[str] = None

    @classmethod
    def pending(cls) -> "ImageStatus":
        return cls(state=JobState.PENDING)

    @classmethod
    def ready(cls, image: DiffusionImage) -> "ImageStatus":
        return cls(state=JobState.READY, image=image)

    @classmethod
    def failed(cls, reason: str) -> "ImageStatus":
        return cls(state=JobState.FAILED, reason=reason)

    @property
    def is_pending(self) -> bool:
        return self.state is JobState.PENDING

    @property
    def is_ready(self) -> bool:
        return self.state is JobState.READY

    @property
    def is_failed(self) -> bool:
        return self.state is JobState.FAILED
