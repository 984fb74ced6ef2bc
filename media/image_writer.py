import hashlib
from pathlib import Path
from typing import Optional, Union

from diffusion.exceptions.diffusion_exceptions import DecodeError
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Leading bytes of the formats diffusion.to returns
_SIGNATURES = {
    b"\x89PNG\r\n\x1a\n": "png",
    b"\xff\xd8\xff": "jpg",
    b"RIFF": "webp",
}


def guess_extension(data: bytes) -> str:
    for signature, extension in _SIGNATURES.items():
        if data.startswith(signature):
            return extension
    return "png"


def default_filename(data: bytes) -> str:
    """Content-addressed file name: sha256 of the image plus its extension"""
    return f"{hashlib.sha256(data).hexdigest()}.{guess_extension(data)}"


def write_image(data: bytes, out: Optional[Union[str, Path]] = None) -> Path:
    """
    Write image bytes to ``out``, or to a content-addressed file in the
    current directory when no path is given. Returns the path written.
    """
    if not data:
        raise DecodeError("image payload decoded to zero bytes")

    path = Path(out) if out is not None else Path(default_filename(data))
    path.parent.mkdir(parents=True, exist_ok=True)

    path.write_bytes(data)
    logger.info(f"Wrote {len(data)} bytes to {path}")
    return path

