# diffusion-to - CLI and client library for the diffusion.to image API
# Copyright (C) 2025 brokechubb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

import argparse
import asyncio
import sys

from config import (
    DIFFUSION_API_KEY,
    DIFFUSION_MAX_WAIT,
    DIFFUSION_POLL_INTERVAL,
    LOG_FILE_PATH,
    LOG_LEVEL,
    LOG_TO_FILE,
)
from diffusion import __version__
from diffusion.clients.async_client import DiffusionClient
from diffusion.exceptions.diffusion_exceptions import DiffusionError
from diffusion.models.image_models import ImageModel, ImageOrientation, ImageRequest, ImageSize, ImageSteps
from media.image_writer import write_image
from utils.error_handler import handle_error
from utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def _choice(value: str) -> str:
    # accept "anime-realism" and "Anime_Realism" for anime_realism
    return value.strip().lower().replace("-", "_")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diffusion-to",
        description="CLI for requesting and downloading AI-created images via diffusion.to",
    )
    parser.add_argument("-a", "--api-key", default=DIFFUSION_API_KEY,
                        help="The token for the API (default: $DIFFUSION_API_KEY)")
    parser.add_argument("-p", "--prompt", required=True, help="The prompt for the image")
    parser.add_argument("-n", "--negative", help="The negative prompt for the image")
    parser.add_argument("-s", "--steps", type=int, default=ImageSteps.FIFTY.value,
                        choices=[s.value for s in ImageSteps],
                        help="The number of steps for the generation to use")
    parser.add_argument("-m", "--model", type=_choice, default=ImageModel.BEAUTY_REALISM.value,
                        choices=ImageModel.choices(), help="The image model to use")
    parser.add_argument("--size", type=_choice, default=ImageSize.SMALL.value,
                        choices=ImageSize.choices(), help="The size of the image")
    parser.add_argument("-o", "--orientation", type=_choice, default=ImageOrientation.SQUARE.value,
                        choices=ImageOrientation.choices(), help="The orientation of the image")
    parser.add_argument("--out", help="The file to write the decoded image to")
    parser.add_argument("--save", action="store_true",
                        help="Without --out, write the image to <sha256>.png instead of printing it")
    parser.add_argument("-t", "--timeout", type=float, default=DIFFUSION_MAX_WAIT,
                        help="Seconds to wait for the image before giving up (default: %(default)s)")
    parser.add_argument("--poll-interval", type=float, default=DIFFUSION_POLL_INTERVAL,
                        help="Seconds between status checks (default: %(default)s)")
    parser.add_argument("--log-level", default=LOG_LEVEL, type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Log verbosity on stderr (default: %(default)s)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_request(args: argparse.Namespace) -> ImageRequest:
    request = (
        ImageRequest(args.prompt)
        .update_steps(args.steps)
        .update_model(args.model)
        .update_size(args.size)
        .update_orientation(args.orientation)
    )
    if args.negative is not None:
        request = request.update_negative_prompt(args.negative)
    return request


async def generate(args: argparse.Namespace) -> None:
    # invalid prompts fail here, before any network call
    request = build_request(args)

    async with DiffusionClient(args.api_key, poll_interval=args.poll_interval) as client:
        token = await client.request_image(request)
        logger.info(f"Waiting up to {args.timeout}s for the image")
        image = await client.check_and_wait(token, timeout=args.timeout)

        if args.out is None and not args.save:
            print(image.raw)
            return

        # process and save image
        data = await client.fetch_image_bytes(image)

    # stdout stays empty; the writer logs the path
    write_image(data, args.out)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, log_to_file=LOG_TO_FILE, log_file_path=LOG_FILE_PATH)

    try:
        asyncio.run(generate(args))
    except (DiffusionError, OSError) as e:
        error = handle_error(e, secret=args.api_key)
        print(f"error: {error.user_message}", file=sys.stderr)
        return error.exit_code
    except KeyboardInterrupt:
        print("interrupted", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
