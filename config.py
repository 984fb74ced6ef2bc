import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# diffusion.to credentials
DIFFUSION_API_KEY = os.getenv("DIFFUSION_API_KEY")

# API endpoints
DIFFUSION_API_URL = os.getenv("DIFFUSION_API_URL", "https://diffusion.to/api/image")
DIFFUSION_STATUS_URL = os.getenv(
    "DIFFUSION_STATUS_URL", "https://diffusion.to/api/image/status"
)

# Polling configuration
DIFFUSION_POLL_INTERVAL = float(
    os.getenv("DIFFUSION_POLL_INTERVAL", "5")
)  # seconds between status checks, as suggested by the API docs
DIFFUSION_MAX_WAIT = float(
    os.getenv("DIFFUSION_MAX_WAIT", "300")
)  # seconds the CLI waits for an image before giving up

# Per-request HTTP timeout
DIFFUSION_REQUEST_TIMEOUT = float(
    os.getenv("DIFFUSION_REQUEST_TIMEOUT", "30")
)  # seconds

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "logs/diffusion_to.log")
