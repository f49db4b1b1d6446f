from __future__ import annotations

import logging
from pathlib import Path

LOGGER = logging.getLogger("attachdl")
APP_VERSION = "0.1.0"

ATTACHMENT_PATH = "/download/attachment"
EMAIL_QUERY_PARAM = "emailThatSentAttach"

INVALID_EMAIL_MESSAGE = "Invalid email address"
REQUEST_FAILED_MESSAGE = "Something went wrong, please try again"
SUCCESS_MESSAGE = "Download completed!"
LOADING_MESSAGE = "Downloading..."

ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
