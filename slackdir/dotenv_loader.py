# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Idempotent ``.env`` loading.

Reads environment variables from two locations (in order):

1. ``~/.config/slackdir/.env`` (XDG config directory)
2. ``.env`` in the current working directory

Variables already present in the environment, including those set by the
first file, are not overwritten by later files.
"""

import logging
from pathlib import Path

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

_dotenv_loaded = False


def load_dotenv_once() -> None:
    """Load ``.env`` files once, if not already loaded.

    Calling it again after the first load has no effect.
    """
    global _dotenv_loaded
    if _dotenv_loaded:
        return

    from slackdir.config import get_dotenv_path

    for env_file in (get_dotenv_path(), Path.cwd() / ".env"):
        if env_file.exists():
            load_dotenv(env_file)
            logger.debug("Loaded .env from %s", env_file)

    _dotenv_loaded = True


def reset_dotenv_state() -> None:
    """Reset the dotenv loaded state. For testing only."""
    global _dotenv_loaded
    _dotenv_loaded = False
