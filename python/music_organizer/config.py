"""Configuration management for Music Organizer."""

import os
import sys
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

DEFAULT_MUSIC_DIR = "~/Music"
DEFAULT_VERBOSITY = 1
VERBOSITY_LEVELS = (0, 1, 2)


def eprint(*args, **kwargs):
    """Print to stderr."""
    print(*args, file=sys.stderr, **kwargs)


def load_config(env_file: Optional[str] = None) -> dict:
    """
    Load configuration from .env file.

    Args:
        env_file: Path to .env file. Defaults to .env in current directory.

    Returns:
        Dictionary of configuration values.
    """
    if env_file is None:
        env_file = ".env"

    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
        eprint(f"Loaded environment from {env_path.resolve()}")

    return {
        "music_dir": os.getenv("MUSIC_ORGANIZER_MUSIC_DIR") or DEFAULT_MUSIC_DIR,
        "output_dir": os.getenv("MUSIC_ORGANIZER_OUTPUT_DIR") or None,
        "verbosity": os.getenv("MUSIC_ORGANIZER_VERBOSITY", str(DEFAULT_VERBOSITY)),
    }


def validate_config(config: dict) -> List[str]:
    """
    Validate configuration and return list of problems.

    Args:
        config: Configuration dictionary from load_config()

    Returns:
        List of human readable problems (empty if valid).
    """
    problems = []

    if not config.get("music_dir"):
        problems.append("MUSIC_ORGANIZER_MUSIC_DIR is empty")

    verbosity = config.get("verbosity")
    try:
        if int(verbosity) not in VERBOSITY_LEVELS:
            problems.append(
                f"MUSIC_ORGANIZER_VERBOSITY must be one of {VERBOSITY_LEVELS}, got {verbosity}"
            )
    except (TypeError, ValueError):
        problems.append(f"MUSIC_ORGANIZER_VERBOSITY is not a number: {verbosity!r}")

    return problems


def expand_dir(path: str) -> Path:
    """Expand ``~`` and environment variables in a directory argument."""
    return Path(os.path.expandvars(os.path.expanduser(path)))
