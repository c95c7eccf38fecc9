from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_DATA_DIR = Path.home() / ".sweat_pets"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_data_dir(override: str | Path | None = None) -> Path:
    """Directory holding the pet store; ``override`` beats ``SWEAT_PETS_DATA_DIR``."""
    if override:
        return Path(override).expanduser()
    return Path(os.getenv("SWEAT_PETS_DATA_DIR", str(_DEFAULT_DATA_DIR))).expanduser()


def get_log_level() -> int:
    name = os.getenv("SWEAT_PETS_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        logger.warning("Unknown SWEAT_PETS_LOG_LEVEL %r, falling back to WARNING", name)
        return logging.WARNING
    return level


def get_log_file(data_dir: Path) -> Path:
    return Path(os.getenv("SWEAT_PETS_LOG_FILE", str(data_dir / "sweat_pets.log"))).expanduser()


def configure_logging(data_dir: Path) -> Path:
    """Send log records to a file so they never draw over the terminal UI."""
    log_file = get_log_file(data_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_file),
        level=get_log_level(),
        format=_LOG_FORMAT,
    )
    return log_file
