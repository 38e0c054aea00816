import logging
import os
from pathlib import Path
from typing import Dict

from dotenv import dotenv_values

logger = logging.getLogger(__name__)


def export_env_file(path: Path, override: bool = True) -> Dict[str, str]:
    """Export the ``KEY=VALUE`` entries of a ``.env`` file into ``os.environ``.

    Missing or unreadable files are ignored, as are keys without a value.

    Args:
        path: The ``.env`` file.
        override: Replace variables that are already set.

    Returns:
        The entries that were written to the environment.
    """
    path = Path(path)
    if not path.is_file() or not os.access(path, os.R_OK):
        return {}

    exported: Dict[str, str] = {}
    for key, value in dotenv_values(path).items():
        if value is None:
            continue
        if not override and key in os.environ:
            continue
        os.environ[key] = value
        exported[key] = value

    logger.debug("Exported %d variable(s) from %s", len(exported), path)
    return exported
