from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ContainerSettings(BaseSettings):
    """Container configuration loaded from ``WIREBOX_*`` environment variables.

    Attributes:
        env_file: Optional ``.env`` file exported into ``os.environ`` on container creation.
        env_override: Whether exported entries replace existing variables.
    """

    model_config = SettingsConfigDict(env_prefix="WIREBOX_", case_sensitive=False)

    env_file: Optional[Path] = Field(default=None, description="Path of a .env file to export.")
    env_override: bool = Field(default=True, description="Replace existing environment variables.")
