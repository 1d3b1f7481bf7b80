"""Configuration management."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field


# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class Settings(BaseModel):
    """Engine settings."""

    # Document defaults
    creator: str = Field(
        default_factory=lambda: os.getenv("CAMPER_EXPORT_CREATOR", "Camper Planner")
    )
    default_name: str = Field(
        default_factory=lambda: os.getenv("CAMPER_EXPORT_DEFAULT_NAME", "Camper Route")
    )

    # Device limits
    tomtom_max_file_size_kb: int = Field(
        default_factory=lambda: int(os.getenv("CAMPER_EXPORT_TOMTOM_MAX_KB", "1024"))
    )
    max_waypoints_warning: int = Field(
        default_factory=lambda: int(os.getenv("CAMPER_EXPORT_MAX_WAYPOINTS", "1000"))
    )

    # Output settings
    output_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("CAMPER_EXPORT_OUTPUT_DIR", "output"))
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO")
    )

    @property
    def tomtom_max_file_size(self) -> int:
        """TomTom size ceiling in bytes."""
        return self.tomtom_max_file_size_kb * 1024


# Global settings instance
settings = Settings()
