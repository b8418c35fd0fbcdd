"""Configuration management."""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from ``WAN_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Network generation
    node_count: int = Field(default=40, ge=0, description="Number of nodes to place on the globe")
    earth_radius: float = Field(default=0.5, gt=0, description="Visible globe radius")
    radius_multiplier: float = Field(
        default=1.02, gt=0, description="Scale applied to the globe radius for node placement"
    )
    angle_threshold: float = Field(
        default=60.0, ge=0, description="Maximum great-circle angle (degrees) between linked nodes"
    )
    node_names: List[str] = Field(
        default_factory=list, description="Optional custom names for the first nodes"
    )

    @property
    def node_radius(self) -> float:
        """Radius nodes are placed at, just above the globe surface."""
        return self.earth_radius * self.radius_multiplier

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")


# Instantiate singleton settings object
settings = Settings()
