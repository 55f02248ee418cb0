"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(env_prefix="RESERVOIR_", env_file=".env", extra="ignore")

    # Simulation
    spring_x: int = Field(default=500, description="Column of the spring")

    # Output
    render: bool = Field(default=False, description="Print the settled grid before the counts")

    # Logging
    log_level: str = Field(default="WARNING", description="Log level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")


settings = Settings()
