"""
Camunda Connector — Application Configuration
===============================================

What:  Server settings loaded with Pydantic Settings.
How:   Values come from CONNECTOR_* environment variables (or a .env file),
       are type-coerced and validated, and are exposed through the `settings`
       singleton. create_app()/serve() accept an explicit Settings instance
       instead, which is how tests and embedding applications override them.

Recognized variables:
    CONNECTOR_PORT       Listen port (default 8080)
    CONNECTOR_HOST       Bind address (default 0.0.0.0)
    CONNECTOR_LOG_LEVEL  DEBUG | INFO | WARNING | ERROR | CRITICAL (default INFO)
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Connector server settings.

    The listen port is the only option the connector contract itself knows
    about; host and log level are operational knobs.
    """

    # ── Server ────────────────────────────────────────────────────────────
    port: int = Field(default=8080, ge=1, le=65535, description="HTTP listen port")
    host: str = Field(default="0.0.0.0", description="Bind address")

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_prefix": "CONNECTOR_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Singleton instance used when no explicit Settings is passed
settings = Settings()
