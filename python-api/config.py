"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation
and type checking.
"""


from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type coercion.
    Reads from .env file if present.
    """

    # Application settings
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    API_VERSION: str = Field(default="v1", description="API version prefix")

    # CORS settings
    ALLOWED_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://localhost:8080",
        description="Comma-separated list of allowed CORS origins",
    )

    # Server settings
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")

    # ZeroDB Settings
    ZERODB_API_KEY: str = Field(default="", description="ZeroDB API key")
    ZERODB_PROJECT_ID: str = Field(default="", description="ZeroDB project ID")
    ZERODB_BASE_URL: str = Field(
        default="https://api.ainative.studio", description="ZeroDB API base URL"
    )
    ZERODB_TIMEOUT: float = Field(default=30.0, description="ZeroDB request timeout")

    # Credentials
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31, description="bcrypt cost factor")
    LOGIN_RATE_LIMIT: int = Field(
        default=20, ge=1, description="Login attempts allowed per client IP per window"
    )
    LOGIN_RATE_WINDOW: int = Field(
        default=60, ge=1, description="Login rate limit window in seconds"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
    )

    @property
    def cors_origins(self) -> list[str]:
        """
        Parse comma-separated CORS origins into a list.

        Returns:
            List of origin strings
        """
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate log level is one of the standard Python logging levels.

        Raises:
            ValueError: If log level is invalid
        """
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper


# Singleton instance
settings = Settings()
