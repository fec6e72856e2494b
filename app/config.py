"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.

Credentials are never configured here; they are resolved at runtime through
security.secret_source.SecretSource.
"""

from enum import Enum
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="MealPlanner", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # Database settings - local SQLite unless DATABASE_URL is supplied
    local_database_url: str = Field(
        default="sqlite:///./mealplanner.db",
        description="Fallback database URL (must not embed credentials)",
    )
    db_echo: bool = Field(default=False, description="SQLAlchemy echo SQL statements")
    db_init_attempts: int = Field(
        default=3, ge=1, description="Database initialization retry attempts"
    )
    db_init_delay_sec: float = Field(
        default=1.0, ge=0, description="Delay between DB init attempts"
    )

    # File serving
    recipe_files_dir: str = Field(
        default="./recipes", description="Root directory for recipe text files"
    )

    # Security
    bcrypt_rounds: int = Field(
        default=12, ge=4, le=31, description="bcrypt cost factor for password hashing"
    )
    max_import_bytes: int = Field(
        default=64 * 1024, ge=1, description="Maximum size of an imported recipe document"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=False, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="/api", description="API route prefix")
    api_title: str = Field(
        default="MealPlanner API", description="API documentation title"
    )
    api_description: str = Field(
        default="Recipe and meal planning service with a secure input-handling layer",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("local_database_url")
    @classmethod
    def reject_embedded_credentials(cls, v: str) -> str:
        """Connection strings with a password belong in DATABASE_URL, not settings"""
        netloc = v.split("://", 1)[-1].split("/", 1)[0]
        if "@" in netloc and ":" in netloc.split("@", 1)[0]:
            raise ValueError(
                "local_database_url must not embed credentials; supply DATABASE_URL instead"
            )
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


# Global settings instance
settings = Settings()
