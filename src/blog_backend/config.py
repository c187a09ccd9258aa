"""
# Configuration Management Module

This module provides the configuration system for the Blog Backend. It is built on
**Pydantic Settings**, so every value is type-checked when the `Settings` object is
constructed and can be supplied through environment variables or a dotenv file.

## Configuration Loading Hierarchy

```
┌─────────────────────────────────────────────────────────────┐
│  1. Environment Variables (HIGHEST PRIORITY)                │
├─────────────────────────────────────────────────────────────┤
│  2. BLOG_BACKEND_CONFIG_PATH                                │
│     - Custom dotenv file path from env var                  │
├─────────────────────────────────────────────────────────────┤
│  3. .env File (Project Root)                                │
├─────────────────────────────────────────────────────────────┤
│  4. Default Values (LOWEST PRIORITY)                        │
└─────────────────────────────────────────────────────────────┘
```

If no configuration file is found the application runs in environment-only mode.

## Explicit Construction

There is no module-level settings singleton. The application factory
(`blog_backend.main.create_app`) builds one `Settings` instance and hands it to every
component it constructs (database manager, token service, stores). Tests construct
their own instance:

```python
from blog_backend.config import Settings

settings = Settings(SECRET_KEY="a-real-signing-key", MONGODB_URL="mongodb://localhost:27017")
```

`get_settings()` returns a cached instance built from the environment for the
process entry point.

## Secret Management

`SECRET_KEY` is a `SecretStr` so it never shows up in logs or reprs. A validator
rejects empty values and obvious placeholders (`"change"`, `"0000"`,
`"your_jwt_secret"`), forcing the key to be configured explicitly.
"""

from functools import lru_cache
import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "BLOG_BACKEND_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parents[2]

PLACEHOLDER_SECRETS = ("change", "0000", "your_jwt_secret")


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determine the configuration file path.

    Checks, in order, the `BLOG_BACKEND_CONFIG_PATH` environment variable and the
    `.env` file in the project root. Returns `None` when neither exists, which
    leaves the settings in environment-only mode.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    # Real environment variables keep precedence over the file.
    load_dotenv(dotenv_path=CONFIG_PATH, override=False)


class Settings(BaseSettings):
    """
    Application configuration settings model.

    **Configuration Groups:**
    *   **Server**: Host, port, debug mode, log level, CORS origins.
    *   **Security**: JWT signing key, algorithm, token lifetime, bcrypt cost.
    *   **Database**: MongoDB connection details and collection names.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        validate_default=True,  # Empty SECRET_KEY / MONGODB_URL defaults must fail
    )

    # Server configuration
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"
    CORS_ALLOW_CREDENTIALS: bool = False  # Only meaningful with explicit origins

    # JWT configuration
    SECRET_KEY: SecretStr = SecretStr("")  # Must be set in .env or environment
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120  # Tokens are valid for 2 hours

    # Password hashing
    BCRYPT_ROUNDS: int = 10

    # MongoDB configuration
    MONGODB_URL: str = ""  # Must be set in .env or environment
    MONGODB_DATABASE: str = "blog"
    MONGODB_CONNECTION_TIMEOUT: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT: int = 5000
    MONGODB_MAX_POOL_SIZE: int = 50
    MONGODB_MIN_POOL_SIZE: int = 5

    # Collection names
    USERS_COLLECTION: str = "blog_users"
    POSTS_COLLECTION: str = "blog_posts"
    REVIEWS_COLLECTION: str = "blog_reviews"
    FAVORITES_COLLECTION: str = "blog_favorites"

    @field_validator("SECRET_KEY", mode="before")
    @classmethod
    def no_hardcoded_secrets(cls, v: Any, info: Any) -> Any:
        """
        Validates that the signing key is neither empty nor a known placeholder.

        Raises:
            ValueError: If the value is empty, whitespace or a placeholder.
        """
        raw = v.get_secret_value() if isinstance(v, SecretStr) else v
        if not raw or not str(raw).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .env and not empty!")
        lowered = str(raw).lower()
        if any(marker in lowered for marker in PLACEHOLDER_SECRETS):
            raise ValueError(f"{info.field_name} must be set via environment or .env and not hardcoded!")
        return v

    @field_validator("MONGODB_URL", mode="before")
    @classmethod
    def no_empty_urls(cls, v: Any, info: Any) -> Any:
        """Validates that the MongoDB URL is not empty."""
        if not v or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .env and not empty!")
        return v

    @field_validator("ACCESS_TOKEN_EXPIRE_MINUTES", "PORT", "MONGODB_CONNECTION_TIMEOUT",
                     "MONGODB_SERVER_SELECTION_TIMEOUT", mode="after")
    @classmethod
    def validate_positive_integers(cls, v: int, info: Any) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return v

    @field_validator("BCRYPT_ROUNDS", mode="after")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        # bcrypt only accepts cost factors in [4, 31]
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS origins parsed from the comma-separated `CORS_ORIGINS` value."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return not self.DEBUG


@lru_cache
def get_settings() -> Settings:
    """Build (once) the settings for the running process from the environment."""
    return Settings()
