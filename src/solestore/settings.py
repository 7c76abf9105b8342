"""Runtime settings for the SoleStore service.

Settings are read from the environment (prefix ``SOLESTORE_``) and an optional
``.env`` file. A `ShopSettings` instance is built once at startup and handed to
`create_app`, which passes the relevant pieces to the token service and the
order workflow.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PASSWORD_HASH_ITERATIONS = 390_000


class ShopSettings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="SOLESTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "SoleStore API"

    # Authentication
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = Field(default=24, ge=1)
    cookie_name: str = "jwt"
    cookie_secure: bool = False
    password_hash_iterations: int = Field(default=DEFAULT_PASSWORD_HASH_ITERATIONS, ge=1)

    # Pricing
    shipping_fee: float = Field(default=10.0, ge=0)
    free_shipping_threshold: float = Field(default=100.0, ge=0)

    # Listings
    default_page_size: int = Field(default=20, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    review_page_size: int = Field(default=10, ge=1)

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> ShopSettings:
    """Settings built from the process environment, cached."""
    return ShopSettings()
