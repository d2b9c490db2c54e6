"""
Configuration management for the storefront application
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    secret_key: str = Field(
        default="dev-secret-key-change-in-production",
        description="Flask session signing key"
    )

    database_url: str = Field(
        default="sqlite:///storefront.db",
        description="SQLAlchemy database URI"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    order_placement_atomic: bool = Field(
        default=True,
        description="Commit an order and all of its items in a single transaction"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STOREFRONT_",
        extra="ignore"
    )

    def to_flask_config(self):
        return {
            'SECRET_KEY': self.secret_key,
            'SQLALCHEMY_DATABASE_URI': self.database_url,
            'SQLALCHEMY_TRACK_MODIFICATIONS': False,
            'LOG_LEVEL': self.log_level.upper(),
            'ORDER_PLACEMENT_ATOMIC': self.order_placement_atomic,
        }
