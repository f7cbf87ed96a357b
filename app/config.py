"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings

from app.calculations.defaults import MarketDefaults


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "Mortgage Calculator"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Escrow defaults (annual rates as decimals)
    property_tax_rate: float = 0.0121
    home_insurance_rate: float = 0.0045
    pmi_rate: float = 0.005
    high_risk_insurance_multiplier: float = 1.5

    # Underwriting ratios
    front_end_ratio: float = 0.28
    back_end_ratio: float = 0.36

    # Rate quotes (percent)
    base_rate: float = 7.25
    fixed_rate_spread: float = 0.75

    # Property tax fallback jurisdiction
    default_county: str = "riverside"

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"

    def market_defaults(self) -> MarketDefaults:
        """Build the defaults record handed to the calculators."""
        return MarketDefaults(
            property_tax_rate=self.property_tax_rate,
            home_insurance_rate=self.home_insurance_rate,
            pmi_rate=self.pmi_rate,
            front_end_ratio=self.front_end_ratio,
            back_end_ratio=self.back_end_ratio,
            high_risk_insurance_multiplier=self.high_risk_insurance_multiplier,
            base_rate=self.base_rate,
            fixed_rate_spread=self.fixed_rate_spread,
            default_county=self.default_county,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
