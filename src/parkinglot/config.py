# File: src/parkinglot/config.py
"""
Facility configuration

Values are read from the environment (prefix PARKING_) or a .env file.
Defaults describe three floors of 165 spots each.
"""

from decimal import Decimal
from typing import Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import Category


class FacilitySettings(BaseSettings):
    floors: int = Field(default=3, ge=1)

    # Spots per floor
    compact_spots_per_floor: int = Field(default=33, ge=0)
    regular_spots_per_floor: int = Field(default=116, ge=0)
    large_spots_per_floor: int = Field(default=10, ge=0)
    accessible_spots_per_floor: int = Field(default=6, ge=0)

    # Hourly rates by client category
    compact_hourly_rate: Decimal = Field(default=Decimal('2.00'), ge=0)
    regular_hourly_rate: Decimal = Field(default=Decimal('5.00'), ge=0)
    large_hourly_rate: Decimal = Field(default=Decimal('10.00'), ge=0)
    accessible_hourly_rate: Decimal = Field(default=Decimal('3.00'), ge=0)

    # 20% off stays of a day or more
    long_stay_hours: int = Field(default=24, ge=1)
    long_stay_factor: Decimal = Field(default=Decimal('0.8'), gt=0, le=1)

    currency: str = "USD"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PARKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3:
            raise ValueError(f"Currency must be 3-letter code: {v}")
        return v.upper()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    def spots_per_floor(self) -> Dict[Category, int]:
        return {
            Category.COMPACT: self.compact_spots_per_floor,
            Category.REGULAR: self.regular_spots_per_floor,
            Category.LARGE: self.large_spots_per_floor,
            Category.RESERVED_ACCESSIBLE: self.accessible_spots_per_floor,
        }

    def hourly_rates(self) -> Dict[Category, Decimal]:
        return {
            Category.COMPACT: self.compact_hourly_rate,
            Category.REGULAR: self.regular_hourly_rate,
            Category.LARGE: self.large_hourly_rate,
            Category.RESERVED_ACCESSIBLE: self.accessible_hourly_rate,
        }
