"""Configuration for AAMVA barcode processing."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import DigestAlgorithm, SubfileType


class AAMVASettings(BaseSettings):
    """Environment-driven settings, read from ``AAMVA_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="AAMVA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    service_name: str = Field(default="aamva-barcode")
    log_level: str = Field(default="INFO")
    log_format: Literal["text", "json"] = Field(default="text")
    identity_subfile_types: list[str] = Field(
        default_factory=lambda: [SubfileType.DRIVER_LICENSE.value, SubfileType.ID_CARD.value]
    )
    digest_algorithm: DigestAlgorithm = Field(default=DigestAlgorithm.SHA256)


@lru_cache
def get_settings() -> AAMVASettings:
    """Return a cached settings instance."""

    return AAMVASettings()
