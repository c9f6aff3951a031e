# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: OCR provider
coordinates, batch concurrency, AI enhancement, export defaults, the web
session boundary and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === OCR provider (Document AI) ===
    ocr_project_id: str = ""
    ocr_location: str = "us"
    ocr_processor_id: str = ""
    ocr_credentials_json: str = ""
    ocr_endpoint_template: str = (
        "https://{location}-documentai.googleapis.com/v1/projects/{project_id}"
        "/locations/{location}/processors/{processor_id}:process"
    )
    ocr_scopes: str = "https://www.googleapis.com/auth/cloud-platform"

    # === Token cache ===
    token_ttl_seconds: int = 3600
    token_refresh_margin_seconds: int = 300

    # === Requests ===
    request_timeout_seconds: float = 60.0
    scan_max_retries: int = 2
    scan_retry_base_delay_seconds: float = 1.0

    # === Batch ===
    batch_concurrency: int = 5
    duplicate_detection_enabled: bool = True
    max_file_size_mb: int = 10
    allowed_mime_types: str = "image/jpeg,image/png,application/pdf"

    # === Image compression ===
    image_compression_enabled: bool = True
    image_max_dimension: int = 1000
    image_jpeg_quality: int = 80
    image_target_size_kb: int = 500

    # === AI enhancement ===
    enhancement_mode: Literal["none", "per_record", "bulk"] = "none"
    llm_provider: str = "openai"
    llm_model: str = "gpt-4o"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 4096
    openai_api_key: str = ""

    # === Normalization ===
    address_strategy: Literal["static_sample", "ai_generated", "fail_sentinel"] = (
        "fail_sentinel"
    )
    default_marital_status: str = "SOLTERO"
    default_profession: str = "NO INFORMA"

    # === Web / session ===
    session_cookie_name: str = "session"
    session_max_age_days: int = 5
    session_cookie_secure: bool = False
    firebase_credentials_json: str = ""
    web_secret_key: str = "change-me"

    # === Output ===
    output_dir: Path = Path("./output")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("batch_concurrency")
    @classmethod
    def validate_batch_concurrency(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("batch_concurrency must be >= 1")
        return v

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_request_timeout(cls, v: float) -> float:  # noqa: N805
        """A hung provider call must never hold a concurrency slot forever."""
        if v <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.address_strategy == "ai_generated" and self.enhancement_mode == "none":
            errors.append(
                "ADDRESS_STRATEGY=ai_generated requires ENHANCEMENT_MODE other than none"
            )

        if self.token_refresh_margin_seconds >= self.token_ttl_seconds:
            errors.append(
                "TOKEN_REFRESH_MARGIN_SECONDS must be < TOKEN_TTL_SECONDS"
            )

        if self.scan_max_retries < 0:
            errors.append("SCAN_MAX_RETRIES must be >= 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def allowed_mime_types_list(self) -> list[str]:
        """Parse comma-separated MIME types."""
        return [m.strip() for m in self.allowed_mime_types.split(",") if m.strip()]

    @property
    def ocr_scopes_list(self) -> list[str]:
        """Parse comma-separated OAuth scopes."""
        return [s.strip() for s in self.ocr_scopes.split(",") if s.strip()]

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def ocr_endpoint(self) -> str:
        """Fully resolved processor endpoint URL."""
        return self.ocr_endpoint_template.format(
            location=self.ocr_location,
            project_id=self.ocr_project_id,
            processor_id=self.ocr_processor_id,
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-batch config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
