"""
Configuration Management for ergo-kb.

Provides centralized, type-safe configuration loading using Pydantic Settings.
Supports environment variables, .env files, and sensible defaults for zero-config operation.

License: MIT
"""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_FORMATS = ("json", "yaml", "toml", "sexp", "md", "rst", "txt")


class ErgoKBSettings(BaseSettings):
    """
    Centralized configuration for the knowledge-base loader.

    Configuration is loaded with the following priority (highest to lowest):
    1. System environment variables (prefixed ``ERGO_KB_``)
    2. .env file in the working directory
    3. Hardcoded default values

    Example:
        ```python
        from ergo_kb_core.config import settings

        print(settings.default_format)  # 'json'
        print(settings.markdown_section_level)  # 2
        ```
    """

    # ========================================
    # KNOWLEDGE BASE SOURCES
    # ========================================

    kb_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding knowledge-base files (None = bundled data)",
    )

    default_format: str = Field(
        default="json", description="Serialization used when no source is given"
    )

    max_file_size: int = Field(
        default=5_000_000,
        ge=1_000,
        le=100_000_000,
        description="Maximum size of a single source file in bytes",
    )

    # ========================================
    # FORMAT CONVENTIONS
    # ========================================

    markdown_section_level: int = Field(
        default=2, ge=1, le=6, description="Markdown heading level that starts a chunk"
    )

    rst_section_char: str = Field(
        default="-", description="reStructuredText adornment character that starts a chunk"
    )

    strict_parity: bool = Field(
        default=False, description="Also compare chunk text when checking cross-format parity"
    )

    # ========================================
    # LOGGING CONFIGURATION
    # ========================================

    log_level: str = Field(
        default="WARNING", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: str = Field(default="json", description="Log format (json, console)")

    # ========================================
    # VALIDATORS
    # ========================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate log level is one of allowed values.

        Raises:
            ValueError: If log level not in allowed values
        """
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got '{v}'")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = ["json", "console"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got '{v}'")
        return v_lower

    @field_validator("default_format")
    @classmethod
    def validate_default_format(cls, v: str) -> str:
        v_lower = v.lower().lstrip(".")
        if v_lower not in SUPPORTED_FORMATS:
            raise ValueError(f"default_format must be one of {list(SUPPORTED_FORMATS)}, got '{v}'")
        return v_lower

    @field_validator("rst_section_char")
    @classmethod
    def validate_rst_section_char(cls, v: str) -> str:
        """
        Validate the adornment is a single punctuation character.

        Raises:
            ValueError: If value is not exactly one non-alphanumeric character
        """
        if len(v) != 1 or v.isalnum() or v.isspace():
            raise ValueError(f"rst_section_char must be one punctuation character, got '{v}'")
        return v

    model_config = SettingsConfigDict(
        env_prefix="ERGO_KB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )


# ============================================================
# HELPER FUNCTIONS
# ============================================================


def get_config_summary(settings: ErgoKBSettings) -> Dict[str, Any]:
    """
    Get configuration summary for logging/debugging.

    Args:
        settings: ErgoKBSettings instance

    Returns:
        Configuration summary grouped by category
    """
    return {
        "sources": {
            "kb_dir": str(settings.kb_dir) if settings.kb_dir else None,
            "default_format": settings.default_format,
            "max_file_size": settings.max_file_size,
        },
        "conventions": {
            "markdown_section_level": settings.markdown_section_level,
            "rst_section_char": settings.rst_section_char,
            "strict_parity": settings.strict_parity,
        },
        "logging": {
            "level": settings.log_level,
            "format": settings.log_format,
        },
    }


# Singleton instance - instantiated once at module import
settings = ErgoKBSettings()
