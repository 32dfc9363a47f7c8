"""veritrace configuration settings using Pydantic.

Loads settings from:
1. Environment variables (VERITRACE_*, .env)
2. An optional YAML overlay
3. Default values
"""

from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables
load_dotenv()

# Reconstruction recurses once per explanation level; stay well inside the
# interpreter recursion limit so the depth bound always fires first.
MAX_EXPLANATION_DEPTH = 500


class VeritraceSettings(BaseSettings):
    """Central configuration for the verification query synthesizer."""

    model_config = SettingsConfigDict(
        env_prefix="VERITRACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Reconstruction ---
    fresh_var_prefix: str = Field(
        default="f",
        pattern=r"^[A-Za-z][A-Za-z0-9_-]*$",
        description="Name prefix for variables introduced by reification",
    )
    id_marker: str = Field(
        default=" id ",
        min_length=1,
        description="Substring marking a rendered statement as pinning an internal id",
    )
    max_explanation_depth: int = Field(
        default=200,
        ge=1,
        le=MAX_EXPLANATION_DEPTH,
        description="Deepest explanation tree reconstructed before failing",
    )

    # --- Batch ---
    max_workers: int = Field(
        default=1,
        ge=1,
        description="Answers reconstructed concurrently per batch",
    )

    # --- Logging ---
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = None

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "VeritraceSettings":
        """Load settings from a YAML file, falling back to defaults."""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            return cls()

        with open(yaml_path) as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)


# Global settings instance
_settings: Optional[VeritraceSettings] = None


def get_settings() -> VeritraceSettings:
    """Get or create the global settings instance"""
    global _settings
    if _settings is None:
        _settings = VeritraceSettings()
    return _settings


def reload_settings(yaml_path: Optional[str | Path] = None) -> VeritraceSettings:
    """Rebuild settings from the environment and an optional YAML file"""
    global _settings
    _settings = VeritraceSettings.from_yaml(yaml_path) if yaml_path else VeritraceSettings()
    return _settings
