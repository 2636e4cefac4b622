"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "CMSPUB_"


class Settings(BaseModel):
    app_name:         str = "cmspub"
    base_url:         Optional[str] = Field(default=None, description="Fallback API base URL for health checks")
    timeout:          float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    primary_locale:   str = Field(default="vi", min_length=1, description="Locale key of the primary Markdown file")
    secondary_locale: str = Field(default="en", min_length=1, description="Locale key of the secondary Markdown file")
    markdown_preset:  str = Field(default="commonmark", description="MarkdownIt parser preset name")
    per_page:         int = Field(default=15, ge=1, description="Default page size for list commands")
    human:            bool = Field(default=False, description="Pretty-print results and plain-text errors")
    log_level:        str = Field(default="WARNING", pattern="(?i)^(debug|info|warning|error|critical)$")

    @property
    def locales(self) -> tuple[str, str]:
        return self.primary_locale, self.secondary_locale


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then CMSPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
