"""Configuration manager backed by a YAML file and environment overrides."""
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

import yaml

from statementsense.utils.exceptions import ConfigError


@dataclass
class Config:
    """System configuration."""
    gemini_api_key: str = ""
    model_name: str = "gemini-3-flash-preview"
    pdf_resolution: int = 144
    jpeg_quality: int = 85
    log_level: str = "INFO"
    export_dir: str = "."


class ConfigManager:
    """Loads, saves and validates configuration."""

    API_KEY_VARS = ("GEMINI_API_KEY", "API_KEY")

    def __init__(self, config_file: Optional[Path] = None):
        if config_file is None:
            config_file = Path(os.getenv("STATEMENTSENSE_CONFIG", "config.yaml"))
        self.config_file = Path(config_file)

    def load_config(self) -> Config:
        """
        Load configuration from the YAML file, then apply environment overrides.

        A missing file yields the defaults.

        Raises:
            ConfigError: If the file cannot be parsed
        """
        data = {}
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Failed to load configuration: {e}")

            if not isinstance(data, dict):
                raise ConfigError(f"Configuration must be a mapping: {self.config_file}")

        known = {f.name for f in fields(Config)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        config = Config(**data)

        for var in self.API_KEY_VARS:
            if os.getenv(var):
                config.gemini_api_key = os.environ[var]
                break

        if os.getenv("STATEMENTSENSE_LOG_LEVEL"):
            config.log_level = os.environ["STATEMENTSENSE_LOG_LEVEL"]

        return config

    def save_config(self, config: Config) -> None:
        """Save configuration as YAML."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                yaml.safe_dump(asdict(config), f, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def validate_config(self, config: Config) -> tuple[bool, str]:
        """Validate configuration values."""
        if not config.gemini_api_key:
            return False, "Gemini API key is required"

        if not config.model_name:
            return False, "Model name is required"

        if config.pdf_resolution < 1:
            return False, "PDF resolution must be a positive number of dpi"

        if not 1 <= config.jpeg_quality <= 95:
            return False, "JPEG quality must be between 1 and 95"

        return True, "Configuration is valid"
