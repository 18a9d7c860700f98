"""Configuration manager for gettext-extractor.

This module loads YAML configuration files and validates them with the
Pydantic schema in :mod:`gettext_extractor.config.schema`.
"""

import logging
from pathlib import Path

import yaml

from .schema import ExtractorConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads and merges extraction configuration."""

    @staticmethod
    def load_config(config_path: Path) -> ExtractorConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            ExtractorConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ValueError: If the file does not contain a mapping
            pydantic.ValidationError: If the configuration fails validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ValueError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        config = ExtractorConfig.model_validate(config_data)
        logger.debug(f"Loaded configuration from {config_path}")
        return config

    @staticmethod
    def apply_overrides(config: ExtractorConfig, **overrides: object) -> ExtractorConfig:
        """
        Return a copy of ``config`` with non-None overrides applied.

        Args:
            config: Base configuration
            **overrides: Field values keyed by Python field name

        Returns:
            ExtractorConfig: Re-validated configuration
        """
        data = config.model_dump()
        for key, value in overrides.items():
            match value:
                case None:
                    continue
                case list() if key == "exclude_dirs":
                    data[key] = [*config.exclude_dirs, *value]  # pyright: ignore[reportUnknownVariableType]
                case _:
                    data[key] = value

        return ExtractorConfig.model_validate(data)
