"""YAML loading for AnalysisConfig."""

import logging
from pathlib import Path
from typing import Union

import yaml

from soilprofiles.core.exceptions import ConfigurationError, soilprofiles_error_handler

from .base import ensure_config
from .models import AnalysisConfig

logger = logging.getLogger(__name__)


def load_config(path: Union[str, Path]) -> AnalysisConfig:
    """
    Load an AnalysisConfig from a YAML file.

    Top-level keys are the upper-case section aliases (``SCHEMA``, ``SLAB``,
    ``COMPARE`` ...); field names are accepted as well.

    Args:
        path: Path to the YAML file

    Returns:
        Validated AnalysisConfig

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
        ConfigValidationError: If the content fails model validation
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    with soilprofiles_error_handler(
        f"reading configuration {config_path}", logger, error_type=ConfigurationError
    ):
        with open(config_path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Configuration file {config_path} must contain a mapping, got {type(raw).__name__}"
        )

    config = ensure_config(AnalysisConfig, raw)
    logger.debug(f"Loaded configuration from {config_path}")
    return config
