# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Base configuration for config models.

This module provides the shared ConfigDict used across all configuration
model classes and the adapter that turns mappings into typed models.
"""

from typing import Any, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from soilprofiles.core.exceptions import ConfigValidationError

# Standard ConfigDict for all config models
FROZEN_CONFIG = ConfigDict(extra='forbid', populate_by_name=True, frozen=True)

M = TypeVar('M', bound=BaseModel)


def ensure_config(
    model: Type[M],
    value: Union[M, Mapping[str, Any]],
    error_type: type = ConfigValidationError,
) -> M:
    """
    Ensure a configuration value is an instance of ``model``.

    Mappings are validated into the model; pydantic validation failures are
    converted into ``error_type`` so callers only see soilprofiles errors.

    Args:
        model: Configuration model class
        value: Model instance or mapping of field names/aliases to values
        error_type: Exception type raised on validation failure

    Returns:
        Validated model instance

    Example:
        >>> cfg = ensure_config(SlabConfig, {'variables': ['clay'], 'slab': 10})
        >>> isinstance(cfg, SlabConfig)
        True
    """
    if isinstance(value, model):
        return value
    if not isinstance(value, Mapping):
        raise error_type(
            f"{model.__name__} expects a mapping or {model.__name__} instance, "
            f"got {type(value).__name__}"
        )
    try:
        return model(**value)
    except PydanticValidationError as e:
        raise error_type(f"Invalid {model.__name__}: {e}") from e
