"""Common utilities: exceptions, constants, logging and configuration."""

from .constants import ColumnDefaults, OverlapDefaults, SlabDefaults
from .exceptions import (
    ConfigurationError,
    ConfigValidationError,
    EmptySelectionError,
    InsufficientDataError,
    InvalidDepthLogicError,
    MissingProfileLinkError,
    ProfileApplyError,
    ShapeMismatchError,
    SoilProfilesError,
    ValidationError,
    require,
    require_not_none,
    soilprofiles_error_handler,
)
from .logging_utils import setup_logging

__all__ = [
    'ColumnDefaults',
    'OverlapDefaults',
    'SlabDefaults',
    'ConfigurationError',
    'ConfigValidationError',
    'EmptySelectionError',
    'InsufficientDataError',
    'InvalidDepthLogicError',
    'MissingProfileLinkError',
    'ProfileApplyError',
    'ShapeMismatchError',
    'SoilProfilesError',
    'ValidationError',
    'require',
    'require_not_none',
    'soilprofiles_error_handler',
    'setup_logging',
]
