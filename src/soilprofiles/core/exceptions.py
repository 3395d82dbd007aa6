# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Custom exception hierarchy for soilprofiles.

This module defines a hierarchy of exceptions that provide clear, specific
error types for the failure modes of profile collections and the depth
algorithms that operate on them.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, TypeVar


class SoilProfilesError(Exception):
    """
    Base exception for all soilprofiles-specific errors.

    All custom exceptions in soilprofiles inherit from this class.
    This allows catching all soilprofiles errors with a single except clause.
    """
    pass


class ConfigurationError(SoilProfilesError):
    """
    Configuration-related errors.

    Raised when:
    - Configuration values are invalid
    - Configuration file cannot be loaded or parsed
    """
    pass


class ConfigValidationError(ConfigurationError):
    """
    Configuration validation failures.

    Raised when:
    - A configuration model fails schema validation
    - Cross-field validation constraints are violated
    """
    pass


class ValidationError(SoilProfilesError):
    """
    Data or parameter validation failures.

    Raised when:
    - Required horizon or site columns are missing
    - Horizon identifiers are duplicated
    - Depth grids, windows or positions are malformed
    """
    pass


class InvalidDepthLogicError(ValidationError):
    """
    Horizon depth logic failures.

    Raised when:
    - A horizon has top >= bottom, or a missing top depth
    - Consecutive horizons of a profile overlap
    - A depth operation receives a profile whose horizons are not sorted

    Attributes:
        profile_ids: Keys of the offending profiles
        horizon_indices: Offending horizon positions (within profile) per key
    """

    def __init__(
        self,
        message: str,
        profile_ids: Optional[Iterable[Any]] = None,
        horizon_indices: Optional[Dict[Any, List[int]]] = None,
    ):
        super().__init__(message)
        self.profile_ids = list(profile_ids or [])
        self.horizon_indices = dict(horizon_indices or {})


class MissingProfileLinkError(ValidationError):
    """
    Broken links between the site and horizon relations.

    Raised when:
    - A horizon row references a profile key absent from the site table
    - A site row has no horizons
    - A diagnostic or restriction row references an unknown profile key
    """

    def __init__(self, message: str, profile_ids: Optional[Iterable[Any]] = None):
        super().__init__(message)
        self.profile_ids = list(profile_ids or [])


class ShapeMismatchError(SoilProfilesError):
    """
    Per-profile apply results with an unexpected shape.

    Raised when:
    - A per-horizon result length differs from the profile's horizon count
    - Results mix scalars, records and sequences across profiles
    """

    def __init__(
        self,
        message: str,
        profile_id: Any = None,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ):
        super().__init__(message)
        self.profile_id = profile_id
        self.expected = expected
        self.actual = actual


class EmptySelectionError(SoilProfilesError):
    """
    A selection produced no usable data.

    Raised when:
    - A strict ragged selection yields zero horizons
    - Fewer than two profiles have data for a dissimilarity calculation
    """
    pass


class InsufficientDataError(SoilProfilesError):
    """
    An estimator received no contributing data.

    The slab aggregator converts this into missing statistics with a
    contributing fraction of zero.
    """
    pass


class ProfileApplyError(SoilProfilesError):
    """
    A user function failed while being applied to a single profile.

    Attributes:
        profile_id: Key of the profile being processed
    """

    def __init__(self, message: str, profile_id: Any = None):
        super().__init__(message)
        self.profile_id = profile_id


# =============================================================================
# Validation Helpers
# =============================================================================

T = TypeVar('T')


def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    This replaces assert statements with proper validation that cannot be
    disabled with python -O.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: ValidationError)

    Raises:
        ValidationError (or specified error_type) if condition is False

    Example:
        >>> require(threshold > 0, "threshold must be positive")
    """
    if error_type is None:
        error_type = ValidationError
    if not condition:
        raise error_type(message)


def require_not_none(value: Optional[T], name: str, error_type: type = None) -> T:
    """
    Validate that a value is not None, returning it if valid.

    Args:
        value: The value to check
        name: Name of the value (for error message)
        error_type: Exception type to raise (default: ValidationError)

    Returns:
        The value if it is not None
    """
    if error_type is None:
        error_type = ValidationError
    if value is None:
        raise error_type(f"{name} must not be None")
    return value


@contextmanager
def soilprofiles_error_handler(
    operation: str,
    logger: Optional[logging.Logger] = None,
    reraise: bool = True,
    error_type: type = SoilProfilesError
):
    """
    Context manager for standardized error handling.

    soilprofiles errors pass through unchanged; any other exception is
    converted to ``error_type`` with the operation named in the message.

    Args:
        operation: Description of the operation being performed (for logging)
        logger: Logger instance for error messages. If None, errors are not logged.
        reraise: Whether to re-raise the exception after handling (default: True)
        error_type: soilprofiles exception type to convert generic exceptions to

    Example:
        >>> with soilprofiles_error_handler("slab aggregation", logger):
        ...     result = slab(spc, config)
    """
    try:
        yield
    except SoilProfilesError:
        if logger:
            logger.error(f"Error during {operation}", exc_info=True)
        if reraise:
            raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)
        if reraise:
            raise error_type(f"Failed during {operation}: {e}") from e


# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Base
    'SoilProfilesError',
    # Domain exceptions
    'ConfigurationError',
    'ConfigValidationError',
    'ValidationError',
    'InvalidDepthLogicError',
    'MissingProfileLinkError',
    'ShapeMismatchError',
    'EmptySelectionError',
    'InsufficientDataError',
    'ProfileApplyError',
    # Helpers
    'require',
    'require_not_none',
    'soilprofiles_error_handler',
]
