"""Typed configuration models for soilprofiles."""

from .base import FROZEN_CONFIG, ensure_config
from .loader import load_config
from .models import (
    AnalysisConfig,
    CompareConfig,
    DepthWindow,
    ExecutionConfig,
    OverlapConfig,
    ProfileSchema,
    SlabConfig,
    SliceConfig,
)

__all__ = [
    "FROZEN_CONFIG",
    "ensure_config",
    "load_config",
    "AnalysisConfig",
    "CompareConfig",
    "DepthWindow",
    "ExecutionConfig",
    "OverlapConfig",
    "ProfileSchema",
    "SlabConfig",
    "SliceConfig",
]
