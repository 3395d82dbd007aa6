# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Configuration models for collections and depth operations.

Contains the column schema of a collection plus one model per depth
operation (slicing, slab aggregation, profile comparison, overlap
resolution) and the umbrella AnalysisConfig.
"""

import math
from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from soilprofiles.core.constants import ColumnDefaults, OverlapDefaults, SlabDefaults

from .base import FROZEN_CONFIG


def _unique_names(names: List[str], field_name: str) -> List[str]:
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"{field_name} contains duplicated names: {duplicates}")
    return names


class ProfileSchema(BaseModel):
    """Column names of the site and horizon relations"""
    model_config = FROZEN_CONFIG

    id_column: str = Field(default=ColumnDefaults.PROFILE_ID, alias='PROFILE_ID_COLUMN')
    horizon_id_column: str = Field(default=ColumnDefaults.HORIZON_ID, alias='HORIZON_ID_COLUMN')
    top_column: str = Field(default=ColumnDefaults.TOP, alias='TOP_COLUMN')
    bottom_column: str = Field(default=ColumnDefaults.BOTTOM, alias='BOTTOM_COLUMN')

    @model_validator(mode='after')
    def check_distinct_columns(self):
        """Structural columns must not share a name."""
        names = [self.id_column, self.horizon_id_column, self.top_column, self.bottom_column]
        if len(set(names)) != len(names):
            raise ValueError(f"Structural column names must be distinct, got {names}")
        return self

    @property
    def structural_columns(self) -> Tuple[str, str, str, str]:
        return (self.id_column, self.horizon_id_column, self.top_column, self.bottom_column)


class DepthWindow(BaseModel):
    """A (top, bottom) depth interval"""
    model_config = FROZEN_CONFIG

    top: float = Field(alias='TOP')
    bottom: float = Field(alias='BOTTOM')

    @field_validator('top', 'bottom')
    @classmethod
    def validate_finite(cls, v, info):
        """Window limits must be finite numbers."""
        if not math.isfinite(v):
            raise ValueError(f"{info.field_name} must be finite, got {v}")
        return v

    @model_validator(mode='after')
    def check_order(self):
        if self.top > self.bottom:
            raise ValueError(f"Window top ({self.top}) must not exceed bottom ({self.bottom})")
        return self

    @property
    def thickness(self) -> float:
        return self.bottom - self.top


class ExecutionConfig(BaseModel):
    """Per-profile execution settings"""
    model_config = FROZEN_CONFIG

    max_workers: int = Field(default=1, ge=1, alias='MAX_WORKERS')


class SliceConfig(BaseModel):
    """Depth grid and variables for slicing"""
    model_config = FROZEN_CONFIG

    depths: List[int] = Field(alias='SLICE_DEPTHS', min_length=1)
    variables: Optional[List[str]] = Field(default=None, alias='SLICE_VARIABLES')

    @field_validator('depths')
    @classmethod
    def validate_ascending(cls, v):
        """Grid depths must be strictly increasing."""
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError(f"SLICE_DEPTHS must be strictly increasing, got {v}")
        return v

    @field_validator('variables')
    @classmethod
    def validate_variables(cls, v):
        if v is not None:
            _unique_names(v, 'SLICE_VARIABLES')
        return v


class SlabConfig(BaseModel):
    """Slab aggregation settings: variables, grouping, slab structure and estimator"""
    model_config = FROZEN_CONFIG

    variables: List[str] = Field(alias='SLAB_VARIABLES', min_length=1)
    group_by: Optional[str] = Field(default=None, alias='SLAB_GROUP_BY')
    slab: Union[float, List[float]] = Field(alias='SLAB_STRUCTURE')
    estimator: Literal['quantiles', 'weighted_mean'] = Field(default='quantiles', alias='SLAB_ESTIMATOR')
    probabilities: Tuple[float, ...] = Field(default=SlabDefaults.PROBABILITIES, alias='SLAB_PROBABILITIES')
    tie_break: Literal['shallower', 'deeper'] = Field(default='shallower', alias='SLAB_TIE_BREAK')
    weight_column: Optional[str] = Field(default=None, alias='SLAB_WEIGHT_COLUMN')
    min_hd_samples: int = Field(default=SlabDefaults.MIN_HD_SAMPLES, ge=1, alias='SLAB_MIN_HD_SAMPLES')

    @field_validator('variables')
    @classmethod
    def validate_variables(cls, v):
        return _unique_names(v, 'SLAB_VARIABLES')

    @field_validator('slab')
    @classmethod
    def validate_slab_structure(cls, v):
        """Accept a positive thickness, a (top, bottom) pair or >= 3 increasing boundaries."""
        if isinstance(v, list):
            if len(v) < 2:
                raise ValueError(
                    f"SLAB_STRUCTURE sequence needs a (top, bottom) pair or >= 3 boundaries, got {v}"
                )
            if not all(math.isfinite(b) for b in v):
                raise ValueError(f"SLAB_STRUCTURE boundaries must be finite, got {v}")
            if any(b <= a for a, b in zip(v, v[1:])):
                raise ValueError(f"SLAB_STRUCTURE boundaries must be strictly increasing, got {v}")
        elif not (math.isfinite(v) and v > 0):
            raise ValueError(f"SLAB_STRUCTURE thickness must be positive and finite, got {v}")
        return v

    @field_validator('probabilities')
    @classmethod
    def validate_probabilities(cls, v):
        if not v:
            raise ValueError("SLAB_PROBABILITIES must not be empty")
        for p in v:
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"SLAB_PROBABILITIES must lie in [0, 1], got {p}")
        return tuple(v)


class CompareConfig(BaseModel):
    """Profile dissimilarity settings"""
    model_config = FROZEN_CONFIG

    variables: List[str] = Field(alias='COMPARE_VARIABLES', min_length=1)
    max_depth: int = Field(alias='COMPARE_MAX_DEPTH', gt=0)
    k: float = Field(default=0.0, ge=0.0, alias='COMPARE_DEPTH_WEIGHT_EXPONENT')

    @field_validator('variables')
    @classmethod
    def validate_variables(cls, v):
        return _unique_names(v, 'COMPARE_VARIABLES')


class OverlapConfig(BaseModel):
    """Overlap resolver search settings"""
    model_config = FROZEN_CONFIG

    threshold: float = Field(alias='OVERLAP_THRESHOLD', gt=0)
    max_iterations: int = Field(default=OverlapDefaults.MAX_ITERATIONS, ge=1, alias='OVERLAP_MAX_ITERATIONS')
    adjustment: float = Field(default=OverlapDefaults.ADJUSTMENT, gt=0, alias='OVERLAP_ADJUSTMENT')
    overlap_weight: float = Field(default=OverlapDefaults.OVERLAP_WEIGHT, gt=1, alias='OVERLAP_WEIGHT')
    tolerance: float = Field(default=OverlapDefaults.TOLERANCE, ge=0, alias='OVERLAP_TOLERANCE')
    seed: Optional[int] = Field(default=None, alias='OVERLAP_SEED')


class AnalysisConfig(BaseModel):
    """Top-level configuration grouping the schema and per-operation settings"""
    model_config = FROZEN_CONFIG

    schema_: ProfileSchema = Field(default_factory=ProfileSchema, alias='SCHEMA')
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig, alias='EXECUTION')
    slice: Optional[SliceConfig] = Field(default=None, alias='SLICE')
    slab: Optional[SlabConfig] = Field(default=None, alias='SLAB')
    compare: Optional[CompareConfig] = Field(default=None, alias='COMPARE')
    overlap: Optional[OverlapConfig] = Field(default=None, alias='OVERLAP')
