# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Slab aggregation: summarize horizon attributes over depth intervals and profile groups.

Each profile is first reduced to one value per slab and variable, weighted by
how much of the slab each horizon covers:

- numeric variables: thickness-weighted mean of the non-missing horizon values
- categorical variables: the value of the horizon with the greatest overlap
  (ties resolved towards the shallower horizon unless configured otherwise)

The per-profile values of a group are then summarized with an estimator
(numeric) or as weighted class proportions (categorical), weighting each
profile by its covered depth times an optional site weight.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from soilprofiles.collection import AttributeKind, ProfileView, SoilProfileCollection, require_valid_depths
from soilprofiles.core.config import SlabConfig, ensure_config
from soilprofiles.core.constants import SlabDefaults
from soilprofiles.core.exceptions import InsufficientDataError, ValidationError

from .apply import map_profiles
from .estimators import Estimator, make_estimator

logger = logging.getLogger(__name__)

SlabValues = Dict[str, Tuple[np.ndarray, np.ndarray]]


@dataclass(frozen=True, eq=False)
class SlabStructure:
    """Ascending slab boundaries; slab ``i`` spans ``[boundaries[i], boundaries[i + 1])``."""

    boundaries: np.ndarray

    @classmethod
    def from_value(cls, slab: Union[float, List[float]], max_depth: float) -> 'SlabStructure':
        """
        Build the slab structure from a configured value.

        A thickness produces contiguous slabs from 0 down to the first multiple
        of the thickness at or above ``max_depth``; a (top, bottom) pair is a
        single slab; three or more values are the boundaries themselves.
        """
        if isinstance(slab, (list, tuple, np.ndarray)):
            return cls(np.asarray(slab, dtype=float))

        thickness = float(slab)
        if math.isfinite(max_depth) and max_depth > 0:
            n = max(1, math.ceil(max_depth / thickness))
        else:
            n = 1
        return cls(np.arange(n + 1, dtype=float) * thickness)

    @property
    def tops(self) -> np.ndarray:
        return self.boundaries[:-1]

    @property
    def bottoms(self) -> np.ndarray:
        return self.boundaries[1:]

    @property
    def thickness(self) -> np.ndarray:
        return np.diff(self.boundaries)

    def __len__(self) -> int:
        return len(self.boundaries) - 1


def overlap_matrix(tops: np.ndarray, bottoms: np.ndarray, boundaries: np.ndarray) -> np.ndarray:
    """
    Overlap length of every horizon with every slab.

    Returns:
        Array of shape (n_horizons, n_slabs); horizons without a bottom depth
        overlap nothing
    """
    upper = np.minimum(bottoms[:, None], boundaries[None, 1:])
    lower = np.maximum(tops[:, None], boundaries[None, :-1])
    return np.maximum(np.nan_to_num(upper - lower, nan=0.0), 0.0)


def profile_slab_values(
    profile: ProfileView,
    structure: SlabStructure,
    variables: List[str],
    kinds: Mapping[str, AttributeKind],
    tie_break: str = 'shallower',
) -> SlabValues:
    """
    Reduce one profile to a value and a covered depth per slab for each variable.

    Returns:
        Mapping variable -> (values, covered); ``values`` is float for numeric
        variables and object (None when uncovered) for categorical ones
    """
    overlap = overlap_matrix(profile.tops, profile.bottoms, structure.boundaries)
    n_slabs = len(structure)
    result: SlabValues = {}

    for var in variables:
        column = profile.horizons[var]
        valid = column.notna().to_numpy()
        weights = overlap * valid[:, None]
        covered = weights.sum(axis=0)

        if kinds[var] is AttributeKind.NUMERIC:
            x = np.where(valid, column.to_numpy(dtype=float, na_value=np.nan), 0.0)
            with np.errstate(invalid='ignore', divide='ignore'):
                values = (weights * x[:, None]).sum(axis=0) / covered
            values = np.where(covered > 0, values, np.nan)
        else:
            values = np.full(n_slabs, None, dtype=object)
            if len(column):
                if tie_break == 'deeper':
                    idx = len(weights) - 1 - np.argmax(weights[::-1], axis=0)
                else:
                    idx = np.argmax(weights, axis=0)
                picked = column.to_numpy(dtype=object)[idx]
                values[covered > 0] = picked[covered > 0]

        result[var] = (values, covered)
    return result


def _check_site_column(collection: SoilProfileCollection, column: Optional[str], role: str) -> None:
    if column is not None and column not in collection.site_attribute_names:
        raise ValidationError(
            f"{role} column {column!r} is not a site attribute; "
            f"available: {collection.site_attribute_names}"
        )


def _group_labels(collection: SoilProfileCollection, group_by: Optional[str]) -> np.ndarray:
    if group_by is None:
        return np.full(len(collection), SlabDefaults.ALL_PROFILES_GROUP, dtype=object)

    labels = collection.site[group_by]
    missing = labels.isna().to_numpy()
    if missing.any():
        dropped = [pid for pid, m in zip(collection.profile_ids, missing) if m]
        logger.warning(
            f"Dropping {len(dropped)} profiles with missing '{group_by}' from slab aggregation: "
            f"{dropped[:10]}{' ...' if len(dropped) > 10 else ''}"
        )
    labels = labels.to_numpy(dtype=object)
    labels[missing] = None
    return labels


def _site_weights(collection: SoilProfileCollection, weight_column: Optional[str]) -> np.ndarray:
    if weight_column is None:
        return np.ones(len(collection))

    column = collection.site[weight_column]
    if not pd.api.types.is_numeric_dtype(column.dtype) or pd.api.types.is_bool_dtype(column.dtype):
        raise ValidationError(f"Weight column {weight_column!r} must be numeric")
    weights = column.to_numpy(dtype=float, na_value=np.nan)
    if np.any(weights < 0):
        raise ValidationError(f"Weight column {weight_column!r} contains negative weights")
    n_missing = int(np.isnan(weights).sum())
    if n_missing:
        logger.warning(f"{n_missing} profiles have a missing '{weight_column}' weight and contribute no weight")
    return weights


def _summarize_numeric(estimator: Estimator, values: np.ndarray, weights: np.ndarray) -> Dict[str, float]:
    try:
        stats = estimator(values, weights)
    except InsufficientDataError:
        return {name: np.nan for name in estimator.statistic_names}
    return {name: float(stats.get(name, np.nan)) for name in estimator.statistic_names}


def _summarize_categorical(values: np.ndarray, weights: np.ndarray, levels: List[Any]) -> Dict[str, float]:
    present = pd.Series(values, dtype=object)
    w = np.where(np.isnan(weights), 0.0, weights) * present.notna().to_numpy()
    total = w.sum()
    stats = {}
    for level in levels:
        name = f"{SlabDefaults.PROPORTION_PREFIX}{level}"
        if total > 0:
            stats[name] = float(w[(present == level).to_numpy()].sum() / total)
        else:
            stats[name] = np.nan
    return stats


def _categorical_levels(collection: SoilProfileCollection, var: str) -> List[Any]:
    return sorted(pd.unique(collection.horizons[var].dropna()), key=str)


def slab(
    collection: SoilProfileCollection,
    config: Union[SlabConfig, Mapping[str, Any]],
    estimator: Optional[Estimator] = None,
    max_workers: Optional[int] = 1,
) -> pd.DataFrame:
    """
    Aggregate horizon attributes over depth slabs, per group of profiles.

    Args:
        collection: Source collection (validated and sorted)
        config: SlabConfig or mapping accepted by it
        estimator: Custom estimator for numeric variables; the built-in named
            by ``config.estimator`` when None
        max_workers: Thread pool size for the per-profile reduction

    Returns:
        Long-format DataFrame with columns ``group, variable, slab_top,
        slab_bottom, statistic, value, contributing_fraction``

    Raises:
        ConfigValidationError: Invalid configuration
        ValidationError: Unknown variables or site columns, invalid weights
        InvalidDepthLogicError: If any profile fails depth validation

    Example:
        >>> out = slab(spc, {'variables': ['clay'], 'slab': [0, 20], 'estimator': 'weighted_mean'})
        >>> out.loc[out['statistic'] == 'mean', 'value'].item()
        25.0
    """
    config = ensure_config(SlabConfig, config)
    kinds = collection.attribute_kinds()
    unknown = [v for v in config.variables if v not in kinds]
    if unknown:
        raise ValidationError(f"Unknown horizon attributes: {unknown}; available: {list(kinds)}")
    _check_site_column(collection, config.group_by, "Group")
    _check_site_column(collection, config.weight_column, "Weight")
    require_valid_depths(collection, "slab aggregation")

    estimator = make_estimator(config, estimator)
    structure = SlabStructure.from_value(config.slab, collection.max_depth())
    labels = _group_labels(collection, config.group_by)
    site_weights = _site_weights(collection, config.weight_column)
    levels = {
        var: _categorical_levels(collection, var)
        for var in config.variables
        if kinds[var] is not AttributeKind.NUMERIC
    }

    contributions = map_profiles(
        collection,
        lambda profile: profile_slab_values(profile, structure, config.variables, kinds, config.tie_break),
        max_workers=max_workers,
        desc="Slab aggregation",
    )

    groups = pd.unique(pd.Series([g for g in labels if g is not None], dtype=object))
    rows = []
    for group in groups:
        members = np.array([i for i, g in enumerate(labels) if g is not None and g == group])
        member_weights = site_weights[members]

        for var in config.variables:
            values = np.stack([contributions[i][var][0] for i in members])
            covered = np.stack([contributions[i][var][1] for i in members])

            for j, (top, bottom, thickness) in enumerate(zip(structure.tops, structure.bottoms, structure.thickness)):
                fraction = min(1.0, float(covered[:, j].sum() / (thickness * len(members))))
                weights = covered[:, j] * member_weights

                if var in levels:
                    stats = _summarize_categorical(values[:, j], weights, levels[var])
                else:
                    stats = _summarize_numeric(estimator, values[:, j].astype(float), weights)

                for name, value in stats.items():
                    rows.append((group, var, float(top), float(bottom), name, value, fraction))

    logger.info(
        f"Slab aggregation: {len(collection)} profiles, {len(groups)} groups, "
        f"{len(config.variables)} variables, {len(structure)} slabs"
    )
    return pd.DataFrame(rows, columns=list(SlabDefaults.OUTPUT_COLUMNS))


__all__ = ['SlabStructure', 'overlap_matrix', 'profile_slab_values', 'slab']
