# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Depth-weighted pairwise dissimilarity between profiles.

Profiles are sliced at 1-unit depths on ``[0, max_depth)``. At each depth a
Gower distance compares every pair of profiles over the requested variables:
numeric differences are scaled by the range observed across profiles at that
depth, categorical variables contribute a 0/1 mismatch, and variables missing
in either profile are left out of that pair. Depth-level distances are then
combined with weights ``1 / (d + 1) ** k`` normalized by the weights of the
depths the pair actually shares.
"""

import logging
from typing import Any, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd
from scipy.cluster import hierarchy
from scipy.spatial.distance import squareform

from soilprofiles.collection import AttributeKind, SoilProfileCollection, require_valid_depths
from soilprofiles.core.config import CompareConfig, ensure_config
from soilprofiles.core.exceptions import EmptySelectionError, ValidationError

from .slicing import slice_collection

logger = logging.getLogger(__name__)


def depth_weights(n_depths: int, k: float) -> np.ndarray:
    """Weights ``1 / (d + 1) ** k`` for depths ``0 .. n_depths - 1``."""
    return 1.0 / np.power(np.arange(n_depths, dtype=float) + 1.0, k)


def _numeric_pairwise(x: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    valid = ~np.isnan(x)
    pair_valid = valid[:, None] & valid[None, :]
    if valid.sum() < 2:
        return np.zeros(pair_valid.shape), pair_valid
    spread = np.nanmax(x) - np.nanmin(x)
    if spread == 0:
        return np.zeros(pair_valid.shape), pair_valid
    filled = np.where(valid, x, 0.0)
    diff = np.abs(filled[:, None] - filled[None, :]) / spread
    return np.where(pair_valid, diff, 0.0), pair_valid


def _categorical_pairwise(x: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    valid = pd.notna(x)
    pair_valid = valid[:, None] & valid[None, :]
    codes, _ = pd.factorize(pd.Series(x, dtype=object))
    diff = (codes[:, None] != codes[None, :]).astype(float)
    return np.where(pair_valid, diff, 0.0), pair_valid


def gower_at_depth(columns: List[Tuple[np.ndarray, AttributeKind]]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Gower distance between all profiles at a single depth.

    Args:
        columns: One (values, kind) pair per variable, values ordered by profile

    Returns:
        (distance, usable) square arrays; ``usable`` marks pairs sharing at
        least one non-missing variable
    """
    total = None
    count = None
    for values, kind in columns:
        if kind is AttributeKind.NUMERIC:
            diff, pair_valid = _numeric_pairwise(np.asarray(values, dtype=float))
        else:
            diff, pair_valid = _categorical_pairwise(values)
        total = diff if total is None else total + diff
        count = pair_valid.astype(float) if count is None else count + pair_valid

    usable = count > 0
    with np.errstate(invalid='ignore', divide='ignore'):
        distance = np.where(usable, total / count, 0.0)
    return distance, usable


def profile_compare(
    collection: SoilProfileCollection,
    config: Union[CompareConfig, Mapping[str, Any]],
    max_workers: Optional[int] = 1,
) -> pd.DataFrame:
    """
    Pairwise dissimilarity between all profiles of a collection.

    Args:
        collection: Source collection (validated and sorted)
        config: CompareConfig or mapping accepted by it
        max_workers: Thread pool size for the slicing step

    Returns:
        Symmetric DataFrame with a zero diagonal, indexed by profile key in
        collection order on both axes. Pairs without any shared usable depth
        are missing.

    Raises:
        ValidationError: Unknown variables
        EmptySelectionError: Fewer than two profiles have data in ``[0, max_depth)``
        InvalidDepthLogicError: If any profile fails depth validation

    Example:
        >>> d = profile_compare(spc, {'variables': ['clay'], 'max_depth': 20})
        >>> float(d.loc['A', 'B'])
        0.0
    """
    config = ensure_config(CompareConfig, config)
    kinds = collection.attribute_kinds()
    unknown = [v for v in config.variables if v not in kinds]
    if unknown:
        raise ValidationError(f"Unknown horizon attributes: {unknown}; available: {list(kinds)}")
    require_valid_depths(collection, "profile comparison")

    n_profiles = len(collection)
    n_depths = config.max_depth
    sliced = slice_collection(collection, range(n_depths), config.variables, max_workers=max_workers)
    horizons = sliced.horizons

    # sliced rows are profile-major with exactly one row per depth
    grids = {}
    for var in config.variables:
        if kinds[var] is AttributeKind.NUMERIC:
            values = horizons[var].to_numpy(dtype=float, na_value=np.nan)
        else:
            values = horizons[var].to_numpy(dtype=object)
        grids[var] = values.reshape(n_profiles, n_depths)
    has_data = np.zeros(n_profiles, dtype=bool)
    for grid in grids.values():
        has_data |= pd.notna(grid).any(axis=1)
    if has_data.sum() < 2:
        raise EmptySelectionError(
            f"Profile comparison needs at least two profiles with data above {n_depths}, "
            f"found {int(has_data.sum())}"
        )
    if not has_data.all():
        empty = [pid for pid, ok in zip(collection.profile_ids, has_data) if not ok]
        logger.warning(f"{len(empty)} profiles have no data above {n_depths} and get missing distances: {empty}")

    weights = depth_weights(n_depths, config.k)
    numerator = np.zeros((n_profiles, n_profiles))
    denominator = np.zeros((n_profiles, n_profiles))
    for d in range(n_depths):
        columns = [(grids[var][:, d], kinds[var]) for var in config.variables]
        distance, usable = gower_at_depth(columns)
        numerator += np.where(usable, weights[d] * distance, 0.0)
        denominator += np.where(usable, weights[d], 0.0)

    with np.errstate(invalid='ignore', divide='ignore'):
        result = np.where(denominator > 0, numerator / denominator, np.nan)
    np.fill_diagonal(result, 0.0)
    # symmetric up to floating point accumulation order
    result = (result + result.T) / 2.0

    index = pd.Index(collection.profile_ids, name=collection.schema.id_column)
    logger.info(
        f"Compared {n_profiles} profiles over {n_depths} depths "
        f"({len(config.variables)} variables, k={config.k:g})"
    )
    return pd.DataFrame(result, index=index, columns=index.copy())


def dissimilarity_order(matrix: pd.DataFrame) -> List[Any]:
    """
    Profile keys in the leaf order of an average-linkage clustering of ``matrix``.

    Useful for reordering a collection so that similar profiles are adjacent,
    e.g. ``collection.subset(dissimilarity_order(d))``.

    Raises:
        ValidationError: If the matrix is not square or has missing distances
    """
    if matrix.shape[0] != matrix.shape[1] or list(matrix.index) != list(matrix.columns):
        raise ValidationError("Dissimilarity matrix must be square with matching index and columns")
    if len(matrix) < 2:
        return list(matrix.index)
    values = matrix.to_numpy(dtype=float)
    if np.isnan(values).any():
        raise ValidationError("Dissimilarity matrix has missing distances; subset the profiles first")

    condensed = squareform(values, checks=False)
    tree = hierarchy.linkage(condensed, method='average')
    return [matrix.index[i] for i in hierarchy.leaves_list(tree)]


__all__ = ['depth_weights', 'gower_at_depth', 'profile_compare', 'dissimilarity_order']
