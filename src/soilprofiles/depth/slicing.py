# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Slicing: re-sample every profile at a regular integer depth grid.

For each grid depth the covering horizon is located by binary search over
the profile's sorted top depths; its attribute values are copied unchanged
(no interpolation). Grid depths with no covering horizon still produce a
row whose requested attributes are missing, so every sliced profile is a
depth-complete rectangle over the grid.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from soilprofiles.collection import ProfileView, SoilProfileCollection, require_valid_depths
from soilprofiles.core.config import SliceConfig, ensure_config
from soilprofiles.core.constants import ColumnDefaults
from soilprofiles.core.exceptions import ValidationError

from .apply import map_profiles

logger = logging.getLogger(__name__)

SLICE_BOOKKEEPING = (ColumnDefaults.SOURCE_HORIZON_ID, ColumnDefaults.MISSING_FRACTION)


def covering_horizon_index(tops: np.ndarray, bottoms: np.ndarray, depths: np.ndarray) -> np.ndarray:
    """
    Position of the horizon covering each depth, -1 where none does.

    A horizon covers ``d`` when ``top <= d < bottom``. The final horizon whose
    bottom is the profile's true base also covers ``d == bottom``. Horizons
    without a bottom depth cover nothing. ``tops`` must be sorted ascending.

    Args:
        tops: Sorted horizon top depths
        bottoms: Matching bottom depths (NaN for open lower boundaries)
        depths: Query depths

    Returns:
        Integer array of horizon positions, same length as ``depths``
    """
    depths = np.asarray(depths, dtype=float)
    if len(tops) == 0:
        return np.full(len(depths), -1, dtype=int)

    candidate = np.searchsorted(tops, depths, side='right') - 1
    clipped = np.clip(candidate, 0, len(tops) - 1)
    cand_bottom = bottoms[clipped]

    with np.errstate(invalid='ignore'):
        covered = (candidate >= 0) & (depths < cand_bottom)

        finite_bottoms = bottoms[~np.isnan(bottoms)]
        if finite_bottoms.size:
            base = finite_bottoms.max()
            base_positions = np.flatnonzero(bottoms == base)
            final = base_positions[-1]
            # closed lower bound at the true profile base only
            covered |= (candidate == final) & (depths == base)

    return np.where(covered, candidate, -1)


def _resolve_variables(collection: SoilProfileCollection, variables: Optional[Iterable[str]]) -> List[str]:
    available = collection.horizon_attribute_names
    if variables is None:
        return [v for v in available if v not in SLICE_BOOKKEEPING]
    variables = list(variables)
    unknown = [v for v in variables if v not in available]
    if unknown:
        raise ValidationError(f"Unknown horizon attributes: {unknown}; available: {available}")
    return variables


def _grid_bottoms(depths: np.ndarray) -> np.ndarray:
    if len(depths) == 1:
        step = 1
    else:
        step = depths[-1] - depths[-2]
    return np.append(depths[1:], depths[-1] + step)


def slice_profile(profile: ProfileView, depths: Sequence[int], variables: List[str]) -> pd.DataFrame:
    """
    Slice one profile at ``depths``, returning the sliced horizon rows.

    The rows carry the profile key, grid top/bottom, the covering horizon's ID
    (``source_hzid``), the fraction of requested variables missing at that
    depth (``missing_fraction``) and the copied attribute values.
    """
    s = profile.schema
    grid = np.asarray(depths, dtype=int)
    hz = profile.horizons
    idx = covering_horizon_index(profile.tops, profile.bottoms, grid)
    covered = idx >= 0
    take = np.where(covered, idx, 0)

    if len(hz):
        values = hz[variables].iloc[take].reset_index(drop=True)
        mask = np.broadcast_to(covered[:, None], values.shape)
        values = values.where(mask)
        source = hz[s.horizon_id_column].to_numpy(dtype=object)[take]
        source = np.where(covered, source, None)
    else:
        values = pd.DataFrame(np.nan, index=range(len(grid)), columns=variables)
        source = np.full(len(grid), None, dtype=object)

    if variables:
        missing_fraction = values.isna().to_numpy().mean(axis=1)
    else:
        missing_fraction = np.where(covered, 0.0, 1.0)

    frame = pd.DataFrame({
        s.id_column: [profile.profile_id] * len(grid),
        s.top_column: grid.astype(float),
        s.bottom_column: _grid_bottoms(grid).astype(float),
        ColumnDefaults.SOURCE_HORIZON_ID: source,
        ColumnDefaults.MISSING_FRACTION: missing_fraction,
    })
    return pd.concat([frame, values], axis=1)


def slice_collection(
    collection: SoilProfileCollection,
    depths: Sequence[int],
    variables: Optional[Iterable[str]] = None,
    max_workers: Optional[int] = 1,
) -> SoilProfileCollection:
    """
    Re-sample every profile at an ascending integer depth grid.

    Args:
        collection: Source collection (validated and sorted)
        depths: Strictly increasing integer depths
        variables: Horizon attributes to carry; all attributes when None
        max_workers: Thread pool size for the per-profile loop

    Returns:
        New collection with one horizon per profile and grid depth, spanning
        ``[d_i, d_{i+1})`` (the last one spans one grid step). Site and
        auxiliary tables are carried over unchanged.

    Raises:
        ConfigValidationError: If the grid is empty, not integer or not increasing
        ValidationError: If a requested variable does not exist
        InvalidDepthLogicError: If any profile fails depth validation

    Example:
        >>> sliced = slice_collection(spc, [0, 5, 10, 15], ['clay'])
        >>> sliced.horizons['clay'].tolist() == [20, 20, 30, 30]
        True
    """
    config = ensure_config(SliceConfig, {
        'depths': np.asarray(depths).tolist(),
        'variables': None if variables is None else list(variables),
    })
    variables = _resolve_variables(collection, config.variables)
    require_valid_depths(collection, "slicing")

    clashes = sorted(set(SLICE_BOOKKEEPING) & set(variables))
    if clashes:
        raise ValidationError(f"Cannot slice attributes named like slice bookkeeping columns: {clashes}")

    grid = np.asarray(config.depths, dtype=int)
    pieces = map_profiles(
        collection,
        lambda profile: slice_profile(profile, grid, variables),
        max_workers=max_workers,
        desc="Slicing",
    )

    s = collection.schema
    if pieces:
        horizons = pd.concat(pieces, ignore_index=True)
    else:
        horizons = pd.DataFrame(columns=[s.id_column, s.top_column, s.bottom_column, *SLICE_BOOKKEEPING, *variables])
    horizons.insert(1, s.horizon_id_column, np.arange(1, len(horizons) + 1))

    logger.info(
        f"Sliced {len(collection)} profiles at {len(grid)} depths "
        f"({grid[0]}-{grid[-1]}) for {len(variables)} variables"
    )
    return collection.with_horizon_table(horizons)


__all__ = ['SLICE_BOOKKEEPING', 'covering_horizon_index', 'slice_profile', 'slice_collection']
