# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Ragged selection: extract (glom) or truncate the horizons of a profile within a depth window.

A horizon is selected when it overlaps ``[top, bottom)``. With truncation the
selected horizons are clipped to the window, so the first and last ones start
and end at the window limits (or at the true profile base when the window
reaches deeper than the profile). An empty result is a valid profile view.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from soilprofiles.collection import ProfileView, SoilProfileCollection, require_valid_depths
from soilprofiles.collection.validation import depth_report
from soilprofiles.core.config import DepthWindow, ensure_config
from soilprofiles.core.exceptions import (
    EmptySelectionError,
    InvalidDepthLogicError,
    ValidationError,
)

from .apply import map_profiles
from .slicing import covering_horizon_index

logger = logging.getLogger(__name__)


def _window(top: float, bottom: float) -> DepthWindow:
    return ensure_config(DepthWindow, {'top': top, 'bottom': bottom}, error_type=ValidationError)


def _check_profile(profile: ProfileView) -> None:
    report = depth_report(profile.profile_id, profile.tops, profile.bottoms)
    if not report.valid or not report.is_sorted:
        raise InvalidDepthLogicError(
            f"Cannot select depths from profile {profile.profile_id!r}: invalid or unsorted horizons",
            profile_ids=[profile.profile_id],
            horizon_indices={profile.profile_id: sorted(set(report.inverted) | set(report.overlaps))},
        )


def glom(
    profile: ProfileView,
    top: float,
    bottom: float,
    truncate: bool = True,
    strict: bool = False,
) -> ProfileView:
    """
    Select the horizons of one profile that overlap the window ``[top, bottom)``.

    Horizons without a bottom depth are kept when their top lies inside the
    window; with truncation the window bottom becomes their bottom. A
    zero-thickness window selects the horizon covering that single depth and
    leaves it unclipped.

    Args:
        profile: Source profile view
        top: Window top
        bottom: Window bottom (``top <= bottom``)
        truncate: Clip the selected horizons to the window
        strict: Raise instead of returning an empty view

    Returns:
        New ProfileView (possibly with zero horizons)

    Raises:
        ValidationError: Invalid window
        InvalidDepthLogicError: The profile has invalid or unsorted horizons
        EmptySelectionError: ``strict`` and no horizon overlaps the window

    Example:
        >>> clipped = glom(spc.profile('A'), 5, 15)
        >>> clipped.tops.tolist(), clipped.bottoms.tolist()
        ([5.0, 10.0], [10.0, 15.0])
    """
    window = _window(top, bottom)
    _check_profile(profile)

    s = profile.schema
    tops, bottoms = profile.tops, profile.bottoms

    if window.thickness == 0:
        idx = covering_horizon_index(tops, bottoms, np.array([window.top]))
        selected = np.flatnonzero(np.isin(np.arange(len(tops)), idx[idx >= 0]))
        truncate = False
    else:
        has_bottom = ~np.isnan(bottoms)
        with np.errstate(invalid='ignore'):
            closed = has_bottom & (tops < window.bottom) & (bottoms > window.top)
        open_ended = ~has_bottom & (tops >= window.top) & (tops < window.bottom)
        selected = np.flatnonzero(closed | open_ended)

    horizons = profile.horizons.iloc[selected].copy()
    if truncate and len(horizons):
        horizons[s.top_column] = np.maximum(horizons[s.top_column].to_numpy(dtype=float), window.top)
        horizons[s.bottom_column] = np.fmin(horizons[s.bottom_column].to_numpy(dtype=float), window.bottom)

    if horizons.empty:
        message = (
            f"No horizons of profile {profile.profile_id!r} overlap "
            f"[{window.top:g}, {window.bottom:g})"
        )
        if strict:
            raise EmptySelectionError(message)
        logger.debug(message)

    return profile.with_horizons(horizons)


def trunc(profile: ProfileView, bottom: float, truncate: bool = True, strict: bool = False) -> ProfileView:
    """Truncate a profile at ``bottom``: ``glom`` with a window starting at the surface."""
    return glom(profile, 0.0, bottom, truncate=truncate, strict=strict)


def glom_collection(
    collection: SoilProfileCollection,
    top: float,
    bottom: float,
    truncate: bool = True,
    max_workers: Optional[int] = 1,
) -> SoilProfileCollection:
    """
    Apply ``glom`` to every profile of a collection.

    Profiles left without horizons are dropped from the result (with their
    site and auxiliary rows); the remaining profiles keep collection order.
    """
    window = _window(top, bottom)
    require_valid_depths(collection, "ragged selection")

    views = map_profiles(
        collection,
        lambda profile: glom(profile, window.top, window.bottom, truncate=truncate),
        max_workers=max_workers,
        desc="Ragged selection",
    )
    kept = [v.horizons for v in views if not v.is_empty]
    dropped = [v.profile_id for v in views if v.is_empty]
    if dropped:
        logger.warning(
            f"{len(dropped)} profiles have no horizons within "
            f"[{window.top:g}, {window.bottom:g}) and were dropped"
        )

    if kept:
        horizons = pd.concat(kept, ignore_index=True)
    else:
        horizons = collection.horizons.iloc[0:0]
    return collection.with_horizon_table(horizons)


def trunc_collection(
    collection: SoilProfileCollection,
    bottom: float,
    truncate: bool = True,
    max_workers: Optional[int] = 1,
) -> SoilProfileCollection:
    """Truncate every profile of a collection at ``bottom``."""
    return glom_collection(collection, 0.0, bottom, truncate=truncate, max_workers=max_workers)


__all__ = ['glom', 'trunc', 'glom_collection', 'trunc_collection']
