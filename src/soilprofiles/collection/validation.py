# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Horizon depth logic validation.

Checks each profile for inverted horizons (top >= bottom or missing top),
overlapping consecutive horizons, gaps (warnings only) and sort order, and
aggregates the per-profile reports into a collection-level pass/fail result.
Overlap and inversion are semantic errors: ``repair_depth_order`` only fixes
row order and refuses to touch profiles whose depths are inconsistent.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from soilprofiles.core.exceptions import InvalidDepthLogicError

from .collection import SoilProfileCollection
from .profile import ProfileView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepthIssue:
    """One located depth problem."""

    profile_id: Any
    horizon_index: int
    kind: str
    severity: str
    message: str


@dataclass(frozen=True)
class ProfileDepthReport:
    """
    Depth logic report for one profile.

    Horizon positions are 0-based and follow the profile's stored order.
    ``overlaps`` and ``gaps`` hold the position ``i`` of the upper horizon of
    each offending pair ``(i, i + 1)``.
    """

    profile_id: Any
    inverted: Tuple[int, ...] = ()
    overlaps: Tuple[int, ...] = ()
    gaps: Tuple[int, ...] = ()
    is_sorted: bool = True

    @property
    def valid(self) -> bool:
        """No inversion and no overlap; gaps do not invalidate a profile."""
        return not self.inverted and not self.overlaps

    @property
    def contiguous(self) -> bool:
        return not self.gaps

    def issues(self) -> List[DepthIssue]:
        found = [
            DepthIssue(self.profile_id, i, 'inverted', 'error',
                       f"Horizon {i} of profile {self.profile_id!r} has top >= bottom or a missing top")
            for i in self.inverted
        ]
        found += [
            DepthIssue(self.profile_id, i, 'overlap', 'error',
                       f"Horizons {i} and {i + 1} of profile {self.profile_id!r} overlap")
            for i in self.overlaps
        ]
        found += [
            DepthIssue(self.profile_id, i, 'gap', 'warning',
                       f"Gap between horizons {i} and {i + 1} of profile {self.profile_id!r}")
            for i in self.gaps
        ]
        return found


def depth_report(profile_id: Any, tops: np.ndarray, bottoms: np.ndarray) -> ProfileDepthReport:
    """Build a report from the top and bottom depths of one profile, in stored order."""
    tops = np.asarray(tops, dtype=float)
    bottoms = np.asarray(bottoms, dtype=float)

    has_bottom = ~np.isnan(bottoms)
    missing_top = np.isnan(tops)
    with np.errstate(invalid='ignore'):
        inverted = missing_top | (has_bottom & (tops >= bottoms))

        upper_top, lower_top = tops[:-1], tops[1:]
        upper_bottom = bottoms[:-1]
        both_tops = ~(np.isnan(upper_top) | np.isnan(lower_top))
        overlap = both_tops & (
            (lower_top <= upper_top) | (has_bottom[:-1] & (upper_bottom > lower_top))
        )
        gap = both_tops & has_bottom[:-1] & (upper_bottom < lower_top)
        is_sorted = bool(np.all(np.diff(tops) >= 0)) if len(tops) else True

    return ProfileDepthReport(
        profile_id=profile_id,
        inverted=tuple(np.flatnonzero(inverted).tolist()),
        overlaps=tuple(np.flatnonzero(overlap).tolist()),
        gaps=tuple(np.flatnonzero(gap).tolist()),
        is_sorted=is_sorted,
    )


def check_profile_depths(profile: ProfileView) -> ProfileDepthReport:
    """Validate the horizon depth logic of a single profile."""
    return depth_report(profile.profile_id, profile.tops, profile.bottoms)


@dataclass(frozen=True)
class DepthLogicResult:
    """Collection-level aggregation of per-profile depth reports."""

    reports: Dict[Any, ProfileDepthReport] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return all(r.valid for r in self.reports.values())

    @property
    def failed_profiles(self) -> List[Any]:
        """Keys of profiles with inverted or overlapping horizons."""
        return [k for k, r in self.reports.items() if not r.valid]

    @property
    def unsorted_profiles(self) -> List[Any]:
        return [k for k, r in self.reports.items() if not r.is_sorted]

    @property
    def gap_profiles(self) -> List[Any]:
        return [k for k, r in self.reports.items() if not r.contiguous]

    def issues(self) -> List[DepthIssue]:
        return [issue for r in self.reports.values() for issue in r.issues()]

    def horizon_indices(self) -> Dict[Any, List[int]]:
        """Offending horizon positions (inversions and upper horizons of overlaps) per failed profile."""
        return {
            k: sorted(set(r.inverted) | set(r.overlaps))
            for k, r in self.reports.items() if not r.valid
        }

    def to_frame(self, id_column: str = 'id') -> pd.DataFrame:
        return pd.DataFrame([
            {
                id_column: k,
                'valid': r.valid,
                'sorted': r.is_sorted,
                'n_inverted': len(r.inverted),
                'n_overlaps': len(r.overlaps),
                'n_gaps': len(r.gaps),
            }
            for k, r in self.reports.items()
        ], columns=[id_column, 'valid', 'sorted', 'n_inverted', 'n_overlaps', 'n_gaps'])


def check_depth_logic(collection: SoilProfileCollection) -> DepthLogicResult:
    """
    Run the depth checks on every profile of a collection.

    Returns:
        DepthLogicResult with one report per profile, in collection order
    """
    tops, bottoms, offsets = collection.depth_arrays()
    reports = {}
    for position, pid in enumerate(collection.profile_ids):
        lo, hi = offsets[position], offsets[position + 1]
        reports[pid] = depth_report(pid, tops[lo:hi], bottoms[lo:hi])
    result = DepthLogicResult(reports)

    if not result.valid:
        logger.warning(
            f"Depth logic errors in {len(result.failed_profiles)} of {len(collection)} profiles"
        )
    if result.gap_profiles:
        logger.debug(f"{len(result.gap_profiles)} profiles have depth gaps")
    return result


def horizon_depth_issues(collection: SoilProfileCollection) -> pd.DataFrame:
    """
    Flat table of every depth issue, with enough identity to locate the record.

    Columns: profile key, horizon_index (within profile), horizon ID, kind,
    severity and message.
    """
    s = collection.schema
    hzids = collection.horizon_ids
    _, _, offsets = collection.depth_arrays()
    positions = {pid: i for i, pid in enumerate(collection.profile_ids)}
    rows = []
    for issue in check_depth_logic(collection).issues():
        row_number = offsets[positions[issue.profile_id]] + issue.horizon_index
        rows.append({
            s.id_column: issue.profile_id,
            'horizon_index': issue.horizon_index,
            s.horizon_id_column: hzids[row_number],
            'kind': issue.kind,
            'severity': issue.severity,
            'message': issue.message,
        })
    return pd.DataFrame(rows, columns=[s.id_column, 'horizon_index', s.horizon_id_column,
                                       'kind', 'severity', 'message'])


def require_valid_depths(
    collection: SoilProfileCollection,
    operation: str = "depth operation",
    result: Optional[DepthLogicResult] = None,
) -> DepthLogicResult:
    """
    Gate for depth operations: every profile must be valid and sorted by top.

    Raises:
        InvalidDepthLogicError: Naming the offending profiles and horizon positions
    """
    result = result or check_depth_logic(collection)
    failed = result.failed_profiles
    if failed:
        raise InvalidDepthLogicError(
            f"Cannot run {operation}: invalid horizon depth logic in profiles {failed[:10]}",
            profile_ids=failed,
            horizon_indices=result.horizon_indices(),
        )
    unsorted = result.unsorted_profiles
    if unsorted:
        raise InvalidDepthLogicError(
            f"Cannot run {operation}: horizons not sorted by top depth in profiles {unsorted[:10]}; "
            "use repair_depth_order first",
            profile_ids=unsorted,
        )
    return result


def repair_depth_order(collection: SoilProfileCollection) -> SoilProfileCollection:
    """
    Sort every profile's horizons by top depth and re-derive horizon IDs.

    Horizon IDs become 1..n in the repaired collection order. Sorting is the
    only repair: profiles that still have inverted or overlapping horizons
    after sorting are reported, not fixed.

    Raises:
        InvalidDepthLogicError: If any profile has inversion or overlap
    """
    s = collection.schema
    horizons = collection.horizons
    order = {pid: i for i, pid in enumerate(collection.profile_ids)}
    horizons['_profile_order'] = horizons[s.id_column].map(order)
    horizons = (
        horizons.sort_values(['_profile_order', s.top_column], kind='stable', na_position='last')
        .drop(columns=['_profile_order'])
        .reset_index(drop=True)
    )

    reports = {}
    tops = horizons[s.top_column].to_numpy(dtype=float)
    bottoms = horizons[s.bottom_column].to_numpy(dtype=float)
    row_index = horizons.groupby(s.id_column, sort=False).indices
    for pid in collection.profile_ids:
        rows = row_index[pid]
        reports[pid] = depth_report(pid, tops[rows], bottoms[rows])
    result = DepthLogicResult(reports)
    if not result.valid:
        raise InvalidDepthLogicError(
            f"Cannot repair depth order: overlapping or inverted horizons in profiles "
            f"{result.failed_profiles[:10]}",
            profile_ids=result.failed_profiles,
            horizon_indices=result.horizon_indices(),
        )

    horizons[s.horizon_id_column] = np.arange(1, len(horizons) + 1)
    logger.info(f"Repaired horizon order for {len(collection)} profiles")
    return collection.with_horizon_table(horizons)


__all__ = [
    'DepthIssue',
    'ProfileDepthReport',
    'DepthLogicResult',
    'depth_report',
    'check_profile_depths',
    'check_depth_logic',
    'horizon_depth_issues',
    'require_valid_depths',
    'repair_depth_order',
]
