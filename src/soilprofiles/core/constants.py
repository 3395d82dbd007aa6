"""
Shared constants for soilprofiles.

Centralizes default column names and estimator settings so the collection,
the depth algorithms and the configuration models agree on them.
"""

from typing import Tuple


class ColumnDefaults:
    """Default column names for the site and horizon relations."""

    PROFILE_ID = 'id'
    """Profile key shared by the site and horizon tables."""

    HORIZON_ID = 'hzID'
    """Unique horizon identifier within a collection."""

    TOP = 'top'
    """Horizon top depth."""

    BOTTOM = 'bottom'
    """Horizon bottom depth (missing denotes an open lower boundary)."""

    KIND = 'kind'
    """Feature kind column of diagnostic and restriction tables."""

    SOURCE_HORIZON_ID = 'source_hzid'
    """Covering horizon identifier carried by sliced horizons."""

    MISSING_FRACTION = 'missing_fraction'
    """Fraction of requested variables missing at a slice."""


class SlabDefaults:
    """Defaults for slab aggregation."""

    PROBABILITIES: Tuple[float, ...] = (0.05, 0.25, 0.5, 0.75, 0.95)
    """Quantile levels reported by the default estimator."""

    MIN_HD_SAMPLES = 3
    """Effective sample size below which Harrell-Davis falls back to weighted quantiles."""

    ALL_PROFILES_GROUP = 'all'
    """Group label used when no grouping attribute is given."""

    PROPORTION_PREFIX = 'proportion:'
    """Statistic name prefix for categorical class proportions."""

    OUTPUT_COLUMNS: Tuple[str, ...] = (
        'group',
        'variable',
        'slab_top',
        'slab_bottom',
        'statistic',
        'value',
        'contributing_fraction',
    )


class OverlapDefaults:
    """Defaults for the overlap resolver search."""

    MAX_ITERATIONS = 2000
    ADJUSTMENT = 0.2
    OVERLAP_WEIGHT = 10.0
    TOLERANCE = 1e-6
