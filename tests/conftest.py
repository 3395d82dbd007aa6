"""
Root conftest.py - Fixtures shared across all tests.

Provides small hand-checked profile collections used throughout the unit
tests. Depths are in cm; values are chosen so expected results can be
worked out by hand.
"""

import logging

import numpy as np
import pytest

from soilprofiles import SoilProfileCollection
from soilprofiles.core.logging_utils import PACKAGE_LOGGER

# ============================================================================
# Record builders
# ============================================================================

PROFILE_A = [
    {'id': 'A', 'top': 0, 'bottom': 10, 'clay': 20.0, 'texture': 'loam'},
    {'id': 'A', 'top': 10, 'bottom': 20, 'clay': 30.0, 'texture': 'clay'},
]


def profile_rows(profile_id, layers):
    """Rows for one profile from (top, bottom, clay, texture) tuples."""
    return [
        {'id': profile_id, 'top': top, 'bottom': bottom, 'clay': clay, 'texture': texture}
        for top, bottom, clay, texture in layers
    ]


# ============================================================================
# Collections
# ============================================================================

@pytest.fixture
def profile_a():
    """Single profile A: (0-10, clay 20, loam), (10-20, clay 30, clay)."""
    return SoilProfileCollection(PROFILE_A)


@pytest.fixture
def twin_collection():
    """Profiles A and B with identical horizons."""
    rows = PROFILE_A + [dict(r, id='B') for r in PROFILE_A]
    return SoilProfileCollection(rows)


@pytest.fixture
def mixed_collection():
    """
    Three profiles with site attributes.

    P1: 0-10 (10, loam), 10-30 (20, clay), 30-50 (40, clay)
    P2: 0-5 (15, sand), 5-25 (missing, loam), 25-40 (35, clay)
    P3: 0-20 (12, sand), 30-60 (50, clay)  -- gap between 20 and 30
    """
    rows = (
        profile_rows('P1', [(0, 10, 10.0, 'loam'), (10, 30, 20.0, 'clay'), (30, 50, 40.0, 'clay')])
        + profile_rows('P2', [(0, 5, 15.0, 'sand'), (5, 25, np.nan, 'loam'), (25, 40, 35.0, 'clay')])
        + profile_rows('P3', [(0, 20, 12.0, 'sand'), (30, 60, 50.0, 'clay')])
    )
    site = [
        {'id': 'P1', 'region': 'north', 'area': 1.0},
        {'id': 'P2', 'region': 'north', 'area': 2.0},
        {'id': 'P3', 'region': 'south', 'area': 1.0},
    ]
    restrictions = [
        {'id': 'P1', 'kind': 'lithic', 'top': 50, 'bottom': 60},
        {'id': 'P3', 'kind': 'densic', 'top': 45, 'bottom': 60},
        {'id': 'P3', 'kind': 'lithic', 'top': 60, 'bottom': 70},
    ]
    diagnostics = [
        {'id': 'P1', 'kind': 'argillic', 'top': 10, 'bottom': 50},
        {'id': 'P2', 'kind': 'ochric', 'top': 0, 'bottom': 5},
    ]
    return SoilProfileCollection(rows, site=site, restrictions=restrictions, diagnostics=diagnostics)


@pytest.fixture
def clean_package_logger():
    """Restore the package logger after tests that configure it."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
