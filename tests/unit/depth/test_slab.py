"""Tests for slab aggregation."""

import numpy as np
import pandas as pd
import pytest

from soilprofiles import slab
from soilprofiles.core.constants import SlabDefaults
from soilprofiles.core.exceptions import ConfigValidationError, ValidationError
from soilprofiles.depth import FunctionEstimator, SlabStructure
from soilprofiles.depth.slab import overlap_matrix

pytestmark = [pytest.mark.unit]


def stat(result, statistic, group='all', variable=None, slab_top=None):
    rows = result[result['statistic'] == statistic]
    if group is not None:
        rows = rows[rows['group'] == group]
    if variable is not None:
        rows = rows[rows['variable'] == variable]
    if slab_top is not None:
        rows = rows[rows['slab_top'] == slab_top]
    assert len(rows) == 1, rows
    return rows.iloc[0]


class TestSlabStructure:

    def test_thickness_covers_deepest_bottom(self):
        structure = SlabStructure.from_value(10, 55)
        assert structure.boundaries.tolist() == [0, 10, 20, 30, 40, 50, 60]
        assert len(structure) == 6

    def test_pair_is_single_slab(self):
        structure = SlabStructure.from_value([5, 25], 100)
        assert structure.tops.tolist() == [5.0]
        assert structure.thickness.tolist() == [20.0]

    def test_explicit_boundaries(self):
        assert SlabStructure.from_value([0, 10, 30], 100).bottoms.tolist() == [10.0, 30.0]

    def test_empty_collection_depth(self):
        assert SlabStructure.from_value(10, float('nan')).boundaries.tolist() == [0.0, 10.0]


class TestOverlapMatrix:

    def test_overlap_lengths(self):
        matrix = overlap_matrix(np.array([0.0, 10.0]), np.array([10.0, 25.0]), np.array([0.0, 5.0, 20.0, 30.0]))
        np.testing.assert_array_equal(matrix, [[5, 5, 0], [0, 10, 5]])

    def test_open_bottom_overlaps_nothing(self):
        matrix = overlap_matrix(np.array([0.0]), np.array([np.nan]), np.array([0.0, 10.0]))
        assert matrix.tolist() == [[0.0]]


class TestNumericSlabs:

    def test_output_layout(self, profile_a):
        result = slab(profile_a, {'variables': ['clay'], 'slab': [0, 20], 'estimator': 'weighted_mean'})
        assert list(result.columns) == list(SlabDefaults.OUTPUT_COLUMNS)
        assert result['statistic'].tolist() == ['mean', 'sd']

    def test_full_depth_mean_is_thickness_weighted(self, profile_a):
        result = slab(profile_a, {'variables': ['clay'], 'slab': [0, 20], 'estimator': 'weighted_mean'})
        row = stat(result, 'mean')
        assert row['value'] == pytest.approx(25.0)
        assert row['contributing_fraction'] == pytest.approx(1.0)
        assert stat(result, 'sd')['value'] == pytest.approx(0.0)

    def test_unequal_thickness(self, mixed_collection):
        result = slab(
            mixed_collection.subset(['P1']),
            {'variables': ['clay'], 'slab': [0, 50], 'estimator': 'weighted_mean'},
        )
        # (10 * 10 + 20 * 20 + 20 * 40) / 50
        assert stat(result, 'mean')['value'] == pytest.approx(26.0)

    def test_default_quantiles_per_slab(self, twin_collection):
        result = slab(twin_collection, {'variables': ['clay'], 'slab': 10})
        assert len(result) == 2 * len(SlabDefaults.PROBABILITIES)
        assert stat(result, 'p50', slab_top=0.0)['value'] == pytest.approx(20.0)
        assert stat(result, 'p95', slab_top=10.0)['value'] == pytest.approx(30.0)
        assert (result['contributing_fraction'] == 1.0).all()

    def test_groups_and_partial_coverage(self, mixed_collection):
        result = slab(
            mixed_collection,
            {'variables': ['clay'], 'group_by': 'region', 'slab': [0, 10], 'estimator': 'weighted_mean'},
        )
        north = stat(result, 'mean', group='north')
        # P1: 10 cm of clay 10; P2: 5 cm of clay 15, the other 5 cm missing
        assert north['value'] == pytest.approx(175.0 / 15.0)
        assert north['contributing_fraction'] == pytest.approx(0.75)
        assert stat(result, 'mean', group='south')['value'] == pytest.approx(12.0)
        assert result['group'].unique().tolist() == ['north', 'south']

    def test_site_weights(self, mixed_collection):
        result = slab(
            mixed_collection,
            {'variables': ['clay'], 'group_by': 'region', 'slab': [0, 10],
             'estimator': 'weighted_mean', 'weight_column': 'area'},
        )
        # weights: P1 10 cm x 1, P2 5 cm x 2
        assert stat(result, 'mean', group='north')['value'] == pytest.approx(12.5)

    def test_zero_coverage_gives_missing_statistics(self, mixed_collection):
        result = slab(mixed_collection, {'variables': ['clay'], 'slab': [60, 80]})
        assert result['value'].isna().all()
        assert (result['contributing_fraction'] == 0.0).all()

    def test_gap_slab(self, mixed_collection):
        result = slab(
            mixed_collection,
            {'variables': ['clay'], 'group_by': 'region', 'slab': 10, 'estimator': 'weighted_mean'},
        )
        gap = stat(result, 'mean', group='south', slab_top=20.0)
        assert np.isnan(gap['value'])
        assert gap['contributing_fraction'] == 0.0

    def test_custom_estimator(self, twin_collection):
        estimator = FunctionEstimator(lambda x, w: x.max(), 'max')
        result = slab(twin_collection, {'variables': ['clay'], 'slab': [0, 20]}, estimator=estimator)
        assert result['statistic'].tolist() == ['max']
        assert result['value'].tolist() == [pytest.approx(25.0)]

    def test_threaded_matches_serial(self, mixed_collection):
        config = {'variables': ['clay', 'texture'], 'group_by': 'region', 'slab': 5}
        serial = slab(mixed_collection, config)
        threaded = slab(mixed_collection, config, max_workers=3)
        pd.testing.assert_frame_equal(serial, threaded)


class TestCategoricalSlabs:

    def test_tie_goes_to_shallower_horizon(self, profile_a):
        result = slab(profile_a, {'variables': ['texture'], 'slab': [0, 20]})
        assert stat(result, 'proportion:loam')['value'] == 1.0
        assert stat(result, 'proportion:clay')['value'] == 0.0

    def test_tie_break_deeper(self, profile_a):
        result = slab(profile_a, {'variables': ['texture'], 'slab': [0, 20], 'tie_break': 'deeper'})
        assert stat(result, 'proportion:clay')['value'] == 1.0

    def test_weighted_class_proportions(self, mixed_collection):
        result = slab(mixed_collection, {'variables': ['texture'], 'group_by': 'region', 'slab': [0, 10]})
        north = result[result['group'] == 'north'].set_index('statistic')['value']
        # P1 is loam; P2 splits 5/5 between sand and loam and keeps the shallower sand
        assert north.to_dict() == {
            'proportion:clay': 0.0,
            'proportion:loam': pytest.approx(0.5),
            'proportion:sand': pytest.approx(0.5),
        }


class TestGroupingAndValidation:

    def test_missing_group_values_are_dropped(self, mixed_collection, caplog):
        spc = mixed_collection.with_site_attributes({'zone': ['a', None, 'b']})
        with caplog.at_level("WARNING", logger="soilprofiles.depth.slab"):
            result = slab(spc, {'variables': ['clay'], 'group_by': 'zone', 'slab': [0, 10],
                                'estimator': 'weighted_mean'})
        assert result['group'].unique().tolist() == ['a', 'b']
        assert "Dropping 1 profiles with missing 'zone'" in caplog.text

    def test_unknown_variable(self, mixed_collection):
        with pytest.raises(ValidationError, match="Unknown horizon attributes"):
            slab(mixed_collection, {'variables': ['silt'], 'slab': 10})

    def test_group_must_be_site_attribute(self, mixed_collection):
        with pytest.raises(ValidationError, match="not a site attribute"):
            slab(mixed_collection, {'variables': ['clay'], 'group_by': 'texture', 'slab': 10})

    def test_negative_weights(self, mixed_collection):
        spc = mixed_collection.with_site_attributes({'w': [1.0, -1.0, 1.0]})
        with pytest.raises(ValidationError, match="negative"):
            slab(spc, {'variables': ['clay'], 'slab': 10, 'weight_column': 'w'})

    def test_invalid_config(self, mixed_collection):
        with pytest.raises(ConfigValidationError):
            slab(mixed_collection, {'variables': ['clay'], 'slab': -10})
