"""Tests for weighted group estimators."""

import numpy as np
import pytest
from scipy.stats import mstats

from soilprofiles.core.config import SlabConfig
from soilprofiles.core.exceptions import ConfigurationError, InsufficientDataError
from soilprofiles.depth.estimators import (
    FunctionEstimator,
    QuantileEstimator,
    WeightedMeanEstimator,
    effective_sample_size,
    harrell_davis_quantile,
    list_available_estimators,
    make_estimator,
    weighted_mean,
    weighted_quantile,
)

pytestmark = [pytest.mark.unit]


class TestEffectiveSampleSize:

    def test_equal_weights(self):
        assert effective_sample_size(np.ones(4)) == pytest.approx(4.0)

    def test_single_dominant_weight(self):
        assert effective_sample_size(np.array([5.0, 0.0, 0.0])) == pytest.approx(1.0)


class TestWeightedQuantile:

    def test_median_equal_weights(self):
        assert weighted_quantile([3, 1, 2], [1, 1, 1], 0.5) == pytest.approx(2.0)

    def test_extremes_clamp(self):
        assert weighted_quantile([1, 2, 3], [1, 1, 1], 0.0) == 1.0
        assert weighted_quantile([1, 2, 3], [1, 1, 1], 1.0) == 3.0

    def test_unequal_weights(self):
        # plotting positions 0.125, 0.375, 0.75
        assert weighted_quantile([1, 2, 3], [1, 1, 2], 0.5) == pytest.approx(2.0 + 1.0 / 3.0)

    def test_missing_values_and_zero_weights_ignored(self):
        assert weighted_quantile([1, np.nan, 5, 100], [1, 1, 1, 0], 0.5) == pytest.approx(3.0)


class TestHarrellDavis:

    @pytest.mark.parametrize("prob", [0.05, 0.25, 0.5, 0.75, 0.95])
    def test_matches_unweighted_harrell_davis(self, prob):
        values = np.array([4.0, 1.0, 7.0, 3.0, 9.0, 2.0, 6.0])
        expected = mstats.hdquantiles(values, prob=[prob])[0]
        assert harrell_davis_quantile(values, np.ones(len(values)), prob) == pytest.approx(expected)

    def test_symmetric_median(self):
        assert harrell_davis_quantile([1, 2, 3, 4, 5], np.ones(5), 0.5) == pytest.approx(3.0)

    def test_weight_scale_invariance(self):
        values = [1.0, 4.0, 2.0, 8.0]
        weights = np.array([1.0, 2.0, 0.5, 3.0])
        assert harrell_davis_quantile(values, weights, 0.3) == pytest.approx(
            harrell_davis_quantile(values, weights * 10, 0.3)
        )

    def test_extreme_probabilities(self):
        assert harrell_davis_quantile([5, 1, 3], [1, 1, 1], 0.0) == 1.0
        assert harrell_davis_quantile([5, 1, 3], [1, 1, 1], 1.0) == 5.0

    def test_single_value(self):
        assert harrell_davis_quantile([7.0], [2.0], 0.4) == 7.0

    def test_no_data(self):
        with pytest.raises(InsufficientDataError):
            harrell_davis_quantile([np.nan, np.nan], [1, 1], 0.5)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="differ in shape"):
            harrell_davis_quantile([1, 2], [1], 0.5)


class TestEstimators:

    def test_quantile_statistic_names(self):
        assert QuantileEstimator().statistic_names == ('p05', 'p25', 'p50', 'p75', 'p95')
        assert QuantileEstimator((0.975,)).statistic_names == ('p97.5',)

    def test_quantile_falls_back_for_small_samples(self):
        # effective size 2 < 3: simple weighted quantile, p25 sits on the first value
        result = QuantileEstimator((0.25,))([10.0, 20.0], [1.0, 1.0])
        assert result == {'p25': pytest.approx(10.0)}

    def test_quantile_uses_harrell_davis_for_larger_samples(self):
        values = np.arange(1.0, 11.0)
        result = QuantileEstimator((0.25,))(values, np.ones(10))
        assert result['p25'] == pytest.approx(mstats.hdquantiles(values, prob=[0.25])[0])

    def test_weighted_mean(self):
        mean, sd = weighted_mean([10.0, 20.0], [1.0, 3.0])
        assert mean == pytest.approx(17.5)
        assert sd == pytest.approx(np.sqrt(18.75))

    def test_weighted_mean_estimator(self):
        result = WeightedMeanEstimator()([2.0, 4.0], [1.0, 1.0])
        assert result == {'mean': pytest.approx(3.0), 'sd': pytest.approx(1.0)}

    def test_weighted_mean_no_data(self):
        with pytest.raises(InsufficientDataError):
            WeightedMeanEstimator()([1.0, 2.0], [0.0, 0.0])


class TestFunctionEstimator:

    def test_scalar_result(self):
        est = FunctionEstimator(lambda x, w: np.median(x), 'median')
        assert est([3.0, 1.0, 2.0, np.nan], [1, 1, 1, 1]) == {'median': 2.0}

    def test_sequence_result(self):
        est = FunctionEstimator(lambda x, w: (x.min(), x.max()), ['min', 'max'])
        assert est([3.0, 1.0], [1, 1]) == {'min': 1.0, 'max': 3.0}

    def test_mapping_result(self):
        est = FunctionEstimator(lambda x, w: {'total': float(np.sum(x * w)), 'other': 0}, ['total'])
        assert est([1.0, 2.0], [2.0, 1.0]) == {'total': 4.0}

    def test_wrong_length(self):
        est = FunctionEstimator(lambda x, w: (1.0, 2.0, 3.0), ['a', 'b'])
        with pytest.raises(ValueError, match="3 values"):
            est([1.0], [1.0])

    def test_requires_names(self):
        with pytest.raises(ConfigurationError):
            FunctionEstimator(np.mean, [])


class TestMakeEstimator:

    def test_builtin_from_config(self):
        config = SlabConfig(variables=['clay'], slab=10, probabilities=(0.1, 0.9))
        est = make_estimator(config)
        assert isinstance(est, QuantileEstimator)
        assert est.statistic_names == ('p10', 'p90')

    def test_weighted_mean_from_config(self):
        config = SlabConfig(variables=['clay'], slab=10, estimator='weighted_mean')
        assert isinstance(make_estimator(config), WeightedMeanEstimator)

    def test_custom_estimator_wins(self):
        config = SlabConfig(variables=['clay'], slab=10)
        custom = WeightedMeanEstimator()
        assert make_estimator(config, custom) is custom

    def test_rejects_non_estimators(self):
        config = SlabConfig(variables=['clay'], slab=10)
        with pytest.raises(ConfigurationError, match="statistic_names"):
            make_estimator(config, np.mean)

    def test_registry_listing(self):
        assert list_available_estimators() == ['quantiles', 'weighted_mean']
