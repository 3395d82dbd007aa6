"""Tests for per-profile apply and the mutate helpers."""

import numpy as np
import pandas as pd
import pytest

from soilprofiles import SoilProfileCollection, mutate_horizons, mutate_site, profile_apply
from soilprofiles.core.exceptions import (
    ConfigValidationError,
    EmptySelectionError,
    ProfileApplyError,
    ShapeMismatchError,
)
from soilprofiles.depth import map_profiles

from conftest import profile_rows

pytestmark = [pytest.mark.unit]


class TestMapProfiles:

    def test_results_in_collection_order(self, mixed_collection):
        assert map_profiles(mixed_collection, lambda p: p.profile_id) == ['P1', 'P2', 'P3']

    def test_thread_pool_keeps_order(self, mixed_collection):
        serial = map_profiles(mixed_collection, lambda p: p.bottom_depth)
        threaded = map_profiles(mixed_collection, lambda p: p.bottom_depth, max_workers=4)
        assert threaded == serial == [50.0, 40.0, 60.0]

    def test_invalid_worker_count(self, mixed_collection):
        with pytest.raises(ConfigValidationError):
            map_profiles(mixed_collection, len, max_workers=-2)


class TestProfileApply:

    def test_scalar_results(self, mixed_collection):
        result = profile_apply(mixed_collection, lambda p: p.n_horizons, name='n')
        assert isinstance(result, pd.Series)
        assert result.name == 'n'
        assert result.to_dict() == {'P1': 3, 'P2': 3, 'P3': 2}

    def test_mapping_results(self, mixed_collection):
        result = profile_apply(mixed_collection, lambda p: {'top': p.top_depth, 'base': p.bottom_depth})
        assert isinstance(result, pd.DataFrame)
        assert result.loc['P3', 'base'] == 60.0
        assert list(result.index) == ['P1', 'P2', 'P3']

    def test_sequence_results_align_with_horizons(self, mixed_collection):
        result = profile_apply(mixed_collection, lambda p: p.horizons['clay'] * 2)
        assert len(result) == mixed_collection.n_horizons
        assert list(result.index) == mixed_collection.horizon_ids
        assert result.iloc[0] == 20.0
        assert np.isnan(result.iloc[4])

    def test_length_mismatch(self, mixed_collection):
        with pytest.raises(ShapeMismatchError) as info:
            profile_apply(mixed_collection, lambda p: [1, 2, 3])
        assert info.value.profile_id == 'P3'
        assert (info.value.expected, info.value.actual) == (2, 3)

    def test_mixed_result_kinds(self, mixed_collection):
        with pytest.raises(ShapeMismatchError, match="mix"):
            profile_apply(mixed_collection, lambda p: 1 if p.profile_id == 'P1' else [1, 2])

    def test_horizon_mode_requires_sequences(self, mixed_collection):
        with pytest.raises(ShapeMismatchError):
            profile_apply(mixed_collection, lambda p: 1.0, mode='horizon')

    def test_site_mode_keeps_sequences_whole(self, mixed_collection):
        result = profile_apply(mixed_collection, lambda p: p.tops.tolist(), mode='site')
        assert result['P3'] == [0.0, 30.0]

    def test_fixed_length_records(self):
        spc = SoilProfileCollection(
            profile_rows('A', [(0, 10, 5.0, 'sand'), (10, 30, 8.0, 'loam')])
            + profile_rows('B', [(0, 20, 12.0, 'sand'), (20, 45, 30.0, 'clay')])
        )

        def extent(p):
            return (float(p.tops.min()), p.bottom_depth)

        # a tuple matching the horizon count is spread over the horizons
        spread = profile_apply(spc, extent)
        assert spread.index.tolist() == spc.horizon_ids
        assert spread.tolist() == [0.0, 30.0, 0.0, 45.0]

        whole = profile_apply(spc, extent, mode='site')
        assert whole.to_dict() == {'A': (0.0, 30.0), 'B': (0.0, 45.0)}

        as_mapping = profile_apply(spc, lambda p: dict(zip(('top', 'bottom'), extent(p))))
        assert as_mapping.loc['B'].tolist() == [0.0, 45.0]

    def test_user_errors_name_the_profile(self, mixed_collection):
        def fragile(p):
            if p.profile_id == 'P2':
                raise KeyError('missing column')
            return 1

        with pytest.raises(ProfileApplyError, match="'P2'") as info:
            profile_apply(mixed_collection, fragile)
        assert info.value.profile_id == 'P2'
        assert isinstance(info.value.__cause__, KeyError)

    def test_package_errors_pass_through(self, mixed_collection):
        def strict(p):
            raise EmptySelectionError("nothing here")

        with pytest.raises(EmptySelectionError):
            profile_apply(mixed_collection, strict, max_workers=2)


class TestMutate:

    def test_mutate_site(self, mixed_collection):
        spc = mutate_site(mixed_collection, 'base', lambda p: p.bottom_depth)
        assert spc.site['base'].tolist() == [50.0, 40.0, 60.0]

    def test_mutate_site_with_records(self, mixed_collection):
        spc = mutate_site(mixed_collection, 'depth', lambda p: {'top': p.top_depth, 'base': p.bottom_depth})
        assert {'depth_top', 'depth_base'} <= set(spc.site_attribute_names)

    def test_mutate_horizons(self, mixed_collection):
        spc = mutate_horizons(mixed_collection, 'thick', lambda p: p.bottoms - p.tops)
        assert spc.profile('P3').horizons['thick'].tolist() == [20.0, 30.0]
