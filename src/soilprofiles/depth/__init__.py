"""Depth algorithms over profile collections: apply, slicing, ragged selection, slabs and dissimilarity."""

from .apply import map_profiles, mutate_horizons, mutate_site, profile_apply
from .dissimilarity import depth_weights, dissimilarity_order, profile_compare
from .estimators import (
    FunctionEstimator,
    QuantileEstimator,
    WeightedMeanEstimator,
    harrell_davis_quantile,
    make_estimator,
    weighted_mean,
    weighted_quantile,
)
from .ragged import glom, glom_collection, trunc, trunc_collection
from .slab import SlabStructure, slab
from .slicing import covering_horizon_index, slice_collection

__all__ = [
    'map_profiles',
    'mutate_horizons',
    'mutate_site',
    'profile_apply',
    'depth_weights',
    'dissimilarity_order',
    'profile_compare',
    'FunctionEstimator',
    'QuantileEstimator',
    'WeightedMeanEstimator',
    'harrell_davis_quantile',
    'make_estimator',
    'weighted_mean',
    'weighted_quantile',
    'glom',
    'glom_collection',
    'trunc',
    'trunc_collection',
    'SlabStructure',
    'slab',
    'covering_horizon_index',
    'slice_collection',
]
