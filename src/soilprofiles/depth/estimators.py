# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Weighted group estimators used by slab aggregation.

An estimator is any object with a ``statistic_names`` sequence and a
``__call__(values, weights)`` returning a mapping from statistic name to
value. Estimators raise InsufficientDataError when no usable value remains
after dropping missing values and non-positive weights.

Built-in estimators:
    - QuantileEstimator: Harrell-Davis weighted quantiles, with a simple
      weighted-quantile fallback for small effective sample sizes
    - WeightedMeanEstimator: weighted mean and standard deviation
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional, Protocol, Sequence, Tuple, Union

import numpy as np
from scipy import stats

from soilprofiles.core.config import SlabConfig
from soilprofiles.core.constants import SlabDefaults
from soilprofiles.core.exceptions import ConfigurationError, InsufficientDataError

logger = logging.getLogger(__name__)

__all__ = [
    "Estimator",
    "effective_sample_size",
    "weighted_quantile",
    "harrell_davis_quantile",
    "weighted_mean",
    "QuantileEstimator",
    "WeightedMeanEstimator",
    "FunctionEstimator",
    "ESTIMATOR_REGISTRY",
    "make_estimator",
    "list_available_estimators",
]


class Estimator(Protocol):
    """Group summary strategy."""

    statistic_names: Tuple[str, ...]

    def __call__(self, values: np.ndarray, weights: np.ndarray) -> Mapping[str, float]:
        ...


def _clean_weighted(values, weights) -> Tuple[np.ndarray, np.ndarray]:
    """Drop missing values and non-positive or missing weights; sort by value."""
    x = np.asarray(values, dtype=float)
    w = np.asarray(weights, dtype=float)
    if x.shape != w.shape:
        raise ValueError(f"values and weights differ in shape: {x.shape} vs {w.shape}")

    valid = ~np.isnan(x) & ~np.isnan(w) & (w > 0)
    x, w = x[valid], w[valid]
    if x.size == 0:
        raise InsufficientDataError("No values with positive weight to summarize")

    order = np.argsort(x, kind='stable')
    return x[order], w[order]


def effective_sample_size(weights: np.ndarray) -> float:
    """Kish effective sample size ``(sum w)^2 / sum w^2``."""
    w = np.asarray(weights, dtype=float)
    denom = np.sum(w ** 2)
    if denom == 0:
        return 0.0
    return float(np.sum(w) ** 2 / denom)


def weighted_quantile(values, weights, prob: float) -> float:
    """
    Weighted quantile by linear interpolation over weighted plotting positions.

    Sorted values sit at ``(S_j - w_j / 2) / S`` where ``S_j`` is the
    cumulative weight; probabilities outside the first/last position return
    the minimum/maximum.
    """
    x, w = _clean_weighted(values, weights)
    cumulative = np.cumsum(w)
    positions = (cumulative - w / 2) / cumulative[-1]
    return float(np.interp(prob, positions, x))


def harrell_davis_quantile(values, weights, prob: float) -> float:
    """
    Weighted Harrell-Davis quantile.

    Each sorted value receives the Beta(a, b) probability mass of its slice
    of the cumulative normalized weight, with ``a = (n* + 1) p`` and
    ``b = (n* + 1)(1 - p)`` where ``n*`` is the Kish effective sample size.

    Args:
        values: Sample values
        weights: Non-negative sample weights
        prob: Probability in [0, 1]

    Returns:
        Quantile estimate; ``p = 0`` and ``p = 1`` return the minimum and maximum
    """
    x, w = _clean_weighted(values, weights)
    if prob <= 0.0:
        return float(x[0])
    if prob >= 1.0:
        return float(x[-1])
    if x.size == 1:
        return float(x[0])

    n_eff = effective_sample_size(w)
    a = (n_eff + 1.0) * prob
    b = (n_eff + 1.0) * (1.0 - prob)

    edges = np.concatenate([[0.0], np.cumsum(w) / np.sum(w)])
    edges[-1] = 1.0
    mass = np.diff(stats.beta.cdf(edges, a, b))
    return float(np.sum(mass * x))


def weighted_mean(values, weights) -> Tuple[float, float]:
    """Weighted mean and (population) weighted standard deviation."""
    x, w = _clean_weighted(values, weights)
    mean = float(np.average(x, weights=w))
    variance = float(np.average((x - mean) ** 2, weights=w))
    return mean, float(np.sqrt(variance))


def _probability_name(prob: float) -> str:
    pct = prob * 100.0
    if abs(pct - round(pct)) < 1e-9:
        return f"p{int(round(pct)):02d}"
    return f"p{pct:g}"


class QuantileEstimator:
    """
    Harrell-Davis weighted quantiles at fixed probabilities.

    When the effective sample size of a group is below ``min_hd_samples``
    the simple weighted quantile is used instead.
    """

    def __init__(
        self,
        probabilities: Sequence[float] = SlabDefaults.PROBABILITIES,
        min_hd_samples: int = SlabDefaults.MIN_HD_SAMPLES,
    ):
        self.probabilities = tuple(float(p) for p in probabilities)
        self.min_hd_samples = min_hd_samples
        self.statistic_names = tuple(_probability_name(p) for p in self.probabilities)

    def __call__(self, values, weights) -> Dict[str, float]:
        x, w = _clean_weighted(values, weights)
        if effective_sample_size(w) < self.min_hd_samples:
            quantile = weighted_quantile
        else:
            quantile = harrell_davis_quantile
        return {
            name: quantile(x, w, p)
            for name, p in zip(self.statistic_names, self.probabilities)
        }

    def __repr__(self) -> str:
        return f"QuantileEstimator(probabilities={self.probabilities})"


class WeightedMeanEstimator:
    """Weighted mean and standard deviation."""

    statistic_names = ("mean", "sd")

    def __call__(self, values, weights) -> Dict[str, float]:
        mean, sd = weighted_mean(values, weights)
        return {"mean": mean, "sd": sd}

    def __repr__(self) -> str:
        return "WeightedMeanEstimator()"


class FunctionEstimator:
    """
    Adapt a plain function ``fn(values, weights)`` to the estimator protocol.

    The function may return a mapping, a sequence matching ``statistic_names``,
    or a scalar when a single statistic is named. Missing values and
    non-positive weights are removed before the call.
    """

    def __init__(self, fn: Callable, statistic_names: Union[str, Sequence[str]]):
        if isinstance(statistic_names, str):
            statistic_names = (statistic_names,)
        if not statistic_names:
            raise ConfigurationError("FunctionEstimator needs at least one statistic name")
        self.fn = fn
        self.statistic_names = tuple(statistic_names)

    def __call__(self, values, weights) -> Dict[str, float]:
        x, w = _clean_weighted(values, weights)
        result = self.fn(x, w)
        if isinstance(result, Mapping):
            return {name: float(result[name]) for name in self.statistic_names}
        if np.ndim(result) == 0:
            if len(self.statistic_names) != 1:
                raise ValueError(
                    f"Estimator returned a scalar for statistics {self.statistic_names}"
                )
            return {self.statistic_names[0]: float(result)}
        result = list(result)
        if len(result) != len(self.statistic_names):
            raise ValueError(
                f"Estimator returned {len(result)} values for statistics {self.statistic_names}"
            )
        return {name: float(v) for name, v in zip(self.statistic_names, result)}

    def __repr__(self) -> str:
        return f"FunctionEstimator({getattr(self.fn, '__name__', self.fn)!r})"


ESTIMATOR_REGISTRY: Dict[str, Callable[[SlabConfig], Estimator]] = {
    "quantiles": lambda config: QuantileEstimator(config.probabilities, config.min_hd_samples),
    "weighted_mean": lambda config: WeightedMeanEstimator(),
}


def make_estimator(config: SlabConfig, estimator: Optional[Estimator] = None) -> Estimator:
    """Return ``estimator`` when given, else the built-in named by ``config.estimator``."""
    if estimator is not None:
        if not hasattr(estimator, "statistic_names") or not callable(estimator):
            raise ConfigurationError(
                f"Estimator {estimator!r} must be callable and define statistic_names"
            )
        return estimator
    try:
        factory = ESTIMATOR_REGISTRY[config.estimator]
    except KeyError:
        raise ConfigurationError(
            f"Unknown estimator {config.estimator!r}; available: {list_available_estimators()}"
        ) from None
    return factory(config)


def list_available_estimators() -> list:
    """List built-in estimator names."""
    return sorted(ESTIMATOR_REGISTRY)
