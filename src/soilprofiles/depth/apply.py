# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
Per-profile execution.

Profiles are independent, so every per-profile computation (user functions,
slicing, slab contributions) goes through ``map_profiles``: each task writes
to its own result slot and the caller receives results in collection order,
whether the work ran serially or on a thread pool.
"""

import concurrent.futures
import logging
from typing import Any, Callable, List, Literal, Mapping, Optional, Sequence, TypeVar

import numpy as np
import pandas as pd

from soilprofiles.collection import ProfileView, SoilProfileCollection
from soilprofiles.core.config import ExecutionConfig, ensure_config
from soilprofiles.core.exceptions import (
    ProfileApplyError,
    ShapeMismatchError,
    SoilProfilesError,
)

logger = logging.getLogger(__name__)

R = TypeVar('R')

ApplyMode = Literal['auto', 'site', 'horizon']


def _resolve_workers(max_workers: Optional[int], n_tasks: int) -> int:
    workers = ensure_config(ExecutionConfig, {'max_workers': max_workers or 1}).max_workers
    return max(1, min(workers, n_tasks))


def map_profiles(
    collection: SoilProfileCollection,
    fn: Callable[[ProfileView], R],
    max_workers: Optional[int] = 1,
    desc: str = "Processing profiles",
) -> List[R]:
    """
    Apply ``fn`` to every profile view and return the results in collection order.

    Args:
        collection: Source collection
        fn: Function of one ProfileView
        max_workers: Thread pool size; 1 runs serially
        desc: Description for logging

    Returns:
        One result per profile, in collection order

    Raises:
        ProfileApplyError: Wrapping any non-soilprofiles exception raised by ``fn``,
            with the offending profile key attached
    """
    n = len(collection)
    results: List[Any] = [None] * n
    workers = _resolve_workers(max_workers, n)

    def run(position: int) -> None:
        view = collection.profile_at(position)
        try:
            results[position] = fn(view)
        except SoilProfilesError:
            raise
        except Exception as e:
            raise ProfileApplyError(
                f"{desc} failed for profile {view.profile_id!r}: {e}",
                profile_id=view.profile_id,
            ) from e

    if workers <= 1:
        logger.debug(f"{desc}: {n} profiles (serial)")
        for position in range(n):
            run(position)
        return results

    logger.debug(f"{desc}: {n} profiles with {workers} workers")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(run, position) for position in range(n)]
        for future in concurrent.futures.as_completed(futures):
            # re-raises the first failure; remaining futures finish on exit
            future.result()
    return results


def _result_kind(value: Any) -> str:
    if isinstance(value, Mapping):
        return 'site'
    if isinstance(value, (str, bytes)):
        return 'scalar'
    if isinstance(value, (pd.Series, np.ndarray, list, tuple)):
        if isinstance(value, np.ndarray) and value.ndim == 0:
            return 'scalar'
        return 'horizon'
    return 'scalar'


def profile_apply(
    collection: SoilProfileCollection,
    fn: Callable[[ProfileView], Any],
    mode: ApplyMode = 'auto',
    name: Optional[str] = None,
    max_workers: Optional[int] = 1,
):
    """
    Apply a function independently to each profile and combine the results.

    Combination rules:

    - scalar results: Series with one value per profile, indexed by profile key
    - mapping results: DataFrame with one row per profile, indexed by profile key
    - sequence results: Series aligned with the horizon table (indexed by horizon ID);
      every sequence must have exactly as many items as its profile has horizons

    ``mode='site'`` forces per-profile combination (sequences are then kept
    as single object values); ``mode='horizon'`` requires sequences.
    In auto mode any list, tuple or array is read as per-horizon values, so a
    fixed-length record such as ``(top, bottom)`` should be returned as a
    mapping, or combined with ``mode='site'``.

    Args:
        collection: Source collection
        fn: Function of one ProfileView
        mode: 'auto', 'site' or 'horizon'
        name: Name of the resulting Series
        max_workers: Thread pool size; 1 runs serially

    Returns:
        pandas Series or DataFrame, in collection order

    Raises:
        ShapeMismatchError: Per-horizon length mismatch, or mixed result kinds
        ProfileApplyError: ``fn`` failed for a profile
    """
    s = collection.schema
    results = map_profiles(collection, fn, max_workers=max_workers, desc="profile_apply")
    profile_index = pd.Index(collection.profile_ids, name=s.id_column)
    series_name = name or getattr(fn, '__name__', None)

    if not results:
        return pd.Series([], index=profile_index, name=series_name, dtype=float)

    if mode == 'site':
        if all(isinstance(r, Mapping) for r in results):
            return pd.DataFrame(list(results), index=profile_index)
        return pd.Series(results, index=profile_index, name=series_name)

    kinds = {_result_kind(r) for r in results}
    if mode == 'horizon' and kinds != {'horizon'}:
        raise ShapeMismatchError(
            f"profile_apply(mode='horizon') expects sequences for every profile, got {sorted(kinds)}"
        )
    if len(kinds) > 1:
        raise ShapeMismatchError(f"profile_apply results mix incompatible kinds: {sorted(kinds)}")
    kind = kinds.pop()

    if kind == 'scalar':
        return pd.Series(results, index=profile_index, name=series_name)
    if kind == 'site':
        return pd.DataFrame(list(results), index=profile_index)

    counts = collection.horizon_counts()
    pieces = []
    for pid, result in zip(collection.profile_ids, results):
        values = np.asarray(result.to_numpy() if isinstance(result, pd.Series) else result)
        if values.ndim != 1 or len(values) != counts[pid]:
            raise ShapeMismatchError(
                f"profile_apply result for profile {pid!r} has shape {values.shape}, "
                f"expected {counts[pid]} values (one per horizon)",
                profile_id=pid,
                expected=int(counts[pid]),
                actual=int(values.size),
            )
        pieces.append(values)
    combined = np.concatenate(pieces) if pieces else np.array([])
    return pd.Series(
        combined,
        index=pd.Index(collection.horizon_ids, name=s.horizon_id_column),
        name=series_name,
    )


def mutate_site(
    collection: SoilProfileCollection,
    name: str,
    fn: Callable[[ProfileView], Any],
    max_workers: Optional[int] = 1,
) -> SoilProfileCollection:
    """Compute a per-profile value with ``fn`` and store it as site attribute ``name``."""
    values = profile_apply(collection, fn, mode='site', name=name, max_workers=max_workers)
    if isinstance(values, pd.DataFrame):
        return collection.with_site_attributes(values.add_prefix(f"{name}_"))
    return collection.with_site_attributes(values)


def mutate_horizons(
    collection: SoilProfileCollection,
    name: str,
    fn: Callable[[ProfileView], Sequence[Any]],
    max_workers: Optional[int] = 1,
) -> SoilProfileCollection:
    """Compute one value per horizon with ``fn`` and store them as horizon attribute ``name``."""
    values = profile_apply(collection, fn, mode='horizon', name=name, max_workers=max_workers)
    return collection.with_horizon_attributes(values)


__all__ = ['map_profiles', 'profile_apply', 'mutate_site', 'mutate_horizons']
