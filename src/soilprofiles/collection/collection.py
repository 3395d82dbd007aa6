# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""
SoilProfileCollection: the two linked relations (site, horizons) of a set of profiles.

The collection owns one site table (one row per profile) and one horizon table
(one row per horizon) joined by the profile key. Horizon rows are stored
contiguously per profile in collection order, so a profile's rows can be
sliced out by offset without grouping.

Collections are immutable values: every method that changes content returns
a new collection, and the table accessors hand out copies.
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from soilprofiles.core.config import ProfileSchema, ensure_config
from soilprofiles.core.constants import ColumnDefaults
from soilprofiles.core.exceptions import (
    MissingProfileLinkError,
    ValidationError,
    require,
    require_not_none,
)

from .attributes import AttributeKind, column_kind
from .profile import ProfileView

logger = logging.getLogger(__name__)

TableLike = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]

AUXILIARY_COLUMNS = (ColumnDefaults.KIND, ColumnDefaults.TOP, ColumnDefaults.BOTTOM)


def _as_frame(data: Optional[TableLike], name: str) -> Optional[pd.DataFrame]:
    if data is None:
        return None
    if isinstance(data, pd.DataFrame):
        return data.copy()
    try:
        return pd.DataFrame(list(data))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Cannot build {name} table from {type(data).__name__}: {e}") from e


def _numeric_depths(frame: pd.DataFrame, columns: Iterable[str], name: str) -> None:
    for col in columns:
        try:
            frame[col] = pd.to_numeric(frame[col], errors='raise').astype(float)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"{name} column '{col}' must be numeric: {e}") from e


class SoilProfileCollection:
    """
    A collection of soil profiles built from flat horizon (and optional site) records.

    Profiles are created by grouping horizon rows by the profile key; profile
    order is the order in which keys first appear in the horizon records.
    Rows of one profile keep their given order, so unsorted input must go
    through ``repair_depth_order`` before depth operations.

    Args:
        horizons: Horizon rows with profile key, top and bottom columns plus attributes
        site: Optional site rows keyed 1:1 by profile key
        schema: Column names (ProfileSchema or mapping); defaults to id/hzID/top/bottom
        diagnostics: Optional long-format diagnostic features (id, kind, top, bottom)
        restrictions: Optional long-format restrictions (id, kind, top, bottom)

    Raises:
        ValidationError: Missing structural columns, non-numeric depths,
            duplicated horizon IDs or site keys, name clashes between relations
        MissingProfileLinkError: Horizon, site or auxiliary rows referencing absent keys

    Example:
        >>> spc = SoilProfileCollection(
        ...     [{'id': 'A', 'top': 0, 'bottom': 10, 'clay': 20},
        ...      {'id': 'A', 'top': 10, 'bottom': 20, 'clay': 30}])
        >>> len(spc), spc.n_horizons
        (1, 2)
    """

    def __init__(
        self,
        horizons: TableLike,
        site: Optional[TableLike] = None,
        schema: Optional[Union[ProfileSchema, Mapping[str, Any]]] = None,
        diagnostics: Optional[TableLike] = None,
        restrictions: Optional[TableLike] = None,
    ):
        self._schema = ensure_config(ProfileSchema, schema if schema is not None else {})
        self._horizons = self._build_horizons(_as_frame(horizons, 'horizon'))
        self._profile_ids: List[Any] = list(pd.unique(self._horizons[self._schema.id_column]))
        self._positions = {k: i for i, k in enumerate(self._profile_ids)}
        self._site = self._build_site(_as_frame(site, 'site'))

        counts = (
            self._horizons.groupby(self._schema.id_column, sort=False).size()
            .reindex(self._profile_ids).to_numpy()
        )
        self._offsets = np.concatenate([[0], np.cumsum(counts)]).astype(int)

        self._diagnostics = self._build_auxiliary(_as_frame(diagnostics, 'diagnostic'), 'diagnostic')
        self._restrictions = self._build_auxiliary(_as_frame(restrictions, 'restriction'), 'restriction')

        logger.debug(
            f"Built collection with {len(self._profile_ids)} profiles "
            f"and {len(self._horizons)} horizons"
        )

    # =========================================================================
    # Construction helpers
    # =========================================================================

    def _build_horizons(self, frame: pd.DataFrame) -> pd.DataFrame:
        s = self._schema
        if frame is None or (frame.empty and len(frame.columns) == 0):
            frame = empty_horizon_frame(s)

        missing = [c for c in (s.id_column, s.top_column, s.bottom_column) if c not in frame.columns]
        if missing:
            raise ValidationError(f"Horizon table is missing required columns: {missing}")
        if frame[s.id_column].isna().any():
            raise ValidationError("Horizon table contains rows without a profile key")
        _numeric_depths(frame, (s.top_column, s.bottom_column), 'Horizon')

        # group rows contiguously per profile, keeping within-profile order
        order = pd.unique(frame[s.id_column])
        codes = pd.Categorical(frame[s.id_column], categories=order).codes
        positions = np.argsort(codes, kind='stable')
        if np.any(positions != np.arange(len(positions))):
            logger.debug("Horizon rows were not contiguous per profile; regrouped by profile key")
        frame = frame.iloc[positions].reset_index(drop=True)

        if s.horizon_id_column not in frame.columns:
            frame.insert(1, s.horizon_id_column, np.arange(1, len(frame) + 1))
        else:
            hzids = frame[s.horizon_id_column]
            if hzids.isna().any():
                raise ValidationError(f"Horizon IDs ('{s.horizon_id_column}') must not be missing")
            duplicated = hzids[hzids.duplicated()].unique().tolist()
            if duplicated:
                raise ValidationError(f"Horizon IDs must be unique, duplicated: {duplicated[:10]}")
        return frame

    def _build_site(self, frame: Optional[pd.DataFrame]) -> pd.DataFrame:
        id_col = self._schema.id_column
        if frame is None:
            return pd.DataFrame({id_col: pd.Series(self._profile_ids, dtype=self._horizons[id_col].dtype)})

        require(id_col in frame.columns, f"Site table is missing the profile key column '{id_col}'")
        duplicated = frame[id_col][frame[id_col].duplicated()].unique().tolist()
        if duplicated:
            raise ValidationError(f"Site table must have one row per profile, duplicated keys: {duplicated[:10]}")

        site_keys = set(frame[id_col])
        orphan_horizons = [k for k in self._profile_ids if k not in site_keys]
        if orphan_horizons:
            raise MissingProfileLinkError(
                f"Horizon rows reference profile keys absent from the site table: {orphan_horizons[:10]}",
                profile_ids=orphan_horizons,
            )
        hz_keys = set(self._profile_ids)
        orphan_sites = [k for k in frame[id_col] if k not in hz_keys]
        if orphan_sites:
            raise MissingProfileLinkError(
                f"Site rows have no horizons: {orphan_sites[:10]}",
                profile_ids=orphan_sites,
            )

        clashes = sorted(set(frame.columns) & set(self._horizons.columns) - {id_col})
        if clashes:
            raise ValidationError(f"Column names shared by site and horizon tables: {clashes}")

        return frame.set_index(id_col).loc[self._profile_ids].reset_index()

    def _build_auxiliary(self, frame: Optional[pd.DataFrame], name: str) -> pd.DataFrame:
        id_col = self._schema.id_column
        columns = [id_col, *AUXILIARY_COLUMNS]
        if frame is None:
            return pd.DataFrame({
                c: pd.Series(dtype=float if c in (ColumnDefaults.TOP, ColumnDefaults.BOTTOM) else object)
                for c in columns
            })

        missing = [c for c in columns if c not in frame.columns]
        if missing:
            raise ValidationError(f"{name.capitalize()} table is missing required columns: {missing}")
        _numeric_depths(frame, (ColumnDefaults.TOP, ColumnDefaults.BOTTOM), name.capitalize())
        known = set(self._profile_ids)
        unknown = [k for k in pd.unique(frame[id_col]) if k not in known]
        if unknown:
            raise MissingProfileLinkError(
                f"{name.capitalize()} rows reference unknown profile keys: {unknown[:10]}",
                profile_ids=unknown,
            )
        return frame.reset_index(drop=True)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def schema(self) -> ProfileSchema:
        return self._schema

    @property
    def horizons(self) -> pd.DataFrame:
        """Copy of the horizon table."""
        return self._horizons.copy()

    @property
    def site(self) -> pd.DataFrame:
        """Copy of the site table, one row per profile in collection order."""
        return self._site.copy()

    @property
    def diagnostics(self) -> pd.DataFrame:
        return self._diagnostics.copy()

    @property
    def restrictions(self) -> pd.DataFrame:
        return self._restrictions.copy()

    @property
    def profile_ids(self) -> List[Any]:
        return list(self._profile_ids)

    @property
    def horizon_ids(self) -> List[Any]:
        return self._horizons[self._schema.horizon_id_column].tolist()

    @property
    def n_horizons(self) -> int:
        return len(self._horizons)

    def __len__(self) -> int:
        return len(self._profile_ids)

    def __iter__(self) -> Iterator[ProfileView]:
        return self.iter_profiles()

    def __repr__(self) -> str:
        if len(self) == 0:
            return "SoilProfileCollection(n_profiles=0, n_horizons=0)"
        return (
            f"SoilProfileCollection(n_profiles={len(self)}, n_horizons={self.n_horizons}, "
            f"depth=[{self.min_depth():g}, {self.max_depth():g}])"
        )

    @property
    def horizon_attribute_names(self) -> List[str]:
        structural = set(self._schema.structural_columns)
        return [c for c in self._horizons.columns if c not in structural]

    @property
    def site_attribute_names(self) -> List[str]:
        return [c for c in self._site.columns if c != self._schema.id_column]

    def attribute_kinds(self) -> Dict[str, AttributeKind]:
        """Kind tag of every horizon attribute column."""
        return {c: column_kind(self._horizons[c]) for c in self.horizon_attribute_names}

    def horizon_counts(self) -> pd.Series:
        return pd.Series(np.diff(self._offsets), index=pd.Index(self._profile_ids, name=self._schema.id_column),
                         name='n_horizons')

    def position_of(self, profile_id: Any) -> int:
        """Position of ``profile_id`` in collection order."""
        try:
            return self._positions[profile_id]
        except KeyError:
            raise MissingProfileLinkError(f"Unknown profile key: {profile_id!r}", profile_ids=[profile_id])

    def _profile_rows(self, position: int) -> pd.DataFrame:
        return self._horizons.iloc[self._offsets[position]:self._offsets[position + 1]]

    def profile_at(self, position: int) -> ProfileView:
        """View of the profile at ``position`` in collection order."""
        n = len(self)
        if not -n <= position < n:
            raise IndexError(f"Profile position {position} out of range for {n} profiles")
        position %= n
        return ProfileView(
            profile_id=self._profile_ids[position],
            horizons=self._profile_rows(position).reset_index(drop=True),
            site=self._site.iloc[position].copy(),
            schema=self._schema,
        )

    def profile(self, profile_id: Any) -> ProfileView:
        """View of the profile with key ``profile_id``."""
        return self.profile_at(self.position_of(profile_id))

    def iter_profiles(self) -> Iterator[ProfileView]:
        for position in range(len(self)):
            yield self.profile_at(position)

    # =========================================================================
    # Depth summaries
    # =========================================================================

    def depth_range(self) -> pd.DataFrame:
        """Shallowest top and deepest bottom per profile."""
        s = self._schema
        grouped = self._horizons.groupby(s.id_column, sort=False)
        frame = pd.DataFrame({
            s.top_column: grouped[s.top_column].min(),
            s.bottom_column: grouped[s.bottom_column].max(),
        })
        return frame.reindex(self._profile_ids)

    def depth_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Top depths, bottom depths and per-profile row offsets of the horizon table."""
        s = self._schema
        return (
            self._horizons[s.top_column].to_numpy(dtype=float),
            self._horizons[s.bottom_column].to_numpy(dtype=float),
            self._offsets.copy(),
        )

    def min_depth(self) -> float:
        return float(self._horizons[self._schema.top_column].min()) if self.n_horizons else np.nan

    def max_depth(self) -> float:
        """Deepest recorded bottom in the collection."""
        return float(self._horizons[self._schema.bottom_column].max()) if self.n_horizons else np.nan

    def thickness(self) -> pd.Series:
        """Horizon thickness indexed by horizon ID."""
        s = self._schema
        values = self._horizons[s.bottom_column] - self._horizons[s.top_column]
        return pd.Series(values.to_numpy(), index=pd.Index(self.horizon_ids, name=s.horizon_id_column),
                         name='thickness')

    def midpoints(self) -> pd.Series:
        """Horizon mid-depth indexed by horizon ID."""
        s = self._schema
        values = (self._horizons[s.bottom_column] + self._horizons[s.top_column]) / 2.0
        return pd.Series(values.to_numpy(), index=pd.Index(self.horizon_ids, name=s.horizon_id_column),
                         name='midpoint')

    # =========================================================================
    # Derivation
    # =========================================================================

    def _derive(
        self,
        horizons: Optional[pd.DataFrame] = None,
        site: Optional[pd.DataFrame] = None,
    ) -> 'SoilProfileCollection':
        """New collection from replacement tables; auxiliary rows follow the remaining keys."""
        horizons = self._horizons if horizons is None else horizons
        site = self._site if site is None else site
        id_col = self._schema.id_column
        keep = set(horizons[id_col])
        return SoilProfileCollection(
            horizons=horizons,
            site=site[site[id_col].isin(keep)],
            schema=self._schema,
            diagnostics=self._diagnostics[self._diagnostics[id_col].isin(keep)],
            restrictions=self._restrictions[self._restrictions[id_col].isin(keep)],
        )

    def with_horizon_table(self, horizons: pd.DataFrame) -> 'SoilProfileCollection':
        """
        Replace the horizon table, keeping site and auxiliary rows of the profiles still present.

        Profiles missing from ``horizons`` are dropped from the site table.
        """
        return self._derive(horizons=horizons)

    def take(self, positions: Union[Sequence[int], Sequence[bool], np.ndarray, slice]) -> 'SoilProfileCollection':
        """
        Subset (and optionally reorder) profiles by position or boolean mask.

        The order of ``positions`` becomes the profile order of the result.
        """
        n = len(self)
        if isinstance(positions, slice):
            idx = np.arange(n)[positions]
        else:
            arr = np.asarray(positions)
            if arr.dtype == bool:
                if len(arr) != n:
                    raise ValidationError(f"Boolean mask has length {len(arr)}, expected {n}")
                idx = np.flatnonzero(arr)
            else:
                idx = arr.astype(int).ravel()
                if idx.size and (idx.min() < -n or idx.max() >= n):
                    raise IndexError(f"Profile positions out of range for {n} profiles")
                idx = idx % n if n else idx
        if len(set(idx.tolist())) != len(idx):
            raise ValidationError("Profile positions must not repeat")

        if len(idx):
            rows = np.concatenate([
                np.arange(self._offsets[i], self._offsets[i + 1]) for i in idx
            ])
        else:
            rows = np.array([], dtype=int)
        horizons = self._horizons.iloc[rows].reset_index(drop=True)
        site = self._site.iloc[idx].reset_index(drop=True)
        return self._derive(horizons=horizons, site=site)

    def subset(self, profile_ids: Iterable[Any]) -> 'SoilProfileCollection':
        """Subset (and reorder) profiles by key, in the order given."""
        return self.take([self.position_of(k) for k in profile_ids])

    def with_site_attributes(
        self, values: Union[pd.DataFrame, pd.Series, Mapping[str, Any]]
    ) -> 'SoilProfileCollection':
        """
        Add or replace site columns.

        Series and DataFrames are aligned on the profile key (their index, or
        the key column of a DataFrame); plain sequences must follow collection order.
        """
        id_col = self._schema.id_column
        if isinstance(values, pd.Series):
            values = values.to_frame(require_not_none(values.name, "Site attribute Series name"))
        if isinstance(values, pd.DataFrame):
            frame = values.set_index(id_col) if id_col in values.columns else values
            missing = [k for k in self._profile_ids if k not in frame.index]
            if missing:
                raise MissingProfileLinkError(
                    f"Site attributes missing for profiles: {missing[:10]}", profile_ids=missing
                )
            columns = {c: frame[c].reindex(self._profile_ids).to_numpy() for c in frame.columns}
        else:
            columns = {}
            for name, col in values.items():
                col = np.asarray(col, dtype=object) if not isinstance(col, np.ndarray) else col
                if len(col) != len(self):
                    raise ValidationError(
                        f"Site attribute '{name}' has length {len(col)}, expected {len(self)}"
                    )
                columns[name] = col

        self._check_new_names(columns, self.horizon_attribute_names, 'horizon')
        site = self._site.copy()
        for name, col in columns.items():
            site[name] = pd.Series(col).infer_objects().to_numpy() if col.dtype == object else col
        return self._derive(site=site)

    def with_horizon_attributes(
        self, values: Union[pd.DataFrame, pd.Series, Mapping[str, Any]]
    ) -> 'SoilProfileCollection':
        """
        Add or replace horizon columns.

        Series and DataFrames are aligned on horizon ID (their index); plain
        sequences must follow horizon-table order.
        """
        if isinstance(values, pd.Series):
            values = values.to_frame(require_not_none(values.name, "Horizon attribute Series name"))
        hzids = self.horizon_ids
        if isinstance(values, pd.DataFrame):
            missing = [h for h in hzids if h not in values.index]
            if missing:
                raise ValidationError(f"Horizon attributes missing for horizon IDs: {missing[:10]}")
            columns = {c: values[c].reindex(hzids).to_numpy() for c in values.columns}
        else:
            columns = {}
            for name, col in values.items():
                col = np.asarray(col)
                if len(col) != self.n_horizons:
                    raise ValidationError(
                        f"Horizon attribute '{name}' has length {len(col)}, expected {self.n_horizons}"
                    )
                columns[name] = col

        structural = set(self._schema.structural_columns)
        protected = sorted(structural & set(columns))
        if protected:
            raise ValidationError(f"Cannot overwrite structural horizon columns: {protected}")
        self._check_new_names(columns, self.site_attribute_names, 'site')
        horizons = self._horizons.copy()
        for name, col in columns.items():
            horizons[name] = col
        return self._derive(horizons=horizons)

    @staticmethod
    def _check_new_names(columns: Mapping[str, Any], other: List[str], relation: str) -> None:
        clashes = sorted(set(columns) & set(other))
        if clashes:
            raise ValidationError(f"Column names already used by the {relation} table: {clashes}")

    def promote_to_site(self, column: str) -> 'SoilProfileCollection':
        """
        Move a horizon column holding one value per profile to the site table.

        Missing values are ignored when checking uniqueness; a profile whose
        horizons carry two distinct non-missing values cannot be promoted.
        """
        require(column in self.horizon_attribute_names, f"Unknown horizon attribute: '{column}'")
        id_col = self._schema.id_column
        grouped = self._horizons.groupby(id_col, sort=False)[column]
        n_unique = grouped.nunique(dropna=True)
        conflicting = n_unique[n_unique > 1].index.tolist()
        if conflicting:
            raise ValidationError(
                f"Horizon attribute '{column}' varies within profiles {conflicting[:10]}; "
                "only same-valued columns can move to the site table"
            )
        values = grouped.first().reindex(self._profile_ids)
        site = self._site.copy()
        site[column] = values.to_numpy()
        horizons = self._horizons.drop(columns=[column])
        logger.debug(f"Promoted horizon attribute '{column}' to site level")
        return self._derive(horizons=horizons, site=site)

    def demote_to_horizons(self, column: str) -> 'SoilProfileCollection':
        """Copy a site column onto every horizon of its profile and remove it from the site table."""
        require(column in self.site_attribute_names, f"Unknown site attribute: '{column}'")
        counts = np.diff(self._offsets)
        horizons = self._horizons.copy()
        horizons[column] = np.repeat(self._site[column].to_numpy(), counts)
        site = self._site.drop(columns=[column])
        logger.debug(f"Demoted site attribute '{column}' to horizon level")
        return self._derive(horizons=horizons, site=site)

    def fill_gaps(self, to_surface: bool = False) -> 'SoilProfileCollection':
        """
        Insert attribute-less horizons into depth gaps between consecutive horizons.

        Args:
            to_surface: Also fill from depth 0 down to the first horizon's top

        Returns:
            New collection; original horizon IDs are kept, filler horizons get new IDs
        """
        s = self._schema
        fillers = []
        for position in range(len(self)):
            rows = self._profile_rows(position)
            tops = rows[s.top_column].to_numpy()
            bottoms = rows[s.bottom_column].to_numpy()
            pid = self._profile_ids[position]
            if to_surface and len(tops) and tops[0] > 0:
                fillers.append({s.id_column: pid, s.top_column: 0.0, s.bottom_column: tops[0]})
            for upper_bottom, lower_top in zip(bottoms[:-1], tops[1:]):
                if not np.isnan(upper_bottom) and upper_bottom < lower_top:
                    fillers.append({s.id_column: pid, s.top_column: upper_bottom, s.bottom_column: lower_top})

        if not fillers:
            return self
        logger.info(f"Filling {len(fillers)} depth gaps")

        filler_frame = pd.DataFrame(fillers)
        existing = self._horizons[s.horizon_id_column]
        if pd.api.types.is_integer_dtype(existing.dtype):
            start = int(existing.max()) + 1 if len(existing) else 1
            filler_frame[s.horizon_id_column] = np.arange(start, start + len(filler_frame))
        else:
            filler_frame[s.horizon_id_column] = [f"fill-{i + 1}" for i in range(len(filler_frame))]

        combined = pd.concat([self._horizons, filler_frame], ignore_index=True)
        order = {k: i for i, k in enumerate(self._profile_ids)}
        combined['_profile_order'] = combined[s.id_column].map(order)
        combined = (
            combined.sort_values(['_profile_order', s.top_column], kind='stable')
            .drop(columns=['_profile_order'])
            .reset_index(drop=True)
        )
        return self._derive(horizons=combined[self._horizons.columns])

    # =========================================================================
    # Combination
    # =========================================================================

    @classmethod
    def from_profiles(
        cls,
        profiles: Iterable[ProfileView],
        schema: Optional[Union[ProfileSchema, Mapping[str, Any]]] = None,
        diagnostics: Optional[TableLike] = None,
        restrictions: Optional[TableLike] = None,
    ) -> 'SoilProfileCollection':
        """
        Build a collection from profile views; empty views are skipped.

        The schema defaults to the schema of the first view.
        """
        views = list(profiles)
        if schema is None:
            schema = views[0].schema if views else ProfileSchema()
        schema = ensure_config(ProfileSchema, schema)
        kept = [v for v in views if not v.is_empty]
        if len(kept) < len(views):
            logger.debug(f"Skipped {len(views) - len(kept)} empty profiles")
        if not kept:
            return cls(empty_horizon_frame(schema), schema=schema)
        horizons = pd.concat([v.horizons for v in kept], ignore_index=True)
        site = pd.DataFrame([v.site for v in kept]).reset_index(drop=True)
        return cls(horizons, site=site, schema=schema, diagnostics=diagnostics, restrictions=restrictions)

    def combine(self, *others: 'SoilProfileCollection') -> 'SoilProfileCollection':
        """
        Concatenate collections with disjoint profile keys.

        Horizon IDs are regenerated when they collide across collections.
        Columns absent from some inputs are filled with missing values.
        """
        collections = [self, *others]
        for other in others:
            if other.schema != self._schema:
                raise ValidationError("Cannot combine collections with different schemas")
        keys: List[Any] = []
        for c in collections:
            keys.extend(c.profile_ids)
        duplicated = sorted(str(k) for k, n in Counter(keys).items() if n > 1)
        if duplicated:
            raise ValidationError(f"Cannot combine collections sharing profile keys: {duplicated[:10]}")

        s = self._schema
        horizons = pd.concat([c._horizons for c in collections], ignore_index=True)
        if horizons[s.horizon_id_column].duplicated().any():
            logger.info("Horizon IDs collide across collections; regenerating")
            horizons[s.horizon_id_column] = np.arange(1, len(horizons) + 1)
        return SoilProfileCollection(
            horizons=horizons,
            site=pd.concat([c._site for c in collections], ignore_index=True),
            schema=s,
            diagnostics=pd.concat([c._diagnostics for c in collections], ignore_index=True),
            restrictions=pd.concat([c._restrictions for c in collections], ignore_index=True),
        )


def empty_horizon_frame(schema: ProfileSchema) -> pd.DataFrame:
    return pd.DataFrame(columns=[schema.id_column, schema.top_column, schema.bottom_column])


__all__ = ['SoilProfileCollection', 'AUXILIARY_COLUMNS', 'empty_horizon_frame']
