# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 soilprofiles developers

"""Single-profile view over a collection."""

from dataclasses import dataclass, replace
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from soilprofiles.core.config import ProfileSchema

from .attributes import AttributeKind, TaggedValue, column_kind, tag_record


@dataclass(frozen=True)
class ProfileView:
    """
    Read-only view of one profile: its horizons (top-down) and its site record.

    Views are produced by ``SoilProfileCollection.profile`` and by the ragged
    selector; they own private copies of their rows, so functions applied to
    a view cannot alter the collection it came from.

    Attributes:
        profile_id: Profile key
        horizons: Horizon rows of this profile, index reset to 0..n-1
        site: Site record of this profile
        schema: Column names of the parent collection
    """

    profile_id: Any
    horizons: pd.DataFrame
    site: pd.Series
    schema: ProfileSchema

    @property
    def n_horizons(self) -> int:
        return len(self.horizons)

    def __len__(self) -> int:
        return self.n_horizons

    @property
    def is_empty(self) -> bool:
        """True when the view holds zero horizons (e.g. an empty ragged selection)."""
        return self.n_horizons == 0

    @property
    def tops(self) -> np.ndarray:
        return self.horizons[self.schema.top_column].to_numpy(dtype=float)

    @property
    def bottoms(self) -> np.ndarray:
        return self.horizons[self.schema.bottom_column].to_numpy(dtype=float)

    @property
    def horizon_ids(self) -> List[Any]:
        return self.horizons[self.schema.horizon_id_column].tolist()

    @property
    def top_depth(self) -> float:
        """Shallowest top depth, NaN for an empty view."""
        tops = self.tops
        return float(np.nanmin(tops)) if np.any(~np.isnan(tops)) else np.nan

    @property
    def bottom_depth(self) -> float:
        """True base of the profile: deepest recorded bottom, NaN when none is recorded."""
        bottoms = self.bottoms
        return float(np.nanmax(bottoms)) if np.any(~np.isnan(bottoms)) else np.nan

    @property
    def attribute_columns(self) -> List[str]:
        """Horizon attribute names, excluding the structural columns."""
        structural = set(self.schema.structural_columns)
        return [c for c in self.horizons.columns if c not in structural]

    def attribute_kinds(self) -> Dict[str, AttributeKind]:
        return {c: column_kind(self.horizons[c]) for c in self.attribute_columns}

    def horizon_attributes(self, index: int) -> Dict[str, TaggedValue]:
        """Tagged attribute values of the horizon at position ``index`` (top-down)."""
        return tag_record(self.horizons.iloc[index], self.attribute_kinds())

    def site_attributes(self) -> Dict[str, TaggedValue]:
        """Tagged site values, excluding the profile key."""
        names = [c for c in self.site.index if c != self.schema.id_column]
        kinds = {
            name: column_kind(pd.Series([self.site[name]])) for name in names
        }
        return tag_record(self.site, kinds)

    def with_horizons(self, horizons: pd.DataFrame) -> 'ProfileView':
        """Return a view of the same profile carrying ``horizons``."""
        return replace(self, horizons=horizons.reset_index(drop=True))
