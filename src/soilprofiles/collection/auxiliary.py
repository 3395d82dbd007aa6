"""Per-profile summaries of the diagnostic-feature and restriction tables."""

import logging
from typing import Iterable, Optional

import pandas as pd

from soilprofiles.core.constants import ColumnDefaults

from .collection import SoilProfileCollection

logger = logging.getLogger(__name__)


def depth_to_restriction(
    collection: SoilProfileCollection,
    kinds: Optional[Iterable[str]] = None,
) -> pd.Series:
    """
    Depth to the shallowest restriction of each profile.

    Profiles without a matching restriction report their deepest horizon
    bottom (the whole profile is unrestricted).

    Args:
        collection: Source collection
        kinds: Restriction kinds to consider; all kinds when None

    Returns:
        Series indexed by profile key, in collection order
    """
    id_col = collection.schema.id_column
    restrictions = collection.restrictions
    if kinds is not None:
        restrictions = restrictions[restrictions[ColumnDefaults.KIND].isin(list(kinds))]

    shallowest = restrictions.groupby(id_col, sort=False)[ColumnDefaults.TOP].min()
    base = collection.depth_range()[collection.schema.bottom_column]
    depth = shallowest.reindex(base.index).fillna(base)
    logger.debug(f"{shallowest.size} of {len(collection)} profiles have a matching restriction")
    return depth.rename('restriction_depth')


def has_diagnostic(collection: SoilProfileCollection, kind: str) -> pd.Series:
    """Whether each profile carries at least one diagnostic feature of ``kind``."""
    id_col = collection.schema.id_column
    diagnostics = collection.diagnostics
    present = set(diagnostics.loc[diagnostics[ColumnDefaults.KIND] == kind, id_col])
    return pd.Series(
        [pid in present for pid in collection.profile_ids],
        index=pd.Index(collection.profile_ids, name=id_col),
        name=f"has_{kind}",
    )
