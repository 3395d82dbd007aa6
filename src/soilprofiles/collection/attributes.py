"""
Tagged attribute values.

Horizon and site attribute columns are classified once as numeric or
categorical, and single values are exposed as ``TaggedValue`` so that
aggregation code can branch on the tag instead of inspecting runtime types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

import numpy as np
import pandas as pd


class AttributeKind(str, Enum):
    """Kind tag of an attribute value."""

    NUMERIC = 'numeric'
    CATEGORICAL = 'categorical'
    MISSING = 'missing'


@dataclass(frozen=True)
class TaggedValue:
    """A single attribute value with its kind tag."""

    kind: AttributeKind
    value: Any = None

    @property
    def is_missing(self) -> bool:
        return self.kind is AttributeKind.MISSING


MISSING = TaggedValue(AttributeKind.MISSING, None)


def column_kind(series: pd.Series) -> AttributeKind:
    """
    Classify a column as numeric or categorical.

    Booleans, strings, pandas categoricals and object columns are categorical;
    integer and floating columns are numeric.
    """
    if pd.api.types.is_bool_dtype(series.dtype):
        return AttributeKind.CATEGORICAL
    if pd.api.types.is_numeric_dtype(series.dtype):
        return AttributeKind.NUMERIC
    return AttributeKind.CATEGORICAL


def is_missing(value: Any) -> bool:
    """True for None, NaN and pandas NA/NaT."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # array-like values are never treated as a single missing value
        return False


def tag_value(value: Any, kind: AttributeKind) -> TaggedValue:
    """Wrap a raw value with ``kind``, or the MISSING tag when it is missing."""
    if is_missing(value):
        return MISSING
    if kind is AttributeKind.NUMERIC:
        return TaggedValue(AttributeKind.NUMERIC, float(value))
    if isinstance(value, np.generic):
        value = value.item()
    return TaggedValue(AttributeKind.CATEGORICAL, value)


def tag_record(record: pd.Series, kinds: Dict[str, AttributeKind]) -> Dict[str, TaggedValue]:
    """Tag every field of a row using the column kinds of its table."""
    return {name: tag_value(record[name], kinds[name]) for name in kinds}
