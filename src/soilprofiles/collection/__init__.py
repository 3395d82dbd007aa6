"""Profile collection data model: site and horizon relations, views and depth validation."""

from .attributes import MISSING, AttributeKind, TaggedValue, column_kind, tag_value
from .auxiliary import depth_to_restriction, has_diagnostic
from .collection import SoilProfileCollection
from .profile import ProfileView
from .validation import (
    DepthIssue,
    DepthLogicResult,
    ProfileDepthReport,
    check_depth_logic,
    check_profile_depths,
    horizon_depth_issues,
    repair_depth_order,
    require_valid_depths,
)

__all__ = [
    'MISSING',
    'AttributeKind',
    'TaggedValue',
    'column_kind',
    'tag_value',
    'depth_to_restriction',
    'has_diagnostic',
    'SoilProfileCollection',
    'ProfileView',
    'DepthIssue',
    'DepthLogicResult',
    'ProfileDepthReport',
    'check_depth_logic',
    'check_profile_depths',
    'horizon_depth_issues',
    'repair_depth_order',
    'require_valid_depths',
]
