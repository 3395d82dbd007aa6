# src/soilprofiles/__init__.py
try:
    from .soilprofiles_version import __version__
except ImportError:
    try:
        from importlib.metadata import version, PackageNotFoundError
        __version__ = version("soilprofiles")
    except (ImportError, PackageNotFoundError):
        __version__ = "0.0.0"

from .collection import (
    ProfileView,
    SoilProfileCollection,
    check_depth_logic,
    depth_to_restriction,
    has_diagnostic,
    horizon_depth_issues,
    repair_depth_order,
)
from .core import setup_logging
from .core.config import AnalysisConfig, ProfileSchema, load_config
from .depth import (
    dissimilarity_order,
    glom,
    glom_collection,
    mutate_horizons,
    mutate_site,
    profile_apply,
    profile_compare,
    slab,
    slice_collection,
    trunc,
    trunc_collection,
)
from .layout import OverlapResult, find_overlap, fix_overlap

__all__ = [
    "__version__",
    "ProfileView",
    "SoilProfileCollection",
    "check_depth_logic",
    "depth_to_restriction",
    "has_diagnostic",
    "horizon_depth_issues",
    "repair_depth_order",
    "setup_logging",
    "AnalysisConfig",
    "ProfileSchema",
    "load_config",
    "dissimilarity_order",
    "glom",
    "glom_collection",
    "mutate_horizons",
    "mutate_site",
    "profile_apply",
    "profile_compare",
    "slab",
    "slice_collection",
    "trunc",
    "trunc_collection",
    "OverlapResult",
    "find_overlap",
    "fix_overlap",
]
