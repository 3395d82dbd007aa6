"""Layout helpers for sketching profiles side by side."""

from .overlap import OverlapResult, find_overlap, fix_overlap, resolve_overlap

__all__ = ['OverlapResult', 'find_overlap', 'fix_overlap', 'resolve_overlap']
