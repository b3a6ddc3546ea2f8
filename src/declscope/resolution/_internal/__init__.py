"""Internal components for metadata resolution - not part of public API."""

from declscope.resolution._internal.cache import ComputeIfAbsentMap, LruCache, ResolutionCaches
from declscope.resolution._internal.hierarchy import HierarchyWalker
from declscope.resolution._internal.platform import Platform
from declscope.resolution._internal.repeatable import RepeatableTagCollector, contained_tags
from declscope.resolution._internal.signatures import (
    has_compatible_signature,
    is_field_hidden_by,
    is_method_overridden_by,
)
from declscope.resolution._internal.sorting import sort_fields, sort_methods, stable_name_hash
from declscope.resolution._internal.tags import TagResolver

__all__ = [
    "ComputeIfAbsentMap",
    "HierarchyWalker",
    "LruCache",
    "Platform",
    "RepeatableTagCollector",
    "ResolutionCaches",
    "TagResolver",
    "contained_tags",
    "has_compatible_signature",
    "is_field_hidden_by",
    "is_method_overridden_by",
    "sort_fields",
    "sort_methods",
    "stable_name_hash",
]
