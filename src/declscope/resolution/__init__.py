"""Resolution module - hierarchy and tag queries over declaration graphs.

Public API is in `declscope.resolution.ops`:
- MetadataEngine: member, nested-class and tag queries
- create_engine: engine built from layered configuration

Internal implementations are in `declscope.resolution._internal/`.
"""

from declscope.core.modes import CyclePolicy, TraversalDirection
from declscope.resolution._internal import LruCache, ResolutionCaches
from declscope.resolution.ops import MetadataEngine, create_engine

__all__ = [
    # Public API (ops.py)
    "MetadataEngine",
    "create_engine",
    # Switches
    "CyclePolicy",
    "TraversalDirection",
    # Caches
    "LruCache",
    "ResolutionCaches",
]
