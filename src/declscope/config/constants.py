"""Configuration constants.

This module contains values that should NOT be user-configurable, plus the
defaults that the pydantic models in models.py fall back to.
"""

# =============================================================================
# Platform Type Names
# =============================================================================
# Declaration graphs produced by JVM-style loaders use these names for the
# universal root supertype, the supertype of every tag type, and the package
# holding the platform's own meta-tags (retention, target, documented, ...).

DEFAULT_ROOT_TYPE_NAME = "java.lang.Object"
"""Universal root supertype. Never searched for members or tags."""

DEFAULT_TAG_MARKER_TYPE_NAME = "java.lang.annotation.Annotation"
"""Marker interface every tag type implements. Never searched for tags."""

DEFAULT_RESERVED_TAG_NAMESPACE = "java.lang.annotation"
"""Namespace of platform meta-tags skipped during meta-tag resolution."""

# =============================================================================
# Cache Sizing
# =============================================================================

DEFAULT_INTERFACE_METHOD_CACHE_SIZE = 256
"""Default capacity of the equivalent-interface-method LRU cache."""

INTERFACE_METHOD_CACHE_SIZE_MAX = 65_536
"""Upper bound accepted for the interface-method cache capacity."""

# =============================================================================
# Internal Implementation Constants
# =============================================================================

CONTAINER_VALUE_ATTRIBUTE = "value"
"""Attribute through which a container tag exposes its contained tags."""
