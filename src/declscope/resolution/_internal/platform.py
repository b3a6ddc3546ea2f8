"""Platform-specific type names the engine treats specially."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from declscope.config.constants import (
    DEFAULT_RESERVED_TAG_NAMESPACE,
    DEFAULT_ROOT_TYPE_NAME,
    DEFAULT_TAG_MARKER_TYPE_NAME,
)

if TYPE_CHECKING:
    from declscope.config.models import EngineConfig
    from declscope.model import ClassDecl


@dataclass(frozen=True, slots=True)
class Platform:
    """Root supertype, tag marker interface and reserved meta-tag namespace."""

    root_type_name: str = DEFAULT_ROOT_TYPE_NAME
    tag_marker_type_name: str = DEFAULT_TAG_MARKER_TYPE_NAME
    reserved_tag_namespace: str = DEFAULT_RESERVED_TAG_NAMESPACE

    @classmethod
    def from_config(cls, config: EngineConfig) -> Platform:
        return cls(
            root_type_name=config.root_type_name,
            tag_marker_type_name=config.tag_marker_type_name,
            reserved_tag_namespace=config.reserved_tag_namespace,
        )

    def is_searchable(self, cls: ClassDecl | None) -> bool:
        """Non-null and not the universal root supertype."""
        return cls is not None and not cls.universal_root and cls.name != self.root_type_name

    def is_tag_marker(self, cls: ClassDecl) -> bool:
        return cls.name == self.tag_marker_type_name

    def is_reserved_tag_type(self, tag_type: ClassDecl) -> bool:
        return tag_type.name.startswith(self.reserved_tag_namespace + ".")
