"""Tag resolver: single-tag lookup across direct, meta and inherited tags.

A tag is *directly present* when attached to the declaration itself,
*meta-present* when attached (possibly transitively) to the type of a tag
that is present, and *indirectly present* on a class when it comes from an
inherited tag type further up the superclass chain.  Lookups search in that
order and stop at the first hit.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from declscope.config.constants import CONTAINER_VALUE_ATTRIBUTE
from declscope.core import preconditions
from declscope.core.errors import DeclarationLoadError, InternalError
from declscope.core.modes import TraversalDirection
from declscope.model import (
    ClassDecl,
    Declaration,
    FieldDecl,
    MethodDecl,
    ParameterDecl,
    TagInstance,
)
from declscope.resolution._internal.cache import ResolutionCaches
from declscope.resolution._internal.hierarchy import (
    HierarchyWalker,
    interfaces_or_empty,
    superclass_or_none,
)
from declscope.resolution._internal.platform import Platform

log = structlog.get_logger(__name__)


def check_tag_type(tag_type: ClassDecl | None) -> ClassDecl:
    """Reject a missing or non-tag type before any traversal."""
    tag_type = preconditions.not_none(tag_type, "tag type must not be None")
    preconditions.condition(
        tag_type.is_tag_type, lambda: f"{tag_type.name} is not a tag type"
    )
    return tag_type


def all_tags_of(decl: Declaration) -> tuple[TagInstance, ...]:
    """Direct tags plus, for classes, the indirectly present inherited ones."""
    match decl:
        case ClassDecl():
            return decl.all_tags()
        case FieldDecl() | MethodDecl() | ParameterDecl():
            return decl.direct_tags()
    raise InternalError.unexpected("not a declaration", declaration=repr(decl))


class TagResolver:
    """Finds tags on declarations, including meta-tags and inherited tags."""

    def __init__(
        self,
        platform: Platform,
        caches: ResolutionCaches,
        walker: HierarchyWalker,
    ) -> None:
        self._platform = platform
        self._caches = caches
        self._walker = walker

    # =========================================================================
    # Single-tag lookup
    # =========================================================================

    def find_tag(self, decl: Declaration | None, tag_type: ClassDecl) -> TagInstance | None:
        tag_type = check_tag_type(tag_type)
        if decl is None:
            return None
        return self._find(decl, tag_type, tag_type.inherited, set())

    def is_tagged(self, decl: Declaration | None, tag_type: ClassDecl) -> bool:
        return self.find_tag(decl, tag_type) is not None

    def find_tag_in_enclosing(
        self, cls: ClassDecl | None, tag_type: ClassDecl
    ) -> TagInstance | None:
        """Search cls, then each enclosing class of an inner class, outward."""
        tag_type = check_tag_type(tag_type)
        candidate = cls
        seen: set[int] = set()
        while candidate is not None and id(candidate) not in seen:
            seen.add(id(candidate))
            found = self._find(candidate, tag_type, tag_type.inherited, set())
            if found is not None:
                return found
            candidate = candidate.enclosing_class if candidate.is_inner_class else None
        return None

    def _find(
        self,
        decl: Declaration,
        tag_type: ClassDecl,
        inherited: bool,
        visited: set[TagInstance],
    ) -> TagInstance | None:
        # Directly present?
        direct = decl.direct_tag(tag_type)
        if direct is not None:
            return direct

        # Meta-present on directly present tags?
        found = self._find_meta_tag(decl.direct_tags(), tag_type, inherited, visited)
        if found is not None:
            return found

        match decl:
            case ClassDecl():
                for ifc in interfaces_or_empty(decl):
                    if self._platform.is_tag_marker(ifc):
                        continue
                    found = self._find(ifc, tag_type, inherited, visited)
                    if found is not None:
                        return found
                if inherited:
                    superclass = superclass_or_none(decl)
                    if self._platform.is_searchable(superclass):
                        assert superclass is not None
                        found = self._find(superclass, tag_type, inherited, visited)
                        if found is not None:
                            return found

        # Indirectly present?
        all_tags = all_tags_of(decl)
        for tag in all_tags:
            if tag.tag_type is tag_type:
                return tag

        # Meta-present on indirectly present tags?
        return self._find_meta_tag(all_tags, tag_type, inherited, visited)

    def _find_meta_tag(
        self,
        candidates: Iterable[TagInstance],
        tag_type: ClassDecl,
        inherited: bool,
        visited: set[TagInstance],
    ) -> TagInstance | None:
        for candidate in candidates:
            candidate_type = candidate.tag_type
            if self._platform.is_reserved_tag_type(candidate_type) or candidate in visited:
                continue
            visited.add(candidate)
            found = self._find(candidate_type, tag_type, inherited, visited)
            if found is not None:
                return found
        return None

    # =========================================================================
    # Container detection
    # =========================================================================

    def is_repeatable_container(self, candidate: ClassDecl) -> bool:
        """True if candidate is the declared container of some repeatable tag type.

        The candidate must declare a ``value`` attribute returning an array whose
        component type names candidate as its container.
        """
        return self._caches.container_types.get_or_compute(
            candidate, self._compute_is_repeatable_container
        )

    def _compute_is_repeatable_container(self, candidate: ClassDecl) -> bool:
        try:
            methods = candidate.load_declared_methods()
        except DeclarationLoadError as e:
            log.debug("tags.container_check_failed", declaration=candidate.name, error=str(e))
            return False
        for attribute in methods:
            if attribute.name != CONTAINER_VALUE_ATTRIBUTE or attribute.parameters:
                continue
            return_type = attribute.return_type
            if not isinstance(return_type, ClassDecl) or not return_type.is_array:
                continue
            component = return_type.component_type
            return component is not None and component.repeatable_container is candidate
        return False

    # =========================================================================
    # Tagged members
    # =========================================================================

    def find_tagged_fields(
        self, cls: ClassDecl, tag_type: ClassDecl, direction: TraversalDirection
    ) -> tuple[FieldDecl, ...]:
        tag_type = check_tag_type(tag_type)
        return self._walker.find_fields(
            cls, lambda f: self._find(f, tag_type, tag_type.inherited, set()) is not None,
            direction,
        )

    def find_tagged_methods(
        self, cls: ClassDecl, tag_type: ClassDecl, direction: TraversalDirection
    ) -> tuple[MethodDecl, ...]:
        tag_type = check_tag_type(tag_type)
        return self._walker.find_methods(
            cls, lambda m: self._find(m, tag_type, tag_type.inherited, set()) is not None,
            direction,
        )

    def find_public_tagged_fields(
        self, cls: ClassDecl, field_type: ClassDecl, tag_type: ClassDecl
    ) -> tuple[FieldDecl, ...]:
        """Public fields of cls whose type is assignable to field_type and carry tag_type."""
        preconditions.not_none(field_type, "field type must not be None")
        tag_type = check_tag_type(tag_type)
        return tuple(
            f
            for f in self._walker.public_fields(cls)
            if isinstance(f.type, ClassDecl)
            and field_type.is_assignable_from(f.type)
            and self._find(f, tag_type, tag_type.inherited, set()) is not None
        )
