"""Repeatable tag flattening.

Repeated occurrences of a repeatable tag type may be attached one by one,
wrapped in an explicit container tag, or hidden inside a container that is
itself attached as a meta-tag.  Flattening collects all of them into one
insertion-ordered, duplicate-free sequence.  For classes, superclasses are
collected before interfaces and local tags, so ancestors come first.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from declscope.config.constants import CONTAINER_VALUE_ATTRIBUTE
from declscope.core import preconditions
from declscope.model import ClassDecl, Declaration, TagInstance
from declscope.resolution._internal.hierarchy import interfaces_or_empty, superclass_or_none
from declscope.resolution._internal.platform import Platform
from declscope.resolution._internal.tags import TagResolver, all_tags_of, check_tag_type


def contained_tags(container: TagInstance) -> tuple[TagInstance, ...]:
    """Tag instances held in a container's ``value`` attribute."""
    value = container.get(CONTAINER_VALUE_ATTRIBUTE)
    if not isinstance(value, tuple):
        return ()
    return tuple(v for v in value if isinstance(v, TagInstance))


@dataclass
class _Search:
    """State of one flattening query."""

    tag_type: ClassDecl
    container_type: ClassDecl
    inherited: bool
    # dict keeps insertion order and doubles as the duplicate filter
    found: dict[TagInstance, None] = field(default_factory=dict)
    visited: set[TagInstance] = field(default_factory=set)

    def add(self, tag: TagInstance) -> None:
        self.found.setdefault(tag, None)


class RepeatableTagCollector:
    """Collects every occurrence of a repeatable tag type on a declaration."""

    def __init__(self, platform: Platform, resolver: TagResolver) -> None:
        self._platform = platform
        self._resolver = resolver

    def find_repeatable_tags(
        self, decl: Declaration | None, tag_type: ClassDecl
    ) -> tuple[TagInstance, ...]:
        tag_type = check_tag_type(tag_type)
        container_type = preconditions.not_none(
            tag_type.repeatable_container,
            lambda: f"{tag_type.name} must be repeatable",
        )
        if decl is None:
            return ()

        search = _Search(
            tag_type=tag_type,
            container_type=container_type,
            inherited=container_type.inherited,
        )
        self._collect(decl, search)
        return tuple(search.found)

    def _collect(self, decl: Declaration, search: _Search) -> None:
        match decl:
            case ClassDecl():
                # Recurse first so that inherited occurrences come out top-down
                if search.inherited:
                    superclass = superclass_or_none(decl)
                    if self._platform.is_searchable(superclass):
                        assert superclass is not None
                        self._collect(superclass, search)
                for ifc in interfaces_or_empty(decl):
                    if not self._platform.is_tag_marker(ifc):
                        self._collect(ifc, search)

        # Directly present, or meta-present on directly present tags
        self._collect_from(decl.direct_tags(), search)
        # Indirectly present, or meta-present on indirectly present tags
        self._collect_from(all_tags_of(decl), search)

    def _collect_from(self, candidates: Iterable[TagInstance], search: _Search) -> None:
        for candidate in candidates:
            candidate_type = candidate.tag_type
            if self._platform.is_reserved_tag_type(candidate_type) or candidate in search.visited:
                continue
            search.visited.add(candidate)

            if candidate_type is search.tag_type:
                search.add(candidate)
            elif candidate_type is search.container_type:
                for contained in contained_tags(candidate):
                    search.add(contained)
            elif self._resolver.is_repeatable_container(candidate_type):
                # Container of some other repeatable type: search what it holds
                for contained in contained_tags(candidate):
                    self._collect(contained.tag_type, search)
            else:
                self._collect(candidate_type, search)
