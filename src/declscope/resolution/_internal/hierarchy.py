"""Hierarchy walker: fields, methods and nested classes across a type hierarchy.

Member lists are built recursively: the superclass (if searchable) and each
implemented interface contribute their own member lists, filtered against
the class's local members, and the three groups are concatenated in the
requested traversal direction:

    TOP_DOWN:  superclass members, interface members, local members
    BOTTOM_UP: local members, interface members, superclass members

Local methods include the interface default methods still visible on the
class.  A structural load failure in one branch is logged and that branch
contributes nothing; the rest of the query proceeds.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

import structlog

from declscope.core.errors import CycleDetectedError, DeclarationLoadError
from declscope.core.modes import CyclePolicy, TraversalDirection
from declscope.model import ClassDecl, FieldDecl, MethodDecl, TypeRef
from declscope.resolution._internal.cache import ResolutionCaches
from declscope.resolution._internal.platform import Platform
from declscope.resolution._internal.signatures import (
    has_compatible_signature,
    has_same_parameter_types,
    is_field_hidden_by_any,
    is_method_overridden_by_any,
)
from declscope.resolution._internal.sorting import sort_fields, sort_methods

log = structlog.get_logger(__name__)

M = TypeVar("M", FieldDecl, MethodDecl, ClassDecl)


def distinct(items: Iterable[M]) -> list[M]:
    """Drop repeated declarations (by identity), keeping first occurrences."""
    seen: set[int] = set()
    result: list[M] = []
    for item in items:
        if id(item) not in seen:
            seen.add(id(item))
            result.append(item)
    return result


def superclass_or_none(cls: ClassDecl) -> ClassDecl | None:
    """Superclass of cls, or None if it cannot be loaded."""
    try:
        return cls.load_superclass()
    except DeclarationLoadError as e:
        log.debug("hierarchy.superclass_unavailable", declaration=cls.name, error=str(e))
        return None


def interfaces_or_empty(cls: ClassDecl) -> tuple[ClassDecl, ...]:
    """Implemented interfaces of cls, or none if any of them cannot be loaded."""
    try:
        return cls.load_interfaces()
    except DeclarationLoadError as e:
        log.debug("hierarchy.interfaces_unavailable", declaration=cls.name, error=str(e))
        return ()


def _ordered(
    direction: TraversalDirection,
    local: list[M],
    interface_members: list[M],
    superclass_members: list[M],
) -> list[M]:
    if direction is TraversalDirection.TOP_DOWN:
        return [*superclass_members, *interface_members, *local]
    return [*local, *interface_members, *superclass_members]


class HierarchyWalker:
    """Computes member lists and nested classes visible on a class."""

    def __init__(
        self,
        platform: Platform,
        caches: ResolutionCaches,
        *,
        legacy_search_semantics: bool = False,
    ) -> None:
        self._platform = platform
        self._caches = caches
        self._legacy = legacy_search_semantics

    # =========================================================================
    # Fields
    # =========================================================================

    def find_fields(
        self,
        cls: ClassDecl,
        predicate: Callable[[FieldDecl], bool],
        direction: TraversalDirection,
    ) -> tuple[FieldDecl, ...]:
        fields = self._all_fields_in_hierarchy(cls, direction)
        return tuple(distinct(f for f in fields if predicate(f)))

    def _all_fields_in_hierarchy(
        self, cls: ClassDecl, direction: TraversalDirection
    ) -> list[FieldDecl]:
        local = [f for f in self._declared_fields(cls) if not f.is_synthetic]
        superclass_fields = [
            f
            for f in self._superclass_fields(cls, direction)
            if not is_field_hidden_by_any(f, local, legacy=self._legacy)
        ]
        interface_fields = [
            f
            for f in self._interface_fields(cls, direction)
            if not is_field_hidden_by_any(f, local, legacy=self._legacy)
        ]
        return _ordered(direction, local, interface_fields, superclass_fields)

    def _declared_fields(self, cls: ClassDecl) -> list[FieldDecl]:
        try:
            return sort_fields(cls.load_declared_fields())
        except DeclarationLoadError as e:
            log.debug("hierarchy.fields_unavailable", declaration=cls.name, error=str(e))
            return []

    def _superclass_fields(
        self, cls: ClassDecl, direction: TraversalDirection
    ) -> list[FieldDecl]:
        superclass = superclass_or_none(cls)
        if not self._platform.is_searchable(superclass):
            return []
        assert superclass is not None
        return self._all_fields_in_hierarchy(superclass, direction)

    def _interface_fields(
        self, cls: ClassDecl, direction: TraversalDirection
    ) -> list[FieldDecl]:
        result: list[FieldDecl] = []
        for ifc in interfaces_or_empty(cls):
            local_interface_fields = [f for f in self._declared_fields(ifc) if f.is_public]
            superinterface_fields = [
                f
                for f in self._interface_fields(ifc, direction)
                if not is_field_hidden_by_any(f, local_interface_fields, legacy=self._legacy)
            ]
            if direction is TraversalDirection.TOP_DOWN:
                result.extend(superinterface_fields)
            result.extend(local_interface_fields)
            if direction is TraversalDirection.BOTTOM_UP:
                result.extend(superinterface_fields)
        return result

    def public_fields(self, cls: ClassDecl) -> tuple[FieldDecl, ...]:
        """Public fields of cls, its interfaces and superclasses, local first."""
        result = [f for f in self._declared_fields(cls) if f.is_public]
        for ifc in interfaces_or_empty(cls):
            result.extend(self.public_fields(ifc))
        superclass = superclass_or_none(cls)
        if superclass is not None:
            result.extend(self.public_fields(superclass))
        return tuple(distinct(result))

    # =========================================================================
    # Methods
    # =========================================================================

    def find_methods(
        self,
        cls: ClassDecl,
        predicate: Callable[[MethodDecl], bool],
        direction: TraversalDirection,
    ) -> tuple[MethodDecl, ...]:
        methods = self._all_methods_in_hierarchy(cls, direction)
        return tuple(distinct(m for m in methods if predicate(m)))

    def is_method_present(self, cls: ClassDecl, predicate: Callable[[MethodDecl], bool]) -> bool:
        return any(
            predicate(m)
            for m in self._all_methods_in_hierarchy(cls, TraversalDirection.TOP_DOWN)
        )

    def find_method(
        self, cls: ClassDecl, method_name: str, parameter_types: Sequence[TypeRef]
    ) -> MethodDecl | None:
        """Most specific method matching name and parameter types.

        Searches each class's own methods (local first), then its interfaces,
        before moving on to the superclass.
        """

        def matches(method: MethodDecl) -> bool:
            return method.name == method_name and has_compatible_signature(
                method, method_name, parameter_types
            )

        return self._find_first_method(cls, matches)

    def _find_first_method(
        self, cls: ClassDecl, predicate: Callable[[MethodDecl], bool]
    ) -> MethodDecl | None:
        current: ClassDecl | None = cls
        while self._platform.is_searchable(current):
            assert current is not None
            if current.is_interface:
                candidates = self._public_methods_or_empty(current)
            else:
                candidates = self._declared_methods(current, TraversalDirection.BOTTOM_UP)
            for method in candidates:
                if predicate(method):
                    return method
            for ifc in interfaces_or_empty(current):
                found = self._find_first_method(ifc, predicate)
                if found is not None:
                    return found
            current = superclass_or_none(current)
        return None

    def _all_methods_in_hierarchy(
        self, cls: ClassDecl, direction: TraversalDirection
    ) -> list[MethodDecl]:
        local = [m for m in self._declared_methods(cls, direction) if not m.is_synthetic]
        superclass_methods = [
            m
            for m in self._superclass_methods(cls, direction)
            if not is_method_overridden_by_any(m, local, legacy=self._legacy)
        ]
        interface_methods = [
            m
            for m in self._interface_methods(cls, direction)
            if not is_method_overridden_by_any(m, local, legacy=self._legacy)
        ]
        return _ordered(direction, local, interface_methods, superclass_methods)

    def _declared_methods(
        self, cls: ClassDecl, direction: TraversalDirection
    ) -> list[MethodDecl]:
        """Sorted declared methods plus the visible interface default methods."""
        try:
            declared = sort_methods(cls.load_declared_methods())
        except DeclarationLoadError as e:
            log.debug("hierarchy.methods_unavailable", declaration=cls.name, error=str(e))
            declared = []
        defaults = self._default_methods(cls)
        if not defaults:
            return declared
        # Defaults are inherited: they precede declared methods top-down
        if direction is TraversalDirection.BOTTOM_UP:
            return [*declared, *defaults]
        return [*defaults, *declared]

    def _default_methods(self, cls: ClassDecl) -> list[MethodDecl]:
        """Interface default methods not overridden by cls or a more specific interface.

        Visibility is judged on the public methods of cls itself, not on the
        interfaces, since a default may be hidden by another default further down.
        """
        visible = [m for m in self._public_methods_or_empty(cls) if m.is_default]
        if not visible:
            return []
        visible_ids = {id(m) for m in visible}
        result: list[MethodDecl] = []
        for ifc in interfaces_or_empty(cls):
            result.extend(m for m in self._public_methods_or_empty(ifc) if id(m) in visible_ids)
        return distinct(result)

    def _superclass_methods(
        self, cls: ClassDecl, direction: TraversalDirection
    ) -> list[MethodDecl]:
        superclass = superclass_or_none(cls)
        if not self._platform.is_searchable(superclass):
            return []
        assert superclass is not None
        return self._all_methods_in_hierarchy(superclass, direction)

    def _interface_methods(
        self, cls: ClassDecl, direction: TraversalDirection
    ) -> list[MethodDecl]:
        result: list[MethodDecl] = []
        for ifc in interfaces_or_empty(cls):
            public = self._public_methods_or_empty(ifc)
            local_interface_methods = [m for m in public if not m.is_abstract]
            superinterface_methods = [
                m
                for m in self._interface_methods(ifc, direction)
                if not is_method_overridden_by_any(
                    m, local_interface_methods, legacy=self._legacy
                )
            ]
            if direction is TraversalDirection.TOP_DOWN:
                result.extend(superinterface_methods)
            result.extend(local_interface_methods)
            if direction is TraversalDirection.BOTTOM_UP:
                result.extend(superinterface_methods)
        return result

    def public_methods(self, cls: ClassDecl) -> tuple[MethodDecl, ...]:
        """Public member methods of cls, own and inherited, sorted.

        Empty if cls or one of its supertypes cannot be loaded.
        """
        return tuple(self._public_methods_or_empty(cls))

    def _public_methods_or_empty(self, cls: ClassDecl) -> list[MethodDecl]:
        try:
            return self._public_methods(cls)
        except DeclarationLoadError as e:
            log.debug("hierarchy.methods_unavailable", declaration=cls.name, error=str(e))
            return []

    def _public_methods(self, cls: ClassDecl) -> list[MethodDecl]:
        result = [m for m in cls.load_declared_methods() if m.is_public]

        inherited: list[MethodDecl] = []
        superclass = cls.load_superclass()
        if superclass is not None:
            inherited.extend(self._public_methods(superclass))
        for ifc in cls.load_interfaces():
            # Static interface methods are not inherited
            inherited.extend(m for m in self._public_methods(ifc) if not m.is_static)

        for candidate in inherited:
            clash = next(
                (i for i, m in enumerate(result) if has_same_parameter_types(m, candidate)),
                None,
            )
            if clash is None:
                result.append(candidate)
                continue
            existing = result[clash]
            if existing.declaring_class is not cls and _is_more_specific(candidate, existing):
                result[clash] = candidate
        return sort_methods(distinct(result))

    # =========================================================================
    # Nested classes and cycle detection
    # =========================================================================

    def detect_inner_class_cycle(self, cls: ClassDecl, policy: CyclePolicy) -> bool:
        """True if cls is an inner class extending one of its enclosing classes.

        Under FAIL a detected cycle raises CycleDetectedError instead.
        """
        class_name = cls.name
        if self._caches.is_known_cycle_free(class_name):
            return False

        superclass = superclass_or_none(cls)
        if cls.is_inner_class and self._platform.is_searchable(superclass):
            assert superclass is not None
            seen: set[int] = set()
            enclosing = cls.enclosing_class
            while enclosing is not None and id(enclosing) not in seen:
                seen.add(id(enclosing))
                if enclosing is superclass:
                    if policy is CyclePolicy.FAIL:
                        log.error(
                            "hierarchy.inner_class_cycle",
                            declaration=class_name,
                            superclass=superclass.name,
                        )
                        raise CycleDetectedError.between(class_name, superclass.name)
                    log.warning(
                        "hierarchy.inner_class_cycle_skipped",
                        declaration=class_name,
                        superclass=superclass.name,
                    )
                    return True
                enclosing = enclosing.enclosing_class

        self._caches.mark_cycle_free(class_name)
        return False

    def find_nested_classes(
        self,
        cls: ClassDecl,
        predicate: Callable[[ClassDecl], bool],
        policy: CyclePolicy,
    ) -> tuple[ClassDecl, ...]:
        found: list[ClassDecl] = []

        def collect(nested: ClassDecl) -> bool:
            found.append(nested)
            return True

        self._visit_nested_classes(cls, predicate, collect, policy, set())
        return tuple(distinct(found))

    def is_nested_class_present(
        self, cls: ClassDecl, predicate: Callable[[ClassDecl], bool]
    ) -> bool:
        found = False

        def stop_at_first(_nested: ClassDecl) -> bool:
            nonlocal found
            found = True
            return False

        self._visit_nested_classes(cls, predicate, stop_at_first, CyclePolicy.ABORT_BRANCH, set())
        return found

    def _visit_nested_classes(
        self,
        cls: ClassDecl | None,
        predicate: Callable[[ClassDecl], bool],
        visitor: Callable[[ClassDecl], bool],
        policy: CyclePolicy,
        visited: set[int],
    ) -> bool:
        """Walk nested classes of cls and its supertypes. Returns False once visitor stops."""
        if not self._platform.is_searchable(cls) or id(cls) in visited:
            return True
        assert cls is not None
        visited.add(id(cls))

        if cls.is_inner_class and predicate(cls) and self.detect_inner_class_cycle(cls, policy):
            return True

        try:
            nested_classes = cls.load_nested_classes()
        except DeclarationLoadError as e:
            log.debug("hierarchy.nested_classes_unavailable", declaration=cls.name, error=str(e))
            nested_classes = ()

        for nested in nested_classes:
            if not predicate(nested):
                continue
            if self.detect_inner_class_cycle(nested, policy):
                continue
            if not visitor(nested):
                return False

        if not self._visit_nested_classes(
            superclass_or_none(cls), predicate, visitor, policy, visited
        ):
            return False
        for ifc in interfaces_or_empty(cls):
            if not self._visit_nested_classes(ifc, predicate, visitor, policy, visited):
                return False
        return True

    # =========================================================================
    # Type relations
    # =========================================================================

    def all_assignment_compatible_classes(self, cls: ClassDecl) -> tuple[ClassDecl, ...]:
        """cls, its superclasses and every transitively implemented interface."""
        result: list[ClassDecl] = []
        self._collect_assignment_compatible(cls, result)
        return tuple(result)

    def _collect_assignment_compatible(self, cls: ClassDecl, result: list[ClassDecl]) -> None:
        current: ClassDecl | None = cls
        while current is not None and not any(c is current for c in result):
            result.append(current)
            for ifc in interfaces_or_empty(current):
                if not any(c is ifc for c in result):
                    self._collect_assignment_compatible(ifc, result)
            current = superclass_or_none(current)

    def get_interface_method_if_possible(
        self, method: MethodDecl, target_class: ClassDecl | None
    ) -> MethodDecl:
        """Equivalent method on a public interface, if the hierarchy offers one."""
        if not method.is_public or method.declaring_class.is_interface:
            return method

        result = self._caches.interface_methods.get_or_compute(
            method,
            lambda m: self._find_interface_method(m, m.declaring_class, None),
        )
        if result is method and target_class is not None:
            # Late binding: a subclass may implement the interface for a base class method
            result = self._find_interface_method(method, target_class, method.declaring_class)
        return result

    def _find_interface_method(
        self, method: MethodDecl, start: ClassDecl, end: ClassDecl | None
    ) -> MethodDecl:
        current: ClassDecl | None = start
        while self._platform.is_searchable(current) and current is not end:
            assert current is not None
            for ifc in interfaces_or_empty(current):
                if not ifc.is_public:
                    continue
                for candidate in self._public_methods_or_empty(ifc):
                    if has_same_parameter_types(candidate, method):
                        return candidate
            current = superclass_or_none(current)
        return method


def _is_more_specific(candidate: MethodDecl, existing: MethodDecl) -> bool:
    """Whether an inherited candidate replaces an inherited method of equal signature."""
    candidate_owner = candidate.declaring_class
    existing_owner = existing.declaring_class
    if candidate_owner is existing_owner:
        return False
    # Class methods win over interface methods
    if existing_owner.is_interface and not candidate_owner.is_interface:
        return True
    if candidate_owner.is_interface and existing_owner.is_interface:
        return existing_owner.is_assignable_from(candidate_owner)
    return False
