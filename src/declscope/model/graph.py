"""In-memory declaration registry.

Loaders (and tests) assemble declaration graphs through ``DeclarationGraph``:
it owns the universal root type and the tag marker interface, hands out
``UnresolvedType`` placeholders for names it does not know, and wires up
nested classes, tag types and repeatable/container pairs consistently.

Usage::

    graph = DeclarationGraph()
    config = graph.declare_tag_type("app.Config", inherited=True)
    base = graph.declare_class("app.Base", tags=[TagInstance.of(config)])
    derived = graph.declare_class("app.Derived", superclass=base)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from declscope.config.constants import (
    CONTAINER_VALUE_ATTRIBUTE,
    DEFAULT_ROOT_TYPE_NAME,
    DEFAULT_TAG_MARKER_TYPE_NAME,
)
from declscope.core import preconditions
from declscope.model.declarations import (
    PUBLIC,
    ClassDecl,
    ClassKind,
    Modifier,
    TagInstance,
    TypeRef,
    UnresolvedType,
)

_INTERFACE_MODIFIERS = frozenset({Modifier.PUBLIC, Modifier.ABSTRACT})


class DeclarationGraph:
    """Name-indexed set of ClassDecls sharing one root type and tag marker."""

    def __init__(
        self,
        *,
        root_type_name: str = DEFAULT_ROOT_TYPE_NAME,
        tag_marker_type_name: str = DEFAULT_TAG_MARKER_TYPE_NAME,
    ) -> None:
        self._classes: dict[str, ClassDecl] = {}
        self.root = self._register(ClassDecl(root_type_name, universal_root=True))
        self.tag_marker = self._register(
            ClassDecl(
                tag_marker_type_name,
                kind=ClassKind.INTERFACE,
                modifiers=_INTERFACE_MODIFIERS,
            )
        )

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __iter__(self) -> Iterator[ClassDecl]:
        return iter(self._classes.values())

    def __len__(self) -> int:
        return len(self._classes)

    def get(self, name: str) -> ClassDecl | None:
        return self._classes.get(name)

    def ref(self, target: str | TypeRef) -> TypeRef:
        """Resolve a name to its ClassDecl, or an UnresolvedType placeholder."""
        if not isinstance(target, str):
            return target
        return self._classes.get(target) or UnresolvedType(target)

    def _register(self, decl: ClassDecl) -> ClassDecl:
        preconditions.condition(
            decl.name not in self._classes,
            lambda: f"Type {decl.name} is already declared",
        )
        self._classes[decl.name] = decl
        return decl

    # -- classes and interfaces --------------------------------------------

    def declare_class(
        self,
        name: str,
        *,
        superclass: str | TypeRef | None = None,
        interfaces: Iterable[str | TypeRef] = (),
        modifiers: Iterable[Modifier] = PUBLIC,
        tags: Iterable[TagInstance] = (),
    ) -> ClassDecl:
        """Declare a top-level class. Superclass defaults to the root type."""
        preconditions.not_blank(name, "class name must not be blank")
        return self._register(
            ClassDecl(
                name,
                modifiers=frozenset(modifiers),
                superclass=self.ref(superclass) if superclass is not None else self.root,
                interfaces=[self.ref(i) for i in interfaces],
                tags=list(tags),
            )
        )

    def declare_interface(
        self,
        name: str,
        *,
        interfaces: Iterable[str | TypeRef] = (),
        tags: Iterable[TagInstance] = (),
    ) -> ClassDecl:
        preconditions.not_blank(name, "interface name must not be blank")
        return self._register(
            ClassDecl(
                name,
                kind=ClassKind.INTERFACE,
                modifiers=_INTERFACE_MODIFIERS,
                interfaces=[self.ref(i) for i in interfaces],
                tags=list(tags),
            )
        )

    def declare_nested(
        self,
        outer: ClassDecl,
        simple_name: str,
        *,
        static: bool = False,
        superclass: str | TypeRef | None = None,
        interfaces: Iterable[str | TypeRef] = (),
        modifiers: Iterable[Modifier] = PUBLIC,
        tags: Iterable[TagInstance] = (),
    ) -> ClassDecl:
        """Declare a class nested in outer; non-static ones record their enclosing class."""
        preconditions.not_blank(simple_name, "nested class name must not be blank")
        mods = frozenset(modifiers) | ({Modifier.STATIC} if static else set())
        nested = self._register(
            ClassDecl(
                f"{outer.name}${simple_name}",
                modifiers=mods,
                superclass=self.ref(superclass) if superclass is not None else self.root,
                interfaces=[self.ref(i) for i in interfaces],
                enclosing_class=None if static else outer,
                tags=list(tags),
            )
        )
        outer.nested_classes.append(nested)
        return nested

    # -- tag types ---------------------------------------------------------

    def declare_tag_type(
        self,
        name: str,
        *,
        inherited: bool = False,
        tags: Iterable[TagInstance] = (),
    ) -> ClassDecl:
        """Declare a tag type. Every tag type implements the tag marker interface."""
        preconditions.not_blank(name, "tag type name must not be blank")
        return self._register(
            ClassDecl(
                name,
                kind=ClassKind.TAG,
                modifiers=_INTERFACE_MODIFIERS,
                interfaces=[self.tag_marker],
                tags=list(tags),
                inherited=inherited,
            )
        )

    def declare_repeatable(
        self,
        name: str,
        container_name: str,
        *,
        inherited: bool = False,
        tags: Iterable[TagInstance] = (),
    ) -> tuple[ClassDecl, ClassDecl]:
        """Declare a repeatable tag type and its container.

        The container exposes a single ``value`` attribute holding an array of
        the repeatable type. Both types share the inherited marker.
        """
        tag_type = self.declare_tag_type(name, inherited=inherited, tags=tags)
        container = self.declare_tag_type(container_name, inherited=inherited)
        container.declare_method(
            CONTAINER_VALUE_ATTRIBUTE,
            return_type=self.array_of(tag_type),
            modifiers=_INTERFACE_MODIFIERS,
        )
        tag_type.repeatable_container = container
        return tag_type, container

    def container_of(self, container: ClassDecl, *tags: TagInstance) -> TagInstance:
        """Build an explicit container instance wrapping tags."""
        return TagInstance.of(container, **{CONTAINER_VALUE_ATTRIBUTE: tags})

    # -- primitives and arrays ---------------------------------------------

    def primitive(self, name: str) -> ClassDecl:
        existing = self._classes.get(name)
        if existing is not None:
            return existing
        return self._register(
            ClassDecl(name, kind=ClassKind.PRIMITIVE, modifiers=frozenset({Modifier.PUBLIC}))
        )

    def array_of(self, component: ClassDecl) -> ClassDecl:
        name = f"{component.name}[]"
        existing = self._classes.get(name)
        if existing is not None:
            return existing
        return self._register(
            ClassDecl(
                name,
                kind=ClassKind.ARRAY,
                superclass=self.root,
                component_type=component,
            )
        )
