"""Declaration model: classes, fields, methods, parameters and their tags.

Declarations are read-only snapshots handed over by an external loader.
Nodes are compared by identity; tag instances are compared by value
(tag type identity plus attribute values), so two identical occurrences
reached through different paths collapse into one.

Structural references to other types may be ``UnresolvedType`` placeholders
when the loader could not find the referenced type.  The ``load_*`` accessors
raise ``DeclarationLoadError`` for those, mirroring a class whose structure
cannot be materialized; plain attribute access never raises.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from declscope.core.errors import DeclarationLoadError, PreconditionViolationError


class Modifier(str, Enum):
    """Declaration modifiers. No visibility modifier means package scope."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    ABSTRACT = "abstract"
    STATIC = "static"
    FINAL = "final"
    SYNTHETIC = "synthetic"


# Canonical rendering order for signatures
_MODIFIER_ORDER = (
    Modifier.PUBLIC,
    Modifier.PROTECTED,
    Modifier.PRIVATE,
    Modifier.ABSTRACT,
    Modifier.STATIC,
    Modifier.FINAL,
)

_VISIBILITY = frozenset({Modifier.PUBLIC, Modifier.PROTECTED, Modifier.PRIVATE})

PUBLIC = frozenset({Modifier.PUBLIC})


class ClassKind(str, Enum):
    """What a ClassDecl stands for."""

    CLASS = "class"
    INTERFACE = "interface"
    TAG = "tag"  # tag (annotation) type; implicitly an interface
    PRIMITIVE = "primitive"
    ARRAY = "array"


@dataclass(frozen=True, slots=True)
class UnresolvedType:
    """Placeholder for a referenced type the loader could not resolve."""

    name: str


@dataclass(frozen=True)
class TagInstance:
    """One occurrence of a tag type with its attribute values.

    Attribute values are normalized to hashable form: lists and tuples become
    tuples, so a container's ``value`` is a tuple of TagInstances, and sets
    become frozensets. Any other unhashable value, a mapping included, is
    rejected.
    """

    tag_type: ClassDecl
    attributes: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, tag_type: ClassDecl, **attributes: Any) -> TagInstance:
        normalized = tuple(sorted((k, _freeze(k, v)) for k, v in attributes.items()))
        return cls(tag_type=tag_type, attributes=normalized)

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.attributes:
            if key == name:
                return value
        return default

    def as_dict(self) -> dict[str, Any]:
        return dict(self.attributes)

    @property
    def value(self) -> Any:
        return self.get("value")

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.attributes)
        return f"@{self.tag_type.simple_name}({args})"


def _freeze(name: str, value: Any) -> Any:
    if isinstance(value, list | tuple):
        return tuple(_freeze(name, v) for v in value)
    if isinstance(value, set | frozenset):
        return frozenset(_freeze(name, v) for v in value)
    try:
        hash(value)
    except TypeError:
        raise PreconditionViolationError.because(
            f"tag attribute {name!r} has unhashable value of type {type(value).__name__}",
            attribute=name,
        ) from None
    return value


def _render_modifiers(modifiers: frozenset[Modifier]) -> str:
    return " ".join(m.value for m in _MODIFIER_ORDER if m in modifiers)


def _type_name(ref: TypeRef | None) -> str:
    return "void" if ref is None else ref.name


class _Tagged:
    """Capability shared by every declaration: directly attached tags."""

    tags: list[TagInstance]
    modifiers: frozenset[Modifier]

    def direct_tags(self) -> tuple[TagInstance, ...]:
        return tuple(self.tags)

    def direct_tag(self, tag_type: ClassDecl) -> TagInstance | None:
        """First directly attached tag of exactly tag_type."""
        for tag in self.tags:
            if tag.tag_type is tag_type:
                return tag
        return None

    def has_modifier(self, modifier: Modifier) -> bool:
        return modifier in self.modifiers

    @property
    def is_public(self) -> bool:
        return Modifier.PUBLIC in self.modifiers

    @property
    def is_private(self) -> bool:
        return Modifier.PRIVATE in self.modifiers

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers

    @property
    def is_final(self) -> bool:
        return Modifier.FINAL in self.modifiers

    @property
    def is_abstract(self) -> bool:
        return Modifier.ABSTRACT in self.modifiers

    @property
    def is_synthetic(self) -> bool:
        return Modifier.SYNTHETIC in self.modifiers

    @property
    def is_package_scoped(self) -> bool:
        return not (self.modifiers & _VISIBILITY)


@dataclass(eq=False)
class ClassDecl(_Tagged):
    """A class, interface, tag type, primitive or array type.

    Nested class names use ``$`` as separator (``pkg.Outer$Inner``) so that
    the package is everything before the last dot.
    """

    name: str
    kind: ClassKind = ClassKind.CLASS
    modifiers: frozenset[Modifier] = PUBLIC
    superclass: TypeRef | None = None
    interfaces: list[TypeRef] = field(default_factory=list)
    enclosing_class: ClassDecl | None = None
    nested_classes: list[TypeRef] = field(default_factory=list)
    fields: list[FieldDecl] = field(default_factory=list)
    methods: list[MethodDecl] = field(default_factory=list)
    tags: list[TagInstance] = field(default_factory=list)
    # Tag-type markers
    inherited: bool = False
    repeatable_container: ClassDecl | None = None
    # Array component, only for ClassKind.ARRAY
    component_type: ClassDecl | None = None
    # True only for the universal root supertype of a graph
    universal_root: bool = False

    def __post_init__(self) -> None:
        self.modifiers = frozenset(self.modifiers)

    def __repr__(self) -> str:
        return f"ClassDecl({self.name})"

    # -- naming ------------------------------------------------------------

    @property
    def package(self) -> str:
        return self.name.rpartition(".")[0]

    @property
    def simple_name(self) -> str:
        return self.name.rpartition(".")[2].rpartition("$")[2]

    # -- kind --------------------------------------------------------------

    @property
    def is_interface(self) -> bool:
        return self.kind in (ClassKind.INTERFACE, ClassKind.TAG)

    @property
    def is_tag_type(self) -> bool:
        return self.kind is ClassKind.TAG

    @property
    def is_array(self) -> bool:
        return self.kind is ClassKind.ARRAY

    @property
    def is_primitive(self) -> bool:
        return self.kind is ClassKind.PRIMITIVE

    @property
    def is_inner_class(self) -> bool:
        """Non-static nested class, i.e. one that has an enclosing instance."""
        return self.enclosing_class is not None and not self.is_static

    @property
    def is_repeatable(self) -> bool:
        return self.repeatable_container is not None

    # -- structural accessors (may raise DeclarationLoadError) -------------

    def load_superclass(self) -> ClassDecl | None:
        return self._resolve(self.superclass)

    def load_interfaces(self) -> tuple[ClassDecl, ...]:
        return tuple(self._resolve(ref) for ref in self.interfaces)  # type: ignore[misc]

    def load_nested_classes(self) -> tuple[ClassDecl, ...]:
        return tuple(self._resolve(ref) for ref in self.nested_classes)  # type: ignore[misc]

    def load_declared_fields(self) -> tuple[FieldDecl, ...]:
        for f in self.fields:
            self._resolve(f.type)
        return tuple(self.fields)

    def load_declared_methods(self) -> tuple[MethodDecl, ...]:
        for m in self.methods:
            for p in m.parameters:
                self._resolve(p.type)
            self._resolve(m.return_type)
        return tuple(self.methods)

    def _resolve(self, ref: TypeRef | None) -> ClassDecl | None:
        if isinstance(ref, UnresolvedType):
            raise DeclarationLoadError.unresolved(self.name, ref.name)
        return ref

    # -- tags --------------------------------------------------------------

    def all_tags(self) -> tuple[TagInstance, ...]:
        """Directly attached tags plus inherited ones from the superclass chain.

        A tag type attached lower in the chain hides the same type further up.
        Walking stops at an unresolved superclass.
        """
        result = list(self.tags)
        present = {tag.tag_type for tag in self.tags}
        seen = {self}
        current = self.superclass
        while isinstance(current, ClassDecl) and current not in seen:
            seen.add(current)
            for tag in current.tags:
                if tag.tag_type.inherited and tag.tag_type not in present:
                    result.append(tag)
            present.update(tag.tag_type for tag in current.tags)
            current = current.superclass
        return tuple(result)

    # -- type relations ----------------------------------------------------

    def supertypes(self) -> Iterator[ClassDecl]:
        """Direct resolved supertypes: superclass first, then interfaces."""
        if isinstance(self.superclass, ClassDecl):
            yield self.superclass
        for ref in self.interfaces:
            if isinstance(ref, ClassDecl):
                yield ref

    def is_assignable_from(self, other: ClassDecl) -> bool:
        """True if a value of type other can be used where self is expected."""
        if other is self:
            return True
        if self.is_primitive or other.is_primitive:
            return False
        if self.universal_root:
            return True
        if self.is_array or other.is_array:
            if self.component_type is None or other.component_type is None:
                return False
            return self.component_type.is_assignable_from(other.component_type)
        pending = [other]
        seen: set[ClassDecl] = set()
        while pending:
            current = pending.pop()
            if current is self:
                return True
            if current in seen:
                continue
            seen.add(current)
            pending.extend(current.supertypes())
        return False

    # -- builders used by loaders ------------------------------------------

    def declare_field(
        self,
        name: str,
        type: TypeRef,
        *,
        modifiers: Iterable[Modifier] = PUBLIC,
        tags: Iterable[TagInstance] = (),
    ) -> FieldDecl:
        decl = FieldDecl(
            name=name,
            type=type,
            declaring_class=self,
            modifiers=frozenset(modifiers),
            tags=list(tags),
        )
        self.fields.append(decl)
        return decl

    def declare_method(
        self,
        name: str,
        parameters: Iterable[TypeRef | ParameterDecl] = (),
        *,
        return_type: TypeRef | None = None,
        modifiers: Iterable[Modifier] = PUBLIC,
        tags: Iterable[TagInstance] = (),
    ) -> MethodDecl:
        params = tuple(
            p if isinstance(p, ParameterDecl) else ParameterDecl(type=p) for p in parameters
        )
        decl = MethodDecl(
            name=name,
            declaring_class=self,
            parameters=params,
            return_type=return_type,
            modifiers=frozenset(modifiers),
            tags=list(tags),
        )
        self.methods.append(decl)
        return decl


@dataclass(eq=False)
class FieldDecl(_Tagged):
    """A field declared by exactly one class."""

    name: str
    type: TypeRef
    declaring_class: ClassDecl
    modifiers: frozenset[Modifier] = PUBLIC
    tags: list[TagInstance] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"FieldDecl({self.declaring_class.name}.{self.name})"

    @property
    def signature(self) -> str:
        mods = _render_modifiers(self.modifiers)
        text = f"{_type_name(self.type)} {self.declaring_class.name}.{self.name}"
        return f"{mods} {text}" if mods else text


@dataclass(eq=False)
class ParameterDecl(_Tagged):
    """A formal parameter. ``type_variable`` names the declared type variable, if any."""

    type: TypeRef
    name: str = ""
    tags: list[TagInstance] = field(default_factory=list)
    type_variable: str | None = None
    modifiers: frozenset[Modifier] = frozenset()
    declaring_method: MethodDecl | None = field(default=None, repr=False)
    index: int = 0

    def __repr__(self) -> str:
        return f"ParameterDecl({_type_name(self.type)} {self.name or f'arg{self.index}'})"


@dataclass(eq=False)
class MethodDecl(_Tagged):
    """A method declared by exactly one class. Tag attributes are methods too."""

    name: str
    declaring_class: ClassDecl
    parameters: tuple[ParameterDecl, ...] = ()
    return_type: TypeRef | None = None
    modifiers: frozenset[Modifier] = PUBLIC
    tags: list[TagInstance] = field(default_factory=list)

    def __post_init__(self) -> None:
        for index, param in enumerate(self.parameters):
            param.declaring_method = self
            param.index = index
            if not param.name:
                param.name = f"arg{index}"

    def __repr__(self) -> str:
        return f"MethodDecl({self.declaring_class.name}.{self.name})"

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)

    def parameter_types(self) -> tuple[TypeRef, ...]:
        return tuple(p.type for p in self.parameters)

    @property
    def is_generic(self) -> bool:
        """True if any parameter is declared through a type variable."""
        return any(p.type_variable is not None for p in self.parameters)

    @property
    def is_default(self) -> bool:
        """Concretely implemented, non-static instance method of an interface."""
        return (
            self.declaring_class.is_interface
            and not self.is_abstract
            and not self.is_static
            and not self.is_private
        )

    @property
    def signature(self) -> str:
        mods = _render_modifiers(self.modifiers)
        params = ",".join(_type_name(t) for t in self.parameter_types())
        text = (
            f"{_type_name(self.return_type)} "
            f"{self.declaring_class.name}.{self.name}({params})"
        )
        return f"{mods} {text}" if mods else text


TypeRef = Union[ClassDecl, UnresolvedType]

Declaration = Union[ClassDecl, FieldDecl, MethodDecl, ParameterDecl]
"""Closed union of declaration kinds. All share ``direct_tags()``."""
