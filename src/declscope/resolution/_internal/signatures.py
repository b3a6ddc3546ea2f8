"""Override and hiding rules between members of related classes.

``upper`` is always the member declared higher in the hierarchy (superclass
or interface), ``lower`` the candidate that may override or hide it.
"""

from __future__ import annotations

from collections.abc import Sequence

from declscope.model import ClassDecl, FieldDecl, MethodDecl, TypeRef


def declared_in_same_package(upper: MethodDecl | FieldDecl, lower: MethodDecl | FieldDecl) -> bool:
    return upper.declaring_class.package == lower.declaring_class.package


def has_compatible_signature(
    candidate: MethodDecl, method_name: str, parameter_types: Sequence[TypeRef]
) -> bool:
    """True if candidate can be overridden by a method with this name and parameters.

    Exact parameter types always match. Otherwise each of the candidate's
    parameter types must be assignable from the corresponding one, and the
    candidate must declare a type-variable parameter (generic widening).
    """
    if candidate.name != method_name:
        return False
    if candidate.parameter_count != len(parameter_types):
        return False

    candidate_types = candidate.parameter_types()
    if all(a is b or a == b for a, b in zip(candidate_types, parameter_types)):
        return True

    for lower_type, upper_type in zip(parameter_types, candidate_types):
        if not isinstance(lower_type, ClassDecl) or not isinstance(upper_type, ClassDecl):
            return False
        if not upper_type.is_assignable_from(lower_type):
            return False

    return candidate.is_generic


def is_method_overridden_by(upper: MethodDecl, lower: MethodDecl, *, legacy: bool = False) -> bool:
    if legacy:
        return has_compatible_signature(upper, lower.name, lower.parameter_types())

    # Private, static and final methods cannot be overridden
    if upper.is_private or upper.is_static or upper.is_final:
        return False

    # Package-scoped methods are only overridden within their own package
    if upper.is_package_scoped and not declared_in_same_package(upper, lower):
        return False

    return has_compatible_signature(upper, lower.name, lower.parameter_types())


def is_field_hidden_by(upper: FieldDecl, lower: FieldDecl, *, legacy: bool = False) -> bool:
    # Fields are hidden, never overridden: only legacy searches drop them by name
    return legacy and upper.name == lower.name


def is_method_overridden_by_any(
    upper: MethodDecl, locals_: Sequence[MethodDecl], *, legacy: bool = False
) -> bool:
    return any(is_method_overridden_by(upper, local, legacy=legacy) for local in locals_)


def is_field_hidden_by_any(
    upper: FieldDecl, locals_: Sequence[FieldDecl], *, legacy: bool = False
) -> bool:
    return any(is_field_hidden_by(upper, local, legacy=legacy) for local in locals_)


def has_same_parameter_types(a: MethodDecl, b: MethodDecl) -> bool:
    """Same name and identical parameter types."""
    if a.name != b.name or a.parameter_count != b.parameter_count:
        return False
    return all(x is y or x == y for x, y in zip(a.parameter_types(), b.parameter_types()))
