"""Declaration model - passive data describing types, members and tags.

Public API:
- ClassDecl, FieldDecl, MethodDecl, ParameterDecl: declaration nodes
- TagInstance: value-compared tag occurrence
- DeclarationGraph: registry for assembling graphs
"""

from declscope.model.declarations import (
    PUBLIC,
    ClassDecl,
    ClassKind,
    Declaration,
    FieldDecl,
    MethodDecl,
    Modifier,
    ParameterDecl,
    TagInstance,
    TypeRef,
    UnresolvedType,
)
from declscope.model.graph import DeclarationGraph

__all__ = [
    "PUBLIC",
    "ClassDecl",
    "ClassKind",
    "Declaration",
    "DeclarationGraph",
    "FieldDecl",
    "MethodDecl",
    "Modifier",
    "ParameterDecl",
    "TagInstance",
    "TypeRef",
    "UnresolvedType",
]
