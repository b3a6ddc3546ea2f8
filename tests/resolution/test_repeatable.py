"""Tests for repeatable tag flattening."""

from __future__ import annotations

import pytest

from declscope.core.errors import PreconditionViolationError
from declscope.model import ClassDecl, DeclarationGraph, TagInstance
from declscope.resolution import MetadataEngine


def _role(role: ClassDecl, name: str) -> TagInstance:
    return TagInstance.of(role, value=name)


class TestFindRepeatableTags:
    def test_given_direct_and_contained_occurrences_when_found_then_all_in_order(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        # Given
        role, roles = graph.declare_repeatable("app.Role", "app.Roles")
        r1, r2, r3, r4 = (_role(role, n) for n in ("r1", "r2", "r3", "r4"))
        cls = graph.declare_class(
            "app.Service", tags=[r1, r2, r3, graph.container_of(roles, r4)]
        )

        # When
        found = engine.find_repeatable_tags(cls, role)

        # Then
        assert found == (r1, r2, r3, r4)

    def test_container_before_direct_tag(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, roles = graph.declare_repeatable("app.Role", "app.Roles")
        admin, ops, audit = (_role(role, n) for n in ("admin", "ops", "audit"))
        cls = graph.declare_class(
            "app.Service", tags=[graph.container_of(roles, admin, ops), audit]
        )

        assert engine.find_repeatable_tags(cls, role) == (admin, ops, audit)

    def test_same_occurrence_listed_once(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, roles = graph.declare_repeatable("app.Role", "app.Roles")
        admin = _role(role, "admin")
        cls = graph.declare_class(
            "app.Service", tags=[admin, graph.container_of(roles, admin, _role(role, "ops"))]
        )

        assert engine.find_repeatable_tags(cls, role) == (admin, _role(role, "ops"))

    def test_inherited_container_ancestors_first(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, _roles = graph.declare_repeatable("app.Role", "app.Roles", inherited=True)
        base = graph.declare_class("app.Base", tags=[_role(role, "base")])
        middle = graph.declare_class("app.Middle", superclass=base)
        derived = graph.declare_class(
            "app.Derived", superclass=middle, tags=[_role(role, "derived")]
        )

        assert engine.find_repeatable_tags(derived, role) == (
            _role(role, "base"),
            _role(role, "derived"),
        )

    def test_non_inherited_container_local_only(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, _roles = graph.declare_repeatable("app.Role", "app.Roles")
        base = graph.declare_class("app.Base", tags=[_role(role, "base")])
        derived = graph.declare_class(
            "app.Derived", superclass=base, tags=[_role(role, "derived")]
        )

        assert engine.find_repeatable_tags(derived, role) == (_role(role, "derived"),)

    def test_superclass_interface_local_order(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, _roles = graph.declare_repeatable("app.Role", "app.Roles", inherited=True)
        base = graph.declare_class("app.Base", tags=[_role(role, "base")])
        contract = graph.declare_interface("app.Contract", tags=[_role(role, "iface")])
        derived = graph.declare_class(
            "app.Derived",
            superclass=base,
            interfaces=[contract],
            tags=[_role(role, "own")],
        )

        assert engine.find_repeatable_tags(derived, role) == (
            _role(role, "base"),
            _role(role, "iface"),
            _role(role, "own"),
        )

    def test_meta_occurrences_included(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        # Given - @Admin carries two @Role occurrences
        role, _roles = graph.declare_repeatable("app.Role", "app.Roles")
        admin = graph.declare_tag_type(
            "app.Admin", tags=[_role(role, "admin"), _role(role, "ops")]
        )
        method = graph.declare_class("app.Service").declare_method(
            "restart", tags=[TagInstance.of(admin), _role(role, "own")]
        )

        # When
        found = engine.find_repeatable_tags(method, role)

        # Then
        assert found == (_role(role, "admin"), _role(role, "ops"), _role(role, "own"))

    def test_other_repeatable_container_contents_searched(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, _roles = graph.declare_repeatable("app.Role", "app.Roles")
        perm, perms = graph.declare_repeatable(
            "app.Perm", "app.Perms", tags=[_role(role, "from-perm")]
        )
        cls = graph.declare_class(
            "app.Service",
            tags=[
                graph.container_of(
                    perms, TagInstance.of(perm, value="read"), TagInstance.of(perm, value="write")
                )
            ],
        )

        assert engine.find_repeatable_tags(cls, role) == (_role(role, "from-perm"),)

    def test_reserved_tag_skipped(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, _roles = graph.declare_repeatable("app.Role", "app.Roles")
        documented = graph.declare_tag_type(
            "java.lang.annotation.Documented", tags=[_role(role, "hidden")]
        )
        cls = graph.declare_class("app.Service", tags=[TagInstance.of(documented)])

        assert engine.find_repeatable_tags(cls, role) == ()

    def test_untagged_declaration_empty(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, _roles = graph.declare_repeatable("app.Role", "app.Roles")

        assert engine.find_repeatable_tags(graph.declare_class("app.Plain"), role) == ()

    def test_none_declaration_empty(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        role, _roles = graph.declare_repeatable("app.Role", "app.Roles")

        assert engine.find_repeatable_tags(None, role) == ()

    def test_non_repeatable_tag_type_rejected(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        plain = graph.declare_tag_type("app.Plain")
        cls = graph.declare_class("app.Service")

        with pytest.raises(PreconditionViolationError, match="app.Plain must be repeatable"):
            engine.find_repeatable_tags(cls, plain)

    def test_none_tag_type_rejected(
        self, graph: DeclarationGraph, engine: MetadataEngine
    ) -> None:
        with pytest.raises(PreconditionViolationError):
            engine.find_repeatable_tags(graph.declare_class("app.Service"), None)  # type: ignore[arg-type]
