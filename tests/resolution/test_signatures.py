"""Tests for override and hiding rules."""

from __future__ import annotations

import pytest

from declscope.model import DeclarationGraph, Modifier, ParameterDecl
from declscope.resolution._internal.signatures import (
    has_compatible_signature,
    has_same_parameter_types,
    is_field_hidden_by,
    is_method_overridden_by,
)


@pytest.fixture
def types(graph: DeclarationGraph) -> dict[str, object]:
    number = graph.declare_class("lang.Number")
    integer = graph.declare_class("lang.Integer", superclass=number)
    string = graph.declare_class("lang.String")
    return {"number": number, "integer": integer, "string": string}


class TestHasCompatibleSignature:
    def test_exact_parameter_types(
        self, graph: DeclarationGraph, types: dict[str, object]
    ) -> None:
        cls = graph.declare_class("app.A")
        method = cls.declare_method("m", [types["string"]])

        assert has_compatible_signature(method, "m", [types["string"]])

    def test_other_name(
        self, graph: DeclarationGraph, types: dict[str, object]
    ) -> None:
        method = graph.declare_class("app.A").declare_method("m", [types["string"]])

        assert not has_compatible_signature(method, "n", [types["string"]])

    def test_other_arity(
        self, graph: DeclarationGraph, types: dict[str, object]
    ) -> None:
        method = graph.declare_class("app.A").declare_method("m", [types["string"]])

        assert not has_compatible_signature(method, "m", [])

    def test_wider_generic_parameter(
        self, graph: DeclarationGraph, types: dict[str, object]
    ) -> None:
        """A type-variable parameter erased to a supertype accepts narrower overrides."""
        method = graph.declare_class("app.Handler").declare_method(
            "handle", [ParameterDecl(type=types["number"], type_variable="T")]
        )

        assert has_compatible_signature(method, "handle", [types["integer"]])

    def test_wider_plain_parameter_is_overload(
        self, graph: DeclarationGraph, types: dict[str, object]
    ) -> None:
        method = graph.declare_class("app.Handler").declare_method("handle", [types["number"]])

        assert not has_compatible_signature(method, "handle", [types["integer"]])

    def test_unrelated_generic_parameter(
        self, graph: DeclarationGraph, types: dict[str, object]
    ) -> None:
        method = graph.declare_class("app.Handler").declare_method(
            "handle", [ParameterDecl(type=types["number"], type_variable="T")]
        )

        assert not has_compatible_signature(method, "handle", [types["string"]])


class TestIsMethodOverriddenBy:
    @pytest.mark.parametrize(
        "modifiers",
        [
            {Modifier.PRIVATE},
            {Modifier.PUBLIC, Modifier.STATIC},
            {Modifier.PUBLIC, Modifier.FINAL},
        ],
    )
    def test_non_overridable_upper(
        self, graph: DeclarationGraph, modifiers: set[Modifier]
    ) -> None:
        upper = graph.declare_class("app.A").declare_method("m", modifiers=modifiers)
        lower = graph.declare_class("app.B").declare_method("m")

        assert not is_method_overridden_by(upper, lower)
        assert is_method_overridden_by(upper, lower, legacy=True)

    def test_package_scoped_upper_same_package(
        self, graph: DeclarationGraph
    ) -> None:
        upper = graph.declare_class("p1.A").declare_method("m", modifiers=())
        lower = graph.declare_class("p1.B").declare_method("m")

        assert is_method_overridden_by(upper, lower)

    def test_package_scoped_upper_other_package(
        self, graph: DeclarationGraph
    ) -> None:
        upper = graph.declare_class("p1.A").declare_method("m", modifiers=())
        lower = graph.declare_class("p2.B").declare_method("m")

        assert not is_method_overridden_by(upper, lower)
        assert is_method_overridden_by(upper, lower, legacy=True)

    def test_protected_upper_other_package(
        self, graph: DeclarationGraph
    ) -> None:
        upper = graph.declare_class("p1.A").declare_method("m", modifiers={Modifier.PROTECTED})
        lower = graph.declare_class("p2.B").declare_method("m")

        assert is_method_overridden_by(upper, lower)


class TestIsFieldHiddenBy:
    def test_same_name_hidden_only_in_legacy_mode(self, graph: DeclarationGraph) -> None:
        int_type = graph.primitive("int")
        upper = graph.declare_class("app.A").declare_field("x", int_type)
        lower = graph.declare_class("app.B").declare_field("x", int_type)

        assert not is_field_hidden_by(upper, lower)
        assert is_field_hidden_by(upper, lower, legacy=True)

    def test_other_name_never_hidden(self, graph: DeclarationGraph) -> None:
        int_type = graph.primitive("int")
        upper = graph.declare_class("app.A").declare_field("x", int_type)
        lower = graph.declare_class("app.B").declare_field("y", int_type)

        assert not is_field_hidden_by(upper, lower, legacy=True)

    def test_static_upper_hidden_only_in_legacy_mode(
        self, graph: DeclarationGraph
    ) -> None:
        int_type = graph.primitive("int")
        upper = graph.declare_class("app.A").declare_field(
            "x", int_type, modifiers={Modifier.PUBLIC, Modifier.STATIC}
        )
        lower = graph.declare_class("app.B").declare_field("x", int_type)

        assert not is_field_hidden_by(upper, lower)
        assert is_field_hidden_by(upper, lower, legacy=True)


class TestHasSameParameterTypes:
    def test_identical_signatures(
        self, graph: DeclarationGraph, types: dict[str, object]
    ) -> None:
        a = graph.declare_class("app.A").declare_method("m", [types["string"]])
        b = graph.declare_interface("app.I").declare_method("m", [types["string"]])

        assert has_same_parameter_types(a, b)

    def test_narrower_parameter_differs(
        self, graph: DeclarationGraph, types: dict[str, object]
    ) -> None:
        a = graph.declare_class("app.A").declare_method("m", [types["number"]])
        b = graph.declare_class("app.B").declare_method("m", [types["integer"]])

        assert not has_same_parameter_types(a, b)
