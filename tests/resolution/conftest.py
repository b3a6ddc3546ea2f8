"""Shared fixtures for resolution tests."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass

import pytest
import structlog

from declscope.model import ClassDecl, DeclarationGraph, Modifier, TagInstance
from declscope.resolution import MetadataEngine

ABSTRACT = frozenset({Modifier.PUBLIC, Modifier.ABSTRACT})


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None, None, None]:
    """Undo logging configuration left behind by other test modules."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def graph() -> DeclarationGraph:
    return DeclarationGraph()


@pytest.fixture
def engine() -> MetadataEngine:
    """Fresh engine with fresh caches."""
    return MetadataEngine()


@dataclass
class ConfigScenario:
    """Iface1 extends Iface2, Base implements Iface1, Derived extends Base.

    ``Config`` is an inherited tag type attached to Base only.
    """

    iface1: ClassDecl
    iface2: ClassDecl
    base: ClassDecl
    derived: ClassDecl
    config: ClassDecl
    config_on_base: TagInstance


@pytest.fixture
def config_scenario(graph: DeclarationGraph) -> ConfigScenario:
    config = graph.declare_tag_type("app.Config", inherited=True)
    config_on_base = TagInstance.of(config, value="base")
    iface2 = graph.declare_interface("app.Iface2")
    iface1 = graph.declare_interface("app.Iface1", interfaces=[iface2])
    base = graph.declare_class("app.Base", interfaces=[iface1], tags=[config_on_base])
    derived = graph.declare_class("app.Derived", superclass=base)
    return ConfigScenario(
        iface1=iface1,
        iface2=iface2,
        base=base,
        derived=derived,
        config=config,
        config_on_base=config_on_base,
    )
