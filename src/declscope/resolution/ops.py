"""Public entry point of the metadata resolution engine.

``MetadataEngine`` wires the hierarchy walker, tag resolver and repeatable
tag collector around one set of injectable caches.  It validates arguments up
front (misuse raises ``PreconditionViolationError`` before any traversal) and
returns results as tuples, which callers may share freely between threads.

Usage::

    engine = MetadataEngine()
    tests = engine.find_tagged_methods(cls, test_tag, TraversalDirection.TOP_DOWN)
    config = engine.find_tag(cls, config_tag)
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog

from declscope.config.loader import load_config
from declscope.config.models import EngineConfig
from declscope.core import preconditions
from declscope.core.logging import configure_logging
from declscope.core.modes import CyclePolicy, TraversalDirection
from declscope.model import ClassDecl, Declaration, FieldDecl, MethodDecl, TagInstance, TypeRef
from declscope.resolution._internal import (
    HierarchyWalker,
    Platform,
    RepeatableTagCollector,
    ResolutionCaches,
    TagResolver,
)

log = structlog.get_logger(__name__)


def _accept_all(_decl: Any) -> bool:
    return True


class MetadataEngine:
    """Hierarchy and tag queries over a declaration graph.

    Traversal direction and cycle policy are per-call switches; when omitted
    they default to the values in ``EngineConfig``.  Caches live as long as
    the engine unless ``clear_caches()`` is called.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        caches: ResolutionCaches | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._caches = caches or ResolutionCaches(self._config.interface_method_cache_size)
        self._platform = Platform.from_config(self._config)
        self._walker = HierarchyWalker(
            self._platform,
            self._caches,
            legacy_search_semantics=self._config.legacy_search_semantics,
        )
        self._tags = TagResolver(self._platform, self._caches, self._walker)
        self._repeatable = RepeatableTagCollector(self._platform, self._tags)

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def caches(self) -> ResolutionCaches:
        return self._caches

    def clear_caches(self) -> None:
        self._caches.clear()
        log.debug("engine.caches_cleared")

    def _direction(self, direction: TraversalDirection | None) -> TraversalDirection:
        return direction if direction is not None else self._config.default_direction

    def _policy(self, policy: CyclePolicy | None) -> CyclePolicy:
        return policy if policy is not None else self._config.cycle_policy

    # =========================================================================
    # Hierarchy queries
    # =========================================================================

    def find_fields(
        self,
        cls: ClassDecl,
        predicate: Callable[[FieldDecl], bool] = _accept_all,
        direction: TraversalDirection | None = None,
    ) -> tuple[FieldDecl, ...]:
        """Fields of cls and its supertypes matching predicate, hidden ones removed."""
        preconditions.not_none(cls, "class must not be None")
        preconditions.not_none(predicate, "predicate must not be None")
        return self._walker.find_fields(cls, predicate, self._direction(direction))

    def find_methods(
        self,
        cls: ClassDecl,
        predicate: Callable[[MethodDecl], bool] = _accept_all,
        direction: TraversalDirection | None = None,
    ) -> tuple[MethodDecl, ...]:
        """Methods of cls and its supertypes matching predicate, overridden ones removed."""
        preconditions.not_none(cls, "class must not be None")
        preconditions.not_none(predicate, "predicate must not be None")
        return self._walker.find_methods(cls, predicate, self._direction(direction))

    def find_method(
        self, cls: ClassDecl, method_name: str, *parameter_types: TypeRef
    ) -> MethodDecl | None:
        preconditions.not_none(cls, "class must not be None")
        preconditions.not_blank(method_name, "method name must not be blank")
        preconditions.condition(
            all(t is not None for t in parameter_types), "parameter types must not contain None"
        )
        return self._walker.find_method(cls, method_name.strip(), parameter_types)

    def is_method_present(self, cls: ClassDecl, predicate: Callable[[MethodDecl], bool]) -> bool:
        preconditions.not_none(cls, "class must not be None")
        preconditions.not_none(predicate, "predicate must not be None")
        return self._walker.is_method_present(cls, predicate)

    def get_public_methods(self, cls: ClassDecl) -> tuple[MethodDecl, ...]:
        preconditions.not_none(cls, "class must not be None")
        return self._walker.public_methods(cls)

    def find_nested_classes(
        self,
        cls: ClassDecl,
        predicate: Callable[[ClassDecl], bool] = _accept_all,
        policy: CyclePolicy | None = None,
    ) -> tuple[ClassDecl, ...]:
        """Nested classes of cls and its supertypes matching predicate.

        Raises CycleDetectedError under CyclePolicy.FAIL when a candidate is an
        inner class extending one of its enclosing classes.
        """
        preconditions.not_none(cls, "class must not be None")
        preconditions.not_none(predicate, "predicate must not be None")
        return self._walker.find_nested_classes(cls, predicate, self._policy(policy))

    def is_nested_class_present(
        self, cls: ClassDecl, predicate: Callable[[ClassDecl], bool]
    ) -> bool:
        preconditions.not_none(cls, "class must not be None")
        preconditions.not_none(predicate, "predicate must not be None")
        return self._walker.is_nested_class_present(cls, predicate)

    def detect_inner_class_cycle(
        self, cls: ClassDecl, policy: CyclePolicy | None = None
    ) -> bool:
        preconditions.not_none(cls, "class must not be None")
        return self._walker.detect_inner_class_cycle(cls, self._policy(policy))

    def get_all_assignment_compatible_classes(self, cls: ClassDecl) -> tuple[ClassDecl, ...]:
        preconditions.not_none(cls, "class must not be None")
        return self._walker.all_assignment_compatible_classes(cls)

    def get_interface_method_if_possible(
        self, method: MethodDecl, target_class: ClassDecl | None = None
    ) -> MethodDecl:
        """Equivalent public interface method for method, or method itself."""
        preconditions.not_none(method, "method must not be None")
        return self._walker.get_interface_method_if_possible(method, target_class)

    # =========================================================================
    # Tag queries
    # =========================================================================

    def find_tag(self, decl: Declaration | None, tag_type: ClassDecl) -> TagInstance | None:
        """First tag_type instance present on decl: direct, meta or inherited."""
        return self._tags.find_tag(decl, tag_type)

    def find_tag_in_enclosing(
        self, cls: ClassDecl | None, tag_type: ClassDecl
    ) -> TagInstance | None:
        return self._tags.find_tag_in_enclosing(cls, tag_type)

    def is_tagged(self, decl: Declaration | None, tag_type: ClassDecl) -> bool:
        return self._tags.is_tagged(decl, tag_type)

    def find_repeatable_tags(
        self, decl: Declaration | None, tag_type: ClassDecl
    ) -> tuple[TagInstance, ...]:
        """Every tag_type occurrence on decl, containers unpacked, ancestors first."""
        return self._repeatable.find_repeatable_tags(decl, tag_type)

    def find_tagged_fields(
        self,
        cls: ClassDecl,
        tag_type: ClassDecl,
        direction: TraversalDirection | None = None,
    ) -> tuple[FieldDecl, ...]:
        preconditions.not_none(cls, "class must not be None")
        return self._tags.find_tagged_fields(cls, tag_type, self._direction(direction))

    def find_tagged_methods(
        self,
        cls: ClassDecl,
        tag_type: ClassDecl,
        direction: TraversalDirection | None = None,
    ) -> tuple[MethodDecl, ...]:
        preconditions.not_none(cls, "class must not be None")
        return self._tags.find_tagged_methods(cls, tag_type, self._direction(direction))

    def find_public_tagged_fields(
        self, cls: ClassDecl, field_type: ClassDecl, tag_type: ClassDecl
    ) -> tuple[FieldDecl, ...]:
        preconditions.not_none(cls, "class must not be None")
        return self._tags.find_public_tagged_fields(cls, field_type, tag_type)


def create_engine(
    project_root: Path | None = None,
    *,
    configure_logs: bool = False,
    **overrides: Any,
) -> MetadataEngine:
    """Build an engine from layered configuration (files, env, overrides).

    With configure_logs, the logging section of the same configuration is
    applied to the process before the engine is built.
    """
    config = load_config(project_root, **overrides)
    if configure_logs:
        configure_logging(config=config.logging)
    engine = MetadataEngine(config.engine)
    log.debug(
        "engine.created",
        direction=config.engine.default_direction.value,
        cycle_policy=config.engine.cycle_policy.value,
        legacy=config.engine.legacy_search_semantics,
    )
    return engine
