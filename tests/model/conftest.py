"""Shared fixtures for declaration model tests."""

from __future__ import annotations

import pytest

from declscope.model import DeclarationGraph


@pytest.fixture
def graph() -> DeclarationGraph:
    """Empty graph with the default root type and tag marker."""
    return DeclarationGraph()
