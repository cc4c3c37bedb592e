"""
Pytest Configuration for nl2dsl Tests
=====================================

Shared fixtures: parse contexts over the built-in and fixture catalogs,
static reasoning sessions for the renderer.
"""

from typing import Any, Callable

import pytest

from catalog import OperatorIndex
from grammar import ParseContext, RefCounter, TranslatorOptions
from render import ReasoningResult, ResponseTranslator, StaticSession


# ==============================================================================
#  Catalog Fixtures
# ==============================================================================

SMALL_CATALOG: dict[str, Any] = {
    "version": "test",
    "operators": [
        {"name": "isA", "arity": 2, "kind": "relation"},
        {"name": "hasProperty", "arity": 2, "kind": "property"},
        {"name": "likes", "arity": 2},
        {"name": "at", "arity": 2},
        {"name": "Not", "arity": 1, "kind": "logic"},
        {"name": "And", "arity": None, "kind": "logic"},
        {"name": "Implies", "arity": 2, "kind": "logic"},
        {"name": "give", "arity": 3},
    ],
}


@pytest.fixture
def default_index() -> OperatorIndex:
    """Built-in operator catalog (core_operators.json)."""
    return OperatorIndex.default()


@pytest.fixture
def small_index() -> OperatorIndex:
    """Minimal fixture catalog: isA, hasProperty, likes, at, give/3 and logic operators."""
    return OperatorIndex.from_dict(SMALL_CATALOG)


# ==============================================================================
#  Parse Context Fixtures
# ==============================================================================


@pytest.fixture
def ctx(default_index: OperatorIndex) -> ParseContext:
    """Default options, built-in catalog, fresh reference counter."""
    return ParseContext.create(TranslatorOptions(), default_index, RefCounter())


@pytest.fixture
def auto_ctx(default_index: OperatorIndex) -> ParseContext:
    """Auto-declaration of unknown operators enabled."""
    options = TranslatorOptions(auto_declare_unknown_operators=True)
    return ParseContext.create(options, default_index, RefCounter())


@pytest.fixture
def small_ctx(small_index: OperatorIndex) -> ParseContext:
    """Default options over the minimal fixture catalog."""
    return ParseContext.create(TranslatorOptions(), small_index, RefCounter())


# ==============================================================================
#  Renderer Fixtures
# ==============================================================================


@pytest.fixture
def make_session() -> Callable[..., StaticSession]:
    """Factory: StaticSession from the engine's JSON shape (camelCase keys)."""

    def _make(**data: Any) -> StaticSession:
        return StaticSession.from_dict(data)

    return _make


@pytest.fixture
def render() -> Callable[..., str]:
    """Renders one action result against a session: render(session, action, result_dict, query_dsl)."""

    def _render(session: StaticSession, action: str, result: dict | None, query_dsl: str = "") -> str:
        parsed = ReasoningResult.from_dict(result) if result is not None else None
        return ResponseTranslator(session).translate(action, parsed, query_dsl)

    return _render


def statement(op: str, *args: str) -> dict[str, Any]:
    """Engine AST Statement; '?name' args become Hole nodes."""
    nodes = [
        {"type": "Hole", "name": a[1:]} if a.startswith("?") else {"type": "Identifier", "name": a}
        for a in args
    ]
    return {"type": "Statement", "operator": {"type": "Identifier", "name": op}, "args": nodes}


def kb_fact(op: str, *args: str, fact_id: str | None = None) -> dict[str, Any]:
    """Session KB fact record."""
    return {"id": fact_id, "metadata": {"operator": op, "args": list(args)}}
