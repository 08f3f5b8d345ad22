"""Tree-sitter grammar registry for ignore-directive resolution.

Every language whose sources can carry range-style ignore directives has
exactly ONE Grammar entry describing:
- Grammar install metadata (package, module, loader function)
- Node types that count as an enclosing block for ``rest`` directives
- Node types that are comments, and other extras excluded from sibling lists

The GRAMMARS registry is the canonical lookup: ``GRAMMARS["javascript"]``.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Any

import tree_sitter

from covmap.core.errors import SourceParseError


@dataclass(frozen=True)
class Grammar:
    """Loading and traversal metadata for one tree-sitter grammar."""

    name: str
    grammar_package: str
    grammar_module: str
    language_func: str = "language"
    block_types: frozenset[str] = frozenset({"statement_block"})
    comment_types: frozenset[str] = frozenset({"comment"})
    skip_types: frozenset[str] = frozenset({"hashbang_line"})


GRAMMARS: dict[str, Grammar] = {
    "javascript": Grammar(
        name="javascript",
        grammar_package="tree-sitter-javascript",
        grammar_module="tree_sitter_javascript",
    ),
    "typescript": Grammar(
        name="typescript",
        grammar_package="tree-sitter-typescript",
        grammar_module="tree_sitter_typescript",
        language_func="language_typescript",
    ),
    "tsx": Grammar(
        name="tsx",
        grammar_package="tree-sitter-typescript",
        grammar_module="tree_sitter_typescript",
        language_func="language_tsx",
    ),
}


def get_grammar(name: str) -> Grammar:
    grammar = GRAMMARS.get(name)
    if grammar is None:
        raise SourceParseError.unsupported_language(name)
    return grammar


def load_language(grammar: Grammar) -> tree_sitter.Language:
    """Load the tree-sitter Language for a grammar from its binding module."""
    try:
        mod = importlib.import_module(grammar.grammar_module)
        lang_fn: Any = getattr(mod, grammar.language_func)
    except (ImportError, AttributeError) as err:
        raise SourceParseError.unsupported_language(grammar.name) from err
    return tree_sitter.Language(lang_fn())


def parse(grammar: Grammar, data: bytes) -> tree_sitter.Tree:
    parser = tree_sitter.Parser(load_language(grammar))
    return parser.parse(data)
