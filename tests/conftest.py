"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Builders for Roslyn-shaped native nodes (spans, tokens, trivia).
- Tracer and console isolation between tests.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add src to path so we can import 'csharp_normalizer' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from csharp_normalizer.core.tracer import reset_tracer  # noqa: E402
from csharp_normalizer.utils.console import reset_console  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_globals():
  """Gives every test a fresh global tracer and a default console."""
  reset_tracer()
  reset_console()
  yield
  reset_console()


def _span(start: int, end: int) -> Dict[str, Any]:
  return {"@type": "TextSpan", "Start": start, "End": end, "Length": end - start, "IsEmpty": start == end}


def _with_spans(node: Dict[str, Any], start: Optional[int], end: Optional[int], full: Optional[tuple] = None):
  if start is None:
    return node
  full_start, full_end = full or (start, end)
  node["Span"] = _span(start, end)
  node["FullSpan"] = _span(full_start, full_end)
  node["SpanStart"] = start
  return node


@pytest.fixture
def span():
  """Factory for a Roslyn TextSpan object."""
  return _span


@pytest.fixture
def spanned():
  """Factory adding Span, FullSpan and SpanStart to a node."""
  return _with_spans


@pytest.fixture
def token():
  """
  Factory for a Roslyn token.

  ``value`` defaults to the text, ``start`` (when given) adds spans covering
  the text.
  """

  def make(
    typ: str,
    text: str,
    value: Any = None,
    value_text: Optional[str] = None,
    start: Optional[int] = None,
    leading: Optional[List[Any]] = None,
    trailing: Optional[List[Any]] = None,
  ) -> Dict[str, Any]:
    node = {
      "@type": typ,
      "Text": text,
      "Value": text if value is None else value,
      "ValueText": text if value_text is None else value_text,
      "IsMissing": False,
      "LeadingTrivia": list(leading or []),
      "TrailingTrivia": list(trailing or []),
    }
    if start is None:
      return node
    return _with_spans(node, start, start + len(text))

  return make


@pytest.fixture
def trivia():
  """Factory for a trivia node (whitespace, end of line, comments)."""

  def make(typ: str, start: Optional[int] = None, end: Optional[int] = None) -> Dict[str, Any]:
    return _with_spans({"@type": typ, "IsDirective": False}, start, end)

  return make


@pytest.fixture
def ident_name(token):
  """Factory for an IdentifierName wrapping an IdentifierToken."""

  def make(name: str) -> Dict[str, Any]:
    return {
      "@type": "IdentifierName",
      "Identifier": token("IdentifierToken", name),
      "Arity": 0,
      "IsMissing": False,
      "IsStructuredTrivia": False,
    }

  return make
