"""
Tests for the NormalizerEngine orchestration.

Verifies:
1. Mode selection of passes.
2. Failure handling (no partial output, errors and trace preserved).
3. The `normalize` convenience wrapper.
"""

import pytest

import csharp_normalizer as csn
from csharp_normalizer.config import RuntimeConfig
from csharp_normalizer.core.engine import NormalizerEngine
from csharp_normalizer.core.tracer import TraceEventType, TraceLogger, get_tracer
from csharp_normalizer.enums import Mode
from csharp_normalizer.errors import NormalizerError
from csharp_normalizer.uast.schema import positions


@pytest.fixture
def literal(token, spanned):
  tok = token("TrueKeyword", "true", value=True, start=0)
  return spanned(
    {"@type": "TrueLiteralExpression", "IsMissing": False, "IsStructuredTrivia": False, "Token": tok},
    0,
    4,
  )


def count(tracer, typ):
  return sum(1 for e in tracer.export() if e["type"] == typ)


def phase_names(events):
  return [e["description"] for e in events if e["type"] == TraceEventType.PHASE_START]


def test_native_mode_only_validates(literal):
  engine = NormalizerEngine()
  res = engine.run(literal, mode=Mode.NATIVE)
  assert res.success
  assert res.uast == literal
  assert phase_names(res.trace_events) == ["Normalization Pipeline", "validate"]


def test_pass_selection():
  engine = NormalizerEngine()
  names = lambda mode, src: [p.describe() for p in engine.passes(mode, src)]  # noqa: E731

  assert names(Mode.NATIVE, True) == []
  assert names(Mode.PREPROCESSED, False) == ["preprocess"]
  assert names(Mode.PREPROCESSED, True) == ["preprocess", "code"]
  assert names(Mode.ANNOTATED, True) == ["preprocess", "code", "annotate"]
  assert names(Mode.SEMANTIC, False) == ["preprocess", "normalize", "annotate"]
  assert names(Mode.SEMANTIC, True) == ["preprocess", "code", "normalize", "annotate"]


def test_preprocessed_mode(literal):
  res = NormalizerEngine(RuntimeConfig(mode=Mode.PREPROCESSED)).run(literal)
  assert res.success
  assert res.uast["@type"] == "TrueLiteralExpression"
  assert res.uast["@pos"] == positions(0, 4)
  assert "@role" not in res.uast
  names = phase_names(res.trace_events)
  assert "preprocess" in names
  assert "normalize" not in names


def test_semantic_mode_with_source(literal):
  res = NormalizerEngine().run(literal, source="true")
  assert res.success
  assert res.uast["@type"] == "uast:Bool"
  assert res.uast["Value"] is True
  assert res.uast["@pos"]["start"]["line"] == 1
  assert res.uast["@pos"]["end"]["col"] == 5
  assert count(get_tracer(), TraceEventType.MAPPING_MATCH) > 0


def test_mode_argument_accepts_strings(literal):
  res = NormalizerEngine().run(literal, mode="annotated")
  assert res.success
  assert res.uast["@type"] == "TrueLiteralExpression"
  assert res.uast["@role"] == ["Literal", "Boolean", "Expression"]


def test_malformed_span_fails_without_output(literal):
  del literal["Span"]["End"]
  res = NormalizerEngine().run(literal)
  assert not res.success
  assert res.uast is None
  assert res.has_errors
  assert "TextSpan has no End" in res.errors[0]
  errors = [e for e in res.trace_events if e["type"] == TraceEventType.ERROR]
  assert len(errors) == 1
  # every started phase was closed
  starts = sum(1 for e in res.trace_events if e["type"] == TraceEventType.PHASE_START)
  ends = sum(1 for e in res.trace_events if e["type"] == TraceEventType.PHASE_END)
  assert starts == ends


def test_offset_past_source_end(literal):
  res = NormalizerEngine().run(literal, source="tr")
  assert not res.success
  assert "past the end of the source" in res.errors[0]


def test_untyped_objects():
  tree = {"@type": "CompilationUnit", "Members": [{"Name": "x"}]}
  res = NormalizerEngine().run(tree, mode=Mode.NATIVE)
  assert not res.success
  assert "/Members/0" in res.errors[0]

  res = NormalizerEngine(RuntimeConfig(require_types=False)).run(tree, mode=Mode.NATIVE)
  assert res.success


def test_injected_tracer(literal):
  tracer = TraceLogger(record_matches=False)
  engine = NormalizerEngine(tracer=tracer)
  res = engine.run(literal)
  assert res.success
  assert count(tracer, TraceEventType.PHASE_START) > 0
  assert count(tracer, TraceEventType.MAPPING_MATCH) == 0
  assert count(get_tracer(), TraceEventType.PHASE_START) == 0


def test_engine_is_reusable(literal):
  engine = NormalizerEngine()
  first = engine.run(literal)
  second = engine.run(literal)
  assert first.uast == second.uast
  assert len(first.trace_events) == len(second.trace_events)


def test_normalize_wrapper(literal):
  out = csn.normalize(literal, mode="preprocessed")
  assert out["@pos"] == positions(0, 4)


def test_normalize_wrapper_raises(literal):
  literal["Span"]["Start"] = "zero"
  with pytest.raises(NormalizerError, match="Normalization failed"):
    csn.normalize(literal)
