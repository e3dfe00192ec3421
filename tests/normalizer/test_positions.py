"""
Tests for span validation, position synthesis and source-aware fixes.
"""

import pytest

from csharp_normalizer.errors import MalformedInputError
from csharp_normalizer.normalizer.positions import FromOffset, TextSpan, TokenFromSource, offsets_to_positions
from csharp_normalizer.transformer.context import TransformContext
from csharp_normalizer.transformer.ops import Var, check_op
from csharp_normalizer.transformer.state import State
from csharp_normalizer.transformer.transformers import Mappings
from csharp_normalizer.uast.schema import positions


def test_text_span_binds_offsets(span):
  st = State()
  assert check_op(TextSpan(Var("s"), Var("e")), st, span(2, 7))
  assert (st.get_var("s"), st.get_var("e")) == (2, 7)
  assert TextSpan(Var("s"), Var("e")).construct(st, None) == {"@type": "TextSpan", "Start": 2, "Length": 5, "End": 7}


def test_text_span_ignores_other_objects():
  assert not check_op(TextSpan(Var("s"), Var("e")), State(), {"@type": "Span", "Start": 0, "End": 1})


@pytest.mark.parametrize(
  "bad",
  [
    {"@type": "TextSpan", "Start": 0},
    {"@type": "TextSpan", "End": 1},
    {"@type": "TextSpan", "Start": -1, "End": 1},
    {"@type": "TextSpan", "Start": True, "End": 1},
    {"@type": "TextSpan", "Start": "0", "End": 1},
    {"@type": "TextSpan", "Start": 5, "End": 1},
  ],
)
def test_malformed_text_span(bad):
  with pytest.raises(MalformedInputError):
    check_op(TextSpan(Var("s"), Var("e")), State(), bad)


def test_offsets_to_positions():
  ctx = TransformContext()
  out = Mappings(offsets_to_positions()).transform({"@type": "X", "spanStart": 1, "spanEnd": 3, "v": 0}, ctx)
  assert out == {"@type": "X", "@pos": positions(1, 3), "v": 0}


def test_offsets_half_specified_is_malformed():
  with pytest.raises(MalformedInputError):
    Mappings(offsets_to_positions()).transform({"@type": "X", "spanStart": 1}, TransformContext())


def test_from_offset_lines_and_columns():
  ctx = TransformContext(source="ab\ncd")
  tree = {"@type": "X", "@pos": positions(3, 5), "first": positions(0, 0)}
  out = FromOffset().transform(tree, ctx)
  assert out["@pos"]["start"] == {"@type": "uast:Position", "offset": 3, "line": 2, "col": 1}
  assert out["@pos"]["end"] == {"@type": "uast:Position", "offset": 5, "line": 2, "col": 3}
  assert out["first"]["start"] == {"@type": "uast:Position", "offset": 0, "line": 1, "col": 1}


def test_from_offset_without_source_is_noop():
  tree = {"@type": "X", "@pos": positions(0, 1)}
  assert FromOffset().transform(tree, TransformContext()) is tree


def test_from_offset_past_end_is_malformed():
  with pytest.raises(MalformedInputError):
    FromOffset().transform({"@type": "X", "@pos": positions(0, 6)}, TransformContext(source="ab\ncd"))


def test_token_from_source():
  ctx = TransformContext(source="// hi\nx")
  tree = [
    {"@type": "SingleLineCommentTrivia", "@pos": positions(0, 5), "@token": ""},
    {"@type": "IdentifierToken", "@pos": positions(6, 7)},
  ]
  out = TokenFromSource(["SingleLineCommentTrivia"]).transform(tree, ctx)
  assert out[0]["@token"] == "// hi"
  assert "@token" not in out[1]


def test_token_from_source_range_outside_source():
  ctx = TransformContext(source="//")
  tree = {"@type": "SingleLineCommentTrivia", "@pos": positions(0, 5)}
  with pytest.raises(MalformedInputError):
    TokenFromSource(["SingleLineCommentTrivia"]).transform(tree, ctx)
