"""
Preprocess Pass.

Cleans up the native Roslyn tree before normalization:

1. whitespace, end-of-line and skipped-token trivia become ``None``
   tombstones, and the redundant ``TextSpan.IsEmpty`` flag is dropped;
2. tombstones are filtered out of ``LeadingTrivia``;
3. and out of ``TrailingTrivia``;
4. ``SpanStart`` (a copy of ``Span.Start``) is dropped;
5. each node's ``Span`` or ``FullSpan`` is selected and its offsets moved to
   temporary ``spanStart``/``spanEnd`` fields;
6. those fields become the canonical ``@pos`` range;
7. comment trivia without a token get an empty one.

Each step is a separate traversal, so every step sees the whole tree as left
by the previous one.
"""

from typing import List, Sequence

from csharp_normalizer.config import RuntimeConfig
from csharp_normalizer.normalizer.operators import LEADING_TRIVIA, TRAILING_TRIVIA, DropNils
from csharp_normalizer.normalizer.positions import SPAN_END, SPAN_START, TEXT_SPAN, TextSpan, offsets_to_positions
from csharp_normalizer.transformer.mapping import Map, Mapping
from csharp_normalizer.transformer.objects import CasesObj, Has, Obj, Part
from csharp_normalizer.transformer.ops import Any, Bool, Check, Is, String, Var
from csharp_normalizer.transformer.pipeline import Transformers
from csharp_normalizer.transformer.predicates import In, Not
from csharp_normalizer.transformer.transformers import Mappings
from csharp_normalizer.uast.nodes import KEY_TOKEN, KEY_TYPE

ERASED_TRIVIA = ["WhitespaceTrivia", "EndOfLineTrivia", "SkippedTokensTrivia"]
COMMENT_TRIVIA = ["SingleLineCommentTrivia", "SingleLineDocumentationCommentTrivia", "MultiLineCommentTrivia"]


def erase_trivia() -> Mapping:
  return Map(
    Obj(
      {
        KEY_TYPE: Check(In(*ERASED_TRIVIA), Any()),
        "FullSpan": Any(),
        "Span": Any(),
        "SpanStart": Any(),
        "IsDirective": Bool(False),
      }
    ),
    Is(None),
    name="erase whitespace trivia",
  )


def drop_text_span_is_empty() -> Mapping:
  # IsEmpty is the same as Length == 0
  return Map(
    Part("_", Obj({KEY_TYPE: String(TEXT_SPAN), "IsEmpty": Any()})),
    Part("_", Obj({KEY_TYPE: String(TEXT_SPAN)})),
    name="drop TextSpan.IsEmpty",
  )


def drop_nils(field: str) -> Mapping:
  return Map(
    Part("_", Obj({field: DropNils(Var("arr"))})),
    Part("_", Obj({field: Var("arr")})),
    name=f"drop tombstones from {field}",
  )


def drop_span_start() -> Mapping:
  return Map(
    Part("_", Obj({"SpanStart": Any()})),
    Part("_", Obj({})),
    name="drop SpanStart",
  )


def select_span(full_span_types: Sequence[str]) -> Mapping:
  """
  Picks ``FullSpan`` for the listed types and ``Span`` for everything else.

  The unused span is dropped. The offsets of the chosen one are stored in
  ``spanStart``/``spanEnd``.
  """
  full = list(full_span_types)
  use_full = Check(In(*full), Var("typ"))
  use_tight = Check(Not(In(*full)), Var("typ"))
  span = TextSpan(Var("start"), Var("end"))
  return Map(
    Part(
      "_",
      CasesObj(
        "case",
        None,
        [
          Obj({KEY_TYPE: use_full, "FullSpan": span, "Span": Any()}),
          Obj({KEY_TYPE: use_tight, "Span": span, "FullSpan": Any()}),
        ],
      ),
    ),
    Part(
      "_",
      CasesObj(
        "case",
        Obj({SPAN_START: Var("start"), SPAN_END: Var("end")}),
        [
          Obj({KEY_TYPE: use_full}),
          Obj({KEY_TYPE: use_tight}),
        ],
      ),
    ),
    name="select span",
  )


def empty_comment_token(typ: str) -> Mapping:
  # the comment rules match on @token, it is filled from the source later
  return Map(
    Check(Not(Has({KEY_TOKEN: Any()})), Part("_", Obj({KEY_TYPE: String(typ)}))),
    Part("_", Obj({KEY_TYPE: String(typ), KEY_TOKEN: String("")})),
    name=f"empty token for {typ}",
  )


def preprocessors(config: RuntimeConfig) -> List[Mappings]:
  """Returns the Preprocess stages, in order."""
  return [
    Mappings(erase_trivia(), drop_text_span_is_empty(), name="erase trivia"),
    Mappings(drop_nils(LEADING_TRIVIA), name="leading trivia"),
    Mappings(drop_nils(TRAILING_TRIVIA), name="trailing trivia"),
    Mappings(drop_span_start(), name="span start"),
    Mappings(select_span(config.full_span_types), name="select span"),
    Mappings(offsets_to_positions(), name="positions"),
    Mappings(*[empty_comment_token(t) for t in COMMENT_TRIVIA], name="comment tokens"),
  ]


def build_preprocess(config: RuntimeConfig) -> Transformers:
  return Transformers("preprocess", preprocessors(config))
