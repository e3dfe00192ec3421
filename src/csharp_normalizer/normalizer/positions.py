"""
Position Normalization.

Native nodes describe their extent with Roslyn ``TextSpan`` objects. The
Preprocess pass selects one span per node, moves its offsets into temporary
fields, and finally replaces them with a canonical ``@pos`` range. When the
source text is known, :class:`FromOffset` adds line and column numbers and
:class:`TokenFromSource` restores comment tokens.
"""

import bisect
from typing import Dict, Iterable, Optional

from csharp_normalizer.errors import MalformedInputError, UnexpectedTypeError
from csharp_normalizer.transformer.context import TransformContext
from csharp_normalizer.transformer.interface import Transformer
from csharp_normalizer.transformer.mapping import Map, Mapping
from csharp_normalizer.transformer.objects import Field, FieldDesc, Fields, ObjectOp, Part
from csharp_normalizer.transformer.ops import Op, Var, check_op
from csharp_normalizer.transformer.state import State
from csharp_normalizer.uast.nodes import KEY_POS, KEY_TOKEN, Node, NodeKind, apply, kind_of, type_of
from csharp_normalizer.uast.schema import Position, Positions, positions

TEXT_SPAN = "TextSpan"
SPAN_START = "spanStart"
SPAN_END = "spanEnd"


def _offset(value: Node, what: str) -> int:
  if isinstance(value, bool) or not isinstance(value, int):
    raise MalformedInputError(f"{what} must be an integer offset, got {kind_of(value).name.lower()}")
  if value < 0:
    raise MalformedInputError(f"{what} must not be negative, got {value}")
  return value


class TextSpan(Op):
  """
  Matches a ``TextSpan`` object and checks ``start``/``end`` on its offsets.

  A TextSpan without integer ``Start`` and ``End`` is malformed input.
  Construction builds a TextSpan with ``Start``, ``Length`` and ``End``.
  """

  kinds = NodeKind.OBJECT

  def __init__(self, start: Op, end: Op) -> None:
    self.start = start
    self.end = end

  def check(self, st: State, n: Node) -> bool:
    if type_of(n) != TEXT_SPAN:
      return False
    for key in ("Start", "End"):
      if key not in n:
        raise MalformedInputError(f"{TEXT_SPAN} has no {key}")
    start = _offset(n["Start"], f"{TEXT_SPAN}.Start")
    end = _offset(n["End"], f"{TEXT_SPAN}.End")
    if end < start:
      raise MalformedInputError(f"{TEXT_SPAN} ends before it starts ({start} > {end})")
    return check_op(self.start, st, start) and check_op(self.end, st, end)

  def construct(self, st: State, n: Node) -> Node:
    start = self.start.construct(st, None)
    end = self.end.construct(st, None)
    return {"@type": TEXT_SPAN, "Start": start, "Length": end - start, "End": end}


class OffsetFields(ObjectOp):
  """
  Matches the pair of temporary offset fields.

  Objects with neither field do not match. Objects with only one of them
  are malformed input.
  """

  def __init__(self, start: Op, end: Op, start_key: str = SPAN_START, end_key: str = SPAN_END) -> None:
    self.start = start
    self.end = end
    self.start_key = start_key
    self.end_key = end_key

  def fields(self) -> Dict[str, FieldDesc]:
    return {self.start_key: FieldDesc(False), self.end_key: FieldDesc(False)}

  def check_obj(self, st: State, obj: Dict[str, Node]) -> bool:
    has_start, has_end = self.start_key in obj, self.end_key in obj
    if not has_start and not has_end:
      return False
    if not (has_start and has_end):
      missing = self.end_key if has_start else self.start_key
      raise MalformedInputError(f"position has no {missing}")
    start = _offset(obj[self.start_key], self.start_key)
    end = _offset(obj[self.end_key], self.end_key)
    return check_op(self.start, st, start) and check_op(self.end, st, end)

  def construct_obj(self, st: State, obj: Optional[Dict[str, Node]]) -> Dict[str, Node]:
    return {self.start_key: self.start.construct(st, None), self.end_key: self.end.construct(st, None)}


class PositionsOp(Op):
  """Matches a ``uast:Positions`` range, or builds one from two offsets."""

  kinds = NodeKind.OBJECT

  def __init__(self, start: Op, end: Op) -> None:
    self.start = start
    self.end = end

  def check(self, st: State, n: Node) -> bool:
    if type_of(n) != Positions.TYPE:
      return False
    start, end = n.get("start"), n.get("end")
    if type_of(start) != Position.TYPE or type_of(end) != Position.TYPE:
      return False
    return check_op(self.start, st, start.get("offset")) and check_op(self.end, st, end.get("offset"))

  def construct(self, st: State, n: Node) -> Node:
    start = self.start.construct(st, None)
    end = self.end.construct(st, None)
    for value in (start, end):
      if isinstance(value, bool) or not isinstance(value, int):
        raise UnexpectedTypeError("int", kind_of(value).name.lower(), "position offset")
    return positions(start, end)


def offsets_to_positions(start_key: str = SPAN_START, end_key: str = SPAN_END) -> Mapping:
  """Mapping that replaces the temporary offset fields with ``@pos``."""
  return Map(
    Part("_", OffsetFields(Var("start"), Var("end"), start_key, end_key)),
    Part("_", Fields([Field(KEY_POS, PositionsOp(Var("start"), Var("end")))])),
    name="offsets -> @pos",
  )


class FromOffset(Transformer):
  """
  Fills ``line`` and ``col`` (both 1-based) of every ``uast:Position``.

  Requires the source text. An offset past the end of the text is malformed
  input.
  """

  name = "positions from offsets"

  def transform(self, root: Node, context: TransformContext) -> Node:
    if not context.has_source:
      return root
    size = len(context.source)
    starts = context.line_starts()

    def fix(node: Node) -> Node:
      if type_of(node) != Position.TYPE:
        return node
      offset = _offset(node.get("offset"), "position offset")
      if offset > size:
        raise MalformedInputError(f"offset {offset} is past the end of the source ({size})")
      line = bisect.bisect_right(starts, offset)
      col = offset - starts[line - 1] + 1
      if node.get("line") == line and node.get("col") == col:
        return node
      out = dict(node)
      out["line"] = line
      out["col"] = col
      return out

    return apply(root, fix)


class TokenFromSource(Transformer):
  """Sets ``@token`` of the given node types to the source text they cover."""

  name = "tokens from source"

  def __init__(self, types: Iterable[str]) -> None:
    self.types = frozenset(types)

  def transform(self, root: Node, context: TransformContext) -> Node:
    if not context.has_source:
      return root
    source = context.source

    def fix(node: Node) -> Node:
      if type_of(node) not in self.types:
        return node
      pos = node.get(KEY_POS)
      if type_of(pos) != Positions.TYPE:
        return node
      first, last = pos.get("start"), pos.get("end")
      if not isinstance(first, dict) or not isinstance(last, dict):
        raise MalformedInputError(f"{Positions.TYPE} of {type_of(node)} has no start or end")
      start = _offset(first.get("offset"), "position offset")
      end = _offset(last.get("offset"), "position offset")
      if end > len(source) or start > end:
        raise MalformedInputError(f"token range [{start}, {end}) is outside the source ({len(source)})")
      out = dict(node)
      out[KEY_TOKEN] = source[start:end]
      return out

    return apply(root, fix)
