"""
Mappings.

A :class:`Mapping` pairs a source pattern with a destination pattern. When
the source matches a node, the node is replaced by whatever the destination
builds from the variables bound during the match.
"""

from dataclasses import dataclass
from typing import Optional, Type

from csharp_normalizer.transformer.objects import Field, Fields, JoinObj, ObjectOp, UASTType
from csharp_normalizer.transformer.ops import Check, Is, Op, Var
from csharp_normalizer.uast.nodes import KEY_POS, KEY_TYPE
from csharp_normalizer.uast.schema import UASTNode


@dataclass(frozen=True)
class Mapping:
  """
  A named rewrite rule.

  Attributes:
      name: Used in trace events and error messages.
      src: Pattern checked against each node.
      dst: Pattern constructed when ``src`` matched.
  """

  name: str
  src: Op
  dst: Op

  def node_type(self) -> Optional[str]:
    """The type tag the source pattern is pinned to, if any."""
    op = self.src
    while isinstance(op, Check):
      if isinstance(op.sel, ObjectOp) and op.sel.fixed_type():
        return op.sel.fixed_type()
      op = op.op
    if isinstance(op, ObjectOp):
      return op.fixed_type()
    return None


@dataclass(frozen=True)
class ObjMapping:
  """A pair of object patterns, the building block for object-level mappings."""

  src: ObjectOp
  dst: ObjectOp


def _describe(op: Op) -> str:
  typ = Mapping("", op, op).node_type()
  return typ or type(op).__name__


def Map(src: Op, dst: Op, name: str = "") -> Mapping:
  """Creates a mapping, naming it after the source type when no name is given."""
  return Mapping(name or f"{_describe(src)} -> {_describe(dst)}", src, dst)


def MapObj(src: ObjectOp, dst: ObjectOp) -> ObjMapping:
  return ObjMapping(src, dst)


def _type_header(native_type: Optional[str]) -> Fields:
  fields = [Field(KEY_POS, Var(KEY_POS), optional=f"{KEY_POS}?")]
  if native_type is not None:
    fields.insert(0, Field(KEY_TYPE, Is(native_type)))
  return Fields(fields)


def MapSemantic(native_type: str, model: Type[UASTNode], m: ObjMapping, name: str = "") -> Mapping:
  """
  Maps a native node type to a canonical schema kind.

  The type tag is replaced and the position range, when present, is carried
  over unchanged. Every other field comes from ``m``.

  Args:
      native_type: Type tag of the native node.
      model: Schema model of the canonical node.
      m: Field mapping between the two.
      name: Optional mapping name.

  Returns:
      Mapping: The rewrite rule.
  """
  src = JoinObj(_type_header(native_type), m.src)
  dst = UASTType(model, _type_header(None), m.dst)
  return Mapping(name or f"{native_type} -> {model.TYPE}", src, dst)
