"""
Canonical Semantic Schema.

Each semantic node kind is declared once as a pydantic model. The model's
``TYPE`` is the type tag written into trees, its fields (with defaults) form
the template used when a node of that kind is built.
"""

from typing import Any, ClassVar, Dict, List, Optional, Type

from pydantic import BaseModel, Field

from csharp_normalizer.uast.nodes import KEY_TYPE, Node

NAMESPACE = "uast"


class UASTNode(BaseModel):
  """Base class of all canonical node models."""

  TYPE: ClassVar[str] = ""


class Position(UASTNode):
  TYPE: ClassVar[str] = "uast:Position"

  offset: int = Field(0, description="Zero-based character offset.")
  line: Optional[int] = Field(None, description="One-based line, when the source is known.")
  col: Optional[int] = Field(None, description="One-based column, when the source is known.")


class Positions(UASTNode):
  """A half-open ``[start, end)`` range."""

  TYPE: ClassVar[str] = "uast:Positions"

  start: Position = Field(default_factory=Position)
  end: Position = Field(default_factory=Position)


class Identifier(UASTNode):
  TYPE: ClassVar[str] = "uast:Identifier"

  Name: str = ""


class String(UASTNode):
  TYPE: ClassVar[str] = "uast:String"

  Value: str = ""
  Format: str = ""


class Bool(UASTNode):
  TYPE: ClassVar[str] = "uast:Bool"

  Value: bool = False


class Block(UASTNode):
  TYPE: ClassVar[str] = "uast:Block"

  Statements: List[Any] = Field(default_factory=list)


class Comment(UASTNode):
  """
  A comment split into its text and the decoration around it.

  ``Prefix``/``Suffix`` hold whitespace between the comment tokens and the
  text, ``Tab`` the indentation shared by continuation lines.
  """

  TYPE: ClassVar[str] = "uast:Comment"

  Text: str = ""
  Prefix: str = ""
  Suffix: str = ""
  Tab: str = ""
  Block: bool = False


class Group(UASTNode):
  TYPE: ClassVar[str] = "uast:Group"

  Nodes: List[Any] = Field(default_factory=list)


class FunctionGroup(UASTNode):
  TYPE: ClassVar[str] = "uast:FunctionGroup"

  Nodes: List[Any] = Field(default_factory=list)


class Import(UASTNode):
  TYPE: ClassVar[str] = "uast:Import"

  Path: Any = None
  All: bool = False
  Names: Optional[List[Any]] = None
  Target: Any = None


class QualifiedIdentifier(UASTNode):
  TYPE: ClassVar[str] = "uast:QualifiedIdentifier"

  Names: List[Any] = Field(default_factory=list)


class Argument(UASTNode):
  TYPE: ClassVar[str] = "uast:Argument"

  Name: Any = None
  Type: Any = None
  Init: Any = None
  Variadic: bool = False
  MapVariadic: bool = False
  Receiver: bool = False


class Alias(UASTNode):
  TYPE: ClassVar[str] = "uast:Alias"

  Name: Any = None
  Node: Any = None


class FunctionType(UASTNode):
  TYPE: ClassVar[str] = "uast:FunctionType"

  Arguments: List[Any] = Field(default_factory=list)
  Returns: Optional[List[Any]] = None


class Function(UASTNode):
  TYPE: ClassVar[str] = "uast:Function"

  Type: Any = None
  Body: Any = None


def to_node(obj: Any) -> Node:
  """
  Converts a schema model instance (or nested values holding them) to a tree.

  Fields set to ``None`` are omitted.

  Args:
      obj: A :class:`UASTNode`, list, dict or scalar.

  Returns:
      A plain tree value.
  """
  if isinstance(obj, UASTNode):
    out: Dict[str, Any] = {KEY_TYPE: obj.TYPE}
    for name in type(obj).model_fields:
      value = getattr(obj, name)
      if value is not None:
        out[name] = to_node(value)
    return out
  if isinstance(obj, list):
    return [to_node(v) for v in obj]
  if isinstance(obj, dict):
    return {k: to_node(v) for k, v in obj.items()}
  return obj


def template(model: Type[UASTNode]) -> Dict[str, Any]:
  """Returns a fresh tree for a schema kind with every field at its default."""
  return to_node(model())


def positions(start: int, end: int) -> Dict[str, Any]:
  """Builds a ``uast:Positions`` tree from two offsets."""
  return to_node(Positions(start=Position(offset=start), end=Position(offset=end)))
