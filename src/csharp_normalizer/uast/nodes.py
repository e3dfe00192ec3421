"""
Tree Value Model.

Trees are plain JSON-compatible Python values:

- ``None`` (a tombstone, distinct from an absent field),
- ``bool``, ``int``, ``float``, ``str``,
- ``list`` of nodes (ordered),
- ``dict`` mapping field names to nodes.

Objects carry their type tag under :data:`KEY_TYPE` and optionally a position
range under :data:`KEY_POS`. Trees are never mutated in place; every rewrite
produces new containers and shares untouched children.
"""

from enum import Flag, auto
from typing import Any, Callable, Dict, List, Tuple, Union

from csharp_normalizer.errors import MalformedInputError

KEY_TYPE = "@type"
KEY_POS = "@pos"
KEY_TOKEN = "@token"
KEY_ROLES = "@role"

Node = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


class NodeKind(Flag):
  """Runtime kind of a node value. Ops declare the kinds they apply to."""

  NULL = auto()
  BOOL = auto()
  INT = auto()
  FLOAT = auto()
  STRING = auto()
  ARRAY = auto()
  OBJECT = auto()

  NUMBER = INT | FLOAT
  VALUE = BOOL | INT | FLOAT | STRING
  SCALAR = NULL | VALUE
  ANY = SCALAR | ARRAY | OBJECT


def kind_of(node: Node) -> NodeKind:
  """
  Determines the kind of a node value.

  Args:
      node: Any tree value.

  Returns:
      NodeKind: The single kind flag of the value.

  Raises:
      MalformedInputError: If the value is not part of the node model.
  """
  if node is None:
    return NodeKind.NULL
  # bool is a subclass of int, check it first
  if isinstance(node, bool):
    return NodeKind.BOOL
  if isinstance(node, int):
    return NodeKind.INT
  if isinstance(node, float):
    return NodeKind.FLOAT
  if isinstance(node, str):
    return NodeKind.STRING
  if isinstance(node, list):
    return NodeKind.ARRAY
  if isinstance(node, dict):
    return NodeKind.OBJECT
  raise MalformedInputError(f"unsupported node value of type {type(node).__name__}")


def type_of(node: Node) -> str:
  """Returns the type tag of an object node, or an empty string."""
  if isinstance(node, dict):
    typ = node.get(KEY_TYPE)
    if isinstance(typ, str):
      return typ
  return ""


def equal(a: Node, b: Node) -> bool:
  """
  Deep, kind-strict equality of two trees.

  Unlike ``==``, ``True`` is not equal to ``1`` and ``1`` is not equal to ``1.0``.
  """
  stack: List[Tuple[Node, Node]] = [(a, b)]
  while stack:
    x, y = stack.pop()
    if x is y:
      continue
    kx, ky = kind_of(x), kind_of(y)
    if kx != ky:
      return False
    if kx == NodeKind.ARRAY:
      if len(x) != len(y):
        return False
      stack.extend(zip(x, y))
    elif kx == NodeKind.OBJECT:
      if x.keys() != y.keys():
        return False
      stack.extend((x[k], y[k]) for k in x)
    elif x != y:
      return False
  return True


def validate(root: Node, require_types: bool = True) -> None:
  """
  Checks that a tree conforms to the node model.

  Args:
      root: The tree to check.
      require_types: If True, every object must carry a string type tag.

  Raises:
      MalformedInputError: On the first violation found.
  """
  stack: List[Tuple[Node, str]] = [(root, "")]
  while stack:
    node, path = stack.pop()
    try:
      kind = kind_of(node)
    except MalformedInputError as err:
      raise MalformedInputError(str(err), path or "/") from err
    if kind == NodeKind.ARRAY:
      stack.extend((v, f"{path}/{i}") for i, v in enumerate(node))
    elif kind == NodeKind.OBJECT:
      for key, value in node.items():
        if not isinstance(key, str):
          raise MalformedInputError(f"object key {key!r} is not a string", path or "/")
        stack.append((value, f"{path}/{key}"))
      if KEY_TYPE in node and not isinstance(node[KEY_TYPE], str):
        raise MalformedInputError("type tag must be a string", path or "/")
      if require_types and not type_of(node):
        raise MalformedInputError("object has no type tag", path or "/")


def apply(root: Node, fn: Callable[[Node], Node]) -> Node:
  """
  Rewrites a tree bottom-up.

  Children are rewritten before their parent, and ``fn`` sees the parent with
  its already rewritten children. The traversal uses an explicit stack, so
  depth is not limited by the interpreter's recursion limit.

  Args:
      root: The tree to rewrite.
      fn: Called once per node; returns the replacement node.

  Returns:
      The rewritten tree. Unchanged subtrees are shared with the input.
  """
  results: List[Node] = []
  stack: List[Tuple[Node, bool]] = [(root, False)]
  while stack:
    node, expanded = stack.pop()
    if isinstance(node, (dict, list)) and node:
      if not expanded:
        stack.append((node, True))
        children = node.values() if isinstance(node, dict) else node
        stack.extend((child, False) for child in reversed(list(children)))
        continue
      size = len(node)
      values = results[-size:]
      del results[-size:]
      if isinstance(node, dict):
        if any(v is not old for v, old in zip(values, node.values())):
          node = dict(zip(node.keys(), values))
      elif any(v is not old for v, old in zip(values, node)):
        node = values
    results.append(fn(node))
  return results[0]
