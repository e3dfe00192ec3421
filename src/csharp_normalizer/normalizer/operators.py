"""
Structural Operators.

Operators that reshape trees in ways the generic combinators cannot: they
depend on where a typed element sits in an array, or fold an array into a
nested chain.

- :class:`DropNils` removes ``None`` tombstones from an array.
- :class:`ArrHasKeyword` turns "this modifier list contains keyword X" into a
  bool and removes X from the list.
- :class:`ArrToChain` converts between a flat modifier list plus a terminal
  type and a ``Type``-nested chain of modifiers.
- :class:`MoveTrivias` hoists ``LeadingTrivia``/``TrailingTrivia`` into a
  ``uast:Group`` around the node.
- :class:`MergeGroups` folds such a Group into the single
  ``uast:FunctionGroup`` it contains.
"""

from typing import Callable, Dict, List, Mapping, Optional

from csharp_normalizer.errors import StructuralError, UnexpectedTypeError
from csharp_normalizer.transformer.ops import Op, check_op
from csharp_normalizer.transformer.state import State
from csharp_normalizer.uast.nodes import KEY_POS, Node, NodeKind, kind_of, type_of
from csharp_normalizer.uast.schema import FunctionGroup, Group, Positions, to_node

LEADING_TRIVIA = "LeadingTrivia"
TRAILING_TRIVIA = "TrailingTrivia"


class DropNils(Op):
  """
  Filters ``None`` out of an array before checking it with ``op``.

  A ``None`` in place of the array is treated as an empty array. Construction
  does not put the removed tombstones back.
  """

  kinds = NodeKind.ARRAY | NodeKind.NULL

  def __init__(self, op: Op) -> None:
    self.op = op

  def check(self, st: State, n: Node) -> bool:
    items = [] if n is None else [v for v in n if v is not None]
    return check_op(self.op, st, items)

  def construct(self, st: State, n: Node) -> Node:
    return self.op.construct(st, n)


class ArrHasKeyword(Op):
  """
  Extracts a keyword from an array into a bool flag.

  On check, the array is scanned for the first element whose type tag is
  ``keyword``. If found, ``has`` is checked against ``True`` and ``rest``
  against the array without that element. Otherwise ``has`` is checked
  against ``False`` and ``rest`` against the whole array.

  Construction builds ``rest`` only. The flag is validated but the keyword
  element is not put back into the array.
  """

  kinds = NodeKind.ARRAY | NodeKind.NULL

  def __init__(self, keyword: str, has: Op, rest: Op) -> None:
    self.keyword = keyword
    self.has = has
    self.rest = rest

  def check(self, st: State, n: Node) -> bool:
    index = next((i for i, v in enumerate(n or []) if type_of(v) == self.keyword), -1)
    if index < 0:
      if not check_op(self.has, st, False):
        return False
      return check_op(self.rest, st, n)
    if not check_op(self.has, st, True):
      return False
    return check_op(self.rest, st, n[:index] + n[index + 1 :])

  def construct(self, st: State, n: Node) -> Node:
    flag = self.has.construct(st, None)
    if not isinstance(flag, bool):
      raise UnexpectedTypeError("bool", kind_of(flag).name.lower(), f"{self.keyword} flag")
    return self.rest.construct(st, n)


def is_modifier(node: Node) -> bool:
  return type_of(node).endswith("Keyword")


class ArrToChain(Op):
  """
  Converts a ``Type``-nested chain of modifiers to a flat list and back.

  A chain looks like ``{"@type": "RefKeyword", "Type": {"@type":
  "ReadOnlyKeyword", "Type": T}}``. On check, the chain is unwound outermost
  first while the node is a modifier carrying a ``Type`` field. ``mods``
  receives the modifiers innermost first (without their ``Type`` field), and
  ``typ`` the terminal type ``T``.

  Construction folds the list back: each modifier in order wraps the
  accumulated chain, so the last one ends up outermost. Unwinding a folded
  chain yields the same list and terminal.
  """

  def __init__(self, mods: Op, typ: Op, modifier: Callable[[Node], bool] = is_modifier) -> None:
    self.mods = mods
    self.typ = typ
    self.modifier = modifier

  def check(self, st: State, n: Node) -> bool:
    chain: List[Node] = []
    cur = n
    while isinstance(cur, dict) and "Type" in cur and self.modifier(cur):
      chain.append({k: v for k, v in cur.items() if k != "Type"})
      cur = cur["Type"]
    chain.reverse()
    if not check_op(self.typ, st, cur):
      return False
    return check_op(self.mods, st, chain)

  def construct(self, st: State, n: Node) -> Node:
    mods = self.mods.construct(st, None)
    if not isinstance(mods, list):
      raise UnexpectedTypeError("array", kind_of(mods).name.lower(), "modifier list")
    out = self.typ.construct(st, None)
    for mod in mods:
      if not isinstance(mod, dict):
        raise UnexpectedTypeError("object", kind_of(mod).name.lower(), "modifier")
      if "Type" in mod:
        raise StructuralError(f"modifier {type_of(mod) or '<untyped>'} already has a Type field")
      wrapped = dict(mod)
      wrapped["Type"] = out
      out = wrapped
    return out


def _absorbs_trivia(field: str) -> bool:
  return field == "ReturnType" or field.endswith("Token") or field.endswith("Keyword")


def _start_offset(node: Node) -> Optional[int]:
  pos = node.get(KEY_POS) if isinstance(node, dict) else None
  if type_of(pos) != Positions.TYPE or not isinstance(pos.get("start"), dict):
    return None
  offset = pos["start"].get("offset")
  if isinstance(offset, bool) or not isinstance(offset, int):
    return None
  return offset


def _absorbed_groups(obj: Dict[str, Node]) -> List[str]:
  """
  Token fields holding a Group left by an earlier hoist, in source order.

  Groups are ordered by the start offset of their first node. Groups without
  a position come last, in field name order.
  """
  keys = []
  for key in sorted(obj):
    group = obj[key]
    if _absorbs_trivia(key) and type_of(group) == Group.TYPE and isinstance(group.get("Nodes"), list):
      keys.append(key)

  def order(key: str):
    nodes = obj[key]["Nodes"]
    offset = _start_offset(nodes[0]) if nodes else None
    return (offset is None, offset or 0)

  return sorted(keys, key=order)


class MoveTrivias(Op):
  """
  Hoists trivia out of a node.

  On check, the node's ``LeadingTrivia`` and ``TrailingTrivia`` are removed.
  Token fields whose value was already wrapped into a Group by a previous
  application (children are visited first) are unwrapped, and their trivia
  joins the node's own. The result is then one of:

  - the node with trivia spliced into a list field, for node types listed in
    ``fields`` (``leading + existing + trailing``);
  - a ``uast:Group`` of ``leading + [node] + trailing``;
  - the bare node, if it had trivia fields but they were empty.

  ``op`` is checked against that result. Nodes without any trivia to move do
  not match. Construction passes through ``op``.

  Only token fields (``*Token``, ``*Keyword`` and ``ReturnType``) are
  re-absorbed. Trivia hoisted into a Group inside a list field, such as a doc
  comment on the first element of ``Modifiers``, stays there; mappings that
  drop that list drop the comment with it.
  """

  kinds = NodeKind.OBJECT

  def __init__(self, op: Op, fields: Optional[Mapping[str, str]] = None) -> None:
    self.op = op
    self.fields: Dict[str, str] = dict(fields or {})

  def check(self, st: State, n: Node) -> bool:
    obj = dict(n)
    modified = False
    leading: List[Node] = []
    trailing: List[Node] = []

    for key, target in ((LEADING_TRIVIA, leading), (TRAILING_TRIVIA, trailing)):
      if key not in obj:
        continue
      value = obj.pop(key)
      modified = True
      if value is None:
        continue
      if not isinstance(value, list):
        raise UnexpectedTypeError("array", kind_of(value).name.lower(), key)
      target.extend(value)

    absorbed: List[Node] = []
    for key in _absorbed_groups(obj):
      nodes = obj[key]["Nodes"]
      modified = True
      inner = next((i for i, v in enumerate(nodes) if not type_of(v).endswith("Trivia")), -1)
      if inner < 0:
        leading.extend(nodes)
        obj[key] = None
        continue
      leading.extend(nodes[:inner])
      absorbed.extend(nodes[inner + 1 :])
      obj[key] = nodes[inner]
    trailing[:0] = absorbed

    if not modified:
      return False
    if not leading and not trailing:
      return check_op(self.op, st, obj)

    field = self.fields.get(type_of(obj))
    if field is not None:
      existing = obj.get(field)
      if not isinstance(existing, list):
        raise StructuralError(f"trivia target field {type_of(obj)}.{field} is {kind_of(existing).name.lower()}")
      obj[field] = leading + existing + trailing
      return check_op(self.op, st, obj)

    return check_op(self.op, st, to_node(Group(Nodes=leading + [obj] + trailing)))

  def construct(self, st: State, n: Node) -> Node:
    return self.op.construct(st, n)


class MergeGroups(Op):
  """
  Folds a Group into the one FunctionGroup it contains.

  On check, a ``uast:Group`` with exactly one ``uast:FunctionGroup`` child
  becomes that FunctionGroup, with the Group's other children spliced into
  its ``Nodes`` where the FunctionGroup sat. Anything else does not match.
  Construction passes through ``op``.
  """

  kinds = NodeKind.OBJECT

  def __init__(self, op: Op) -> None:
    self.op = op

  def check(self, st: State, n: Node) -> bool:
    if type_of(n) != Group.TYPE:
      return False
    nodes = n.get("Nodes")
    if not isinstance(nodes, list):
      return False
    positions = [i for i, v in enumerate(nodes) if type_of(v) == FunctionGroup.TYPE]
    if len(positions) != 1:
      return False
    index = positions[0]
    fg = nodes[index]
    inner = fg.get("Nodes")
    if inner is None:
      inner = []
    if not isinstance(inner, list):
      raise StructuralError(f"{FunctionGroup.TYPE}.Nodes is {kind_of(inner).name.lower()}")
    merged = dict(fg)
    merged["Nodes"] = nodes[:index] + inner + nodes[index + 1 :]
    return check_op(self.op, st, merged)

  def construct(self, st: State, n: Node) -> Node:
    return self.op.construct(st, n)
