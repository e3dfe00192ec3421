"""
Check-only predicates used as guards in :class:`~csharp_normalizer.transformer.ops.Check`.
"""

from typing import List

from csharp_normalizer.transformer.ops import Op, Sel, check_op
from csharp_normalizer.transformer.state import State
from csharp_normalizer.uast.nodes import Node, NodeKind, equal, kind_of, type_of


class In(Sel):
  """Matches a node equal to one of the given values."""

  def __init__(self, *values: Node) -> None:
    self.values: List[Node] = list(values)
    kinds = NodeKind(0)
    for v in self.values:
      kinds |= kind_of(v)
    self.kinds = kinds

  def check(self, st: State, n: Node) -> bool:
    return any(equal(v, n) for v in self.values)


class Not(Sel):
  """Inverts a predicate. Bindings made by the inner op are discarded."""

  def __init__(self, op: Op) -> None:
    self.op = op

  def check(self, st: State, n: Node) -> bool:
    return not check_op(self.op, st.clone(), n)


class And(Sel):
  def __init__(self, *ops: Op) -> None:
    self.ops: List[Op] = list(ops)

  def check(self, st: State, n: Node) -> bool:
    return all(check_op(op, st, n) for op in self.ops)


class Or(Sel):
  def __init__(self, *ops: Op) -> None:
    self.ops: List[Op] = list(ops)

  def check(self, st: State, n: Node) -> bool:
    for op in self.ops:
      sub = st.clone()
      if check_op(op, sub, n):
        st.apply_from(sub)
        return True
    return False


class HasType(Sel):
  """Matches an object whose type tag equals ``typ``."""

  kinds = NodeKind.OBJECT

  def __init__(self, typ: str) -> None:
    self.typ = typ

  def check(self, st: State, n: Node) -> bool:
    return type_of(n) == self.typ
