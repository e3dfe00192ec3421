"""
Bidirectional Pattern Operators.

An :class:`Op` is used in two directions:

- ``check(state, node)`` matches a node and records variables in ``state``.
  It returns ``False`` on a clean mismatch and raises only when the input can
  never be modeled (see :mod:`csharp_normalizer.errors`).
- ``construct(state, seed)`` builds a node from the bindings in ``state``.

A mapping checks one op against a node and constructs another from the same
state, so variables carry data from the matched shape into the built one.

Callers go through :func:`check_op`, which rejects nodes whose kind the op
does not declare before any op-specific code runs.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from csharp_normalizer.errors import AmbiguousValueError, StructuralError, UnexpectedTypeError
from csharp_normalizer.transformer.state import State
from csharp_normalizer.uast.nodes import Node, NodeKind, equal, kind_of


class Op(ABC):
  """
  Abstract base for all pattern operators.

  Attributes:
      kinds (NodeKind): Node kinds this op can match.
  """

  kinds: NodeKind = NodeKind.ANY

  @abstractmethod
  def check(self, st: State, n: Node) -> bool:
    """Matches ``n``, binding variables into ``st``."""
    pass

  @abstractmethod
  def construct(self, st: State, n: Node) -> Node:
    """Builds a node from ``st``. ``n`` is an optional seed."""
    pass


class Sel(Op):
  """
  A check-only operator (predicate).

  Predicates test a node without describing how to build one, so their
  construct direction always fails.
  """

  def construct(self, st: State, n: Node) -> Node:
    raise AmbiguousValueError(f"{type(self).__name__} cannot construct a value")


def check_op(op: Op, st: State, n: Node) -> bool:
  """
  Checks ``n`` against ``op`` after a kind pre-check.

  Returns:
      bool: False without invoking ``op`` if the kind of ``n`` is not in
      ``op.kinds``.
  """
  if not (kind_of(n) & op.kinds):
    return False
  return op.check(st, n)


class Var(Op):
  """
  Binds the matched node to a variable.

  Matching the same name twice within one attempt succeeds only if both
  nodes are equal. Construction fails if the variable is unbound.
  """

  def __init__(self, name: str) -> None:
    self.name = name

  def check(self, st: State, n: Node) -> bool:
    return st.set_var(self.name, n)

  def construct(self, st: State, n: Node) -> Node:
    return st.get_var(self.name)

  def __repr__(self) -> str:
    return f"Var({self.name!r})"


class Any(Op):
  """Matches any node without binding it. Cannot construct."""

  def check(self, st: State, n: Node) -> bool:
    return True

  def construct(self, st: State, n: Node) -> Node:
    raise AmbiguousValueError("Any() cannot construct a value")


class Is(Op):
  """Matches a node equal to a fixed value, and constructs that value."""

  def __init__(self, value: Node) -> None:
    self.value = value
    self.kinds = kind_of(value)

  def check(self, st: State, n: Node) -> bool:
    return equal(self.value, n)

  def construct(self, st: State, n: Node) -> Node:
    return self.value

  def __repr__(self) -> str:
    return f"Is({self.value!r})"


def String(value: str) -> Is:
  return Is(str(value))


def Bool(value: bool) -> Is:
  return Is(bool(value))


def Int(value: int) -> Is:
  return Is(int(value))


class Arr(Op):
  """
  Positional array pattern.

  The array must have exactly as many elements as there are ops.
  """

  kinds = NodeKind.ARRAY

  def __init__(self, *ops: Op) -> None:
    self.ops: List[Op] = list(ops)

  def __len__(self) -> int:
    return len(self.ops)

  def check(self, st: State, n: Node) -> bool:
    if len(n) != len(self.ops):
      return False
    for op, item in zip(self.ops, n):
      if not check_op(op, st, item):
        return False
    return True

  def construct(self, st: State, n: Node) -> Node:
    seeds: Sequence[Node] = n if isinstance(n, list) and len(n) == len(self.ops) else [None] * len(self.ops)
    return [op.construct(st, seed) for op, seed in zip(self.ops, seeds)]


class Append(Op):
  """
  Concatenation of an array with fixed-length tails.

  On check, the tails take the last elements of the array (their lengths are
  known from their arity) and ``prefix`` receives everything before them.
  On construct, the constructed prefix and tails are concatenated.
  """

  kinds = NodeKind.ARRAY

  def __init__(self, prefix: Op, *tails: Arr) -> None:
    self.prefix = prefix
    self.tails: List[Arr] = list(tails)

  def check(self, st: State, n: Node) -> bool:
    tail_size = sum(len(t) for t in self.tails)
    if len(n) < tail_size:
      return False
    split = len(n) - tail_size
    if not check_op(self.prefix, st, n[:split]):
      return False
    for tail in self.tails:
      if not check_op(tail, st, n[split : split + len(tail)]):
        return False
      split += len(tail)
    return True

  def construct(self, st: State, n: Node) -> Node:
    head = self.prefix.construct(st, None)
    if not isinstance(head, list):
      raise UnexpectedTypeError("array", kind_of(head).name.lower(), "Append prefix")
    out = list(head)
    for tail in self.tails:
      out.extend(tail.construct(st, None))
    return out


class Check(Op):
  """
  Guards ``op`` with a predicate.

  The predicate runs on a throwaway copy of the state, so it never binds
  anything. Construction ignores the predicate.
  """

  def __init__(self, sel: Op, op: Op) -> None:
    self.sel = sel
    self.op = op
    self.kinds = sel.kinds & op.kinds

  def check(self, st: State, n: Node) -> bool:
    if not check_op(self.sel, st.clone(), n):
      return False
    return check_op(self.op, st, n)

  def construct(self, st: State, n: Node) -> Node:
    return self.op.construct(st, n)


class Cases(Op):
  """
  Ordered alternation.

  The first alternative that matches wins, and its index is bound to
  ``name`` as an int. Construction reads the index back and builds the same
  alternative, so both directions always take the same branch.
  """

  def __init__(self, name: str, *cases: Op) -> None:
    self.name = name
    self.cases: List[Op] = list(cases)
    kinds = NodeKind(0)
    for op in self.cases:
      kinds |= op.kinds
    self.kinds = kinds

  def check(self, st: State, n: Node) -> bool:
    for i, op in enumerate(self.cases):
      sub = st.clone()
      if check_op(op, sub, n):
        st.apply_from(sub)
        return st.set_var(self.name, i)
    return False

  def construct(self, st: State, n: Node) -> Node:
    return self.cases[case_index(st, self.name, len(self.cases))].construct(st, n)


def case_index(st: State, name: str, count: int) -> int:
  """Reads a branch index bound by an alternation op."""
  value = st.get_var(name)
  if isinstance(value, bool) or not isinstance(value, int):
    raise UnexpectedTypeError("int", kind_of(value).name.lower(), f"case variable {name!r}")
  if not 0 <= value < count:
    raise StructuralError(f"case variable {name!r} out of range: {value}")
  return value


def fixed_value(op: Optional[Op]) -> Optional[Node]:
  """Returns the constant an op always matches, looking through guards."""
  while isinstance(op, Check):
    op = op.op
  if isinstance(op, Is):
    return op.value
  return None
