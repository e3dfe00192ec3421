"""
Variable Scope for Pattern Matching.

A :class:`State` lives for one mapping attempt at one tree position. Matching
writes bindings into it, construction reads them back. Alternatives work on a
clone and commit with :meth:`State.apply_from` only when they succeed.
"""

from typing import Dict, Optional

from csharp_normalizer.errors import UnboundVariableError
from csharp_normalizer.uast.nodes import Node, equal


class State:
  """
  Name to node bindings.

  Attributes:
      _vars (Dict[str, Node]): Current bindings.
  """

  def __init__(self, bindings: Optional[Dict[str, Node]] = None) -> None:
    self._vars: Dict[str, Node] = dict(bindings or {})

  def clone(self) -> "State":
    """Returns an independent copy. Bound values are shared, they are immutable."""
    return State(self._vars)

  def apply_from(self, other: "State") -> None:
    """Replaces all bindings with those of ``other``."""
    self._vars = dict(other._vars)

  def get_var(self, name: str) -> Node:
    """
    Reads a binding.

    Raises:
        UnboundVariableError: If ``name`` was never bound.
    """
    try:
      return self._vars[name]
    except KeyError:
      raise UnboundVariableError(name) from None

  def set_var(self, name: str, value: Node) -> bool:
    """
    Binds ``name`` to ``value``.

    Returns:
        bool: False if ``name`` is already bound to a different value.
    """
    if name in self._vars:
      return equal(self._vars[name], value)
    self._vars[name] = value
    return True

  def __repr__(self) -> str:
    return f"State({self._vars!r})"
