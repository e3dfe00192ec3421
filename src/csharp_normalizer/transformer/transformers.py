"""
Whole-tree stages built on mappings.

:class:`Mappings` rewrites a tree bottom-up: every node is visited after its
children, the node's candidate mappings are tried in list order, and the
first one whose source pattern matches replaces the node. Nodes nothing
matches are kept as they are.
"""

from typing import Dict, List, Optional

from csharp_normalizer.errors import MalformedInputError, MappingError, StructuralError
from csharp_normalizer.transformer.context import TransformContext
from csharp_normalizer.transformer.interface import Transformer
from csharp_normalizer.transformer.mapping import Mapping
from csharp_normalizer.transformer.ops import check_op
from csharp_normalizer.transformer.state import State
from csharp_normalizer.uast.nodes import KEY_ROLES, Node, apply, type_of


class Mappings(Transformer):
  """
  One bottom-up traversal applying the first matching mapping at each node.

  Mappings whose source pins a type tag are indexed by it, so a node is only
  checked against mappings that can possibly match it. Relative list order
  is kept among the candidates.
  """

  def __init__(self, *mappings: Mapping, name: str = "") -> None:
    self.name = name
    self.mappings: List[Mapping] = list(mappings)
    self._untyped: List[Mapping] = [m for m in self.mappings if m.node_type() is None]
    self._by_type: Dict[str, List[Mapping]] = {}
    for typ in {m.node_type() for m in self.mappings} - {None}:
      self._by_type[typ] = [m for m in self.mappings if m.node_type() in (typ, None)]

  def candidates(self, node: Node) -> List[Mapping]:
    return self._by_type.get(type_of(node), self._untyped)

  def describe(self) -> str:
    return self.name or f"mappings[{len(self.mappings)}]"

  def rewrite(self, node: Node, context: Optional[TransformContext] = None) -> Node:
    """
    Applies the first matching mapping to a single node.

    Args:
        node: The node, with its children already rewritten.
        context: Used for tracing matches.

    Returns:
        The replacement node, or ``node`` itself if nothing matched.

    Raises:
        MappingError: If a mapping failed while building its result.
        MalformedInputError: If the node cannot be modeled.
    """
    for m in self.candidates(node):
      st = State()
      try:
        if not check_op(m.src, st, node):
          continue
        out = m.dst.construct(st, None)
      except MalformedInputError:
        raise
      except StructuralError as err:
        raise MappingError(m.name, err, type_of(node) or None) from err
      if context is not None:
        context.tracer.log_match(m.name, type_of(node), type_of(out))
      return out
    return node

  def transform(self, root: Node, context: TransformContext) -> Node:
    return apply(root, lambda n: self.rewrite(n, context))


class RolesDedup(Transformer):
  """Removes repeated role tags, keeping the first occurrence of each."""

  name = "roles dedup"

  def transform(self, root: Node, context: TransformContext) -> Node:
    return apply(root, dedup_roles)


def dedup_roles(node: Node) -> Node:
  if not isinstance(node, dict):
    return node
  roles = node.get(KEY_ROLES)
  if not isinstance(roles, list):
    return node
  unique: List[Node] = []
  for role in roles:
    if role not in unique:
      unique.append(role)
  if len(unique) == len(roles):
    return node
  out = dict(node)
  out[KEY_ROLES] = unique
  return out

