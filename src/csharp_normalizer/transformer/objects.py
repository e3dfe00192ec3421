"""
Object Patterns.

Object patterns match dicts field by field. Matching is open: listed fields
must be present (unless optional) and match, unlisted fields are ignored.
Use :class:`Part` to capture the unlisted fields and put them back when the
object is rebuilt.

All object ops expose :meth:`ObjectOp.fields`, the set of fields they know
about. :class:`JoinObj` uses it to split one object between several ops, and
the mapping dispatcher uses it to find the type tag a pattern is pinned to.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence, Type, Union

from csharp_normalizer.errors import StructuralError, UnexpectedTypeError
from csharp_normalizer.transformer.ops import Is, Op, case_index, check_op, fixed_value
from csharp_normalizer.transformer.state import State
from csharp_normalizer.uast.nodes import KEY_TYPE, Node, NodeKind, kind_of
from csharp_normalizer.uast.schema import UASTNode, template


class FieldDesc(NamedTuple):
  """What an object op knows about one field."""

  optional: bool
  fixed: Optional[Node] = None


@dataclass(frozen=True)
class Field:
  """
  One field of a :class:`Fields` pattern.

  Attributes:
      name: Field name in the object.
      op: Pattern for the field value.
      optional: If set, the field may be absent. Its presence is bound as a
          bool under this variable name, and construction omits the field
          when that variable is False.
  """

  name: str
  op: Op
  optional: str = ""


class ObjectOp(Op):
  """
  Base class for patterns over objects.

  Attributes:
      open (bool): True if the op claims fields beyond those it lists.
  """

  kinds = NodeKind.OBJECT
  open: bool = False

  @abstractmethod
  def fields(self) -> Dict[str, FieldDesc]:
    pass

  @abstractmethod
  def check_obj(self, st: State, obj: Dict[str, Node]) -> bool:
    pass

  @abstractmethod
  def construct_obj(self, st: State, obj: Optional[Dict[str, Node]]) -> Dict[str, Node]:
    pass

  def check(self, st: State, n: Node) -> bool:
    if not isinstance(n, dict):
      return False
    return self.check_obj(st, n)

  def construct(self, st: State, n: Node) -> Node:
    return self.construct_obj(st, n if isinstance(n, dict) else None)

  def fixed_type(self) -> Optional[str]:
    """Returns the type tag every matched object must have, if there is one."""
    desc = self.fields().get(KEY_TYPE)
    if desc is not None and not desc.optional and isinstance(desc.fixed, str):
      return desc.fixed
    return None


class Fields(ObjectOp):
  """An ordered list of field patterns."""

  def __init__(self, fields: Sequence[Field]) -> None:
    self.items: List[Field] = list(fields)
    names = [f.name for f in self.items]
    if len(set(names)) != len(names):
      raise StructuralError(f"duplicate fields in pattern: {names}")

  def fields(self) -> Dict[str, FieldDesc]:
    return {f.name: FieldDesc(bool(f.optional), fixed_value(f.op)) for f in self.items}

  def check_obj(self, st: State, obj: Dict[str, Node]) -> bool:
    for f in self.items:
      if f.name not in obj:
        if not f.optional:
          return False
        if not st.set_var(f.optional, False):
          return False
        continue
      if f.optional and not st.set_var(f.optional, True):
        return False
      if not check_op(f.op, st, obj[f.name]):
        return False
    return True

  def construct_obj(self, st: State, obj: Optional[Dict[str, Node]]) -> Dict[str, Node]:
    out: Dict[str, Node] = {}
    for f in self.items:
      if f.optional:
        present = st.get_var(f.optional)
        if not isinstance(present, bool):
          raise UnexpectedTypeError("bool", kind_of(present).name.lower(), f"presence of field {f.name!r}")
        if not present:
          continue
      seed = obj.get(f.name) if obj else None
      out[f.name] = f.op.construct(st, seed)
    return out


def Obj(fields: Mapping[str, Op]) -> Fields:
  """Shorthand for a :class:`Fields` pattern with no optional fields."""
  return Fields([Field(name, op) for name, op in sorted(fields.items())])


class Has(Fields):
  """
  A guard over selected fields.

  Values may be plain tree values, which are matched exactly.
  """

  def __init__(self, fields: Mapping[str, Union[Op, Node]]) -> None:
    super().__init__([Field(name, op if isinstance(op, Op) else Is(op)) for name, op in sorted(fields.items())])


class Part(ObjectOp):
  """
  Captures the fields ``op`` does not know about into the variable ``var``.

  On construct, the captured fields are merged back into what ``op`` builds.
  Both sides defining the same field is a structural error.
  """

  open = True

  def __init__(self, var: str, op: ObjectOp) -> None:
    if op.open:
      raise StructuralError("Part cannot wrap another open object pattern")
    self.var = var
    self.op = op

  def fields(self) -> Dict[str, FieldDesc]:
    return self.op.fields()

  def check_obj(self, st: State, obj: Dict[str, Node]) -> bool:
    known = self.op.fields()
    rest = {k: v for k, v in obj.items() if k not in known}
    if not st.set_var(self.var, rest):
      return False
    return self.op.check_obj(st, {k: v for k, v in obj.items() if k in known})

  def construct_obj(self, st: State, obj: Optional[Dict[str, Node]]) -> Dict[str, Node]:
    rest = st.get_var(self.var)
    if not isinstance(rest, dict):
      raise UnexpectedTypeError("object", kind_of(rest).name.lower(), f"partial object {self.var!r}")
    built = self.op.construct_obj(st, obj)
    clash = sorted(set(rest) & set(built))
    if clash:
      raise StructuralError(f"fields {clash} are defined both in {self.var!r} and in the pattern")
    out = dict(rest)
    out.update(built)
    return out


class JoinObj(ObjectOp):
  """
  Joins several object patterns that describe disjoint sets of fields.

  At most one of them may be open; it receives every field the others do
  not list.
  """

  def __init__(self, *ops: ObjectOp) -> None:
    self.ops: List[ObjectOp] = list(ops)
    seen: Dict[str, FieldDesc] = {}
    opened = 0
    for op in self.ops:
      fields = op.fields()
      clash = sorted(set(seen) & set(fields))
      if clash:
        raise StructuralError(f"joined patterns share fields {clash}")
      seen.update(fields)
      opened += op.open
    if opened > 1:
      raise StructuralError("only one joined pattern may be open")
    self._fields = seen
    self.open = opened == 1

  def fields(self) -> Dict[str, FieldDesc]:
    return dict(self._fields)

  def check_obj(self, st: State, obj: Dict[str, Node]) -> bool:
    for op in self.ops:
      if op.open:
        others = set(self._fields) - set(op.fields())
        sub = {k: v for k, v in obj.items() if k not in others}
      else:
        known = op.fields()
        sub = {k: v for k, v in obj.items() if k in known}
      if not op.check_obj(st, sub):
        return False
    return True

  def construct_obj(self, st: State, obj: Optional[Dict[str, Node]]) -> Dict[str, Node]:
    out: Dict[str, Node] = {}
    for op in self.ops:
      part = op.construct_obj(st, obj)
      clash = sorted(set(out) & set(part))
      if clash:
        raise StructuralError(f"joined patterns built the same fields {clash}")
      out.update(part)
    return out


class CasesObj(ObjectOp):
  """
  Ordered alternation over object shapes that share a ``common`` part.

  Works like :class:`~csharp_normalizer.transformer.ops.Cases`: the index of
  the first matching case is bound to ``name`` and read back on construct.
  """

  def __init__(self, name: str, common: Optional[ObjectOp], cases: Sequence[ObjectOp]) -> None:
    self.name = name
    self.cases: List[ObjectOp] = [JoinObj(common, c) if common is not None else c for c in cases]
    self.open = any(c.open for c in self.cases)
    self._fields = _merge_case_fields([c.fields() for c in self.cases])

  def fields(self) -> Dict[str, FieldDesc]:
    return dict(self._fields)

  def check_obj(self, st: State, obj: Dict[str, Node]) -> bool:
    for i, op in enumerate(self.cases):
      sub = st.clone()
      if op.check_obj(sub, obj):
        st.apply_from(sub)
        return st.set_var(self.name, i)
    return False

  def construct_obj(self, st: State, obj: Optional[Dict[str, Node]]) -> Dict[str, Node]:
    return self.cases[case_index(st, self.name, len(self.cases))].construct_obj(st, obj)


def _merge_case_fields(all_fields: List[Dict[str, FieldDesc]]) -> Dict[str, FieldDesc]:
  merged: Dict[str, FieldDesc] = {}
  names = {name for fields in all_fields for name in fields}
  for name in names:
    descs = [fields.get(name) for fields in all_fields]
    optional = any(d is None or d.optional for d in descs)
    fixed = descs[0].fixed if descs[0] is not None else None
    if any(d is None or d.fixed != fixed for d in descs):
      fixed = None
    merged[name] = FieldDesc(optional, fixed)
  return merged


class UASTType(JoinObj):
  """
  An object of a canonical schema kind.

  Matches objects whose type tag is ``model.TYPE``. Construction starts from
  the schema template (every field at its default) and overlays the fields
  built by ``ops``.
  """

  def __init__(self, model: Type[UASTNode], *ops: ObjectOp) -> None:
    self.model = model
    super().__init__(Fields([Field(KEY_TYPE, Is(model.TYPE))]), *ops)

  def construct_obj(self, st: State, obj: Optional[Dict[str, Node]]) -> Dict[str, Node]:
    out = template(self.model)
    out.update(super().construct_obj(st, obj))
    return out
