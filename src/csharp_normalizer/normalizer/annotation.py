"""
Role Annotations.

Attaches role tags to native node types. The type to roles table is data,
shipped as ``data/annotations.json`` and loaded once per process into an
immutable tuple of :class:`AnnotationRule` entries.

A rule may also rename fields; keyword tokens move their ``Value`` to
``@token``.
"""

import json
from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field as ModelField

from csharp_normalizer.enums import Role
from csharp_normalizer.errors import UnexpectedTypeError
from csharp_normalizer.transformer.interface import Transformer
from csharp_normalizer.transformer.mapping import Map, Mapping
from csharp_normalizer.transformer.objects import Field, Fields, Part
from csharp_normalizer.transformer.ops import Op, String, Var
from csharp_normalizer.transformer.pipeline import Transformers
from csharp_normalizer.transformer.state import State
from csharp_normalizer.transformer.transformers import Mappings, RolesDedup
from csharp_normalizer.uast.nodes import KEY_ROLES, KEY_TYPE, Node, NodeKind, kind_of

ANNOTATIONS_FILE = "annotations.json"


class AnnotationRule(BaseModel):
  """One row of the annotation table."""

  type: str = ModelField(..., description="Native node type the rule applies to.")
  rename: Dict[str, str] = ModelField(default_factory=dict, description="Field renames, old name to new name.")
  roles: List[Role] = ModelField(default_factory=list, description="Roles appended to the node.")


def resolve_data_dir() -> Path:
  """
  Locates the directory holding the packaged data files.

  Prefers the source tree next to this package, falling back to package
  resources for installed distributions.

  Returns:
      Path: The absolute path to the 'data' directory.
  """
  local_path = Path(__file__).resolve().parent.parent / "data"
  if (local_path / ANNOTATIONS_FILE).exists():
    return local_path
  return Path(str(files("csharp_normalizer") / "data"))


def load_rules(path: Optional[Path] = None) -> Tuple[AnnotationRule, ...]:
  """
  Reads an annotation table.

  Args:
      path: JSON file to read. Defaults to the packaged table.

  Returns:
      Tuple[AnnotationRule, ...]: The rules in file order.
  """
  fpath = path or resolve_data_dir() / ANNOTATIONS_FILE
  with open(fpath, "r", encoding="utf-8") as f:
    content = json.load(f)
  return tuple(AnnotationRule.model_validate(entry) for entry in content)


@lru_cache(maxsize=None)
def default_rules() -> Tuple[AnnotationRule, ...]:
  return load_rules()


class AddRoles(Op):
  """
  Matches a role list, and builds it back with ``roles`` appended.

  ``has`` names the presence flag of the role field; when it is False the
  list starts empty.
  """

  kinds = NodeKind.ARRAY

  def __init__(self, var: str, has: str, roles: Sequence[Role]) -> None:
    self.var = var
    self.has = has
    self.roles = [r.value for r in roles]

  def check(self, st: State, n: Node) -> bool:
    return st.set_var(self.var, n)

  def construct(self, st: State, n: Node) -> Node:
    existing: List[Node] = []
    if st.get_var(self.has):
      existing = st.get_var(self.var)
      if not isinstance(existing, list):
        raise UnexpectedTypeError("array", kind_of(existing).name.lower(), KEY_ROLES)
    return list(existing) + self.roles


def AnnotateType(typ: str, rename: Optional[Dict[str, str]], *roles: Role) -> Mapping:
  """
  Appends ``roles`` to every node of type ``typ`` and renames its fields.

  Args:
      typ: Native node type.
      rename: Old to new field names. Absent fields are skipped.
      *roles: Roles to append to ``@role``.

  Returns:
      Mapping: The annotation rule.
  """
  src = [
    Field(KEY_TYPE, String(typ)),
    Field(KEY_ROLES, Var("roles"), optional="has_roles"),
  ]
  dst = [
    Field(KEY_TYPE, String(typ)),
    Field(KEY_ROLES, AddRoles("roles", "has_roles", roles)),
  ]
  for i, (old, new) in enumerate(sorted((rename or {}).items())):
    src.append(Field(old, Var(f"field{i}"), optional=f"has_field{i}"))
    dst.append(Field(new, Var(f"field{i}"), optional=f"has_field{i}"))
  return Map(Part("_", Fields(src)), Part("_", Fields(dst)), name=f"annotate {typ}")


def annotations(rules: Optional[Sequence[AnnotationRule]] = None) -> List[Mapping]:
  """Builds one mapping per rule of the table."""
  return [AnnotateType(r.type, r.rename, *r.roles) for r in (rules if rules is not None else default_rules())]


def annotators(rules: Optional[Sequence[AnnotationRule]] = None) -> List[Transformer]:
  """Returns the annotation stages, in order."""
  return [Mappings(*annotations(rules), name="annotations"), RolesDedup()]


def build_annotate(rules: Optional[Sequence[AnnotationRule]] = None) -> Transformers:
  return Transformers("annotate", annotators(rules))
