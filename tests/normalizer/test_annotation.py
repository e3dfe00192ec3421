"""
Tests for role annotations and the packaged annotation table.
"""

from csharp_normalizer.enums import Role
from csharp_normalizer.normalizer.annotation import (
  AnnotateType,
  AnnotationRule,
  build_annotate,
  default_rules,
  load_rules,
  resolve_data_dir,
)
from csharp_normalizer.transformer.context import TransformContext
from csharp_normalizer.transformer.transformers import Mappings


def test_packaged_table_loads():
  rules = default_rules()
  assert isinstance(rules, tuple)
  assert len(rules) > 100
  assert all(isinstance(r, AnnotationRule) for r in rules)
  # loaded once
  assert default_rules() is rules
  assert (resolve_data_dir() / "annotations.json").exists()


def test_table_entries():
  by_type = {}
  for rule in default_rules():
    by_type.setdefault(rule.type, rule)
  assert by_type["CompilationUnit"].roles == [Role.FILE, Role.MODULE]
  assert by_type["TrueKeyword"].rename == {"Value": "@token"}
  assert Role.BOOLEAN in by_type["TrueKeyword"].roles


def test_load_rules_from_file(tmp_path):
  path = tmp_path / "rules.json"
  path.write_text('[{"type": "X", "roles": ["Identifier"]}]', encoding="utf-8")
  assert load_rules(path) == (AnnotationRule(type="X", roles=[Role.IDENTIFIER]),)


def test_annotate_appends_roles_and_renames():
  m = AnnotateType("TrueKeyword", {"Value": "@token"}, Role.BOOLEAN, Role.LITERAL)
  assert m.node_type() == "TrueKeyword"
  out = Mappings(m).transform(
    {"@type": "TrueKeyword", "Text": "true", "Value": True, "@role": ["Expression"]},
    TransformContext(),
  )
  assert out == {"@type": "TrueKeyword", "Text": "true", "@token": True, "@role": ["Expression", "Boolean", "Literal"]}


def test_annotate_skips_absent_rename_source():
  m = AnnotateType("ThisKeyword", {"Value": "@token"}, Role.INSTANCE)
  out = Mappings(m).transform({"@type": "ThisKeyword", "Text": "this"}, TransformContext())
  assert out == {"@type": "ThisKeyword", "Text": "this", "@role": ["Instance"]}


def test_annotate_pass_dedups_roles():
  rules = [AnnotationRule(type="IdentifierName", roles=[Role.IDENTIFIER, Role.EXPRESSION])]
  tree = {"@type": "IdentifierName", "@role": ["Identifier"]}
  out = build_annotate(rules).transform(tree, TransformContext())
  assert out["@role"] == ["Identifier", "Expression"]


def test_annotate_pass_with_packaged_table(token):
  tree = {
    "@type": "TrueLiteralExpression",
    "IsMissing": False,
    "IsStructuredTrivia": False,
    "Token": token("TrueKeyword", "true", value=True),
  }
  out = build_annotate().transform(tree, TransformContext())
  assert out["@role"] == ["Literal", "Boolean", "Expression"]
  assert out["Token"]["@token"] is True
  assert "Value" not in out["Token"]
  assert out["Token"]["@role"] == ["Boolean", "Literal"]
