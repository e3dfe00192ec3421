"""
Tests for Config Persistence (TOML).

Verifies that:
1. RuntimeConfig.load() picks up [tool.csharp_normalizer] from pyproject.toml.
2. Explicit arguments override TOML settings.
3. Trivia redirections are merged (arguments win collisions).
4. File traversal finds toml in parent directories.
"""

import pytest
from pydantic import ValidationError

from csharp_normalizer.config import DEFAULT_FULL_SPAN_TYPES, DEFAULT_TRIVIA_FIELDS, RuntimeConfig
from csharp_normalizer.enums import Mode


@pytest.fixture
def toml_file(tmp_path):
  """Creates a dummy pyproject.toml in the temp dir."""
  fpath = tmp_path / "pyproject.toml"
  content = """
[tool.csharp_normalizer]
mode = "Preprocessed"
full_span_types = ["MultiLineCommentTrivia"]
require_types = false

[tool.csharp_normalizer.trivia_fields]
NamespaceDeclaration = "Members"
Block = "Body"
"""
  fpath.write_text(content, encoding="utf-8")
  return fpath


def test_defaults():
  config = RuntimeConfig()
  assert config.mode == Mode.SEMANTIC
  assert config.full_span_types == DEFAULT_FULL_SPAN_TYPES
  assert config.trivia_fields == DEFAULT_TRIVIA_FIELDS
  assert config.require_types is True


def test_load_from_toml(tmp_path, toml_file):
  config = RuntimeConfig.load(search_path=tmp_path)

  assert config.mode == Mode.PREPROCESSED
  assert config.full_span_types == ["MultiLineCommentTrivia"]
  assert config.require_types is False
  assert config.trivia_fields == {
    "Block": "Body",
    "CompilationUnit": "Members",
    "NamespaceDeclaration": "Members",
  }


def test_arguments_override_toml(tmp_path, toml_file):
  config = RuntimeConfig.load(
    mode=Mode.NATIVE,
    trivia_fields={"Block": "Statements", "ClassDeclaration": "Members"},
    search_path=tmp_path,
  )

  assert config.mode == Mode.NATIVE
  assert config.full_span_types == ["MultiLineCommentTrivia"]  # TOML fallback
  assert config.trivia_fields["Block"] == "Statements"
  assert config.trivia_fields["ClassDeclaration"] == "Members"
  assert config.trivia_fields["NamespaceDeclaration"] == "Members"


def test_toml_found_in_parent(tmp_path, toml_file):
  nested = tmp_path / "src" / "project"
  nested.mkdir(parents=True)
  config = RuntimeConfig.load(search_path=nested)
  assert config.mode == Mode.PREPROCESSED


def test_other_tools_are_ignored(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[tool.black]\nline-length = 120\n', encoding="utf-8")
  config = RuntimeConfig.load(search_path=tmp_path)
  assert config == RuntimeConfig()


def test_invalid_toml_falls_back_to_defaults(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.csharp_normalizer\nmode = ", encoding="utf-8")
  config = RuntimeConfig.load(search_path=tmp_path)
  assert config.mode == Mode.SEMANTIC
  assert config.trivia_fields == DEFAULT_TRIVIA_FIELDS


def test_mode_is_case_insensitive():
  assert RuntimeConfig(mode=" Annotated ").mode == Mode.ANNOTATED
  assert RuntimeConfig(mode="SEMANTIC").mode == Mode.SEMANTIC


def test_unknown_mode_rejected():
  with pytest.raises(ValidationError):
    RuntimeConfig(mode="compiled")
