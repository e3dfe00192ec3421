"""
Runtime Configuration Store.

Values come from three layers, lowest priority first: model defaults, the
``[tool.csharp_normalizer]`` table of the nearest ``pyproject.toml``, and
explicit arguments to :meth:`RuntimeConfig.load`.
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from csharp_normalizer.enums import Mode
from csharp_normalizer.utils.console import log_warning

TOOL_SECTION = "csharp_normalizer"

DEFAULT_FULL_SPAN_TYPES = ["SingleLineDocumentationCommentTrivia"]
DEFAULT_TRIVIA_FIELDS = {"Block": "Statements", "CompilationUnit": "Members"}
DEFAULT_COMMENT_TYPES = [
  "SingleLineCommentTrivia",
  "SingleLineDocumentationCommentTrivia",
  "MultiLineCommentTrivia",
]


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the normalizer.
  """

  mode: Mode = Field(Mode.SEMANTIC, description="How far native trees are transformed.")
  full_span_types: List[str] = Field(
    default_factory=lambda: list(DEFAULT_FULL_SPAN_TYPES),
    description="Node types positioned by FullSpan (including trivia) instead of Span.",
  )
  trivia_fields: Dict[str, str] = Field(
    default_factory=lambda: dict(DEFAULT_TRIVIA_FIELDS),
    description="Node types whose trivia is spliced into a list field instead of wrapping the node.",
  )
  comment_types: List[str] = Field(
    default_factory=lambda: list(DEFAULT_COMMENT_TYPES),
    description="Trivia types whose token text is read from the source when it is available.",
  )
  require_types: bool = Field(True, description="If True, every input object must carry a type tag.")

  @field_validator("mode", mode="before")
  @classmethod
  def validate_mode(cls, v: Any) -> Any:
    """
    Accepts mode names case-insensitively.

    Args:
        v: Raw value (string or Mode).

    Returns:
        The normalized value for pydantic to coerce.
    """
    if isinstance(v, str) and not isinstance(v, Mode):
      return v.lower().strip()
    return v

  @classmethod
  def load(
    cls,
    mode: Optional[Mode] = None,
    full_span_types: Optional[List[str]] = None,
    trivia_fields: Optional[Dict[str, str]] = None,
    comment_types: Optional[List[str]] = None,
    require_types: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        mode (Optional[Mode]): Override for the pipeline mode.
        full_span_types (Optional[List[str]]): Override for the full-span allow-list.
        trivia_fields (Optional[Dict[str, str]]): Extra trivia redirections,
            merged over the configured ones.
        comment_types (Optional[List[str]]): Override for source-token comment types.
        require_types (Optional[bool]): Override for input strictness.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    values: Dict[str, Any] = {}
    for key in ("mode", "full_span_types", "comment_types", "require_types"):
      if key in toml_config:
        values[key] = toml_config[key]

    if mode is not None:
      values["mode"] = mode
    if full_span_types is not None:
      values["full_span_types"] = full_span_types
    if comment_types is not None:
      values["comment_types"] = comment_types
    if require_types is not None:
      values["require_types"] = require_types

    fields = dict(DEFAULT_TRIVIA_FIELDS)
    fields.update(toml_config.get("trivia_fields", {}))
    fields.update(trivia_fields or {})
    values["trivia_fields"] = fields

    return cls(**values)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches ``start_path`` and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as err:
        log_warning(f"Ignoring unreadable {toml_path}: {err}")
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None
