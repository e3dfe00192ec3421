"""
Normalize Command Handler.

This module implements the logic for the `csharp_normalizer normalize`
command: it reads one native tree, runs the engine over it and prints the
result as JSON on standard output.
"""

import json
import sys
from pathlib import Path
from typing import Any, Optional

from csharp_normalizer.config import RuntimeConfig
from csharp_normalizer.core.engine import NormalizerEngine
from csharp_normalizer.enums import Mode
from csharp_normalizer.utils.console import log_error, log_info


def _read_tree(path: str) -> Any:
  if path == "-":
    return json.load(sys.stdin)
  with open(path, "r", encoding="utf-8") as f:
    return json.load(f)


def handle_normalize(path: str, source_path: Optional[Path], mode: Optional[Mode], trace: bool = False) -> int:
  """
  Handles the 'normalize' command execution.

  Args:
      path: JSON file holding the native tree, or '-' for standard input.
      source_path: C# file the tree was parsed from, if any.
      mode: Overrides the configured mode.
      trace: If True, prints ``{"ast": ..., "trace": [...]}`` instead of the bare tree.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  try:
    tree = _read_tree(path)
  except FileNotFoundError:
    log_error(f"Input not found: {path}")
    return 1
  except json.JSONDecodeError as err:
    log_error(f"Input is not valid JSON: {err}")
    return 1

  source = None
  if source_path is not None:
    if not source_path.exists():
      log_error(f"Source not found: {source_path}")
      return 1
    # newline="" keeps \r\n intact, offsets count every character
    with open(source_path, "r", encoding="utf-8", newline="") as f:
      source = f.read()

  search_path = Path.cwd() if path == "-" else Path(path).resolve().parent
  config = RuntimeConfig.load(mode=mode, search_path=search_path)
  log_info(f"Normalizing {path} (mode: {config.mode.value})")

  result = NormalizerEngine(config=config).run(tree, source=source)
  if not result.success:
    for err in result.errors:
      log_error(err)
    return 1

  output: Any = result.uast
  if trace:
    output = {"ast": result.uast, "trace": result.trace_events}
  sys.stdout.write(json.dumps(output, indent=2, ensure_ascii=False))
  sys.stdout.write("\n")
  return 0
