"""
Serve Command Handler.

A hosting loop for parser drivers: each line of standard input is one JSON
request, and each request gets exactly one JSON line back on standard output.

Request::

    {"ast": <native tree>, "content": "<source text>", "mode": "semantic"}

Response::

    {"status": "ok" | "error", "errors": [...], "ast": <tree or null>}

``content`` and ``mode`` are optional. A bad request fails that request only;
the loop keeps going until standard input is closed.
"""

import json
import sys
from typing import Any, Dict, Optional, TextIO

from csharp_normalizer.config import RuntimeConfig
from csharp_normalizer.core.engine import NormalizerEngine
from csharp_normalizer.enums import Mode
from csharp_normalizer.utils.console import log_info, log_success

STATUS_OK = "ok"
STATUS_ERROR = "error"


def _error(message: str) -> Dict[str, Any]:
  return {"status": STATUS_ERROR, "errors": [message], "ast": None}


def handle_request(line: str, engine: NormalizerEngine) -> Dict[str, Any]:
  """
  Answers one request line.

  Args:
      line: The raw JSON request.
      engine: Engine to run; its config supplies the default mode.

  Returns:
      Dict[str, Any]: The response object.
  """
  try:
    req = json.loads(line)
  except json.JSONDecodeError as err:
    return _error(f"invalid request: {err}")
  if not isinstance(req, dict):
    return _error("invalid request: expected a JSON object")
  if "ast" not in req:
    return _error("invalid request: no ast")

  content = req.get("content")
  if content is not None and not isinstance(content, str):
    return _error("invalid request: content must be a string")

  mode: Optional[Mode] = None
  if req.get("mode") is not None:
    try:
      mode = Mode(str(req["mode"]).lower())
    except ValueError:
      return _error(f"invalid request: unknown mode {req['mode']!r}")

  result = engine.run(req["ast"], source=content, mode=mode)
  if not result.success:
    return {"status": STATUS_ERROR, "errors": result.errors, "ast": None}
  return {"status": STATUS_OK, "errors": [], "ast": result.uast}


def handle_serve(
  mode: Optional[Mode] = None,
  stdin: Optional[TextIO] = None,
  stdout: Optional[TextIO] = None,
) -> int:
  """
  Handles the 'serve' command execution.

  Args:
      mode: Mode for requests that do not name one. Defaults to the configured mode.
      stdin: Request stream. Defaults to ``sys.stdin``.
      stdout: Response stream. Defaults to ``sys.stdout``.

  Returns:
      int: Exit code, 0 once the input is exhausted.
  """
  stdin = stdin or sys.stdin
  stdout = stdout or sys.stdout
  engine = NormalizerEngine(config=RuntimeConfig.load(mode=mode))
  log_info(f"Serving requests (default mode: {engine.config.mode.value})")

  count = 0
  for line in stdin:
    if not line.strip():
      continue
    resp = handle_request(line, engine)
    stdout.write(json.dumps(resp, ensure_ascii=False))
    stdout.write("\n")
    stdout.flush()
    count += 1

  log_success(f"Served {count} requests")
  return 0
