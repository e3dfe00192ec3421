"""
Main Entry Point for csharp-normalizer CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `csharp_normalizer.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from csharp_normalizer import __version__
from csharp_normalizer.cli import handlers
from csharp_normalizer.enums import Mode

MODE_CHOICES = [m.value for m in Mode]


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="csharp-normalizer: C# syntax tree normalizer")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: NORMALIZE ---
  cmd_norm = subparsers.add_parser("normalize", help="Normalize one native tree read from a JSON file")
  cmd_norm.add_argument("path", help="Input JSON file, or '-' for standard input")
  cmd_norm.add_argument("--source", type=Path, default=None, help="C# source file the tree was parsed from")
  cmd_norm.add_argument("--mode", choices=MODE_CHOICES, default=None, help="Pipeline mode (default: from toml)")
  cmd_norm.add_argument("--trace", action="store_true", help="Emit the execution trace along with the tree")

  # --- Command: SERVE ---
  cmd_serve = subparsers.add_parser("serve", help="Normalize line-delimited JSON requests from standard input")
  cmd_serve.add_argument("--mode", choices=MODE_CHOICES, default=None, help="Mode for requests that name none")

  args = parser.parse_args(argv)

  if args.command == "normalize":
    mode = Mode(args.mode) if args.mode else None
    return handlers.handle_normalize(args.path, args.source, mode, args.trace)

  elif args.command == "serve":
    mode = Mode(args.mode) if args.mode else None
    return handlers.handle_serve(mode)

  return 0


if __name__ == "__main__":
  sys.exit(main())
