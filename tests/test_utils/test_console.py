"""
Tests for Centralized Logging Utility and Injection Mechanics.

Verifies:
1. Singleton Proxy correctness.
2. Injection capabilities (`set_console`).
3. Standard logging wrappers, written to standard error.
"""

import io
import logging

from rich.console import Console
from rich.logging import RichHandler

from csharp_normalizer.utils.console import (
  console,
  get_console,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
)


def capture() -> Console:
  buf = Console(record=True, file=io.StringIO(), width=200)
  set_console(buf)
  return buf


def test_console_singleton_proxy():
  assert callable(console.print)
  assert hasattr(console, "export_text")
  assert isinstance(get_console(), Console)


def test_custom_console_injection():
  buf = capture()
  log_info("Loaded [bold]3[/bold] trees")
  log_success("Done")
  log_warning("Ignoring unreadable config")

  output = buf.export_text()
  assert "Loaded 3 trees" in output
  assert "SUCCESS" in output
  assert "Done" in output
  assert "WARNING" in output


def test_error_messages_are_not_markup():
  buf = capture()
  log_error("mapping 'x' failed on [Literal]")
  output = buf.export_text()
  assert "ERROR" in output
  assert "[Literal]" in output


def test_single_rich_handler():
  capture()
  capture()
  handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
  assert len(handlers) == 1
  assert handlers[0].console is get_console()


def test_reset_functionality():
  temp = Console(file=io.StringIO())
  set_console(temp)
  assert get_console() is temp

  reset_console()
  current = get_console()
  assert current is not temp
  assert current.stderr


def test_default_console_writes_to_stderr(capsys):
  log_info("InfoText")
  captured = capsys.readouterr()
  assert "InfoText" in captured.err
  assert "InfoText" not in captured.out


def test_proxy_getattr_delegation():
  capture()
  assert console.width == 200
  console.print("direct")
  assert "direct" in console.export_text()
