"""
Transform Context Module.

This module provides the `TransformContext` container, which holds the shared
state of one pipeline run: configuration, the trace logger, and the original
source text when it is known.
"""

from typing import List, Optional

from csharp_normalizer.config import RuntimeConfig
from csharp_normalizer.core.tracer import TraceLogger, get_tracer


class TransformContext:
  """
  Shared state container for the transformation pipeline.
  """

  def __init__(
    self,
    config: Optional[RuntimeConfig] = None,
    source: Optional[str] = None,
    tracer: Optional[TraceLogger] = None,
  ) -> None:
    """
    Initializes the context.

    Args:
        config: The runtime configuration for the run.
        source: Original source text the native tree was parsed from.
        tracer: Trace sink. Defaults to the global tracer.
    """
    self.config = config or RuntimeConfig()
    self.source = source
    self.tracer = tracer or get_tracer()
    self._line_starts: Optional[List[int]] = None

  @property
  def has_source(self) -> bool:
    return self.source is not None

  def line_starts(self) -> List[int]:
    """Offsets at which each line of the source begins. Computed once."""
    if self._line_starts is None:
      text = self.source or ""
      starts = [0]
      starts.extend(i + 1 for i, ch in enumerate(text) if ch == "\n")
      self._line_starts = starts
    return self._line_starts
