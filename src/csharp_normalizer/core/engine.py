"""
Orchestration Engine for Tree Normalization.

This module provides the `NormalizerEngine`, the primary driver of a run. It
validates the incoming native tree and executes the passes selected by the
mode:

1.  **Validation**: every mode checks the node model first.
2.  **Preprocess** (``preprocessed`` and above): trivia cleanup, span
    selection and ``@pos`` synthesis.
3.  **Code** (when the source text is supplied): line/column numbers and
    comment tokens read from the source.
4.  **Normalize** (``semantic``): trivia hoisting and semantic mappings.
5.  **Annotate** (``annotated`` and ``semantic``): role tags.

A run either produces the complete tree or fails without partial output.
"""

from typing import List, Optional

from csharp_normalizer.config import RuntimeConfig
from csharp_normalizer.core.conversion_result import ConversionResult
from csharp_normalizer.core.tracer import TraceLogger, get_tracer, reset_tracer
from csharp_normalizer.enums import Mode
from csharp_normalizer.errors import NormalizerError
from csharp_normalizer.normalizer.annotation import build_annotate
from csharp_normalizer.normalizer.normalize import build_normalize
from csharp_normalizer.normalizer.positions import FromOffset, TokenFromSource
from csharp_normalizer.normalizer.preprocess import build_preprocess
from csharp_normalizer.transformer.context import TransformContext
from csharp_normalizer.transformer.interface import Transformer
from csharp_normalizer.transformer.pipeline import TransformPipeline, Transformers
from csharp_normalizer.uast.nodes import Node, validate
from csharp_normalizer.utils.console import log_error


class NormalizerEngine:
  """
  Runs the normalization passes over native trees.

  One engine can be reused for many trees; every run gets a fresh context.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, tracer: Optional[TraceLogger] = None) -> None:
    """
    Initializes the engine.

    Args:
        config: Runtime configuration. Defaults to built-in settings.
        tracer: Trace sink. When omitted, the global tracer is reset at the
            start of every run.
    """
    self.config = config or RuntimeConfig()
    self.tracer = tracer

  def passes(self, mode: Mode, has_source: bool) -> List[Transformer]:
    """
    Lists the passes a run in ``mode`` executes, in order.

    Args:
        mode: Target mode.
        has_source: Whether the source text is available.

    Returns:
        List[Transformer]: The passes. Empty for ``native``.
    """
    out: List[Transformer] = []
    if not mode.includes(Mode.PREPROCESSED):
      return out
    out.append(build_preprocess(self.config))
    if has_source:
      out.append(Transformers("code", [FromOffset(), TokenFromSource(self.config.comment_types)]))
    if mode.includes(Mode.SEMANTIC):
      out.append(build_normalize(self.config))
    if mode.includes(Mode.ANNOTATED):
      out.append(build_annotate())
    return out

  def run(self, tree: Node, source: Optional[str] = None, mode: Optional[Mode] = None) -> ConversionResult:
    """
    Executes the pipeline on one native tree.

    Args:
        tree: The native tree, as decoded from JSON.
        source: The source text the tree was parsed from, if known.
        mode: Overrides the configured mode.

    Returns:
        ConversionResult: The normalized tree, or the errors that stopped the run.
    """
    if self.tracer is None:
      reset_tracer()
      tracer = get_tracer()
    else:
      tracer = self.tracer

    mode = Mode(mode) if mode is not None else self.config.mode
    context = TransformContext(config=self.config, source=source, tracer=tracer)

    tracer.start_phase("Normalization Pipeline", f"mode={mode.value}")
    try:
      tracer.start_phase("validate")
      try:
        validate(tree, require_types=self.config.require_types)
      finally:
        tracer.end_phase()
      result = TransformPipeline(self.passes(mode, context.has_source)).run(tree, context)
    except NormalizerError as err:
      log_error(f"Normalization failed: {err}")
      tracer.log_error(str(err))
      tracer.end_phase()
      return ConversionResult(uast=None, errors=[str(err)], success=False, trace_events=tracer.export())

    tracer.end_phase()
    return ConversionResult(uast=result, success=True, trace_events=tracer.export())
