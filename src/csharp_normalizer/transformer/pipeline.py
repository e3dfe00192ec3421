"""
Orchestration logic for executing sequential transformers.

A pass is a named, ordered list of stages (:class:`Transformers`); the
:class:`TransformPipeline` runs a list of passes over one tree and a shared
context.
"""

from typing import List, Sequence

from csharp_normalizer.transformer.context import TransformContext
from csharp_normalizer.transformer.interface import Transformer
from csharp_normalizer.uast.nodes import Node


class Transformers(Transformer):
  """
  A named sequence of stages, itself usable as a stage.

  Each stage sees the complete output of the previous one, so a stage can
  rely on every node having been visited by all earlier stages.
  """

  def __init__(self, name: str, stages: Sequence[Transformer]) -> None:
    self.name = name
    self.stages: List[Transformer] = list(stages)

  def transform(self, root: Node, context: TransformContext) -> Node:
    tracer = context.tracer
    tracer.start_phase(self.name, f"{len(self.stages)} stages")
    try:
      for stage in self.stages:
        tracer.start_phase(stage.describe())
        try:
          root = stage.transform(root, context)
        finally:
          tracer.end_phase()
    finally:
      tracer.end_phase()
    return root


class TransformPipeline:
  """
  Manages a sequence of passes and executes them in order.
  """

  def __init__(self, passes: List[Transformer]) -> None:
    """
    Initializes the pipeline with a list of passes.

    Args:
        passes: Sequenced list of passes to execute.
    """
    self.passes = passes

  def run(self, root: Node, context: TransformContext) -> Node:
    """
    Executes all registered passes sequentially on the tree.

    Args:
        root: The native tree to transform.
        context: The shared execution state.

    Returns:
        The fully transformed tree.
    """
    current = root
    for pass_instance in self.passes:
      current = pass_instance.transform(current, context)

    return current
