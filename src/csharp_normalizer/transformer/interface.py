"""
Interface definition for tree transformers.

This module defines the abstract base class that every stage of a pass must
implement to be compatible with the ``TransformPipeline``.
"""

from abc import ABC, abstractmethod

from csharp_normalizer.transformer.context import TransformContext
from csharp_normalizer.uast.nodes import Node


class Transformer(ABC):
  """
  Abstract contract for one stage of the pipeline.

  Stages take a whole tree and return a new one; the input is never mutated.
  """

  name: str = ""

  @abstractmethod
  def transform(self, root: Node, context: TransformContext) -> Node:
    """
    Executes the transformation on the given tree.

    Args:
        root: The input tree.
        context: The shared context containing configuration and the tracer.

    Returns:
        The transformed tree.
    """
    pass

  def describe(self) -> str:
    return self.name or type(self).__name__
