"""
Error Hierarchy.

Every failure raised by the normalizer derives from :class:`NormalizerError`,
which is itself a ``ValueError`` so that callers treating bad input as a bad
value keep working.

Three families exist:

1.  **Malformed input** (:class:`MalformedInputError`): the incoming tree
    violates the basic node contract (non-JSON values, missing type tags,
    half-specified spans). Raised during validation or Preprocess.
2.  **Structural violations** (:class:`StructuralError` and subclasses): a
    construction step received bindings that break an operator precondition.
3.  **Unbound variables** (:class:`UnboundVariableError`): a build pattern
    referenced a variable that the matching pattern never bound.

A no-match is never an error; patterns report it by returning ``False``.
"""

from typing import Optional


class NormalizerError(ValueError):
  """Base class for all normalization failures."""


class MalformedInputError(NormalizerError):
  """
  The input tree does not conform to the node model.

  Attributes:
      path (str): Location of the offending value (``/Members/0/Span``).
  """

  def __init__(self, message: str, path: str = "") -> None:
    self.path = path
    if path:
      message = f"{message} (at {path})"
    super().__init__(message)


class StructuralError(NormalizerError):
  """A construct step met bindings that violate an operator precondition."""


class UnexpectedTypeError(StructuralError):
  """
  A value of the wrong kind was found where a specific kind was required.

  Attributes:
      expected (str): The expected kind or type tag.
      got (str): What was actually found.
  """

  def __init__(self, expected: str, got: str, context: str = "") -> None:
    self.expected = expected
    self.got = got
    message = f"expected {expected}, got {got}"
    if context:
      message = f"{context}: {message}"
    super().__init__(message)


class AmbiguousValueError(StructuralError):
  """An operator was asked to build a value it cannot determine."""


class UnboundVariableError(StructuralError):
  """
  A variable was read during construction before being bound.

  Attributes:
      name (str): The variable name.
  """

  def __init__(self, name: str) -> None:
    self.name = name
    super().__init__(f"variable {name!r} is not defined")


class MappingError(StructuralError):
  """
  Wraps a structural failure with the name of the mapping that raised it.

  Attributes:
      mapping (str): Name of the failing mapping.
      node_type (Optional[str]): Type tag of the node being rewritten.
  """

  def __init__(self, mapping: str, cause: Exception, node_type: Optional[str] = None) -> None:
    self.mapping = mapping
    self.node_type = node_type
    where = f" on {node_type}" if node_type else ""
    super().__init__(f"mapping {mapping!r} failed{where}: {cause}")
