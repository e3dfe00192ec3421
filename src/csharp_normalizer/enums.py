"""
Enumerations for csharp-normalizer.

This module defines the pipeline modes and the role vocabulary used by the
annotation stage.
"""

from enum import Enum


class Mode(str, Enum):
  """
  How far a native tree is transformed.

  Modes are cumulative: each one includes the passes of the previous one.
  """

  NATIVE = "native"  # validation only
  PREPROCESSED = "preprocessed"  # cleanup + positions (+ source-aware fixes)
  ANNOTATED = "annotated"  # preprocessed + role annotations
  SEMANTIC = "semantic"  # preprocessed + semantic normalization + annotations

  @property
  def level(self) -> int:
    return _MODE_ORDER.index(self)

  def includes(self, other: "Mode") -> bool:
    """Returns True if running this mode also runs everything ``other`` runs."""
    return self.level >= other.level


_MODE_ORDER = [Mode.NATIVE, Mode.PREPROCESSED, Mode.ANNOTATED, Mode.SEMANTIC]


class Role(str, Enum):
  """
  Semantic role tags attached to nodes by the annotation stage.
  """

  ADD = "Add"
  AND = "And"
  ANONYMOUS = "Anonymous"
  ARGUMENT = "Argument"
  ARITHMETIC = "Arithmetic"
  ASSIGNMENT = "Assignment"
  BINARY = "Binary"
  BITWISE = "Bitwise"
  BLOCK = "Block"
  BODY = "Body"
  BOOLEAN = "Boolean"
  BREAK = "Break"
  CALL = "Call"
  CASE = "Case"
  CHARACTER = "Character"
  DECLARATION = "Declaration"
  DECREMENT = "Decrement"
  DEFAULT = "Default"
  DEREFERENCE = "Dereference"
  DIVIDE = "Divide"
  ELSE = "Else"
  EQUAL = "Equal"
  EXPRESSION = "Expression"
  FILE = "File"
  FOR = "For"
  FUNCTION = "Function"
  GOTO = "Goto"
  GREATER_THAN = "GreaterThan"
  GREATER_THAN_OR_EQUAL = "GreaterThanOrEqual"
  IDENTIFIER = "Identifier"
  IF = "If"
  IMPORT = "Import"
  INCOMPLETE = "Incomplete"
  INCREMENT = "Increment"
  INSTANCE = "Instance"
  KEYWORD = "Keyword"
  LEFT_SHIFT = "LeftShift"
  LESS_THAN = "LessThan"
  LESS_THAN_OR_EQUAL = "LessThanOrEqual"
  LIST = "List"
  LITERAL = "Literal"
  MODULE = "Module"
  MODULO = "Modulo"
  MULTIPLY = "Multiply"
  NOT = "Not"
  NULL = "Null"
  NUMBER = "Number"
  OPERATOR = "Operator"
  OR = "Or"
  QUALIFIED = "Qualified"
  RELATIONAL = "Relational"
  RETURN = "Return"
  RIGHT = "Right"
  RIGHT_SHIFT = "RightShift"
  SCOPE = "Scope"
  STATEMENT = "Statement"
  STRING = "String"
  SUBSTRACT = "Substract"
  SUBTYPE = "Subtype"
  SWITCH = "Switch"
  TYPE = "Type"
  UNARY = "Unary"
  VALUE = "Value"
  VARIABLE = "Variable"
  VISIBILITY = "Visibility"
  WHILE = "While"
  WORLD = "World"
  XOR = "Xor"
