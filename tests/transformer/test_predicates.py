"""
Tests for check-only predicates.
"""

import pytest

from csharp_normalizer.errors import UnboundVariableError
from csharp_normalizer.transformer.ops import Is, Var, check_op
from csharp_normalizer.transformer.predicates import And, HasType, In, Not, Or
from csharp_normalizer.transformer.state import State


def test_in():
  assert check_op(In("a", "b"), State(), "b")
  assert not check_op(In("a", "b"), State(), "c")
  assert not check_op(In(1), State(), True)


def test_not_discards_bindings():
  st = State()
  assert check_op(Not(Is(1)), st, 2)
  assert not check_op(Not(Var("x")), st, 2)
  with pytest.raises(UnboundVariableError):
    st.get_var("x")


def test_and_or():
  assert check_op(And(In(1, 2), Not(Is(2))), State(), 1)
  assert not check_op(And(In(1, 2), Not(Is(2))), State(), 2)

  st = State({"x": 5})
  # first branch conflicts with the existing binding, second wins
  assert check_op(Or(Var("x"), Var("y")), st, 6)
  assert st.get_var("y") == 6


def test_has_type():
  assert check_op(HasType("uast:Identifier"), State(), {"@type": "uast:Identifier"})
  assert not check_op(HasType("uast:Identifier"), State(), "uast:Identifier")
